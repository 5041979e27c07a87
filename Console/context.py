"""
Admin session context.

Built once per request by ``AdminContextMiddleware`` and read by console
views through ``HasAdminContext``. Login and logout rebuild it with
``refresh_admin_context`` so the rest of the request sees the new identity.
"""
from dataclasses import dataclass
from typing import Optional

from rest_framework.exceptions import APIException
from rest_framework.permissions import BasePermission


@dataclass(frozen=True)
class AdminContext:
    user_id: Optional[int] = None
    email: str = ""
    is_authenticated: bool = False

    @classmethod
    def from_user(cls, user) -> "AdminContext":
        if user is None or not user.is_authenticated or not user.is_staff:
            return ANONYMOUS
        return cls(user_id=user.pk, email=user.email or user.get_username(), is_authenticated=True)


ANONYMOUS = AdminContext()


def refresh_admin_context(request) -> AdminContext:
    django_request = getattr(request, "_request", request)
    context = AdminContext.from_user(getattr(django_request, "user", None))
    django_request.admin_context = context
    return context


class AdminContextMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        refresh_admin_context(request)
        return self.get_response(request)


class AdminLoginRequired(APIException):
    status_code = 401
    default_detail = "Admin login required."
    default_code = "admin_login_required"


class HasAdminContext(BasePermission):
    def has_permission(self, request, view):
        context = getattr(request, "admin_context", ANONYMOUS)
        return context.is_authenticated
