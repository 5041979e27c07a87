import logging

from django.contrib.auth import authenticate, login, logout
from django.db import transaction
from django.shortcuts import redirect

from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from Console.context import AdminLoginRequired, HasAdminContext, refresh_admin_context
from Console.serializers import ContributorAdminSerializer, ContributorCreateSerializer, LoginSerializer
from Contribute.models import Contributor, Session
from Contribute.progress import ContributorFlags, status_label
from Contribute.serializers import SessionSerializer
from Contribute.utils import create_response
from Interview.models import Message
from Interview.serializers import MessageSerializer


class ConsoleViewMixin:
    """Console endpoints send anonymous callers to the login step."""
    permission_classes = (HasAdminContext,)

    def permission_denied(self, request, message=None, code=None):
        raise AdminLoginRequired()

    def handle_exception(self, exc):
        if isinstance(exc, AdminLoginRequired):
            return redirect("console-login")
        return super().handle_exception(exc)


def filter_by_session(queryset, session_id):
    if session_id:
        return queryset.filter(session_id=session_id)
    return queryset


class AdminLoginView(APIView):
    def get(self, request):
        if request.admin_context.is_authenticated:
            return redirect("console-dashboard")
        return create_response(True, "Admin login required", {"fields": ["email", "password"]})

    def post(self, request):
        ser = LoginSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        user = authenticate(
            request,
            username=ser.validated_data["email"],
            password=ser.validated_data["password"],
        )
        if user is None or not user.is_staff:
            logging.warning("Admin login failed for %s", ser.validated_data["email"])
            return create_response(False, "Invalid email or password", status_code=status.HTTP_401_UNAUTHORIZED)

        login(request._request, user)
        context = refresh_admin_context(request)
        return create_response(True, "Logged in", {"email": context.email})


class AdminLogoutView(APIView):
    def post(self, request):
        logout(request._request)
        refresh_admin_context(request)
        return create_response(True, "Logged out")


class DashboardView(ConsoleViewMixin, APIView):
    def get(self, request):
        session_id = request.query_params.get("session")
        selected = Session.objects.filter(id=session_id).first() if session_id else None
        if session_id and not selected:
            return create_response(False, "Invalid session", status_code=status.HTTP_404_NOT_FOUND)

        contributors = filter_by_session(
            Contributor.objects.select_related("session").order_by("-created_at", "-id"),
            session_id,
        )
        rows = ContributorAdminSerializer(contributors, many=True, context={"request": request}).data

        counts = {}
        for c in contributors:
            label = status_label(ContributorFlags.from_contributor(c))
            counts[label] = counts.get(label, 0) + 1

        body = {
            "admin": request.admin_context.email,
            "sessions": SessionSerializer(Session.objects.order_by("-created_at", "-id"), many=True).data,
            "selected_session": SessionSerializer(selected).data if selected else None,
            "contributors": rows,
            "contributor_count": len(rows),
            "status_counts": counts,
            "can_add_contributor": selected is not None,
        }
        return create_response(True, "Dashboard", body)


class SessionViewSet(
    ConsoleViewMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Session.objects.all().order_by("-created_at", "-id")
    serializer_class = SessionSerializer


class ContributorConsoleViewSet(
    ConsoleViewMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = ContributorAdminSerializer

    def get_queryset(self):
        queryset = Contributor.objects.select_related("session").order_by("-created_at", "-id")
        return filter_by_session(queryset, self.request.query_params.get("session"))

    def create(self, request, *args, **kwargs):
        ser = ContributorCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            contributor = ser.save()
        except Exception:
            logging.exception("Error adding contributor")
            return create_response(False, "Failed to add contributor.",
                                   status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        data = ContributorAdminSerializer(contributor, context={"request": request}).data
        return create_response(True, "Contributor created", data, status_code=status.HTTP_201_CREATED)

    @transaction.atomic
    def destroy(self, request, *args, **kwargs):
        contributor = self.get_object()
        name = contributor.name
        try:
            # messages first: the contributor row is protected while any remain
            deleted_messages, _ = Message.objects.filter(contributor=contributor).delete()
            contributor.delete()
        except Exception:
            transaction.set_rollback(True)
            logging.exception("Error deleting contributor %s", contributor.id)
            return create_response(False, f"Failed to delete {name}. Please try again.",
                                   status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        logging.info("Deleted contributor %s and %s messages", name, deleted_messages)
        return create_response(True, f"Successfully deleted {name}", {"deleted_messages": deleted_messages})

    @action(detail=True, methods=["get"])
    def transcript(self, request, pk=None):
        contributor = self.get_object()
        messages = Message.objects.filter(contributor=contributor).order_by("created_at", "id")
        return Response({
            "contributor": contributor.name,
            "messages": MessageSerializer(messages, many=True).data,
        })
