import logging

from django.db import transaction
from django.shortcuts import redirect
from django.utils.timezone import now

from rest_framework import viewsets, status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from Contribute.allocation import (
    BUCKET_DEFINITIONS,
    LOCKUP_RANGES,
    build_submission,
    draft_with_defaults,
)
from Contribute.autosave import registry as autosave_registry
from Contribute.models import Contributor
from Contribute.progress import ContributorFlags, Step, route_step
from Contribute.serializers import (
    AlgorithmAcknowledgeSerializer,
    AllocationDraftSerializer,
    AllocationSubmitSerializer,
    SessionSerializer,
)
from Contribute.utils import create_response, find_contributor, invalid_link_response, redirect_to_step


@api_view(["GET"])
def landing(request):
    return Response({
        "title": "Cap Table Agent",
        "message": "Please use a specific access link to continue.",
        "admin": "/api/admin/login/",
    })


class ContributorFlowViewSet(viewsets.GenericViewSet):
    """
    Token-keyed contributor steps. Each step sends the contributor elsewhere
    (HTTP 302) when its preconditions are not met, so any step URL is safe to
    open directly.
    """
    queryset = Contributor.objects.select_related("session")
    lookup_field = "token"

    def enter(self, request, token=None):
        contributor = find_contributor(token)
        if not contributor:
            return redirect("landing")
        return redirect_to_step(route_step(ContributorFlags.from_contributor(contributor)), token)

    # ---- algorithm review ----

    def _review_preconditions(self, contributor):
        session = contributor.session
        if not session or contributor.algorithm_acknowledged_at or not session.has_algorithm:
            return False
        return True

    def review(self, request, token=None):
        contributor = find_contributor(token)
        if not contributor:
            return invalid_link_response()
        if not self._review_preconditions(contributor):
            return redirect_to_step(Step.PREFERENCES, token)

        session = contributor.session
        body = {
            "contributor": {"name": contributor.name},
            "session": SessionSerializer(session).data,
            "algorithm_text": session.algorithm_text,
            "collect_feedback": session.collect_algorithm_feedback,
        }
        return create_response(True, "Review the allocation algorithm", body)

    def acknowledge_review(self, request, token=None):
        contributor = find_contributor(token)
        if not contributor:
            return invalid_link_response()
        if not self._review_preconditions(contributor):
            return redirect_to_step(Step.PREFERENCES, token)

        ser = AlgorithmAcknowledgeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        feedback = ser.validated_data.get("feedback", "").strip()

        contributor.algorithm_acknowledged_at = now()
        update_fields = ["algorithm_acknowledged_at"]
        if contributor.session.collect_algorithm_feedback and feedback:
            contributor.algorithm_feedback = feedback
            update_fields.append("algorithm_feedback")
        try:
            contributor.save(update_fields=update_fields)
        except Exception:
            logging.exception("Failed to acknowledge algorithm for contributor %s", contributor.id)
            return create_response(False, "Could not save your acknowledgement. Please try again.",
                                   status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return redirect_to_step(Step.PREFERENCES, token)

    # ---- allocation preferences ----

    def preferences(self, request, token=None):
        contributor = find_contributor(token)
        if not contributor:
            return invalid_link_response()
        if contributor.allocation_prefs_submitted_at:
            return redirect_to_step(Step.INTERVIEW, token)

        body = {
            "contributor": {"name": contributor.name},
            "draft": draft_with_defaults(contributor, autosave_registry.pending_values(contributor.id)),
            "buckets": BUCKET_DEFINITIONS,
            "lockup_ranges": {
                field: {"min": lo, "max": hi, "default": default, "typical": typical, "source": source}
                for field, (lo, hi, default, typical, source) in LOCKUP_RANGES.items()
            },
            "expertise_choices": [{"value": v, "label": l} for v, l in Contributor.EXPERTISE],
            "saving": autosave_registry.is_pending(contributor.id),
        }
        return create_response(True, "Allocation preferences", body)

    def autosave(self, request, token=None):
        contributor = find_contributor(token)
        if not contributor:
            return invalid_link_response()
        if contributor.allocation_prefs_submitted_at:
            return create_response(False, "Allocation preferences were already submitted",
                                   status_code=status.HTTP_409_CONFLICT)

        ser = AllocationDraftSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        if not ser.validated_data:
            return create_response(True, "Nothing to save")

        try:
            written = autosave_registry.schedule(contributor.id, dict(ser.validated_data))
        except Exception:
            logging.exception("Autosave failed for contributor %s", contributor.id)
            return create_response(False, "Could not save your draft.",
                                   status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        if written:
            return create_response(True, "Draft saved")
        return create_response(True, "Draft queued", status_code=status.HTTP_202_ACCEPTED)

    @transaction.atomic
    def submit_preferences(self, request, token=None):
        contributor = find_contributor(token)
        if not contributor:
            return invalid_link_response()
        if contributor.allocation_prefs_submitted_at:
            return create_response(False, "Allocation preferences were already submitted",
                                   status_code=status.HTTP_409_CONFLICT)

        # unwritten autosave edits count as part of the submitted form
        pending = autosave_registry.take(contributor.id)
        data = draft_with_defaults(contributor, pending)
        data.pop("bucket_total", None)
        for key, value in request.data.items():
            data[key] = value

        ser = AllocationSubmitSerializer(data=data)
        if not ser.is_valid():
            if pending:
                autosave_registry.schedule(contributor.id, pending)
            return create_response(False, "Invalid allocation preferences", ser.errors,
                                   status_code=status.HTTP_400_BAD_REQUEST)

        try:
            values = build_submission(ser.validated_data)
            values["allocation_prefs_submitted_at"] = now()
            Contributor.objects.filter(id=contributor.id).update(**values)
        except Exception:
            transaction.set_rollback(True)
            logging.exception("Failed to submit allocation preferences for contributor %s", contributor.id)
            return create_response(False, "Could not submit your preferences. Please try again.",
                                   status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return redirect_to_step(Step.INTERVIEW, token)
