import logging

from rest_framework import viewsets, status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from Contribute.models import Contributor
from Contribute.progress import Step
from Contribute.utils import create_response, find_contributor, invalid_link_response, redirect_to_step
from Interview.agents.interviewer_agent import ResponderError, respond_to_contributor
from Interview.chat import ChatClosed, ChatError, ChatState, FinishRejected, InterviewChat, TurnInProgress
from Interview.serializers import ChatRequestSerializer, FinishInterviewSerializer, SendMessageSerializer


@api_view(["POST"])
def chat(request):
    """
    Body: { "contributorId": "<uuid>", "message": "..." }
    200 { "message": "<assistant reply>" } or non-2xx { "error": "..." }
    """
    ser = ChatRequestSerializer(data=request.data)
    if not ser.is_valid():
        return Response({"error": "contributorId and message are required"}, status=status.HTTP_400_BAD_REQUEST)

    contributor_id = ser.validated_data["contributorId"]
    contributor = Contributor.objects.filter(id=contributor_id).first()
    if not contributor:
        return Response({"error": "Invalid contributorId"}, status=status.HTTP_404_NOT_FOUND)
    if not contributor.allocation_prefs_submitted_at:
        return Response({"error": "Submit your allocation preferences before the interview."},
                        status=status.HTTP_403_FORBIDDEN)
    if contributor.interview_completed:
        return Response({"error": "This interview has already been completed."}, status=status.HTTP_409_CONFLICT)

    try:
        reply = respond_to_contributor(contributor_id, ser.validated_data["message"])
    except ResponderError as e:
        return Response({"error": str(e) or "An unknown error occurred"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({"message": reply})


class InterviewViewSet(viewsets.GenericViewSet):
    queryset = Contributor.objects.select_related("session")
    lookup_field = "token"

    def _load(self, token):
        contributor = find_contributor(token)
        if not contributor:
            return None, invalid_link_response("Invalid interview link.")
        if not contributor.allocation_prefs_submitted_at and not contributor.interview_completed:
            return None, redirect_to_step(Step.PREFERENCES, token)
        return contributor, None

    def _body(self, chat, **extra):
        body = {
            "contributor": {"id": chat.contributor.id, "name": chat.contributor.name},
            "state": chat.state.value,
            "messages": chat.messages,
        }
        body.update(extra)
        return body

    def transcript(self, request, token=None):
        contributor, early = self._load(token)
        if early:
            return early

        chat = InterviewChat(contributor)
        try:
            chat.open()
        except Exception:
            logging.exception("Failed to load interview for contributor %s", contributor.id)
            return create_response(False, "Could not load the conversation.",
                                   status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

        if chat.state == ChatState.FINISHED:
            return create_response(True, "Thank you, this interview has already been completed.", self._body(chat))
        return create_response(True, "Interview", self._body(chat))

    def send(self, request, token=None):
        contributor, early = self._load(token)
        if early:
            return early

        ser = SendMessageSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        chat = InterviewChat(contributor)
        try:
            reply = chat.send(ser.validated_data["message"])
        except (ChatClosed, TurnInProgress) as e:
            return create_response(False, str(e), status_code=status.HTTP_409_CONFLICT)
        except ChatError as e:
            return create_response(False, str(e), status_code=status.HTTP_400_BAD_REQUEST)
        except Exception:
            logging.exception("Interview turn failed for contributor %s", contributor.id)
            return create_response(False, "Could not send your message. Please try again.",
                                   status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return create_response(True, "Reply received", self._body(chat, reply=reply))

    def finish(self, request, token=None):
        contributor, early = self._load(token)
        if early:
            return early

        ser = FinishInterviewSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        chat = InterviewChat(contributor)
        try:
            chat.finish(ser.validated_data["confirm"], ser.validated_data.get("evidence_text", ""))
        except ChatClosed as e:
            return create_response(False, str(e), status_code=status.HTTP_409_CONFLICT)
        except FinishRejected as e:
            return create_response(False, str(e), status_code=status.HTTP_400_BAD_REQUEST)
        except Exception:
            logging.exception("Error ending interview for contributor %s", contributor.id)
            return create_response(False, "There was an issue ending the interview. Please try again.",
                                   status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return create_response(True, "Your responses have been recorded. You can now close this window.",
                               {"state": chat.state.value})
