import logging

from django.shortcuts import redirect
from django.urls import reverse
from rest_framework import status
from rest_framework.response import Response

from Contribute.models import Contributor
from Contribute.progress import Step


STEP_URL_NAMES = {
    Step.REVIEW: "algorithm-review",
    Step.PREFERENCES: "allocation-preferences",
    Step.INTERVIEW: "interview",
}


def create_response(success, message, body=None, status_code=status.HTTP_200_OK):
    try:
        response_data = {'success': success, 'message': message}
        if body is not None:
            response_data['body'] = body
        return Response(response_data, status=status_code)
    except Exception as e:
        error_message = f"Error creating response: {str(e)}"
        return Response({'success': False, 'message': error_message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def find_contributor(token):
    if not token:
        return None
    return Contributor.objects.select_related("session").filter(token=token).first()


def invalid_link_response(message="Invalid or expired access link"):
    return create_response(False, message, status_code=status.HTTP_404_NOT_FOUND)


def step_path(step: Step, token: str) -> str:
    return reverse(STEP_URL_NAMES[step], kwargs={"token": token})


def redirect_to_step(step: Step, token: str):
    logging.debug("Redirecting %s to %s", token[:6], step.value)
    return redirect(step_path(step, token))
