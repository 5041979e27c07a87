from django.urls import path

from .views import InterviewViewSet, chat

interview = InterviewViewSet.as_view({"get": "transcript", "post": "send"})
interview_submit = InterviewViewSet.as_view({"post": "finish"})

urlpatterns = [
    path("interview/<str:token>/", interview, name="interview"),
    path("interview/<str:token>/submit/", interview_submit, name="interview-submit"),
    path("chat/", chat, name="chat"),
]
