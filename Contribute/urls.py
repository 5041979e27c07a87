from django.urls import path

from .views import ContributorFlowViewSet

character = ContributorFlowViewSet.as_view({"get": "enter"})
review = ContributorFlowViewSet.as_view({"get": "review", "post": "acknowledge_review"})
contribute = ContributorFlowViewSet.as_view({
    "get": "preferences",
    "patch": "autosave",
    "post": "submit_preferences",
})

urlpatterns = [
    path("character/<str:token>/", character, name="character-access"),
    path("review/<str:token>/", review, name="algorithm-review"),
    path("contribute/<str:token>/", contribute, name="allocation-preferences"),
]
