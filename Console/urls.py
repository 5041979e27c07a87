from rest_framework import routers
from django.urls import path, include

from .views import AdminLoginView, AdminLogoutView, ContributorConsoleViewSet, DashboardView, SessionViewSet

router = routers.DefaultRouter()
router.register(r'sessions', SessionViewSet, basename='sessions')
router.register(r'contributors', ContributorConsoleViewSet, basename='contributors')

urlpatterns = [
    path('login/', AdminLoginView.as_view(), name='console-login'),
    path('logout/', AdminLogoutView.as_view(), name='console-logout'),
    path('dashboard/', DashboardView.as_view(), name='console-dashboard'),
    path('', include(router.urls)),
]
