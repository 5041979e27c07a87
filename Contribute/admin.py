from django.contrib import admin

from .models import Contributor, Session


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    list_display = ("name", "collect_algorithm_feedback", "created_at")


@admin.register(Contributor)
class ContributorAdmin(admin.ModelAdmin):
    list_display = ("name", "session", "allocation_prefs_submitted_at", "interview_completed", "created_at")
    list_filter = ("session", "interview_completed")
    readonly_fields = ("token",)
