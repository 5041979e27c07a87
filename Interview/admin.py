from django.contrib import admin

from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("contributor", "role", "created_at")
    list_filter = ("role",)
