from django.contrib import admin

from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("subject", "sender", "recipient", "is_read", "created_at")
    list_filter = ("is_read",)
    search_fields = ("subject", "content", "sender__email", "recipient__email")
