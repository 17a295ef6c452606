"""Admin configuration for core models."""

from django.contrib import admin
from .models import (
    Profile,
    Analysis,
    AnalysisFile,
    VastuRule,
    Notification,
)


class AnalysisFileInline(admin.TabularInline):
    model = AnalysisFile
    extra = 0
    readonly_fields = ("storage_id", "url", "size", "mime_type", "uploaded_at")


@admin.register(Analysis)
class AnalysisAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "user", "status", "overall_score", "is_public", "created_at")
    list_filter = ("status", "is_public", "orientation")
    search_fields = ("title", "user__email")
    readonly_fields = ("area", "processing_started_at", "completed_at", "processing_time")
    inlines = [AnalysisFileInline]


@admin.register(VastuRule)
class VastuRuleAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "direction", "room_type", "importance", "priority", "is_active", "version")
    list_filter = ("category", "importance", "impact", "is_active")
    search_fields = ("name", "description")
    readonly_fields = ("version",)


# Register models
admin.site.register(Profile)
admin.site.register(Notification)
