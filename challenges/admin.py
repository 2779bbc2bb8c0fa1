from django.contrib import admin
from .models import Challenge, ChallengeSubmission


class ChallengeSubmissionInline(admin.TabularInline):
    model = ChallengeSubmission
    extra = 0


@admin.register(Challenge)
class ChallengeAdmin(admin.ModelAdmin):
    list_display = ('title', 'deadline', 'submission_count')
    inlines = [ChallengeSubmissionInline]
