from django.contrib import admin
from .models import Community, Message, PresenceRecord


@admin.register(Community)
class CommunityAdmin(admin.ModelAdmin):
    list_display = ('name', 'created_by', 'created_at')
    search_fields = ('name', 'description')


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ('community', 'author_name', 'created_at', 'delivery_status')
    list_filter = ('delivery_status',)


admin.site.register(PresenceRecord)
