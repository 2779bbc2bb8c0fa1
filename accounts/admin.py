from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import Connection, User


@admin.register(User)
class SkillfolioUserAdmin(UserAdmin):
    list_display = ('email', 'display_name', 'is_staff', 'date_joined')
    search_fields = ('email', 'display_name')
    fieldsets = UserAdmin.fieldsets + (
        ('Profile', {'fields': ('display_name', 'bio', 'skills')}),
    )


@admin.register(Connection)
class ConnectionAdmin(admin.ModelAdmin):
    list_display = ('user', 'connected_user', 'status', 'created_at')
    list_filter = ('status',)
