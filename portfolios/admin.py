from django.contrib import admin
from .models import Portfolio, PortfolioLike


@admin.register(Portfolio)
class PortfolioAdmin(admin.ModelAdmin):
    list_display = ('title', 'owner', 'category', 'like_count', 'view_count', 'created_at')
    list_filter = ('category',)


admin.site.register(PortfolioLike)
