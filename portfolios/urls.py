# Django Imports
from django.urls import path

# Local Imports
from . import views

# Define the application namespace for URL reversing
app_name = "portfolios"


urlpatterns = [
    # ===================================================================
    # Core Application Pages
    # ===================================================================
    path('', views.home, name='home'),
    path('portfolios/', views.portfolio_list, name='list'),
    path('upload/', views.upload, name='upload'),
    path('profile/', views.profile, name='profile'),
    path('analytics/', views.analytics, name='analytics'),

    # ===================================================================
    # Portfolio Actions
    # ===================================================================
    path('portfolios/<int:portfolio_id>/open/', views.open_portfolio, name='open'),
    path('portfolios/<int:portfolio_id>/like/', views.like_portfolio, name='like'),
    path('portfolios/<int:portfolio_id>/delete/', views.delete_portfolio, name='delete'),
]
