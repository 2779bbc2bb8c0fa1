# Django Imports
from django.urls import path

# Local Imports
from . import views

# Define the application namespace for URL reversing
app_name = 'accounts'


urlpatterns = [
    # ==============================================================================
    # AUTHENTICATION & SESSION MANAGEMENT
    # ==============================================================================
    path('auth/', views.auth_view, name='auth'),
    path('logout/', views.logout_view, name='logout'),

    # ==============================================================================
    # CONNECTIONS
    # ==============================================================================
    path('connect/<int:user_id>/', views.connect_view, name='connect'),
]
