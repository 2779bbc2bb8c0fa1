# Django Imports
from django.urls import path

# Local Imports
from . import views

# Define the application namespace for URL reversing
app_name = 'community'


urlpatterns = [
    path('', views.index, name='index'),
    path('create/', views.create_community, name='create'),
    path('<int:community_id>/join/', views.join_community, name='join'),
    path('<int:community_id>/delete/', views.delete_community, name='delete'),
    path('<int:community_id>/chat/', views.chat_view, name='chat'),
]
