from django.urls import path

from . import consumers

websocket_urlpatterns = [
    path('ws/community/<int:community_id>/chat/', consumers.CommunityChatConsumer.as_asgi()),
]
