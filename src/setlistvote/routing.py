from django.urls import re_path
from voting.consumers import ShowVotingConsumer

websocket_urlpatterns = [
    re_path(r'ws/shows/(?P<show_id>\d+)/$', ShowVotingConsumer.as_asgi()),
]
