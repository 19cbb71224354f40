from django.urls import path

from .views import (
    has_voted_view,
    my_vote_stats,
    my_votes,
    presence_heartbeat,
    presence_join,
    presence_leave,
    show_activity,
    show_presence,
    vote,
    vote_status,
)

app_name = "voting"

urlpatterns = [
    path("votes/", vote, name="vote"),
    path("votes/has-voted/", has_voted_view, name="has_voted"),
    path("votes/mine/", my_votes, name="my_votes"),
    path("votes/stats/", my_vote_stats, name="my_vote_stats"),
    path("shows/<int:show_id>/vote-status/", vote_status, name="vote_status"),
    path("shows/<int:show_id>/activity/", show_activity, name="show_activity"),
    path("shows/<int:show_id>/presence/", show_presence, name="show_presence"),
    path("shows/<int:show_id>/presence/join/", presence_join, name="presence_join"),
    path("shows/<int:show_id>/presence/heartbeat/", presence_heartbeat, name="presence_heartbeat"),
    path("shows/<int:show_id>/presence/leave/", presence_leave, name="presence_leave"),
]
