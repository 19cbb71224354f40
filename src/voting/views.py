import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, throttle_classes
from rest_framework.response import Response

from concerts.models import Show
from users.utils import get_session_user, require_auth
from . import presence
from .serializers import (
    CastVoteSerializer,
    HasVotedSerializer,
    PresenceSerializer,
    VoteSerializer,
)
from .services import (
    RejectionReason,
    VoteUnavailable,
    cast_vote,
    get_user_vote_stats,
    get_vote_status,
    has_voted,
    list_user_votes,
    show_vote_activity,
)
from .throttling import VoteRateThrottle

logger = logging.getLogger(__name__)

REJECTION_STATUS = {
    RejectionReason.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    RejectionReason.SONG_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    RejectionReason.ALREADY_VOTED: status.HTTP_409_CONFLICT,
    RejectionReason.SHOW_LIMIT_REACHED: status.HTTP_403_FORBIDDEN,
    RejectionReason.DAILY_LIMIT_REACHED: status.HTTP_403_FORBIDDEN,
}


def _int_param(request, name, default, maximum=None):
    try:
        value = int(request.query_params.get(name, default))
    except (TypeError, ValueError):
        return default
    value = max(0, value)
    return min(value, maximum) if maximum is not None else value


@api_view(["POST"])
@throttle_classes([VoteRateThrottle])
def vote(request):
    """
    Cast one vote.

    Body: {"show_id": int, "setlist_song_id": int}. Rejections carry the
    reason and current quota numbers; storage failures answer 503 and the
    client may retry the same request.
    """
    user = get_session_user(request)
    if user is None:
        return Response(
            {"error": RejectionReason.UNAUTHENTICATED.value, "message": "No valid session."},
            status=status.HTTP_401_UNAUTHORIZED,
        )

    serializer = CastVoteSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {"error": "INVALID_REQUEST", "details": serializer.errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    try:
        result = cast_vote(
            user,
            serializer.validated_data["show_id"],
            serializer.validated_data["setlist_song_id"],
        )
    except VoteUnavailable as error:
        return Response(
            {"error": "VOTE_UNAVAILABLE", "message": str(error), "retryable": True},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    payload = result.to_dict()
    if result.accepted:
        return Response(payload, status=status.HTTP_200_OK)
    payload["error"] = result.reason
    return Response(payload, status=REJECTION_STATUS[RejectionReason(result.reason)])


@api_view(["GET"])
@require_auth
def vote_status(request, show_id):
    show = get_object_or_404(Show, pk=show_id)
    return Response(get_vote_status(request.user, show.pk).to_dict())


@api_view(["POST"])
def has_voted_view(request):
    serializer = HasVotedSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {"error": "INVALID_REQUEST", "details": serializer.errors},
            status=status.HTTP_400_BAD_REQUEST,
        )
    ids = serializer.validated_data["setlist_song_ids"]
    flags = has_voted(get_session_user(request), ids)
    return Response({"results": dict(zip((str(i) for i in ids), flags))})


@api_view(["GET"])
@require_auth
def my_votes(request):
    show_id = request.query_params.get("show_id")
    if show_id is not None and not show_id.isdigit():
        return Response({"error": "show_id must be an integer"}, status=status.HTTP_400_BAD_REQUEST)
    votes = list_user_votes(
        request.user,
        show_id=int(show_id) if show_id else None,
        limit=_int_param(request, "limit", 50, maximum=200),
        offset=_int_param(request, "offset", 0),
    )
    return Response(VoteSerializer(votes, many=True).data)


@api_view(["GET"])
@require_auth
def my_vote_stats(request):
    return Response(get_user_vote_stats(request.user))


@api_view(["GET"])
def show_activity(request, show_id):
    show = get_object_or_404(Show, pk=show_id)
    days = _int_param(request, "days", 30, maximum=365) or 30
    return Response(show_vote_activity(show.pk, days=days))


@api_view(["GET"])
def show_presence(request, show_id):
    show = get_object_or_404(Show, pk=show_id)
    viewers = presence.active_viewers(show.pk)
    return Response({"show_id": show.pk, "active_users": len(viewers), "user_ids": viewers})


def _presence_action(request, show_id, action):
    show = get_object_or_404(Show, pk=show_id)
    serializer = PresenceSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {"error": "INVALID_REQUEST", "details": serializer.errors},
            status=status.HTTP_400_BAD_REQUEST,
        )
    changed = action(show.pk, request.user.pk, serializer.validated_data["connection_id"])
    return Response({"success": True, "changed": changed})


@api_view(["POST"])
@require_auth
def presence_join(request, show_id):
    return _presence_action(request, show_id, presence.join)


@api_view(["POST"])
@require_auth
def presence_heartbeat(request, show_id):
    return _presence_action(request, show_id, presence.heartbeat)


@api_view(["POST"])
@require_auth
def presence_leave(request, show_id):
    return _presence_action(request, show_id, presence.leave)
