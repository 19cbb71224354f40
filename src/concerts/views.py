import hmac
import logging

from django.conf import settings
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from .models import Show
from .serializers import ShowSerializer
from .services import record_show_view, trending_shows
from .trending import recalculate_trending_scores

logger = logging.getLogger(__name__)


@api_view(["GET"])
def trending(request):
    try:
        limit = min(max(int(request.query_params.get("limit", 10)), 1), 50)
    except ValueError:
        return Response({"error": "limit must be an integer"}, status=status.HTTP_400_BAD_REQUEST)
    serializer = ShowSerializer(trending_shows(limit=limit), many=True)
    return Response(dict(data=serializer.data))


@api_view(["GET"])
def show_detail(request, show_id):
    show = get_object_or_404(
        Show.objects.select_related("artist", "venue").annotate(
            total_votes=Coalesce(Sum("setlists__songs__vote_count"), 0)
        ),
        pk=show_id,
    )
    return Response(ShowSerializer(show).data)


@api_view(["POST"])
def show_view(request, show_id):
    if not record_show_view(show_id):
        return Response({"error": "Show not found."}, status=status.HTTP_404_NOT_FOUND)
    return Response({"success": True})


def _is_scheduler(request):
    expected = settings.CRON_SECRET
    if not expected:
        logger.error("CRON_SECRET is not configured, refusing scheduler request")
        return False
    auth_header = request.headers.get("Authorization", "")
    return hmac.compare_digest(auth_header.encode(), f"Bearer {expected}".encode())


@api_view(["GET", "POST"])
def calculate_trending(request):
    """Scheduler entry point for the trending batch. Requires the cron bearer secret."""
    if not _is_scheduler(request):
        logger.warning("Unauthorized trending calculation request")
        return Response({"error": "Unauthorized"}, status=status.HTTP_401_UNAUTHORIZED)

    result = recalculate_trending_scores()
    return Response(
        {
            "success": True,
            "message": f"Processed {result.processed} shows, updated {result.updated} trending scores",
            **result.to_dict(),
        }
    )
