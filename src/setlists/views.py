from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from concerts.models import Show
from .comparison import get_setlist_comparison
from .serializers import SetlistSongSerializer
from .tally import ranked_setlist


@api_view(["GET"])
def show_setlist(request, show_id):
    """Setlist songs of a show, most voted first."""
    show = get_object_or_404(Show, pk=show_id)
    entries = ranked_setlist(show.pk)
    serializer = SetlistSongSerializer(entries, many=True)
    return Response({"show_id": show.pk, "songs": serializer.data})


@api_view(["GET"])
def setlist_comparison(request, show_id):
    get_object_or_404(Show, pk=show_id)
    result = get_setlist_comparison(show_id)
    if result is None:
        return Response(
            {"error": "No played setlist available for this show yet."},
            status=status.HTTP_404_NOT_FOUND,
        )
    return Response(result.to_dict())
