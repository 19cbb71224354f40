"""
Access pattern for the vote tally stored in ``SetlistSong.vote_count``.

Increments are relative updates executed by the database, never a
read-modify-write from Python, so concurrent voters on the same song
cannot lose updates. Rankings are computed at read time.
"""

from django.db.models import F, Sum
from django.db.models.functions import Coalesce

from .models import SetlistSong


def increment_vote_count(setlist_song_id):
    """
    Add one vote to a setlist song and return the post-increment tally.

    Must run inside the caller's transaction; the UPDATE holds the row lock
    until commit so the value read back is this transaction's own.
    """
    updated = SetlistSong.objects.filter(pk=setlist_song_id).update(
        vote_count=F("vote_count") + 1
    )
    if updated != 1:
        raise SetlistSong.DoesNotExist(f"SetlistSong {setlist_song_id} does not exist")
    return SetlistSong.objects.values_list("vote_count", flat=True).get(pk=setlist_song_id)


def ranked_setlist(show_id):
    return (
        SetlistSong.objects.filter(setlist__show_id=show_id)
        .select_related("song", "setlist")
        .order_by("-vote_count", "position", "id")
    )


def total_votes_for_show(show_id):
    return SetlistSong.objects.filter(setlist__show_id=show_id).aggregate(
        total=Coalesce(Sum("vote_count"), 0)
    )["total"]
