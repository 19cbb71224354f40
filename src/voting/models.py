from django.db import models
from django.utils import timezone
from concerts.models import Show
from setlists.models import SetlistSong
from users.models import FanUser


class Vote(models.Model):
    """One fan's endorsement of one setlist song. Votes are never deleted or edited."""

    user = models.ForeignKey(FanUser, on_delete=models.CASCADE, related_name="votes")
    setlist_song = models.ForeignKey(SetlistSong, on_delete=models.CASCADE, related_name="votes")
    # Denormalized from setlist_song so quota counts need no join.
    show = models.ForeignKey(Show, on_delete=models.CASCADE, related_name="votes")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "setlist_song"], name="unique_user_setlist_song_vote"
            ),
        ]
        indexes = [
            models.Index(fields=["user", "show"], name="vote_user_show_idx"),
            models.Index(fields=["user", "created_at"], name="vote_user_created_idx"),
            models.Index(fields=["show", "created_at"], name="vote_show_created_idx"),
        ]

    def __str__(self):
        return f"{self.user} -> {self.setlist_song_id} ({self.show_id})"


class VoteAnalytics(models.Model):
    """
    Per (user, show) vote counters refreshed in the vote transaction.

    Read-side cache for dashboards. Quota enforcement always counts Vote rows.
    """

    user = models.ForeignKey(FanUser, on_delete=models.CASCADE, related_name="vote_analytics")
    show = models.ForeignKey(Show, on_delete=models.CASCADE, related_name="vote_analytics")
    show_votes = models.PositiveIntegerField(default=0)
    daily_votes = models.PositiveIntegerField(default=0)
    # The day daily_votes counts for; a vote on a later day restarts it.
    daily_date = models.DateField(null=True, blank=True)
    last_vote_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "show"], name="unique_user_show_analytics"),
        ]

    def __str__(self):
        return f"{self.user} @ {self.show_id}: {self.show_votes} votes"


class ShowPresence(models.Model):
    """One live connection of a fan viewing a show's voting page."""

    show = models.ForeignKey(Show, on_delete=models.CASCADE, related_name="presences")
    user = models.ForeignKey(FanUser, on_delete=models.CASCADE, related_name="presences")
    connection_id = models.CharField(max_length=255)
    joined_at = models.DateTimeField(auto_now_add=True)
    last_seen = models.DateTimeField()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["show", "user", "connection_id"], name="unique_show_presence_connection"
            ),
        ]
        indexes = [
            models.Index(fields=["show", "last_seen"], name="presence_show_seen_idx"),
        ]

    def __str__(self):
        return f"{self.user} viewing {self.show_id}"
