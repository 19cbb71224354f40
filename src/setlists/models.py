from django.db import models
from concerts.models import Show
from music.models import Song


class Setlist(models.Model):
    """The song list fans vote on for one show. Structure is fixed once created."""

    KIND_MAIN = "main"
    KIND_ENCORE = "encore"
    KIND_CHOICES = [
        (KIND_MAIN, "Main set"),
        (KIND_ENCORE, "Encore"),
    ]

    show = models.ForeignKey(Show, on_delete=models.CASCADE, related_name="setlists")
    kind = models.CharField(max_length=10, choices=KIND_CHOICES, default=KIND_MAIN)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["show", "kind"], name="unique_show_setlist_kind"),
        ]

    def __str__(self):
        return f"{self.show} ({self.kind})"


class SetlistSong(models.Model):
    setlist = models.ForeignKey(Setlist, on_delete=models.CASCADE, related_name="songs")
    song = models.ForeignKey(Song, on_delete=models.CASCADE, related_name="setlist_entries")
    # Display order only; rankings sort by vote_count at read time.
    position = models.PositiveIntegerField(default=0)
    # The tally. Only voting.services.cast_vote writes it, always via F().
    vote_count = models.PositiveIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["setlist", "song"], name="unique_setlist_song"),
        ]
        indexes = [
            models.Index(fields=["setlist", "-vote_count"], name="setlistsong_ranking_idx"),
        ]

    def __str__(self):
        return f"{self.song.name} - {self.vote_count} votes"


class PlayedSetlist(models.Model):
    """What was actually performed, as imported from the historical-setlist provider."""

    show = models.OneToOneField(Show, on_delete=models.CASCADE, related_name="played_setlist")
    provider_setlist_id = models.CharField(max_length=100, blank=True)
    imported_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Played setlist for {self.show}"


class PlayedSetlistSong(models.Model):
    played_setlist = models.ForeignKey(PlayedSetlist, on_delete=models.CASCADE, related_name="songs")
    # Unmatched provider titles keep song empty and are compared by name.
    song = models.ForeignKey(Song, on_delete=models.SET_NULL, null=True, blank=True)
    name = models.CharField(max_length=255)
    position = models.PositiveIntegerField()

    class Meta:
        ordering = ["position"]

    def __str__(self):
        return f"{self.position}. {self.name}"
