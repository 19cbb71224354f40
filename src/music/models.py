# Catalog entities. Rows are written by the external catalog sync jobs.
from django.db import models


class Artist(models.Model):
    artist_id = models.CharField(
        max_length=50, primary_key=True
    )  # Music catalog id
    name = models.CharField(max_length=255)
    followers = models.IntegerField(default=0)
    popularity = models.IntegerField(default=0)
    images = models.JSONField(default=list)  # list of {"url", "width", "height"}

    def __str__(self):
        return self.name


class Song(models.Model):
    artist = models.ForeignKey(Artist, on_delete=models.CASCADE, related_name="songs")
    name = models.CharField(max_length=255)
    catalog_id = models.CharField(max_length=50, unique=True, null=True, blank=True)
    duration_ms = models.IntegerField(null=True, blank=True)

    class Meta:
        indexes = [
            models.Index(fields=["artist", "name"], name="song_artist_name_idx"),
        ]

    def __str__(self):
        return self.name
