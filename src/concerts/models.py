from django.db import models
from music.models import Artist


class Venue(models.Model):
    name = models.CharField(max_length=255)
    city = models.CharField(max_length=255, blank=True)
    state = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, blank=True)

    def __str__(self):
        return f"{self.name}, {self.city}" if self.city else self.name


class Show(models.Model):
    STATUS_SCHEDULED = "scheduled"
    STATUS_ONGOING = "ongoing"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, "Scheduled"),
        (STATUS_ONGOING, "Ongoing"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    artist = models.ForeignKey(Artist, on_delete=models.CASCADE, related_name="shows")
    venue = models.ForeignKey(Venue, on_delete=models.CASCADE, related_name="shows")
    date = models.DateTimeField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_SCHEDULED)
    view_count = models.PositiveIntegerField(default=0)
    # Written only by concerts.trending.recalculate_trending_scores
    trending_score = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['date']
        indexes = [
            models.Index(fields=['date'], name='show_date_idx'),
            models.Index(fields=['trending_score'], name='show_trending_score_idx'),
            models.Index(fields=['status'], name='show_status_idx'),
        ]

    def __str__(self):
        return f"{self.artist} at {self.venue} on {self.date:%Y-%m-%d}"
