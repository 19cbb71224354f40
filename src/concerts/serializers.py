from rest_framework import serializers
from music.serializers import ArtistSerializer
from .models import Show, Venue


class VenueSerializer(serializers.ModelSerializer):
    class Meta:
        model = Venue
        fields = ["id", "name", "city", "state", "country"]


class ShowSerializer(serializers.ModelSerializer):
    artist = ArtistSerializer(read_only=True)
    venue = VenueSerializer(read_only=True)
    total_votes = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Show
        fields = [
            "id",
            "artist",
            "venue",
            "date",
            "status",
            "view_count",
            "trending_score",
            "total_votes",
        ]
