from rest_framework import serializers
from .models import Vote


class CastVoteSerializer(serializers.Serializer):
    show_id = serializers.IntegerField(min_value=1)
    setlist_song_id = serializers.IntegerField(min_value=1)


class HasVotedSerializer(serializers.Serializer):
    setlist_song_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1), max_length=200
    )


class PresenceSerializer(serializers.Serializer):
    connection_id = serializers.CharField(max_length=255, default="http")


class VoteSerializer(serializers.ModelSerializer):
    song_id = serializers.IntegerField(source="setlist_song.song_id", read_only=True)
    song_name = serializers.CharField(source="setlist_song.song.name", read_only=True)

    class Meta:
        model = Vote
        fields = ["id", "show_id", "setlist_song_id", "song_id", "song_name", "created_at"]
