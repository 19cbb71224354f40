from rest_framework import serializers
from music.serializers import SongSerializer
from .models import SetlistSong


class SetlistSongSerializer(serializers.ModelSerializer):
    song = SongSerializer(read_only=True)
    setlist_kind = serializers.CharField(source="setlist.kind", read_only=True)

    class Meta:
        model = SetlistSong
        fields = ["id", "song", "setlist_kind", "position", "vote_count"]
