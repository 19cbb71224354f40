from datetime import timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from concerts.models import Show, Venue
from music.models import Artist, Song
from setlists.models import Setlist, SetlistSong
from users.models import FanUser
from users.utils import SESSION_COOKIE, generate_session_token


def make_user(username):
    return FanUser.objects.create(username=username, email=f"{username}@example.com")


def make_show(artist, venue, days_ahead=7, song_count=12, **fields):
    """A show with a main setlist of ``song_count`` songs."""
    show = Show.objects.create(
        artist=artist,
        venue=venue,
        date=timezone.now() + timedelta(days=days_ahead),
        **fields,
    )
    setlist = Setlist.objects.create(show=show)
    for position in range(song_count):
        song, _ = Song.objects.get_or_create(artist=artist, name=f"Song {position + 1}")
        SetlistSong.objects.create(setlist=setlist, song=song, position=position)
    return show


def setlist_songs(show):
    return list(SetlistSong.objects.filter(setlist__show=show).order_by("position"))


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def artist(db):
    return Artist.objects.create(artist_id="artist-1", name="The Testers")


@pytest.fixture
def venue(db):
    return Venue.objects.create(name="Test Hall", city="Austin", state="TX", country="US")


@pytest.fixture
def show(artist, venue):
    return make_show(artist, venue)


@pytest.fixture
def songs(show):
    return setlist_songs(show)


@pytest.fixture
def fan(db):
    return make_user("fan")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def fan_client(fan):
    client = APIClient()
    token, _ = generate_session_token(fan)
    client.cookies[SESSION_COOKIE] = token
    return client


@pytest.fixture
def published(monkeypatch):
    """Capture realtime events instead of sending them to the channel layer."""
    events = []

    def fake_group_send(show_id, message):
        events.append((show_id, message))
        return True

    monkeypatch.setattr("voting.broadcast._group_send", fake_group_send)
    return events
