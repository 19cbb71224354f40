"""Tests for per-show presence: joins, leaves, heartbeats and TTL expiry."""

from datetime import timedelta

import pytest
from django.utils import timezone

from voting import presence
from voting.models import ShowPresence
from voting.tasks import expire_stale_presence

from conftest import make_show, make_user


def diffs(published):
    return [message["data"] for _, message in published if message["type"] == "presence.diff"]


@pytest.mark.django_db
class TestJoinAndLeave:

    def test_first_connection_announces_join(self, fan, show, published):
        assert presence.join(show.pk, fan.pk, "conn-1")

        assert presence.active_viewers(show.pk) == [str(fan.pk)]
        assert diffs(published) == [{"show_id": show.pk, "joins": [str(fan.pk)], "leaves": []}]

    def test_second_connection_is_silent(self, fan, show, published):
        presence.join(show.pk, fan.pk, "conn-1")
        assert not presence.join(show.pk, fan.pk, "conn-2")

        assert presence.active_viewers(show.pk) == [str(fan.pk)]
        assert len(diffs(published)) == 1

    def test_leave_announced_when_last_connection_closes(self, fan, show, published):
        presence.join(show.pk, fan.pk, "conn-1")
        presence.join(show.pk, fan.pk, "conn-2")

        assert not presence.leave(show.pk, fan.pk, "conn-1")
        assert presence.active_viewers(show.pk) == [str(fan.pk)]

        assert presence.leave(show.pk, fan.pk, "conn-2")
        assert presence.active_viewers(show.pk) == []
        assert diffs(published)[-1] == {"show_id": show.pk, "joins": [], "leaves": [str(fan.pk)]}

    def test_leave_of_unknown_connection(self, fan, show, published):
        assert not presence.leave(show.pk, fan.pk, "never-joined")
        assert published == []

    def test_viewers_are_scoped_to_show(self, fan, artist, venue, show, published):
        other = make_show(artist, venue, days_ahead=3, song_count=0)
        friend = make_user("friend")
        presence.join(show.pk, fan.pk, "conn-1")
        presence.join(other.pk, friend.pk, "conn-2")

        assert presence.active_viewers(show.pk) == [str(fan.pk)]
        assert presence.active_viewers(other.pk) == [str(friend.pk)]

    def test_origin_is_passed_through(self, fan, show, published):
        presence.join(show.pk, fan.pk, "conn-1", origin="specific.channel")
        assert published[0][1]["origin"] == "specific.channel"


@pytest.mark.django_db
class TestExpiry:

    def test_silent_connection_expires(self, fan, show, published):
        start = timezone.now()
        presence.join(show.pk, fan.pk, "conn-1", now=start)

        later = start + timedelta(seconds=61)
        assert presence.active_viewers(show.pk, now=later) == []
        assert presence.expire_stale_presence(now=later) == 1

        assert not ShowPresence.objects.exists()
        assert diffs(published)[-1]["leaves"] == [str(fan.pk)]

    def test_heartbeat_keeps_connection_live(self, fan, show, published):
        start = timezone.now()
        presence.join(show.pk, fan.pk, "conn-1", now=start)

        assert not presence.heartbeat(show.pk, fan.pk, "conn-1", now=start + timedelta(seconds=50))
        assert presence.expire_stale_presence(now=start + timedelta(seconds=100)) == 0
        assert presence.active_viewers(show.pk, now=start + timedelta(seconds=100)) == [str(fan.pk)]

    def test_heartbeat_after_expiry_rejoins(self, fan, show, published):
        start = timezone.now()
        presence.join(show.pk, fan.pk, "conn-1", now=start)

        assert presence.heartbeat(show.pk, fan.pk, "conn-1", now=start + timedelta(seconds=90))
        assert len([d for d in diffs(published) if d["joins"]]) == 2

    def test_user_with_live_connection_is_not_announced(self, fan, show, published):
        start = timezone.now()
        presence.join(show.pk, fan.pk, "stale", now=start)
        presence.join(show.pk, fan.pk, "fresh", now=start + timedelta(seconds=50))

        assert presence.expire_stale_presence(now=start + timedelta(seconds=70)) == 0
        assert list(ShowPresence.objects.values_list("connection_id", flat=True)) == ["fresh"]
        assert all(not d["leaves"] for d in diffs(published))

    def test_nothing_to_expire(self, show, published):
        assert presence.expire_stale_presence() == 0
        assert published == []

    def test_celery_task(self, fan, show, published):
        presence.join(show.pk, fan.pk, "conn-1", now=timezone.now() - timedelta(minutes=5))

        assert expire_stale_presence.delay().get() == 1
