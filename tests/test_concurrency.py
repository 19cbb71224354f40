"""
Concurrent vote admissions and presence joins.

Each call runs on its own thread with its own database connection against
the file-backed test database, all released together by a barrier.
"""

import threading

import pytest
from django.db import connection

from setlists.models import SetlistSong
from voting import presence
from voting.models import ShowPresence, Vote
from voting.services import RejectionReason, VoteUnavailable, cast_vote

from conftest import make_user

UNAVAILABLE = "UNAVAILABLE"


def run_concurrently(calls):
    """Run ``(func, args)`` pairs at the same moment; return their outcomes in order."""
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)
    errors = []

    def worker(index, func, args):
        try:
            barrier.wait()
            outcomes[index] = func(*args)
        except VoteUnavailable:
            outcomes[index] = UNAVAILABLE
        except Exception as error:
            errors.append(error)
        finally:
            connection.close()

    threads = [
        threading.Thread(target=worker, args=(index, func, args))
        for index, (func, args) in enumerate(calls)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert errors == []
    return outcomes


def vote_outcome(user, show_id, setlist_song_id):
    result = cast_vote(user, show_id, setlist_song_id)
    return "OK" if result.accepted else result.reason


@pytest.mark.django_db(transaction=True)
class TestConcurrentVotes:

    def test_unrelated_fans_all_succeed(self, show, songs, published):
        fans = [make_user(f"fan{index}") for index in range(8)]

        outcomes = run_concurrently(
            [(vote_outcome, (fan, show.pk, songs[index].pk)) for index, fan in enumerate(fans)]
        )

        assert outcomes == ["OK"] * 8
        assert Vote.objects.filter(show=show).count() == 8
        assert all(SetlistSong.objects.get(pk=s.pk).vote_count == 1 for s in songs[:8])

    def test_unrelated_fans_on_one_song(self, show, songs, published):
        fans = [make_user(f"fan{index}") for index in range(8)]

        outcomes = run_concurrently([(vote_outcome, (fan, show.pk, songs[0].pk)) for fan in fans])

        assert outcomes == ["OK"] * 8
        assert SetlistSong.objects.get(pk=songs[0].pk).vote_count == 8

    def test_same_song_counted_once(self, fan, show, songs, published):
        outcomes = run_concurrently([(vote_outcome, (fan, show.pk, songs[0].pk))] * 8)

        assert outcomes.count("OK") == 1
        assert outcomes.count(RejectionReason.ALREADY_VOTED) == 7
        assert Vote.objects.filter(user=fan, setlist_song=songs[0]).count() == 1
        assert SetlistSong.objects.get(pk=songs[0].pk).vote_count == 1

    def test_show_cap_holds(self, fan, show, songs, published):
        outcomes = run_concurrently([(vote_outcome, (fan, show.pk, entry.pk)) for entry in songs])

        assert len(songs) == 12
        assert outcomes.count("OK") == 10
        assert outcomes.count(RejectionReason.SHOW_LIMIT_REACHED) == 2
        assert UNAVAILABLE not in outcomes
        assert Vote.objects.filter(user=fan, show=show).count() == 10
        assert sum(SetlistSong.objects.filter(setlist__show=show).values_list("vote_count", flat=True)) == 10


@pytest.mark.django_db(transaction=True)
class TestConcurrentPresence:

    def test_simultaneous_first_connections_announce_once(self, fan, show, published):
        outcomes = run_concurrently(
            [(presence.join, (show.pk, fan.pk, f"tab-{index}")) for index in range(4)]
        )

        assert outcomes.count(True) == 1
        assert ShowPresence.objects.filter(show=show, user=fan).count() == 4
        joins = [m["data"]["joins"] for _, m in published if m["type"] == "presence.diff"]
        assert joins == [[str(fan.pk)]]
