"""Websocket tests for the live show feed."""

import pytest
from channels.db import database_sync_to_async
from channels.testing import WebsocketCommunicator

from setlistvote.asgi import application
from users.utils import SESSION_COOKIE, generate_session_token
from voting.models import ShowPresence
from voting.services import cast_vote

from conftest import make_user

TIMEOUT = 3


def connect_to(show_id, user=None):
    headers = []
    if user is not None:
        token, _ = generate_session_token(user)
        headers.append((b"cookie", f"{SESSION_COOKIE}={token}".encode()))
    return WebsocketCommunicator(application, f"/ws/shows/{show_id}/", headers=headers)


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
async def test_unknown_show_is_rejected():
    communicator = connect_to(424242)
    connected, _ = await communicator.connect(timeout=TIMEOUT)
    assert not connected


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
async def test_anonymous_viewer_gets_state_and_vote_deltas(fan, show, songs):
    communicator = connect_to(show.pk)
    connected, _ = await communicator.connect(timeout=TIMEOUT)
    assert connected

    state = await communicator.receive_json_from(timeout=TIMEOUT)
    assert state == {"type": "presence_state", "data": {"show_id": show.pk, "viewers": []}}

    result = await database_sync_to_async(cast_vote)(fan, show.pk, songs[0].pk)
    assert result.accepted

    delta = await communicator.receive_json_from(timeout=TIMEOUT)
    assert delta == {
        "type": "vote_delta",
        "data": {
            "show_id": show.pk,
            "setlist_song_id": songs[0].pk,
            "song_id": songs[0].song_id,
            "new_vote_count": 1,
        },
    }
    assert not await database_sync_to_async(ShowPresence.objects.exists)()
    await communicator.disconnect()


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
async def test_fans_see_each_other_join_and_leave(fan, show):
    friend = await database_sync_to_async(make_user)("friend")

    first = connect_to(show.pk, fan)
    assert (await first.connect(timeout=TIMEOUT))[0]
    state = await first.receive_json_from(timeout=TIMEOUT)
    assert state["data"]["viewers"] == [str(fan.pk)]
    # A connection is not told about its own join.
    assert await first.receive_nothing(timeout=0.5)

    second = connect_to(show.pk, friend)
    assert (await second.connect(timeout=TIMEOUT))[0]
    second_state = await second.receive_json_from(timeout=TIMEOUT)
    assert second_state["data"]["viewers"] == sorted([str(fan.pk), str(friend.pk)])

    joined = await first.receive_json_from(timeout=TIMEOUT)
    assert joined == {
        "type": "presence_diff",
        "data": {"show_id": show.pk, "joins": [str(friend.pk)], "leaves": []},
    }

    await second.disconnect()
    left = await first.receive_json_from(timeout=TIMEOUT)
    assert left["data"]["leaves"] == [str(friend.pk)]

    await first.disconnect()
    assert not await database_sync_to_async(ShowPresence.objects.exists)()


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
async def test_heartbeat_is_acknowledged(fan, show):
    communicator = connect_to(show.pk, fan)
    assert (await communicator.connect(timeout=TIMEOUT))[0]
    await communicator.receive_json_from(timeout=TIMEOUT)

    await communicator.send_json_to({"type": "heartbeat"})

    assert await communicator.receive_json_from(timeout=TIMEOUT) == {"type": "heartbeat_ack"}
    await communicator.disconnect()
