"""
Best-effort fan-out of vote deltas and presence diffs to show viewers.

Publishing happens after the vote transaction commits. A crash between
commit and publish drops the event; clients reconcile against the tally
on their next fetch or reconnect, so publish errors are logged and dropped
and never reach the voter.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

VOTE_DELTA = "vote.delta"
PRESENCE_DIFF = "presence.diff"


def show_group_name(show_id):
    return f"show_{show_id}"


def _group_send(show_id, message):
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning("No channel layer configured, dropping realtime event")
        return False
    try:
        async_to_sync(channel_layer.group_send)(show_group_name(show_id), message)
    except Exception:
        logger.exception(f"Failed to publish {message['type']} for show {show_id}")
        return False
    return True


def publish_vote_delta(show_id, setlist_song_id, song_id, new_vote_count):
    return _group_send(
        show_id,
        {
            "type": VOTE_DELTA,
            "data": {
                "show_id": show_id,
                "setlist_song_id": setlist_song_id,
                "song_id": song_id,
                "new_vote_count": new_vote_count,
            },
        },
    )


def publish_presence_diff(show_id, joins=(), leaves=(), origin=None):
    """Broadcast a join/leave delta. ``origin`` is the channel that caused it, if any."""
    return _group_send(
        show_id,
        {
            "type": PRESENCE_DIFF,
            "origin": origin,
            "data": {
                "show_id": show_id,
                "joins": [str(user_id) for user_id in joins],
                "leaves": [str(user_id) for user_id in leaves],
            },
        },
    )
