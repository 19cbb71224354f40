# voting/consumers.py
import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from concerts.models import Show
from users.models import FanUser
from . import presence
from .broadcast import show_group_name

logger = logging.getLogger(__name__)


@database_sync_to_async
def show_exists(show_id):
    return Show.objects.filter(pk=show_id).exists()


class ShowVotingConsumer(AsyncWebsocketConsumer):
    """
    Live feed for one show's voting page.

    Everyone receives vote deltas. Signed-in fans are also tracked in
    presence and must send ``{"type": "heartbeat"}`` more often than the
    presence TTL to stay listed.
    """

    async def connect(self):
        self.user = self.scope.get("user")
        self.show_id = int(self.scope["url_route"]["kwargs"]["show_id"])
        self.tracked = isinstance(self.user, FanUser)

        if not await show_exists(self.show_id):
            logger.info(f"Websocket rejected, show {self.show_id} does not exist")
            await self.close()
            return

        self.room_group_name = show_group_name(self.show_id)
        await self.channel_layer.group_add(self.room_group_name, self.channel_name)
        await self.accept()

        if self.tracked:
            await database_sync_to_async(presence.join)(
                self.show_id, self.user.pk, self.channel_name, origin=self.channel_name
            )
        viewers = await database_sync_to_async(presence.active_viewers)(self.show_id)
        await self.send(text_data=json.dumps({
            "type": "presence_state",
            "data": {"show_id": self.show_id, "viewers": viewers},
        }))

    async def disconnect(self, close_code):
        if getattr(self, "room_group_name", None):
            await self.channel_layer.group_discard(self.room_group_name, self.channel_name)
        if getattr(self, "tracked", False) and getattr(self, "room_group_name", None):
            await database_sync_to_async(presence.leave)(
                self.show_id, self.user.pk, self.channel_name, origin=self.channel_name
            )

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or "{}")
        except json.JSONDecodeError:
            logger.debug(f"Ignoring malformed websocket message on show {self.show_id}")
            return

        if data.get("type") == "heartbeat" and self.tracked:
            await database_sync_to_async(presence.heartbeat)(
                self.show_id, self.user.pk, self.channel_name, origin=self.channel_name
            )
            await self.send(text_data=json.dumps({"type": "heartbeat_ack"}))

    async def vote_delta(self, event):
        await self.send(text_data=json.dumps({"type": "vote_delta", "data": event["data"]}))

    async def presence_diff(self, event):
        if event.get("origin") == self.channel_name:
            return
        await self.send(text_data=json.dumps({"type": "presence_diff", "data": event["data"]}))
