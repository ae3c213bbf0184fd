"""Per-connection relay between a browser socket and the realtime API."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from collections.abc import Callable
from enum import Enum
from typing import Any

from . import protocol
from .config import Settings
from .data.store import DatasetStore
from .enrichment import SculptureEnricher
from .errors import ErrorCategory
from .handlers.core import handle_input_audio, handle_response
from .logging import session_logger
from .prompts import DEFAULT_PROMPTS, PromptSet
from .transport.base import ConversationClient
from .transport.events import Dispatcher, UpstreamEvent

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Settings], ConversationClient]


class SessionState(str, Enum):
    CREATED = "created"
    CONFIGURED = "configured"
    ACTIVE = "active"
    CLOSING = "closing"
    CLOSED = "closed"


def session_options(settings: Settings) -> dict:
    """Options sent upstream when the session is configured."""
    return {
        "modalities": ["text", "audio"],
        "input_audio_format": "pcm16",
        "input_audio_transcription": {"model": settings.transcribe_model},
        "voice": settings.voice_name,
        "turn_detection": {"type": "server_vad"},
    }


def message_item(role: str, text: str) -> dict:
    return {
        "type": "message",
        "role": role,
        "content": [{"type": "input_text", "text": text}],
    }


class RealtimeSession:
    """Relay one client socket to one upstream conversation.

    Two duties run side by side: the receive loop forwards client frames
    upstream, and the event loop streams upstream events back to the client.
    ``websocket`` is anything with Starlette's ``receive``/``send_text``/
    ``send_bytes`` coroutines.
    """

    def __init__(
        self,
        websocket: Any,
        client_factory: ClientFactory,
        *,
        settings: Settings,
        store: DatasetStore | None = None,
        prompts: PromptSet = DEFAULT_PROMPTS,
    ):
        self.session_id = str(uuid.uuid4())
        self.websocket = websocket
        self.settings = settings
        self.prompts = prompts
        self.log = session_logger(logger, self.session_id)
        self.store = store
        self.enricher = SculptureEnricher(store, self.log) if store is not None else None
        self.log.debug("upstream_client_init", extra={"backend": settings.backend})
        self.client = client_factory(settings)
        self.state = SessionState.CREATED
        self._init_task: asyncio.Task | None = None

        self._dispatcher: Dispatcher[UpstreamEvent] = Dispatcher()
        self._dispatcher.on("response", lambda ev: handle_response(ev, self, self.log))
        self._dispatcher.on("input_audio", lambda ev: handle_input_audio(ev, self, self.log))
        self.log.info("session_created")

    async def run(self) -> None:
        """Serve the connection until the client disconnects."""
        self._init_task = asyncio.create_task(self.initialize())
        try:
            while True:
                message = await self.websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                await self.handle_message(message)
        finally:
            await self.close()

    async def initialize(self) -> None:
        self.log.debug("configuring_session")
        try:
            await self.client.configure(session_options(self.settings))
        except Exception:
            self.log.exception(
                "configure_failed", extra={"error_category": ErrorCategory.UPSTREAM.value}
            )
            return
        self.state = SessionState.CONFIGURED
        self.log.debug("session_configured")

        try:
            await self.send(protocol.connected(self.prompts.greeting))
        except Exception:
            self.log.exception("greeting_failed")
            return
        await self.start_event_loop()

    async def start_event_loop(self) -> None:
        """Seed the instructions, then consume upstream events until closed."""
        try:
            for instruction in self.prompts.instructions:
                await self.client.send_item(message_item("system", instruction))
            self.state = SessionState.ACTIVE
            self.log.debug("event_loop_started")
            async for event in self.client.events():
                if not await self._dispatcher.dispatch(event):
                    self.log.debug("upstream_event_ignored", extra={"event_type": event.type})
        except Exception:
            self.log.exception(
                "event_loop_failed", extra={"error_category": ErrorCategory.UPSTREAM.value}
            )
            raise

    async def handle_message(self, message: dict) -> None:
        try:
            if message.get("bytes") is not None:
                await self._handle_binary(message["bytes"])
            elif message.get("text") is not None:
                await self._handle_text(message["text"])
        except Exception:
            self.log.exception(
                "message_failed", extra={"error_category": ErrorCategory.PROTOCOL.value}
            )

    async def _handle_binary(self, data: bytes) -> None:
        try:
            await self.client.send_audio(data)
        except Exception:
            self.log.exception(
                "send_audio_failed", extra={"error_category": ErrorCategory.UPSTREAM.value}
            )
            raise

    async def _handle_text(self, raw: str) -> None:
        payload = json.loads(raw)
        message_type = payload.get("type") if isinstance(payload, dict) else None
        self.log.debug("text_message", extra={"message_type": message_type})
        if message_type != "user_message":
            return

        message = protocol.UserMessage.model_validate(payload)
        try:
            if self.enricher is not None and message.text:
                context = self.enricher.enrich(message.text)
                if context:
                    await self.client.send_item(message_item("system", context))
            await self.client.send_item(message_item("user", message.text))
            await self.client.generate_response()
            self.log.debug("user_message_sent")
        except Exception:
            self.log.exception(
                "user_message_failed", extra={"error_category": ErrorCategory.UPSTREAM.value}
            )
            raise

    async def send(self, message: dict) -> None:
        await self.websocket.send_text(json.dumps(message))

    async def send_binary(self, data: bytes) -> None:
        await self.websocket.send_bytes(data)

    async def close(self) -> None:
        if self.state in (SessionState.CLOSING, SessionState.CLOSED):
            return
        self.state = SessionState.CLOSING
        self.log.info("session_closing")
        try:
            await self.client.close()
            self.log.info("session_closed")
        except Exception:
            self.log.exception(
                "close_failed", extra={"error_category": ErrorCategory.UPSTREAM.value}
            )
        if self._init_task is not None:
            if not self._init_task.done():
                self._init_task.cancel()
            await asyncio.gather(self._init_task, return_exceptions=True)
        self.state = SessionState.CLOSED
