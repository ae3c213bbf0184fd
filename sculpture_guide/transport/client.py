from __future__ import annotations

import asyncio
import base64
import importlib
import json
import logging
import sys
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import urlencode, urlsplit

from ..config import Settings
from ..errors import ErrorCategory, UpstreamError, UpstreamNotConnected
from .events import (
    AudioContent,
    ChunkStream,
    Content,
    InputAudioEvent,
    ResponseEvent,
    ResponseItem,
    TextContent,
    UpstreamEvent,
)

logger = logging.getLogger(__name__)


def build_ws_url_headers(settings: Settings) -> tuple[str, dict[str, str]]:
    """Return the realtime websocket URL and auth headers for the backend."""

    if settings.backend == "azure":
        if not settings.azure_openai_endpoint:
            raise ValueError("AZURE_OPENAI_ENDPOINT is required for the azure backend")
        endpoint = urlsplit(settings.azure_openai_endpoint)
        host = endpoint.netloc or endpoint.path.rstrip("/")
        query = urlencode(
            {
                "api-version": settings.azure_openai_api_version,
                "deployment": settings.azure_openai_deployment,
            }
        )
        return f"wss://{host}/openai/realtime?{query}", {"api-key": settings.azure_openai_api_key}

    url = f"{settings.openai_realtime_url}?{urlencode({'model': settings.openai_model})}"
    headers = {
        "Authorization": f"Bearer {settings.openai_api_key}",
        "OpenAI-Beta": "realtime=v1",
    }
    return url, headers


class RealtimeConversationClient:
    """WebSocket client for the OpenAI Realtime API.

    Raw server events are folded into typed objects: each response becomes a
    :class:`ResponseEvent` whose items and content parts stream their deltas,
    and each detected utterance becomes an :class:`InputAudioEvent` that
    completes once its transcription arrives.
    """

    def __init__(self, url: str, headers: dict[str, str]):
        self.url = url
        self.headers = headers
        self._ws: Any | None = None
        self._recv_task: asyncio.Task | None = None
        self._connect_lock = asyncio.Lock()
        self._closed = False
        self._connect_error: str | None = None

        self._events = ChunkStream[UpstreamEvent]()
        self._responses: dict[str, ResponseEvent] = {}
        self._items: dict[str, ResponseItem] = {}
        self._contents: dict[tuple[str, int], Content] = {}
        self._input_items: dict[str, InputAudioEvent] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> RealtimeConversationClient:
        url, headers = build_ws_url_headers(settings)
        logger.debug("upstream_client_created", extra={"backend": settings.backend})
        return cls(url, headers)

    async def _connection(self) -> Any:
        async with self._connect_lock:
            if self._closed:
                raise UpstreamNotConnected("client is closed")
            if self._connect_error is not None:
                raise UpstreamNotConnected(f"connect failed: {self._connect_error}")
            if self._ws is None:
                ws_mod = sys.modules.get("websockets") or importlib.import_module("websockets")
                try:
                    self._ws = await ws_mod.connect(self.url, additional_headers=self.headers)
                except OSError as exc:
                    logger.error(
                        "connection_error",
                        extra={"error_category": ErrorCategory.NETWORK.value},
                    )
                    self._connect_error = str(exc)
                    raise UpstreamNotConnected(str(exc)) from exc
                self._recv_task = asyncio.create_task(self._recv_loop(self._ws))
            return self._ws

    async def _send(self, payload: dict) -> None:
        ws = await self._connection()
        await ws.send(json.dumps(payload))

    async def configure(self, options: dict) -> None:
        await self._send({"type": "session.update", "session": options})

    async def send_audio(self, chunk: bytes) -> None:
        await self._send(
            {
                "type": "input_audio_buffer.append",
                "audio": base64.b64encode(chunk).decode("ascii"),
            }
        )

    async def send_item(self, item: dict) -> None:
        await self._send({"type": "conversation.item.create", "item": item})

    async def generate_response(self) -> None:
        await self._send({"type": "response.create"})

    def events(self) -> AsyncIterator[UpstreamEvent]:
        return self._events

    async def close(self) -> None:
        self._closed = True
        ws, self._ws = self._ws, None
        try:
            if ws is not None:
                await ws.close()
        finally:
            if self._recv_task is not None and self._recv_task is not asyncio.current_task():
                self._recv_task.cancel()
                await asyncio.gather(self._recv_task, return_exceptions=True)
            self._finalize()

    async def _recv_loop(self, ws: Any) -> None:
        error: BaseException | None = None
        try:
            async for raw in ws:
                try:
                    event = json.loads(raw)
                except json.JSONDecodeError:
                    logger.debug(
                        "invalid_json",
                        extra={"raw": raw, "error_category": ErrorCategory.PROTOCOL.value},
                    )
                    continue
                try:
                    self.handle_server_event(event)
                except Exception:
                    logger.warning(
                        "server_event_failed",
                        extra={"raw": raw, "error_category": ErrorCategory.PROTOCOL.value},
                        exc_info=True,
                    )
        except Exception as exc:
            if not self._closed:
                logger.warning(
                    "connection_error",
                    extra={"error_category": ErrorCategory.NETWORK.value},
                    exc_info=True,
                )
                error = exc
        finally:
            self._finalize(error)

    def handle_server_event(self, event: dict) -> None:
        """Fold one raw server event into the typed event streams."""

        etype = event.get("type", "")
        if etype == "input_audio_buffer.speech_started":
            item = InputAudioEvent(event.get("item_id", ""))
            self._input_items[item.id] = item
            self._events.push(item)
        elif etype == "conversation.item.input_audio_transcription.completed":
            item = self._input_items.pop(event.get("item_id", ""), None)
            if item is not None:
                item.complete(event.get("transcript") or "")
        elif etype == "conversation.item.input_audio_transcription.failed":
            item = self._input_items.pop(event.get("item_id", ""), None)
            if item is not None:
                item.complete()
        elif etype == "response.created":
            response = ResponseEvent(event.get("response", {}).get("id", ""))
            self._responses[response.id] = response
            self._events.push(response)
        elif etype == "response.output_item.added":
            response = self._responses.get(event.get("response_id", ""))
            raw_item = event.get("item", {})
            if response is not None:
                item = ResponseItem(
                    raw_item.get("id", ""),
                    raw_item.get("type", ""),
                    raw_item.get("role"),
                    response_id=response.id,
                )
                self._items[item.id] = item
                response.items.push(item)
        elif etype == "response.content_part.added":
            item = self._items.get(event.get("item_id", ""))
            if item is not None:
                key = (item.id, int(event.get("content_index", 0)))
                part_type = event.get("part", {}).get("type")
                content: Content = AudioContent(*key) if part_type == "audio" else TextContent(*key)
                self._contents[key] = content
                item.contents.push(content)
        elif etype == "response.text.delta":
            content = self._content(event)
            if isinstance(content, TextContent):
                content.text.push(event.get("delta", ""))
        elif etype == "response.text.done":
            content = self._content(event)
            if isinstance(content, TextContent):
                content.close()
        elif etype == "response.audio.delta":
            content = self._content(event)
            if isinstance(content, AudioContent):
                content.audio.push(base64.b64decode(event.get("delta", "")))
        elif etype == "response.audio.done":
            content = self._content(event)
            if isinstance(content, AudioContent):
                content.audio.finish()
        elif etype == "response.audio_transcript.delta":
            content = self._content(event)
            if isinstance(content, AudioContent):
                content.transcript.push(event.get("delta", ""))
        elif etype == "response.audio_transcript.done":
            content = self._content(event)
            if isinstance(content, AudioContent):
                content.transcript.finish()
        elif etype == "response.output_item.done":
            item_id = event.get("item", {}).get("id", "")
            self._close_item(item_id)
        elif etype == "response.done":
            response_id = event.get("response", {}).get("id", "")
            response = self._responses.pop(response_id, None)
            if response is not None:
                for item_id in [k for k, v in self._items.items() if v.response_id == response_id]:
                    self._close_item(item_id)
                response.items.finish()
        elif etype == "error":
            err = UpstreamError(event)
            logger.warning(
                "upstream_error: %s",
                err,
                extra={"error_category": ErrorCategory.UPSTREAM.value},
            )
        else:
            logger.debug("upstream_event", extra={"event_type": etype})

    def _content(self, event: dict) -> Content | None:
        return self._contents.get((event.get("item_id", ""), int(event.get("content_index", 0))))

    def _close_item(self, item_id: str, exc: BaseException | None = None) -> None:
        item = self._items.pop(item_id, None)
        for key in [k for k in self._contents if k[0] == item_id]:
            self._contents.pop(key).close(exc)
        if item is not None:
            if exc is None:
                item.contents.finish()
            else:
                item.contents.fail(exc)

    def _finalize(self, exc: BaseException | None = None) -> None:
        """Terminate every open stream; ``exc`` fails them instead."""
        for item_id in list(self._items):
            self._close_item(item_id, exc)
        for key in list(self._contents):
            self._contents.pop(key).close(exc)
        for response in self._responses.values():
            if exc is None:
                response.items.finish()
            else:
                response.items.fail(exc)
        self._responses.clear()
        for item in self._input_items.values():
            item.complete()
        self._input_items.clear()
        if exc is None:
            self._events.finish()
        else:
            self._events.fail(exc)
