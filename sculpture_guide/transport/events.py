from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

_END = object()


class _Failure:
    def __init__(self, exc: BaseException):
        self.exc = exc


class ChunkStream(Generic[T]):
    """Single-consumer async stream fed by a producer.

    Items pushed before the consumer starts are buffered. ``finish`` ends the
    iteration; ``fail`` makes the consumer raise once buffered items are read.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self.closed = False

    def push(self, item: T) -> None:
        if not self.closed:
            self._queue.put_nowait(item)

    def finish(self) -> None:
        if not self.closed:
            self.closed = True
            self._queue.put_nowait(_END)

    def fail(self, exc: BaseException) -> None:
        if not self.closed:
            self.closed = True
            self._queue.put_nowait(_Failure(exc))

    def __aiter__(self) -> ChunkStream[T]:
        return self

    async def __anext__(self) -> T:
        item = await self._queue.get()
        if item is _END:
            # Keep the marker so repeated iteration also stops.
            self._queue.put_nowait(_END)
            raise StopAsyncIteration
        if isinstance(item, _Failure):
            raise item.exc
        return item


class TextContent:
    type: Literal["text"] = "text"

    def __init__(self, item_id: str, content_index: int):
        self.item_id = item_id
        self.content_index = content_index
        self.text = ChunkStream[str]()

    def text_chunks(self) -> AsyncIterator[str]:
        return self.text

    def close(self, exc: BaseException | None = None) -> None:
        if exc is None:
            self.text.finish()
        else:
            self.text.fail(exc)


class AudioContent:
    type: Literal["audio"] = "audio"

    def __init__(self, item_id: str, content_index: int):
        self.item_id = item_id
        self.content_index = content_index
        self.audio = ChunkStream[bytes]()
        self.transcript = ChunkStream[str]()

    def audio_chunks(self) -> AsyncIterator[bytes]:
        return self.audio

    def transcript_chunks(self) -> AsyncIterator[str]:
        return self.transcript

    def close(self, exc: BaseException | None = None) -> None:
        for stream in (self.audio, self.transcript):
            if exc is None:
                stream.finish()
            else:
                stream.fail(exc)


Content = TextContent | AudioContent


class ResponseItem:
    """One output item of a response; iterates its content parts."""

    def __init__(
        self,
        item_id: str,
        item_type: str,
        role: str | None = None,
        *,
        response_id: str | None = None,
    ):
        self.id = item_id
        self.response_id = response_id
        self.type = item_type
        self.role = role
        self.contents = ChunkStream[Content]()

    def __aiter__(self) -> AsyncIterator[Content]:
        return self.contents


class ResponseEvent:
    """A model response; iterates its output items as they are produced."""

    type: Literal["response"] = "response"

    def __init__(self, response_id: str):
        self.id = response_id
        self.items = ChunkStream[ResponseItem]()

    def __aiter__(self) -> AsyncIterator[ResponseItem]:
        return self.items


class InputAudioEvent:
    """Speech detected in the input audio buffer."""

    type: Literal["input_audio"] = "input_audio"

    def __init__(self, item_id: str):
        self.id = item_id
        self.transcription: str | None = None
        self._completed = asyncio.Event()

    def complete(self, transcription: str | None = None) -> None:
        if transcription is not None:
            self.transcription = transcription
        self._completed.set()

    async def wait_for_completion(self) -> None:
        await self._completed.wait()


UpstreamEvent = ResponseEvent | InputAudioEvent


EventT = TypeVar("EventT")


EventHandler = Callable[[EventT], Awaitable[None]]


def get_type(ev: Any) -> str:
    if isinstance(ev, dict):
        return ev.get("type", "")
    return getattr(ev, "type", "")


class Dispatcher(Generic[EventT]):
    """Route upstream events to one coroutine per event kind.

    The kind is read by :func:`get_type`: the ``type`` attribute of a
    :class:`ResponseEvent` or :class:`InputAudioEvent` ("response",
    "input_audio"), or the ``"type"`` key of a raw dict. A session registers
    one handler per kind it relays; :meth:`dispatch` reports kinds with no
    handler so the caller can log and skip them.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, EventHandler[EventT]] = {}

    def on(
        self, event_type: str, handler: EventHandler[EventT] | None = None
    ) -> EventHandler[EventT] | Callable[[EventHandler[EventT]], EventHandler[EventT]]:
        """Register ``handler`` for ``event_type``.

        If ``handler`` is ``None`` this functions as a decorator factory.
        """

        if handler is not None:
            self._handlers[event_type] = handler
            return handler

        def decorator(func: EventHandler[EventT]) -> EventHandler[EventT]:
            self._handlers[event_type] = func
            return func

        return decorator

    async def dispatch(self, event: EventT) -> bool:
        """Await the handler for ``event``; return whether one was found."""
        handler = self._handlers.get(get_type(event))
        if handler:
            await handler(event)
            return True
        return False
