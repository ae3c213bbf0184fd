from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from .. import protocol
from ..transport.events import AudioContent, InputAudioEvent, ResponseEvent, TextContent

logger = logging.getLogger(__name__)

Log = logging.Logger | logging.LoggerAdapter


class Downstream(Protocol):
    """Outbound side of the browser socket."""

    async def send(self, message: dict) -> None: ...

    async def send_binary(self, data: bytes) -> None: ...


def content_id(content: TextContent | AudioContent) -> str:
    return f"{content.item_id}-{content.content_index}"


async def handle_text_content(content: TextContent, out: Downstream, log: Log = logger) -> None:
    """Stream text deltas to the client, then signal ``text_done``."""

    try:
        cid = content_id(content)
        async for text in content.text_chunks():
            await out.send(protocol.text_delta(cid, text))
        await out.send(protocol.text_done(cid))
        log.debug("text_content_done", extra={"content_id": cid})
    except Exception:
        log.exception("text_content_failed")
        raise


async def handle_audio_content(content: AudioContent, out: Downstream, log: Log = logger) -> None:
    """Forward audio chunks and the transcript concurrently."""

    cid = content_id(content)

    async def forward_audio() -> None:
        async for chunk in content.audio_chunks():
            await out.send_binary(chunk)

    async def forward_transcript() -> None:
        async for chunk in content.transcript_chunks():
            await out.send(protocol.text_delta(cid, chunk))
        await out.send(protocol.text_done(cid))

    try:
        await asyncio.gather(forward_audio(), forward_transcript())
        log.debug("audio_content_done", extra={"content_id": cid})
    except Exception:
        log.exception("audio_content_failed")
        raise


async def handle_response(event: ResponseEvent, out: Downstream, log: Log = logger) -> None:
    try:
        async for item in event:
            if item.type != "message":
                continue
            async for content in item:
                if content.type == "text":
                    await handle_text_content(content, out, log)
                elif content.type == "audio":
                    await handle_audio_content(content, out, log)
        log.debug("response_done", extra={"response_id": event.id})
    except Exception:
        log.exception("response_failed")
        raise


async def handle_input_audio(event: InputAudioEvent, out: Downstream, log: Log = logger) -> None:
    """Announce detected speech, then deliver its final transcription."""

    try:
        await out.send(protocol.speech_started())
        await event.wait_for_completion()
        text = event.transcription or ""
        await out.send(protocol.transcription(event.id, text))
        log.debug("input_audio_done", extra={"transcription_length": len(text)})
    except Exception:
        log.exception("input_audio_failed")
        raise
