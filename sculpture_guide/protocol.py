"""Messages exchanged with the browser client over ``/realtime``."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class UserMessage(BaseModel):
    type: Literal["user_message"]
    text: str
    id: str | None = None


def text_delta(content_id: str, delta: str) -> dict:
    return {"id": content_id, "type": "text_delta", "delta": delta}


def transcription(item_id: str, text: str) -> dict:
    return {"id": item_id, "type": "transcription", "text": text}


def connected(greeting: str) -> dict:
    return {"type": "control", "action": "connected", "greeting": greeting}


def speech_started() -> dict:
    return {"type": "control", "action": "speech_started"}


def text_done(content_id: str) -> dict:
    return {"type": "control", "action": "text_done", "id": content_id}
