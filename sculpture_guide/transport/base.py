from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol

from .events import UpstreamEvent


class ConversationClient(Protocol):
    """Capability the session needs from the realtime conversation API."""

    async def configure(self, options: dict) -> None:
        """Apply session options (modalities, voice, turn detection...)."""

    async def send_audio(self, chunk: bytes) -> None:
        """Append raw PCM16 audio to the input buffer."""

    async def send_item(self, item: dict) -> None:
        """Add a conversation item such as a system or user message."""

    async def generate_response(self) -> None:
        """Ask the model to respond to the conversation so far."""

    def events(self) -> AsyncIterator[UpstreamEvent]:
        """Typed upstream events; ends once the client is closed."""

    async def close(self) -> None:
        """Close the connection and end :meth:`events`."""
