"""Inject matching dataset facts as conversation context."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .data.models import SculptureRecord
from .data.store import DatasetStore

logger = logging.getLogger(__name__)

# Optional fields rendered into a fact sheet, in display order.
FACT_LABELS: tuple[tuple[str, str], ...] = (
    ("year", "Year"),
    ("location", "Location"),
    ("artist", "Artist"),
    ("description", "Description"),
    ("cast_information", "Cast Information"),
    ("original_material", "Original Material"),
    ("dimensions", "Dimensions"),
)


def format_sculpture(sculpture: SculptureRecord) -> str:
    lines = [f"Name: {sculpture.name}"]
    for field, label in FACT_LABELS:
        value = getattr(sculpture, field)
        if value:
            lines.append(f"{label}: {value}")
    return "\n".join(lines)


def format_sculptures(sculptures: Iterable[SculptureRecord]) -> str:
    return "\n\n".join(format_sculpture(s) for s in sculptures)


class SculptureEnricher:
    """Build a system-message context block for a user message.

    A sculpture named in the message wins (the longest mentioned name when
    several match); otherwise a broad search over the message text is tried.
    """

    def __init__(self, store: DatasetStore, log: logging.Logger | logging.LoggerAdapter | None = None):
        self.store = store
        self.log = log or logger

    def enrich(self, user_message: str) -> str | None:
        try:
            return self._enrich(user_message)
        except Exception:
            self.log.exception("enrichment_failed")
            return None

    def _enrich(self, user_message: str) -> str | None:
        message = user_message.lower()
        mentioned = [s.name for s in self.store.sculptures if s.name.lower() in message]
        if mentioned:
            best_match = max(mentioned, key=len)
            sculpture = self.store.get_by_name(best_match)
            if sculpture is not None:
                self.log.debug("enrichment_match", extra={"sculpture": sculpture.name})
                return (
                    f'I found information about "{sculpture.name}" in our collection. '
                    f"Here are the details:\n{format_sculptures([sculpture])}\n\n"
                    "Please provide this information to the user in a friendly, engaging way, "
                    "focusing on the most relevant aspects to their question."
                )

        text = " ".join(message.split())
        results = self.store.search(name=text, artist=text, location=text, year=text)
        if not results:
            return None
        self.log.debug("enrichment_search", extra={"matches": len(results)})
        return (
            "I found some relevant sculptures in our collection that might interest the user:\n"
            f"{format_sculptures(results)}\n\n"
            "Please use this information to provide a helpful, engaging response focused on "
            "the most relevant aspects to their question."
        )
