"""Read-only, in-memory access to the sculpture dataset."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pydantic import ValidationError

from ..errors import ErrorCategory
from .models import DatasetDocument, GeneralInfoBlock, SculptureRecord

logger = logging.getLogger(__name__)

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Lower-case ``name``, drop punctuation and collapse whitespace."""
    name = _NON_WORD_RE.sub("", name.lower())
    return _WHITESPACE_RE.sub(" ", name).strip()


def _contains(value: str, needle: str) -> bool:
    return needle.lower().strip() in value.lower()


class DatasetStore:
    """Sculpture records loaded once from a JSON document.

    A failed load leaves the store empty; accessors then report "not found"
    instead of raising.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._document: DatasetDocument | None = None
        self._load_attempted = False

    @property
    def loaded(self) -> bool:
        return self._document is not None

    def load(self) -> bool:
        self._load_attempted = True
        try:
            raw = self.path.read_text(encoding="utf-8")
            self._document = DatasetDocument.model_validate_json(raw)
        except (OSError, UnicodeDecodeError, ValidationError):
            logger.exception(
                "dataset_load_failed",
                extra={"path": str(self.path), "error_category": ErrorCategory.DATASET.value},
            )
            self._document = None
            return False
        logger.info(
            "dataset_loaded",
            extra={"path": str(self.path), "sculptures": len(self._document.sculptures)},
        )
        return True

    def _ensure_loaded(self) -> DatasetDocument | None:
        if self._document is None and not self._load_attempted:
            self.load()
        return self._document

    @property
    def sculptures(self) -> list[SculptureRecord]:
        document = self._ensure_loaded()
        return list(document.sculptures) if document else []

    def get_gallery_info(self) -> GeneralInfoBlock | None:
        document = self._ensure_loaded()
        return document.general_information.gallery_collection if document else None

    def get_gothic_style_info(self) -> GeneralInfoBlock | None:
        document = self._ensure_loaded()
        return document.general_information.gothic_style if document else None

    def find_by_name(self, query: str) -> list[SculptureRecord]:
        """Return records matching ``query``, best tier first.

        Tiers: exact (case-insensitive), normalized, then substring matches
        with the longest names first. The first non-empty tier wins.
        """
        sculptures = self.sculptures
        search = query.lower().strip()
        if not search:
            return []

        exact = [s for s in sculptures if s.name.lower() == search]
        if exact:
            return exact

        normalized = normalize_name(search)
        by_normalized = [s for s in sculptures if normalize_name(s.name) == normalized]
        if by_normalized:
            return by_normalized

        partial = [s for s in sculptures if search in s.name.lower()]
        return sorted(partial, key=lambda s: len(s.name), reverse=True)

    def get_by_name(self, query: str) -> SculptureRecord | None:
        matches = self.find_by_name(query)
        return matches[0] if matches else None

    def search(
        self,
        *,
        name: str | None = None,
        artist: str | None = None,
        location: str | None = None,
        year: str | None = None,
    ) -> list[SculptureRecord]:
        """Filter records on every given criterion.

        A criterion only filters records that carry the corresponding field;
        a record without e.g. ``artist`` is never rejected by the artist
        criterion. Without any criterion nothing is returned.
        """
        if not (name or artist or location or year):
            return []

        criteria = {"artist": artist, "location": location, "year": year}
        results = []
        for sculpture in self.sculptures:
            if name and not _contains(sculpture.name, name):
                continue
            if any(
                value and getattr(sculpture, field) and not _contains(getattr(sculpture, field), value)
                for field, value in criteria.items()
            ):
                continue
            results.append(sculpture)
        return results
