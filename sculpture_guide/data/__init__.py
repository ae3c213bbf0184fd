"""Static sculpture dataset: models and the read-only store."""

from .models import DatasetDocument, GeneralInfoBlock, SculptureRecord
from .store import DatasetStore

__all__ = ["DatasetDocument", "DatasetStore", "GeneralInfoBlock", "SculptureRecord"]
