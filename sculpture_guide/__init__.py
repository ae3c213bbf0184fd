"""Sculpture guide package.

A realtime gallery guide: browser WebSocket clients are relayed to a hosted
realtime conversation API, and user questions are enriched with facts from a
static sculpture dataset. Modules do not perform network or file I/O on import.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
