from __future__ import annotations

from .normalizer import PayloadShape, detect_payload, normalize

__all__ = [
    "PayloadShape",
    "detect_payload",
    "normalize",
]
