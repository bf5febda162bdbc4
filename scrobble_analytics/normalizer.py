"""Validation and coercion of raw, untrusted scrobble entries"""
import math
import re
from collections.abc import Mapping
from typing import Any, Optional

from scrobble_analytics.models.scrobble import ScrobbleRecord

# Numeric string forms that JavaScript's Number() accepts
_DECIMAL_RE = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?', re.ASCII)
_RADIX_RE = re.compile(r'0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)', re.ASCII)

def _to_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ''

def _to_integer(value: Any) -> int:
    """Coerce a timestamp-like value to an int, truncating toward zero; 0 when unusable"""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if _RADIX_RE.fullmatch(text):
            return int(text, 0)
        if not _DECIMAL_RE.fullmatch(text):
            return 0
        value = float(text)
    if isinstance(value, float):
        return math.trunc(value) if math.isfinite(value) else 0
    return 0

def normalize_scrobble(raw: Any) -> Optional[ScrobbleRecord]:
    """
    Turn one raw entry into a canonical record.

    Strings are trimmed, non-strings count as empty. The timestamp comes from
    ``listenedAt``, falling back to ``timestamp`` when absent. Extra keys are
    dropped.

    Returns:
        The record, or None when artist or track is empty or the timestamp
        is not a positive number
    """
    if not isinstance(raw, Mapping):
        return None

    artist = _to_text(raw.get('artist'))
    track = _to_text(raw.get('track'))
    album = _to_text(raw.get('album'))
    listened_at = raw.get('listenedAt')
    if listened_at is None:
        listened_at = raw.get('timestamp')
    listened_at = _to_integer(listened_at)

    if not artist or not track or listened_at <= 0:
        return None

    return ScrobbleRecord(artist=artist, track=track, album=album, listened_at=listened_at)
