"""Timestamp helpers; everything is normalized to timezone-aware UTC."""

from __future__ import annotations

import datetime as dt
from typing import Optional, Union


def parse_github_timestamp(raw: Optional[str]) -> Optional[dt.datetime]:
    """Parse GitHub's ISO-8601 timestamps (`2021-03-05T10:00:00Z` or with an offset)."""
    if not raw:
        return None
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        value = dt.datetime.fromisoformat(text)
    except ValueError:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def from_unix(ts: Union[int, str]) -> dt.datetime:
    return dt.datetime.fromtimestamp(int(ts), tz=dt.timezone.utc)


def to_github_timestamp(value: dt.datetime) -> str:
    return value.astimezone(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


__all__ = ["parse_github_timestamp", "from_unix", "to_github_timestamp"]
