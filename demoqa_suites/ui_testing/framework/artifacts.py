"""
Screenshot and trace artifact naming.

Screenshots are named `{name}-{timestamp}.png` where the timestamp is an
ISO 8601 UTC instant with ':' and '.' replaced by '-', e.g.
`login-page-loaded-2024-05-01T10-15-30-123Z.png`.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union


def format_timestamp(now: Optional[datetime] = None) -> str:
    """ISO 8601 UTC with millisecond precision, filesystem safe."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    iso = now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
    return re.sub(r"[:.]", "-", iso)


def screenshot_filename(name: str, now: Optional[datetime] = None) -> str:
    return f"{name}-{format_timestamp(now)}.png"


def trace_filename(name: str, now: Optional[datetime] = None) -> str:
    return f"{name}-{format_timestamp(now)}-trace.zip"


def ensure_directory(path: Union[str, Path]) -> Path:
    """Create the directory if absent and return it."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def safe_test_name(nodeid: str) -> str:
    """Turn a pytest node id into something usable in a filename."""
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", nodeid).strip("_")


__all__ = [
    "format_timestamp",
    "screenshot_filename",
    "trace_filename",
    "ensure_directory",
    "safe_test_name",
]
