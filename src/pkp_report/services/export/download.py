from __future__ import annotations

import re
from urllib.parse import quote

MEDIA_TYPE_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_UNSAFE_ASCII_RE = re.compile(r'[^\x20-\x7e]|["\\]')


def _ascii_fallback(filename: str) -> str:
    s = _UNSAFE_ASCII_RE.sub("_", filename or "").strip()
    return s or "report.xlsx"


def content_disposition(filename: str) -> str:
    """`attachment` header value; non-ASCII names also get an RFC 5987 `filename*`."""
    fallback = _ascii_fallback(filename)
    if fallback == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"
