from __future__ import annotations

import asyncio
import base64
import re
from typing import Tuple

from resumeai.errors import EncodingError

_DATA_URI_RE = re.compile(r"^data:([^;]+);base64,(.+)$", re.S)


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


async def encode_document(data: bytes, mime_type: str) -> str:
    """
    Turn raw file bytes into a ``data:<mime>;base64,<payload>`` URI.

    Encoding runs in a worker thread so a large upload does not stall the
    event loop. Any failure is raised as EncodingError.
    """
    if not mime_type:
        raise EncodingError()
    try:
        payload = await asyncio.to_thread(_b64, data)
    except (TypeError, ValueError) as e:
        raise EncodingError() from e
    if not payload:
        raise EncodingError()
    return f"data:{mime_type};base64,{payload}"


def split_data_uri(uri: str) -> Tuple[str, str]:
    """Return (mime_type, base64_data) from a data URI."""
    m = _DATA_URI_RE.match(uri or "")
    if not m:
        raise EncodingError()
    return m.group(1), m.group(2)
