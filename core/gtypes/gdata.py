# -*- coding: utf-8 -*-
"""Raw game data acquisition.

The dataset is a JSON object keyed by category. It is read from a local file
or fetched over HTTP; the game client ships it as a script (`var G = {...};`),
which is accepted as well.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

import httpx

from core.gtypes.errors import DataSourceError

logger = logging.getLogger(__name__)

RawData = Dict[str, Any]

_ASSIGN_RE = re.compile(r"^\s*(?:var|let|const)\s+[A-Za-z_$][\w$]*\s*=\s*", re.S)


def is_url(source: Union[str, Path]) -> bool:
    return str(source).startswith(("http://", "https://"))


def parse_raw_data(text: str, *, source: str = "<memory>") -> RawData:
    body = text.lstrip("\ufeff")
    m = _ASSIGN_RE.match(body)
    if m:
        body = body[m.end():].rstrip().rstrip(";")
    try:
        doc = json.loads(body)
    except json.JSONDecodeError as exc:
        raise DataSourceError(f"not valid JSON ({exc})", source=source) from exc
    if not isinstance(doc, dict):
        raise DataSourceError("top-level value must be an object keyed by category", source=source)
    return doc


async def _fetch_url(url: str, *, timeout: float, transport: Optional[httpx.AsyncBaseTransport]) -> str:
    async with httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True) as client:
        try:
            resp = await client.get(url)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise DataSourceError(f"download failed ({exc})", source=url) from exc
        return resp.text


async def fetch_raw_data(
    source: Union[str, Path],
    *,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RawData:
    """Load the raw dataset from a path or an http(s) URL."""
    label = str(source)
    if is_url(source):
        logger.info("Fetching raw data from %s", label)
        text = await _fetch_url(label, timeout=timeout, transport=transport)
    else:
        path = Path(source).expanduser()
        if not path.is_file():
            raise DataSourceError("raw data file not found", source=label)
        logger.info("Reading raw data from %s", path)
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    data = parse_raw_data(text, source=label)
    logger.debug("Raw data: %d top-level keys", len(data))
    return data
