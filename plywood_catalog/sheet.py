"""
Published-sheet source.

Responsibilities:
- fetch the CSV export (with a cache-busting query parameter)
- decode the payload bytes to text
- decode records and apply the visibility filter
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

import httpx
from charset_normalizer import from_bytes

from .config import Settings
from .csv_codec import Record, decode_records
from .errors import SheetFetchError, SheetNotConfigured
from .rules import is_visible

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"


@dataclass
class Catalog:
    rows: List[Record] = field(default_factory=list)
    items: List[Record] = field(default_factory=list)


def decode_payload(raw: bytes) -> str:
    """
    Decode sheet bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - UTF-8 input with a BOM is decoded as utf-8-sig so the first header stays clean.
    - If decode fails, fall back to UTF-8, then to UTF-8 with replacement characters.
    """
    if not raw:
        return ""

    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    if raw.startswith(_UTF8_BOM) and decode_used.lower().replace("-", "_") in ("utf_8", "utf8", "utf_8_sig"):
        decode_used = "utf-8-sig"

    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode("utf-8-sig")
            logger.debug("sheet payload: %s failed, decoded as utf-8", decode_used)
        except UnicodeDecodeError:
            text = raw.decode("utf-8", errors="replace")
            logger.warning("sheet payload: undecodable bytes replaced (detected=%s)", detected)
    return text


def cache_busted(url: str, stamp: Optional[int] = None) -> str:
    if stamp is None:
        stamp = int(time.time() * 1000)
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}cb={stamp}"


async def fetch_csv_text(settings: Settings, client: httpx.AsyncClient) -> str:
    if not settings.csv_configured:
        raise SheetNotConfigured("Please set CSV_URL in .env or environment.")

    url = cache_busted(settings.csv_url) if settings.cache_bust else settings.csv_url
    try:
        res = await client.get(url, timeout=settings.request_timeout, follow_redirects=True)
    except httpx.HTTPError as exc:
        logger.warning("sheet fetch failed: %s", exc)
        raise SheetFetchError(str(exc) or exc.__class__.__name__) from exc

    if not res.is_success:
        logger.warning("sheet fetch failed with status %s", res.status_code)
        raise SheetFetchError(f"Fetch failed {res.status_code}", status_code=res.status_code)

    return decode_payload(res.content)


async def load_catalog(settings: Settings, client: httpx.AsyncClient) -> Catalog:
    text = await fetch_csv_text(settings, client)
    rows = decode_records(text)
    items = [row for row in rows if is_visible(row)]
    logger.info("catalog loaded: %d rows, %d visible", len(rows), len(items))
    return Catalog(rows=rows, items=items)
