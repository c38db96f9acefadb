"""
Cursor (scrollID) protocol.

A cursor token is the complete SearchRequest, serialized and hex encoded,
so paging needs no server side state. Tokens are opaque to clients; the same
token resumes paging (scrollID) or replays a search (qs).

Encoding: camelCase JSON of all non-default fields, zlib compressed, hex.
Unknown fields are ignored when decoding.
"""

import logging
import zlib
from dataclasses import dataclass

from pydantic import ValidationError

from hub3.core.errors import EncodingError, ParseError
from hub3.core.search.request import SearchRequest

logger = logging.getLogger(__name__)


@dataclass
class ScrollPager:
    """Paging state returned with every result page."""
    cursor: int = 0
    total: int = 0
    rows: int = 0
    scroll_id: str = ""


def encode_cursor(sr: SearchRequest) -> str:
    """
    Serialize a search request to a cursor token.

    Raises:
        EncodingError: the request holds values that cannot be serialized
    """
    try:
        payload = sr.model_dump_json(by_alias=True, exclude_defaults=True)
    except (ValueError, TypeError) as e:
        raise EncodingError("unable to encode search request", cause=e)
    return zlib.compress(payload.encode("utf-8")).hex()


def decode_cursor(token: str) -> SearchRequest:
    """
    Restore a search request from a cursor token.

    The result is marked as paging, so aggregations are not computed again.

    Raises:
        ParseError: the token is not a valid cursor
    """
    try:
        payload = zlib.decompress(bytes.fromhex(token))
        sr = SearchRequest.model_validate_json(payload)
    except (ValueError, zlib.error, ValidationError) as e:
        logger.info(f"Unable to parse search request from scrollID: {token[:64]}")
        raise ParseError("invalid scrollID", detail={"scrollID": token}, cause=e)
    sr.paging = True
    return sr


def next_scroll_id(sr: SearchRequest, total: int) -> ScrollPager:
    """
    Advance the request by one page and describe the current page.

    The returned scroll_id is empty when there are no further pages.

    Raises:
        EncodingError: the advanced request cannot be encoded
    """
    pager = ScrollPager()
    if total == 0:
        return pager

    pager.cursor = sr.start
    sr.start = sr.start + sr.response_size
    pager.rows = sr.response_size
    pager.total = total

    if sr.start >= total:
        return pager

    pager.scroll_id = encode_cursor(sr)
    return pager
