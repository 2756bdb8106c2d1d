# core/utils/olid.py
import re
import logging
from typing import Any, Iterable, List, Optional, Union

from core.errors import InvalidFormat

logger = logging.getLogger(__name__)

OLID_PATTERN = re.compile(r'OL[0-9]+([MWA])')

OLID_TYPES = {
    'M': 'edition',
    'W': 'work',
    'A': 'author',
}

# External key prefixes as they appear in Open Library payloads
KEY_PREFIXES = {
    'works': '/works/',
    'edition': '/books/',
    'authors': '/authors/',
    'languages': '/languages/',
}

SINGLE_KINDS = ('works', 'edition')
LIST_KINDS = ('authors', 'languages')


def validate_olid(text: Optional[str]) -> str:
    """Classify an Open Library identifier.

    Args:
        text: Candidate OLID such as "OL12345M"

    Returns:
        "edition", "work" or "author" depending on the trailing letter

    Raises:
        InvalidFormat: If the string is not OL<digits><M|W|A>
    """
    if not isinstance(text, str) or len(text) < 4:
        raise InvalidFormat(f"OLID '{text}' is too short or not a string")
    match = OLID_PATTERN.fullmatch(text)
    if not match:
        raise InvalidFormat(f"OLID '{text}' does not match OL<digits><M|W|A>")
    return OLID_TYPES[match.group(1)]


def is_valid_olid(text: Optional[str], expected: Optional[str] = None) -> bool:
    """Boolean form of validate_olid for request-parameter validators"""
    try:
        kind = validate_olid(text)
    except InvalidFormat:
        return False
    return expected is None or kind == expected


def _strip_key(kind: str, key: str) -> str:
    prefix = KEY_PREFIXES[kind]
    if key.startswith(prefix):
        return key[len(prefix):]
    # Non-conforming keys keep their last path segment
    return key.rstrip('/').split('/')[-1]


def _extract_key(item: Any) -> Optional[str]:
    if isinstance(item, dict) and isinstance(item.get('key'), str) and item['key']:
        return item['key']
    return None


def format_prefix(kind: str, items: Optional[Iterable[Any]]) -> Union[Optional[str], List[str]]:
    """Strip the Open Library key prefix from one or more {key: ...} records.

    "works" and "edition" return the first identifier (or None when the list is
    empty or its first entry is malformed). "authors" and "languages" return a
    list and skip malformed entries individually.
    """
    if kind not in KEY_PREFIXES:
        raise InvalidFormat(f"Unsupported prefix type '{kind}'")

    items = list(items or [])

    if kind in SINGLE_KINDS:
        if not items:
            return None
        key = _extract_key(items[0])
        if key is None:
            logger.warning(f"Malformed {kind} entry skipped: {items[0]!r}")
            return None
        return _strip_key(kind, key)

    identifiers = []
    for item in items:
        key = _extract_key(item)
        if key is None:
            logger.warning(f"Malformed {kind} entry skipped: {item!r}")
            continue
        identifiers.append(_strip_key(kind, key))
    return identifiers


def to_title_case(text: Optional[str]) -> Optional[str]:
    """Title-case author names that Open Library sometimes stores in caps"""
    if not text or not isinstance(text, str):
        return text
    return ' '.join(word[:1].upper() + word[1:].lower() for word in text.split())
