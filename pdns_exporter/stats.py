"""Decoding of the PowerDNS /statistics response.

The endpoint returns a flat JSON list. Each record carries a ``name``, a
``value`` and an optional ``type`` tag:

    [
      {"name": "uptime", "type": "StatisticItem", "value": "3600"},
      {"name": "response-by-qtype", "type": "MapStatisticItem",
       "value": [{"name": "A", "value": "120"}, {"name": "AAAA", "value": "8"}]}
    ]

Simple records become ``StatEntry``, map records become ``MapStatEntry``.
Only the outer shape is validated; odd values are skipped at classification.
Ring records (top-N query lists) and unknown tags are dropped.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Tuple, Union

from .exceptions import ParseError

logger = logging.getLogger("pdns_exporter.stats")

SIMPLE_ITEM = "StatisticItem"
MAP_ITEM = "MapStatisticItem"


@dataclass(frozen=True)
class StatEntry:
    """Single name/value statistic. Values that are not JSON scalars are kept raw."""
    name: str
    value: Any


@dataclass(frozen=True)
class MapStatEntry:
    """Statistic holding an ordered list of (key, value) pairs"""
    name: str
    values: Tuple[Tuple[str, Any], ...]


Entry = Union[StatEntry, MapStatEntry]


def _value(value) -> Any:
    # Numbers keep their string form; anything else is left for the classifier to skip
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _record(item, index: int) -> dict:
    if not isinstance(item, dict):
        raise ParseError(f"item {index}: expected an object, got {type(item).__name__}")
    name = item.get("name")
    if not isinstance(name, str) or not name:
        raise ParseError(f"item {index}: missing or invalid 'name'")
    if "value" not in item:
        raise ParseError(f"item {index} ({name}): missing 'value'")
    return item


def _decode_map(name: str, value) -> MapStatEntry:
    if not isinstance(value, list):
        logger.debug(f"map statistic {name} has no list value, ignoring its contents")
        return MapStatEntry(name, ())

    pairs = []
    for inner in value:
        if isinstance(inner, dict) and isinstance(inner.get("name"), str) and "value" in inner:
            pairs.append((inner["name"], _value(inner["value"])))
        else:
            logger.debug(f"ignoring malformed entry {inner!r} of map statistic {name}")
    return MapStatEntry(name, tuple(pairs))


def decode_statistics(raw: bytes) -> List[Entry]:
    """
    Decode a raw statistics response.

    Args:
        raw: Response body as returned by the statistics endpoint

    Returns:
        Entries in response order

    Raises:
        ParseError: If the body is not valid JSON or not a list of name/value records
    """
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as e:
        raise ParseError(f"invalid statistics JSON: {e}") from e

    if not isinstance(data, list):
        raise ParseError(f"expected a JSON list of statistics, got {type(data).__name__}")

    entries: List[Entry] = []
    for index, item in enumerate(data):
        item = _record(item, index)
        name = item["name"]
        kind = item.get("type", SIMPLE_ITEM)

        if kind == SIMPLE_ITEM:
            entries.append(StatEntry(name, _value(item["value"])))
        elif kind == MAP_ITEM:
            entries.append(_decode_map(name, item["value"]))
        else:
            logger.debug(f"ignoring statistic {name} of type {kind}")

    return entries
