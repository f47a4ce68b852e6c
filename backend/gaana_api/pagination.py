from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union


DEFAULT_PAGE = 0
DEFAULT_LIMIT = 10

GROUPS_FIELD = "gr"
GROUP_ITEMS_FIELD = "gd"
ENTITIES_FIELD = "entities"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

RawNumber = Union[str, int, None]


class ResourceType(str, Enum):
    SEARCH = "search"
    ARTIST_TRACKS = "artist_tracks"
    ARTIST_ALBUMS = "artist_albums"
    LABEL_ALBUMS = "label_albums"
    TRENDING = "trending"
    CHARTS = "charts"
    NEW_RELEASES = "new_releases"


@dataclass(frozen=True)
class PageWindow:
    batch_size: int
    upstream_page_index: int
    slice_start: int
    slice_end: int

    @property
    def spans_batches(self) -> bool:
        # Only one upstream batch is fetched, so anything past batch_size is dropped.
        return self.slice_end > self.batch_size


def parse_int(value: RawNumber) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def resolve_page_request(page: RawNumber, limit: RawNumber) -> tuple[int, int]:
    parsed_page = parse_int(page)
    parsed_limit = parse_int(limit)
    if parsed_page is None or parsed_page < 0:
        parsed_page = DEFAULT_PAGE
    if not parsed_limit or parsed_limit < 0:
        parsed_limit = DEFAULT_LIMIT
    return parsed_page, parsed_limit


def plan(page: RawNumber, limit: RawNumber, batch_size: int) -> PageWindow:
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    page_number, page_size = resolve_page_request(page, limit)
    total_offset = page_number * page_size
    slice_start = total_offset % batch_size
    return PageWindow(
        batch_size=batch_size,
        upstream_page_index=total_offset // batch_size,
        slice_start=slice_start,
        slice_end=slice_start + page_size,
    )


class PaginationPlanner:
    def __init__(self, batch_sizes: Mapping[ResourceType, int]) -> None:
        self.batch_sizes = dict(batch_sizes)

    def batch_size(self, resource: ResourceType) -> int:
        try:
            return self.batch_sizes[resource]
        except KeyError:
            raise ValueError(f"no batch size configured for {resource.value}") from None

    def plan(self, resource: ResourceType, page: RawNumber, limit: RawNumber) -> PageWindow:
        return plan(page, limit, self.batch_size(resource))


def window(payload: Any, start: int, end: int) -> Any:
    if not isinstance(payload, dict):
        return payload

    groups = payload.get(GROUPS_FIELD)
    if isinstance(groups, list):
        for group in groups:
            if isinstance(group, dict) and isinstance(group.get(GROUP_ITEMS_FIELD), list):
                group[GROUP_ITEMS_FIELD] = group[GROUP_ITEMS_FIELD][start:end]

    entities = payload.get(ENTITIES_FIELD)
    if isinstance(entities, list):
        payload[ENTITIES_FIELD] = entities[start:end]

    return payload
