"""
Owned objects loader: address or parent object id to hydrated object records.

Flow: list ids (owned objects for an address, dynamic fields for a parent
object) → one batched multi-get with type, content and display → keep only
objects that exist → classify (coin, balance, image, name).

The two listing responses differ in item shape only, so they are told apart
structurally and converted to a plain id list before anything else sees them.
Any failure at any step fails the whole load; there are no partial results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ledger_explorer.core.exceptions import HydrationError
from ledger_explorer.explorer_logging import get_logger, log_context
from ledger_explorer.objects.utils import (
    display_metadata,
    extract_name,
    get_balance,
    get_object_id,
    is_coin,
    parse_image_url,
    parse_object_type,
    transform_url,
)
from ledger_explorer.rpc.models import ObjectResponse, OwnedObjectRecord

logger = get_logger(__name__)

LOAD_IDLE = "idle"
LOAD_LOADING = "loading"
LOAD_LOADED = "loaded"
LOAD_FAIL = "fail"

FAIL_MESSAGE = "Failed to find Owned Objects"


@dataclass(frozen=True)
class OwnedObjectsPage:
    """Listing of objects owned by an address: items wrap object data."""

    object_ids: tuple[str, ...]
    next_cursor: Any = None
    has_next_page: bool = False


@dataclass(frozen=True)
class DynamicFieldsPage:
    """Listing of dynamic fields under a parent: flat items with name + objectId."""

    object_ids: tuple[str, ...]
    next_cursor: Any = None
    has_next_page: bool = False


ObjectListing = OwnedObjectsPage | DynamicFieldsPage


def _is_dynamic_field(item: Any) -> bool:
    return isinstance(item, dict) and "objectId" in item and "name" in item


def _is_object_response(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    if isinstance(item.get("data"), dict) or "error" in item:
        return True
    return "objectId" in item and "name" not in item


def _owned_object_id(item: dict[str, Any]) -> str | None:
    data = item.get("data")
    if isinstance(data, dict):
        return data.get("objectId")
    return item.get("objectId")


def classify_response(raw: Any) -> ObjectListing:
    """
    Discriminate an owned-objects page from a dynamic-fields page by item shape.

    Accepts a paginated {data, nextCursor, hasNextPage} dict or a bare list.
    Raises ValueError for anything else.
    """
    if isinstance(raw, dict):
        items = raw.get("data")
        next_cursor = raw.get("nextCursor")
        has_next = bool(raw.get("hasNextPage"))
    else:
        items, next_cursor, has_next = raw, None, False
    if not isinstance(items, list):
        raise ValueError("object listing has no data list")

    if all(_is_dynamic_field(item) for item in items) and items:
        ids = tuple(str(item["objectId"]) for item in items)
        return DynamicFieldsPage(ids, next_cursor, has_next)
    if all(_is_object_response(item) for item in items):
        # Error items have no id; they would be dropped by the Exists filter anyway
        ids = tuple(str(i) for i in (_owned_object_id(item) for item in items) if i)
        return OwnedObjectsPage(ids, next_cursor, has_next)
    raise ValueError("unrecognized object listing shape")


def to_record(response: ObjectResponse) -> OwnedObjectRecord:
    details = response.details
    if not isinstance(details, dict):
        raise ValueError("existing object without details")
    display = display_metadata(details)
    url = parse_image_url(display)
    return OwnedObjectRecord(
        id=get_object_id(details),
        type=parse_object_type(details),
        is_coin=is_coin(details),
        balance=get_balance(details),
        display=transform_url(url) if url else None,
        name=extract_name(display) or "",
    )


class OwnedObjectsLoader:
    """
    Loads the objects owned by an address or held as dynamic fields of an object.

    rpc: transport with async get_owned_objects(owner), get_dynamic_fields(parent_id)
    and multi_get_objects(ids, show_type=, show_content=, show_display=).

    status is idle | loading | loaded | fail. A newer load() supersedes an older
    one still in flight; the older result is returned to its caller but never
    stored.
    """

    def __init__(self, rpc: Any) -> None:
        self._rpc = rpc
        self._status = LOAD_IDLE
        self._results: list[OwnedObjectRecord] = []
        self._error: str | None = None
        self._generation = 0

    @property
    def status(self) -> str:
        return self._status

    @property
    def results(self) -> list[OwnedObjectRecord]:
        return list(self._results)

    @property
    def error(self) -> str | None:
        return self._error

    async def load(self, object_id: str, by_address: bool = True) -> list[OwnedObjectRecord]:
        """
        Resolve object_id to hydrated records.

        Raises:
            HydrationError: on any failure (listing, multi-get, or malformed data);
                status becomes fail.
        """
        self._generation += 1
        generation = self._generation
        self._status = LOAD_LOADING
        self._error = None
        with log_context(object_id=object_id, by_address=by_address):
            return await self._load_tracked(generation, object_id, by_address)

    async def _load_tracked(
        self, generation: int, object_id: str, by_address: bool
    ) -> list[OwnedObjectRecord]:
        try:
            records = await self._load(object_id, by_address)
        except Exception as e:
            logger.warning("owned_objects_load_failed", error=str(e))
            if generation == self._generation:
                self._status = LOAD_FAIL
                self._results = []
                self._error = FAIL_MESSAGE
            raise HydrationError(f"{FAIL_MESSAGE}: {e}") from e

        if generation != self._generation:
            logger.debug("owned_objects_result_discarded")
            return records
        self._status = LOAD_LOADED
        self._results = records
        logger.info("owned_objects_loaded", object_count=len(records))
        return records

    async def _load(self, object_id: str, by_address: bool) -> list[OwnedObjectRecord]:
        if by_address:
            raw = await self._rpc.get_owned_objects(object_id)
        else:
            raw = await self._rpc.get_dynamic_fields(object_id)
        listing = classify_response(raw)
        ids = list(listing.object_ids)
        if not ids:
            return []
        responses = await self._rpc.multi_get_objects(
            ids, show_type=True, show_content=True, show_display=True
        )
        return [to_record(resp) for resp in responses if resp.exists]
