"""
Helpers that read classification and display metadata off object details.

All functions take the details dict of an Exists multi-get result and never
raise on missing optional fields.
"""

from __future__ import annotations

import re
from typing import Any

COIN_TYPE_RE = re.compile(r"^0x0*2::coin::Coin<.+>$")
IPFS_GATEWAY = "https://ipfs.io/ipfs/"
ARWEAVE_GATEWAY = "https://arweave.net/"
PACKAGE_TYPE = "Move Package"

_IMAGE_KEYS = ("image_url", "img_url", "url")


def get_object_id(details: dict[str, Any]) -> str:
    object_id = details.get("objectId") or (details.get("reference") or {}).get("objectId")
    if not object_id:
        raise ValueError("object details without objectId")
    return str(object_id)


def parse_object_type(details: dict[str, Any]) -> str:
    content = details.get("content")
    if isinstance(content, dict) and content.get("dataType") == "package":
        return PACKAGE_TYPE
    if details.get("type"):
        return str(details["type"])
    if isinstance(content, dict) and content.get("type"):
        return str(content["type"])
    return ""


def is_coin(details: dict[str, Any]) -> bool:
    return bool(COIN_TYPE_RE.match(parse_object_type(details)))


def get_balance(details: dict[str, Any]) -> int | None:
    """Coin balance from content fields; None for non-coins."""
    if not is_coin(details):
        return None
    content = details.get("content")
    fields = content.get("fields") if isinstance(content, dict) else None
    if not isinstance(fields, dict):
        return None
    try:
        return int(fields.get("balance"))
    except (TypeError, ValueError):
        return None


def display_metadata(details: dict[str, Any]) -> dict[str, Any] | None:
    """Display fields, accepting both {data: {...}} and flat display shapes."""
    display = details.get("display")
    if not isinstance(display, dict):
        return None
    data = display.get("data")
    if isinstance(data, dict):
        return data
    if "data" in display or "error" in display:
        return None
    return display


def parse_image_url(display: dict[str, Any] | None) -> str | None:
    if not display:
        return None
    for key in _IMAGE_KEYS:
        value = display.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def extract_name(display: dict[str, Any] | None) -> str | None:
    if not display:
        return None
    name = display.get("name")
    return str(name) if name is not None else None


def transform_url(url: str) -> str:
    """Rewrite ipfs://, ar:// and protocol-relative URLs to absolute https URLs."""
    url = url.strip()
    if url.startswith("ipfs://"):
        path = url[len("ipfs://"):]
        if path.startswith("ipfs/"):
            path = path[len("ipfs/"):]
        return IPFS_GATEWAY + path
    if url.startswith("ar://"):
        return ARWEAVE_GATEWAY + url[len("ar://"):]
    if url.startswith("//"):
        return "https:" + url
    return url
