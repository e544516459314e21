"""Content schema migrations for decoded file data."""

from collections.abc import Callable
from typing import Any

from docstore.observability.logging_config import get_logger

logger = get_logger(__name__)

Migration = Callable[[dict[str, Any]], dict[str, Any]]


def _migrate_v1(data: dict[str, Any]) -> dict[str, Any]:
    # Page registry split into ordered list + index
    data.setdefault("pages", [])
    data.setdefault("pages_index", {})
    return data


def _migrate_v2(data: dict[str, Any]) -> dict[str, Any]:
    data.setdefault("components", {})
    data.setdefault("media", {})
    return data


def _migrate_v3(data: dict[str, Any]) -> dict[str, Any]:
    # Media descriptors carry their own id
    media = data.get("media") or {}
    data["media"] = {
        key: {**descriptor, "id": key} if isinstance(descriptor, dict) and "id" not in descriptor else descriptor
        for key, descriptor in media.items()
    }
    return data


MIGRATIONS: dict[int, Migration] = {
    1: _migrate_v1,
    2: _migrate_v2,
    3: _migrate_v3,
}

CURRENT_VERSION = max(MIGRATIONS)


def migrate_data(data: dict[str, Any]) -> dict[str, Any]:
    """
    Bring decoded file data up to CURRENT_VERSION.

    Applies every migration newer than the data's ``version`` in order.
    Data already at (or beyond) the current version is returned as-is, so
    the step is idempotent and never downgrades.
    """
    version = data.get("version") or 0
    if version >= CURRENT_VERSION:
        return data

    data = dict(data)
    for target in range(version + 1, CURRENT_VERSION + 1):
        data = MIGRATIONS[target](data)
        data["version"] = target

    logger.debug(f"Migrated file data from version {version} to {CURRENT_VERSION}")
    return data
