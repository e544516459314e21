"""
Docstore - Content Relinker
===========================

Rewrites the identifiers embedded in a file's decoded content so a
duplicated file points at the duplicated siblings and media objects
instead of the originals.

The content tree is schemaless: mappings, sequences and scalars nested
arbitrarily. Rewrites are driven purely by structure (a mapping holding a
``component_file`` UUID, the top-level ``media`` map), never by a fixed
schema walk.
"""

from collections.abc import Callable
from typing import Any
from uuid import UUID

from docstore.core import blob
from docstore.core.migrations import migrate_data

from .identity_index import IdentityIndex

COMPONENT_FILE_KEY = "component_file"
MEDIA_KEY = "media"


def postwalk(node: Any, fn: Callable[[Any], Any]) -> Any:
    """Apply ``fn`` to every node of the tree, children before parents."""
    if isinstance(node, dict):
        node = {k: postwalk(v, fn) for k, v in node.items()}
    elif isinstance(node, list):
        node = [postwalk(v, fn) for v in node]
    elif isinstance(node, tuple):
        node = tuple(postwalk(v, fn) for v in node)
    return fn(node)


def relink_components(data: Any, index: IdentityIndex) -> Any:
    """Point every ``component_file`` reference at its duplicate, if any."""

    def relink(form):
        if isinstance(form, dict) and isinstance(form.get(COMPONENT_FILE_KEY), UUID):
            form[COMPONENT_FILE_KEY] = index.remap_if_present(form[COMPONENT_FILE_KEY])
        return form

    return postwalk(data, relink)


def relink_media(media: dict, index: IdentityIndex) -> dict:
    """Re-key media descriptors whose id has a new identity in ``index``."""
    result = dict(media)
    for key, descriptor in media.items():
        new_id = index.remap_if_present(key)
        if new_id == key:
            continue
        result.pop(key)
        result[new_id] = {**descriptor, "id": new_id} if isinstance(descriptor, dict) else descriptor
    return result


def without_nils(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


def relink_data(data: dict, index: IdentityIndex) -> dict:
    """Both rewrites over an already decoded content tree."""
    data = relink_components(data, index)
    if isinstance(data.get(MEDIA_KEY), dict):
        data[MEDIA_KEY] = relink_media(data[MEDIA_KEY], index)
    return data


def process_file_data(raw: bytes | None, index: IdentityIndex) -> bytes:
    """Decode, relink, migrate and re-encode a file's content blob."""
    data = blob.decode(raw)
    data = relink_data(data, index)
    data = migrate_data(data)
    return blob.encode(without_nils(data))
