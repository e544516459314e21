"""
Docstore - Content Blob Codec
=============================

Encodes the file content tree into the bytes stored in ``file.data``.

Layout: a 2-byte big-endian format version followed by a zlib-compressed
JSON document. JSON has no UUID type and only string keys, so UUIDs (as
values and as mapping keys) are written as tagged strings ``"~u<uuid>"``
and restored on decode.

Usage:
    from docstore.core import blob

    raw = blob.encode({"media": {media_id: {"id": media_id}}})
    data = blob.decode(raw)
"""

import json
import struct
import zlib
from typing import Any
from uuid import UUID

FORMAT_VERSION = 1

_HEADER = struct.Struct(">h")
_UUID_TAG = "~u"
_ESCAPE_TAG = "~~"


def _tag_str(value: str) -> str:
    # Strings that already start with "~" are escaped so they survive decode
    return _ESCAPE_TAG[0] + value if value.startswith("~") else value


def _untag_str(value: str) -> Any:
    if value.startswith(_UUID_TAG):
        return UUID(value[len(_UUID_TAG):])
    if value.startswith(_ESCAPE_TAG):
        return value[1:]
    return value


def _tag(node: Any) -> Any:
    if isinstance(node, UUID):
        return _UUID_TAG + str(node)
    if isinstance(node, str):
        return _tag_str(node)
    if isinstance(node, dict):
        return {_tag_key(k): _tag(v) for k, v in node.items()}
    if isinstance(node, (list, tuple)):
        return [_tag(v) for v in node]
    return node


def _tag_key(key: Any) -> str:
    if isinstance(key, UUID):
        return _UUID_TAG + str(key)
    if isinstance(key, str):
        return _tag_str(key)
    raise TypeError(f"Unsupported mapping key type: {type(key).__name__}")


def _untag(node: Any) -> Any:
    if isinstance(node, str):
        return _untag_str(node)
    if isinstance(node, dict):
        return {_untag_str(k): _untag(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_untag(v) for v in node]
    return node


def encode(data: Any) -> bytes:
    """Encode a content tree into a versioned, compressed blob."""
    payload = json.dumps(_tag(data), separators=(",", ":")).encode("utf-8")
    return _HEADER.pack(FORMAT_VERSION) + zlib.compress(payload)


def decode(raw: bytes | None) -> Any:
    """Decode a blob produced by encode(). ``None`` decodes to an empty tree."""
    if raw is None:
        return {}
    if len(raw) < _HEADER.size:
        raise ValueError("Blob too short to contain a header")

    (version,) = _HEADER.unpack_from(raw)
    if version != FORMAT_VERSION:
        raise ValueError(f"Unsupported blob format version: {version}")

    payload = zlib.decompress(raw[_HEADER.size:])
    return _untag(json.loads(payload.decode("utf-8")))
