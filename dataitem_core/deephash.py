"""
dataitem_core.deephash
----------------------
Structured SHA-384 digest over nested lists of byte strings.

Each blob is tagged with its length before hashing and each list folds
its children's hashes into an accumulator seeded with the list length,
so ``[a, b]`` and ``a + b`` never collide.
"""

from __future__ import annotations
from typing import List, Union

from .constants import FORMAT_NAME, FORMAT_VERSION
from .utils import sha384

Chunk = Union[bytes, bytearray, memoryview, List["Chunk"]]


def deep_hash(chunk: Chunk) -> bytes:
    if isinstance(chunk, list):
        acc = sha384(b"list" + str(len(chunk)).encode("ascii"))
        for item in chunk:
            acc = sha384(acc + deep_hash(item))
        return acc

    data = bytes(chunk)
    tag = b"blob" + str(len(data)).encode("ascii")
    return sha384(sha384(tag) + sha384(data))


def get_signature_data(item) -> bytes:
    """Signing message for a DataItem; absent fields hash as empty blobs."""
    return deep_hash([
        FORMAT_NAME,
        FORMAT_VERSION,
        str(item.signature_type).encode("ascii"),
        item.raw_owner,
        item.raw_target,
        item.raw_anchor,
        item.raw_tags,
        item.raw_data,
    ])
