"""
dataitem_core.tags
------------------
Tag section codec.

Tags are encoded as an Avro ``array<record{name: bytes, value: bytes}>``,
written schemalessly, which is the encoding bundlers expect when they
re-derive the signing message. Tag order is preserved and is part of the
item's identity. An empty tag list encodes to zero bytes.
"""

from __future__ import annotations
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Iterable, List, Mapping, Sequence, Tuple, Union

from fastavro import parse_schema, schemaless_reader, schemaless_writer

from .constants import MAX_TAGS, MAX_TAG_NAME_BYTES, MAX_TAG_VALUE_BYTES
from .errors import InvalidTagError

TAGS_SCHEMA = parse_schema({
    "type": "array",
    "items": {
        "type": "record",
        "name": "Tag",
        "fields": [
            {"name": "name", "type": "bytes"},
            {"name": "value", "type": "bytes"},
        ],
    },
})


@dataclass(frozen=True)
class Tag:
    name: str
    value: str

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value}


TagLike = Union[Tag, Tuple[str, str], Mapping[str, str]]


def to_tag(t: TagLike) -> Tag:
    if isinstance(t, Tag):
        return t
    if isinstance(t, Mapping):
        return Tag(t["name"], t["value"])
    name, value = t
    return Tag(name, value)


def normalize_tags(tags: Iterable[TagLike] | None) -> List[Tag]:
    return [to_tag(t) for t in (tags or [])]


def serialize_tags(tags: Iterable[TagLike] | None) -> bytes:
    tag_list = normalize_tags(tags)
    if not tag_list:
        return b""
    buf = BytesIO()
    schemaless_writer(buf, TAGS_SCHEMA, [
        {"name": t.name.encode("utf-8"), "value": t.value.encode("utf-8")}
        for t in tag_list
    ])
    return buf.getvalue()


def deserialize_tags(raw: bytes) -> List[Tag]:
    raw = bytes(raw)
    if not raw:
        return []
    records: Sequence[Any] = schemaless_reader(BytesIO(raw), TAGS_SCHEMA)
    return [Tag(r["name"].decode("utf-8"), r["value"].decode("utf-8")) for r in records]


def validate_tags(tags: Sequence[Tag]) -> None:
    """Reject tag lists that bundlers would refuse to index."""
    if len(tags) > MAX_TAGS:
        raise InvalidTagError(f"At most {MAX_TAGS} tags are allowed, got {len(tags)}")
    for i, t in enumerate(tags):
        name_len = len(t.name.encode("utf-8"))
        value_len = len(t.value.encode("utf-8"))
        if not 0 < name_len <= MAX_TAG_NAME_BYTES:
            raise InvalidTagError(f"Tag {i} name must be 1-{MAX_TAG_NAME_BYTES} bytes, got {name_len}")
        if not 0 < value_len <= MAX_TAG_VALUE_BYTES:
            raise InvalidTagError(f"Tag {i} value must be 1-{MAX_TAG_VALUE_BYTES} bytes, got {value_len}")
