"""
dataitem_core.envelope
----------------------
Defines DataItem, a signed binary record, and create_data(), which lays one out.

Wire layout (all integers little-endian):

    signature type   2 bytes
    signature        signature_length bytes (zero until signed)
    owner            owner_length bytes
    target flag      1 byte, followed by 32 bytes when the flag is 1
    anchor flag      1 byte, followed by 32 bytes when the flag is 1
    tag count        8 bytes
    tag byte length  8 bytes
    tags             Avro-encoded tag section
    data             rest of the buffer

The buffer is the only state. Accessors recompute offsets from the two
presence flags on every call and return read-only views into the buffer.
"""

from __future__ import annotations
import asyncio
from typing import Iterable, List, Optional, Union

from .constants import (
    ANCHOR_LENGTH,
    PRESENCE_FLAG_LENGTH,
    SIGNATURE_TYPE_LENGTH,
    TAG_BYTES_LENGTH,
    TAG_COUNT_LENGTH,
    TARGET_LENGTH,
)
from .crypto import raw_identifier, sign_data_item, verify_data_item
from .errors import InvalidFieldLengthError
from .logger import get_logger
from .signers import SIGNATURE_CONFIG, SignatureConfig, Signer
from .tags import Tag, TagLike, deserialize_tags, normalize_tags, serialize_tags, validate_tags
from .utils import (
    b64url_decode,
    b64url_encode,
    bytes_to_long,
    bytes_to_short,
    long_to_bytes,
    short_to_bytes,
)

log = get_logger("dataitem.envelope")

TAGS_HEADER_LENGTH = TAG_COUNT_LENGTH + TAG_BYTES_LENGTH

BytesLike = Union[bytes, bytearray, memoryview]


class DataItem:
    """
    A data item buffer and its field accessors.

    sign() calls on one item must all run on the same event loop; the
    per-item lock serializing them belongs to that loop.
    """

    def __init__(self, binary: BytesLike):
        if len(binary) < SIGNATURE_TYPE_LENGTH:
            raise InvalidFieldLengthError(
                f"Data item must be at least {SIGNATURE_TYPE_LENGTH} bytes, got {len(binary)}"
            )
        # A bytearray is adopted as-is; the item owns it from here on
        self._binary = binary if isinstance(binary, bytearray) else bytearray(binary)
        self._id: Optional[bytes] = None
        self._sign_lock = asyncio.Lock()

        if self.signature_type in SIGNATURE_CONFIG and self.is_signed:
            self._id = raw_identifier(self.raw_signature)

    @classmethod
    def from_bytes(cls, raw: BytesLike) -> "DataItem":
        """Wrap a copy of a pre-built buffer, e.g. one received for inspection."""
        return cls(bytearray(raw))

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------
    @property
    def signature_type(self) -> int:
        return bytes_to_short(self._binary[0:SIGNATURE_TYPE_LENGTH])

    @property
    def config(self) -> SignatureConfig:
        try:
            return SIGNATURE_CONFIG[self.signature_type]
        except KeyError:
            raise InvalidFieldLengthError(f"Unknown signature type {self.signature_type}") from None

    @property
    def signature_length(self) -> int:
        return self.config.signature_length

    @property
    def owner_length(self) -> int:
        return self.config.owner_length

    # ------------------------------------------------------------------
    # Raw field views
    # ------------------------------------------------------------------
    def _view(self, start: int, end: Optional[int] = None) -> memoryview:
        return memoryview(self._binary).toreadonly()[start:end]

    @property
    def raw_signature(self) -> memoryview:
        return self._view(SIGNATURE_TYPE_LENGTH, SIGNATURE_TYPE_LENGTH + self.signature_length)

    @property
    def raw_owner(self) -> memoryview:
        start = SIGNATURE_TYPE_LENGTH + self.signature_length
        return self._view(start, start + self.owner_length)

    @property
    def raw_target(self) -> memoryview:
        start = self._target_start()
        if self._flag(start):
            return self._view(start + 1, start + 1 + TARGET_LENGTH)
        return self._view(0, 0)

    @property
    def raw_anchor(self) -> memoryview:
        start = self._anchor_start()
        if self._flag(start):
            return self._view(start + 1, start + 1 + ANCHOR_LENGTH)
        return self._view(0, 0)

    @property
    def raw_tags(self) -> memoryview:
        start = self._tags_start() + TAGS_HEADER_LENGTH
        return self._view(start, start + self._tag_bytes_length())

    @property
    def raw_data(self) -> memoryview:
        start = self._tags_start() + TAGS_HEADER_LENGTH + self._tag_bytes_length()
        return self._view(start)

    def get_raw(self) -> memoryview:
        return self._view(0)

    # ------------------------------------------------------------------
    # Decoded fields
    # ------------------------------------------------------------------
    @property
    def owner(self) -> str:
        return b64url_encode(self.raw_owner)

    @property
    def target(self) -> str:
        return b64url_encode(self.raw_target)

    @property
    def anchor(self) -> str:
        return b64url_encode(self.raw_anchor)

    @property
    def tag_count(self) -> int:
        start = self._tags_start()
        return self._long_at(start)

    @property
    def tags(self) -> List[Tag]:
        return deserialize_tags(self.raw_tags)

    @property
    def data(self) -> bytes:
        return bytes(self.raw_data)

    @property
    def is_signed(self) -> bool:
        return any(self.raw_signature)

    @property
    def raw_id(self) -> Optional[bytes]:
        return self._id

    @property
    def id(self) -> Optional[str]:
        return b64url_encode(self._id) if self._id is not None else None

    # ------------------------------------------------------------------
    # Signing
    # ------------------------------------------------------------------
    async def sign(self, signer: Signer) -> bytes:
        async with self._sign_lock:
            return await sign_data_item(self, signer)

    async def verify(self) -> bool:
        return await verify_data_item(self)

    def _set_signature(self, signature: bytes) -> None:
        start = SIGNATURE_TYPE_LENGTH
        self._binary[start:start + self.signature_length] = signature
        self._id = raw_identifier(signature)

    # ------------------------------------------------------------------
    # Offsets
    # ------------------------------------------------------------------
    def _flag(self, pos: int) -> bool:
        if pos >= len(self._binary):
            raise InvalidFieldLengthError(f"Data item truncated before the presence flag at offset {pos}")
        return self._binary[pos] == 1

    def _long_at(self, pos: int) -> int:
        if pos + TAG_COUNT_LENGTH > len(self._binary):
            raise InvalidFieldLengthError(f"Data item truncated inside the tag header at offset {pos}")
        return bytes_to_long(self._binary[pos:pos + TAG_COUNT_LENGTH])

    def _target_start(self) -> int:
        return SIGNATURE_TYPE_LENGTH + self.signature_length + self.owner_length

    def _anchor_start(self) -> int:
        start = self._target_start()
        return start + PRESENCE_FLAG_LENGTH + (TARGET_LENGTH if self._flag(start) else 0)

    def _tags_start(self) -> int:
        start = self._anchor_start()
        return start + PRESENCE_FLAG_LENGTH + (ANCHOR_LENGTH if self._flag(start) else 0)

    def _tag_bytes_length(self) -> int:
        start = self._tags_start() + TAG_COUNT_LENGTH
        return self._long_at(start)

    # ------------------------------------------------------------------
    # Structural check
    # ------------------------------------------------------------------
    @staticmethod
    def is_data_item(raw: BytesLike) -> bool:
        """Cheap structural check of a buffer; does not verify the signature."""
        buf = bytes(raw)
        if len(buf) < SIGNATURE_TYPE_LENGTH:
            return False
        config = SIGNATURE_CONFIG.get(bytes_to_short(buf[:SIGNATURE_TYPE_LENGTH]))
        if config is None:
            return False

        pos = SIGNATURE_TYPE_LENGTH + config.signature_length + config.owner_length
        for length in (TARGET_LENGTH, ANCHOR_LENGTH):
            if pos >= len(buf) or buf[pos] not in (0, 1):
                return False
            pos += PRESENCE_FLAG_LENGTH + (length if buf[pos] == 1 else 0)

        if pos + TAGS_HEADER_LENGTH > len(buf):
            return False
        tag_count = bytes_to_long(buf[pos:pos + TAG_COUNT_LENGTH])
        tag_bytes = bytes_to_long(buf[pos + TAG_COUNT_LENGTH:pos + TAGS_HEADER_LENGTH])
        pos += TAGS_HEADER_LENGTH
        if pos + tag_bytes > len(buf):
            return False

        try:
            tags = deserialize_tags(buf[pos:pos + tag_bytes])
        except Exception:
            return False
        return len(tags) == tag_count


# ----------------------------------------------------------------------
# Assembly
# ----------------------------------------------------------------------
def _optional_field(value: Union[str, BytesLike, None], name: str, length: int, is_b64: bool) -> Optional[bytes]:
    if not value:
        return None
    if isinstance(value, str):
        try:
            raw = b64url_decode(value) if is_b64 else value.encode("utf-8")
        except ValueError as e:
            raise InvalidFieldLengthError(f"{name} is not valid base64url") from e
    else:
        raw = bytes(value)
    if len(raw) != length:
        raise InvalidFieldLengthError(f"{name} must be {length} bytes but was incorrectly {len(raw)}")
    return raw


def create_data(
    data: Union[str, BytesLike],
    signer: Signer,
    target: Union[str, BytesLike, None] = None,
    anchor: Union[str, BytesLike, None] = None,
    tags: Optional[Iterable[TagLike]] = None,
) -> DataItem:
    """
    Lay out a new, unsigned DataItem.

    ``target`` strings are base64url-decoded; ``anchor`` strings are taken as
    UTF-8 text. Both must come to exactly 32 bytes. All validation happens
    before the buffer is allocated.
    """
    owner = bytes(signer.public_key)
    if len(owner) != signer.owner_length:
        raise InvalidFieldLengthError(
            f"Owner must be {signer.owner_length} bytes, but was incorrectly {len(owner)}"
        )

    _target = _optional_field(target, "Target", TARGET_LENGTH, is_b64=True)
    _anchor = _optional_field(anchor, "Anchor", ANCHOR_LENGTH, is_b64=False)

    tag_list = normalize_tags(tags)
    validate_tags(tag_list)
    _tags = serialize_tags(tag_list)

    _data = data.encode("utf-8") if isinstance(data, str) else bytes(data)

    target_length = PRESENCE_FLAG_LENGTH + (len(_target) if _target else 0)
    anchor_length = PRESENCE_FLAG_LENGTH + (len(_anchor) if _anchor else 0)
    length = (
        SIGNATURE_TYPE_LENGTH
        + signer.signature_length
        + signer.owner_length
        + target_length
        + anchor_length
        + TAGS_HEADER_LENGTH
        + len(_tags)
        + len(_data)
    )
    binary = bytearray(length)  # signature region stays zero-filled

    binary[0:SIGNATURE_TYPE_LENGTH] = short_to_bytes(signer.signature_type)
    pos = SIGNATURE_TYPE_LENGTH + signer.signature_length
    binary[pos:pos + signer.owner_length] = owner
    pos += signer.owner_length

    for value in (_target, _anchor):
        binary[pos] = 1 if value else 0
        if value:
            binary[pos + 1:pos + 1 + len(value)] = value
        pos += PRESENCE_FLAG_LENGTH + (len(value) if value else 0)

    binary[pos:pos + TAG_COUNT_LENGTH] = long_to_bytes(len(tag_list))
    binary[pos + TAG_COUNT_LENGTH:pos + TAGS_HEADER_LENGTH] = long_to_bytes(len(_tags))
    pos += TAGS_HEADER_LENGTH
    binary[pos:pos + len(_tags)] = _tags
    pos += len(_tags)
    binary[pos:] = _data

    log.debug(
        f"[CREATE] data item laid out | length={length} tags={len(tag_list)} "
        f"target={_target is not None} anchor={_anchor is not None}"
    )
    return DataItem(binary)
