"""
dataitem_core.utils
-------------------
Fixed-width integer codec, base64url helpers and digest shortcuts.
Every multi-byte integer in the data item wire format is little-endian.
"""

from __future__ import annotations
import base64, hashlib, struct

_SHORT = struct.Struct("<H")
_LONG = struct.Struct("<Q")


# --------- Integer codec ----------
def short_to_bytes(n: int) -> bytes:
    return _SHORT.pack(n)

def bytes_to_short(b: bytes) -> int:
    return _SHORT.unpack(bytes(b))[0]

def long_to_bytes(n: int) -> bytes:
    return _LONG.pack(n)

def bytes_to_long(b: bytes) -> int:
    return _LONG.unpack(bytes(b))[0]


# --------- base64url ----------
def b64url_encode(b: bytes) -> str:
    return base64.urlsafe_b64encode(bytes(b)).rstrip(b"=").decode("ascii")

def b64url_decode(s: str) -> bytes:
    # Padding is optional on input
    return base64.urlsafe_b64decode((s + "=" * (-len(s) % 4)).encode("ascii"))


# --------- Digests ----------
def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()

def sha384(data: bytes) -> bytes:
    return hashlib.sha384(data).digest()
