"""
dataitem_core.crypto
--------------------
Signing and verification helpers for data items:

- identifier(): base64url(sha256(signature)), the item's canonical address
- sign_data_item(): deep-hash the item, sign it, embed the signature
- verify_data_item(): re-derive the signing message and check the owner

DataItem.sign() / DataItem.verify() delegate here.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .deephash import get_signature_data
from .errors import AlreadySignedError, InvalidFieldLengthError, SigningError
from .logger import get_logger
from .signers import SIGNER_BY_TYPE, Signer
from .utils import b64url_encode, sha256

if TYPE_CHECKING:
    from .envelope import DataItem

log = get_logger("dataitem.crypto")


# --------- Identifier ----------
def raw_identifier(signature: bytes) -> bytes:
    return sha256(bytes(signature))

def identifier(signature: bytes) -> str:
    return b64url_encode(raw_identifier(signature))


# --------- DataItem helpers ----------
async def sign_data_item(item: "DataItem", signer: Signer) -> bytes:
    if item.is_signed:
        raise AlreadySignedError(f"Data item {item.id} is already signed")
    if signer.signature_type != item.signature_type:
        raise InvalidFieldLengthError(
            f"Signer type {signer.signature_type} does not match item type {item.signature_type}"
        )
    if bytes(signer.public_key) != bytes(item.raw_owner):
        raise InvalidFieldLengthError("Signer public key does not match the item owner")

    message = get_signature_data(item)
    try:
        signature = await signer.sign(message)
    except SigningError:
        raise
    except Exception as e:
        log.exception(f"[SIGN] signer raised: {e}")
        raise SigningError("Signer failed to sign data item") from e

    signature = bytes(signature)
    if len(signature) != item.signature_length:
        log.error(f"[SIGN] signer returned {len(signature)} bytes, expected {item.signature_length}")
        raise SigningError(
            f"Signature must be {item.signature_length} bytes, got {len(signature)}"
        )
    if not any(signature):
        raise SigningError("Signer returned an all-zero signature")

    item._set_signature(signature)
    log.info(f"[SIGN] signed data item | id={item.id}")
    return item.raw_id


async def verify_data_item(item: "DataItem") -> bool:
    from .envelope import DataItem

    raw = item.get_raw()
    if not DataItem.is_data_item(raw) or not item.is_signed:
        return False

    signer_cls = SIGNER_BY_TYPE.get(item.signature_type)
    if signer_cls is None:
        return False
    return signer_cls.verify(
        bytes(item.raw_owner), get_signature_data(item), bytes(item.raw_signature)
    )
