"""
dataitem_core
=============
Binary envelope codec and signing engine for data items: self-describing,
signed binary records bundled for storage on a ledger network.

Provides:
- DataItem buffer layout, zero-copy field accessors and create_data()
- Avro tag codec and SHA-384 deep hash signing message
- Pluggable signers (secp256k1 / Ethereum personal-message today)
- Signature-derived identifiers
"""

from .crypto import identifier, raw_identifier, sign_data_item, verify_data_item
from .deephash import deep_hash, get_signature_data
from .envelope import DataItem, create_data
from .errors import (
    AlreadySignedError,
    DataItemError,
    InvalidFieldLengthError,
    InvalidKeyError,
    InvalidTagError,
    SigningError,
)
from .signers import EthereumSigner, Signer, signer_factory
from .tags import Tag, deserialize_tags, serialize_tags

__all__ = [
    "DataItem",
    "create_data",
    "Tag",
    "serialize_tags",
    "deserialize_tags",
    "deep_hash",
    "get_signature_data",
    "identifier",
    "raw_identifier",
    "sign_data_item",
    "verify_data_item",
    "Signer",
    "EthereumSigner",
    "signer_factory",
    "DataItemError",
    "InvalidKeyError",
    "InvalidFieldLengthError",
    "InvalidTagError",
    "SigningError",
    "AlreadySignedError",
]
