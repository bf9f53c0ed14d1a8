"""
dataitem_core.signers.signer_ethereum
-------------------------------------
secp256k1 signer using the Ethereum personal-message convention.

- Public key: 65-byte uncompressed X9.62 point, derived once at construction
- Signature: r (32) || s (32) || v (1), over the EIP-191 prefixed message
"""

from __future__ import annotations
from typing import Union

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_keys import keys

from ..errors import InvalidKeyError, SigningError
from ..logger import get_logger
from .signer_base import ETHEREUM, Signer

log = get_logger("dataitem.signers.ethereum")

PRIVATE_KEY_LENGTH = 32


def parse_private_key(key: Union[str, bytes]) -> bytes:
    if isinstance(key, str):
        hexstr = key[2:] if key.startswith(("0x", "0X")) else key
        try:
            raw = bytes.fromhex(hexstr)
        except ValueError as e:
            raise InvalidKeyError("Private key is not valid hex") from e
    elif isinstance(key, (bytes, bytearray, memoryview)):
        raw = bytes(key)
    else:
        raise InvalidKeyError(f"Unsupported private key type: {type(key).__name__}")

    if len(raw) != PRIVATE_KEY_LENGTH:
        raise InvalidKeyError(f"Private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(raw)}")
    return raw


def public_key_from_private(priv_raw: bytes) -> bytes:
    try:
        sk = ec.derive_private_key(int.from_bytes(priv_raw, "big"), ec.SECP256K1())
    except ValueError as e:
        raise InvalidKeyError("Private key is outside the secp256k1 range") from e
    return sk.public_key().public_bytes(Encoding.X962, PublicFormat.UncompressedPoint)


def address_from_public_key(pub_raw: bytes) -> str:
    # eth_keys wants the 64-byte point without the 0x04 prefix
    return keys.PublicKey(bytes(pub_raw)[1:]).to_checksum_address()


class EthereumSigner(Signer):
    config = ETHEREUM

    def __init__(self, key: Union[str, bytes]):
        self._key = parse_private_key(key)
        self._pk = public_key_from_private(self._key)
        self.address = address_from_public_key(self._pk)
        log.debug(f"[SIGNER] ethereum signer ready | address={self.address}")

    @property
    def public_key(self) -> bytes:
        return self._pk

    async def sign(self, message: bytes) -> bytes:
        try:
            signed = Account.sign_message(encode_defunct(primitive=bytes(message)), self._key)
        except Exception as e:
            log.error(f"[SIGNER] ethereum signing failed: {e}")
            raise SigningError("Ethereum signing backend failed") from e
        return bytes(signed.signature)

    @staticmethod
    def verify(public_key: bytes, message: bytes, signature: bytes) -> bool:
        try:
            recovered = Account.recover_message(
                encode_defunct(primitive=bytes(message)), signature=bytes(signature)
            )
            return recovered == address_from_public_key(public_key)
        except Exception:
            return False
