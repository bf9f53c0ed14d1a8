# dataitem_core/signers/__init__.py
import os

from dataitem_core.errors import InvalidKeyError
from dataitem_core.signers.signer_base import ETHEREUM, SIGNATURE_CONFIG, SignatureConfig, Signer
from dataitem_core.signers.signer_ethereum import EthereumSigner

SIGNERS = {
    "ethereum": EthereumSigner,
}

# signature type → signer class, used to verify items built elsewhere
SIGNER_BY_TYPE = {
    ETHEREUM.signature_type: EthereumSigner,
}


def signer_factory(config: dict | None = None) -> Signer:
    """
    Build a signer from config, falling back to the environment.

      - DATAITEM_SIGNER      → signer type ("ethereum")
      - DATAITEM_PRIVATE_KEY → hex-encoded private key
    """
    config = config or {}
    kind = (config.get("signer") or os.getenv("DATAITEM_SIGNER", "ethereum")).lower()
    key = config.get("private_key") or os.getenv("DATAITEM_PRIVATE_KEY")

    if kind not in SIGNERS:
        raise ValueError(f"Unknown signer type: {kind}")
    if not key:
        raise InvalidKeyError("No private key configured (set DATAITEM_PRIVATE_KEY)")

    return SIGNERS[kind](key)


__all__ = [
    "Signer",
    "SignatureConfig",
    "SIGNATURE_CONFIG",
    "SIGNERS",
    "SIGNER_BY_TYPE",
    "ETHEREUM",
    "EthereumSigner",
    "signer_factory",
]
