from __future__ import annotations
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class SignatureConfig:
    name: str
    signature_type: int
    signature_length: int
    owner_length: int


ETHEREUM = SignatureConfig(name="ethereum", signature_type=3, signature_length=65, owner_length=65)

SIGNATURE_CONFIG: Dict[int, SignatureConfig] = {
    ETHEREUM.signature_type: ETHEREUM,
}


class Signer:
    """
    Signing capability consumed by DataItem.

    A signer exposes its fixed owner/signature lengths, the signature type
    written into the item header, its raw public key, and an async sign()
    that returns exactly ``signature_length`` bytes. Remote or hardware
    signers implement the same contract.
    """
    config: SignatureConfig

    @property
    def owner_length(self) -> int:
        return self.config.owner_length

    @property
    def signature_length(self) -> int:
        return self.config.signature_length

    @property
    def signature_type(self) -> int:
        return self.config.signature_type

    @property
    def public_key(self) -> bytes:
        raise NotImplementedError

    async def sign(self, message: bytes) -> bytes:
        raise NotImplementedError

    @staticmethod
    def verify(public_key: bytes, message: bytes, signature: bytes) -> bool:
        raise NotImplementedError
