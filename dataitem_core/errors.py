from __future__ import annotations


class DataItemError(Exception):
    pass


class InvalidKeyError(DataItemError):
    """Private key material is malformed or missing."""


class InvalidFieldLengthError(DataItemError):
    """A field does not have the length the format requires."""


class InvalidTagError(InvalidFieldLengthError):
    pass


class SigningError(DataItemError):
    """The signing backend failed or returned an unusable signature."""


class AlreadySignedError(DataItemError):
    pass
