"""
Package index models.

Wire models mirror the JSON index; PackageInfo is the selected artifact.
"""

from __future__ import annotations

import binascii
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from edgedb_portable.exceptions import InvalidHashError
from edgedb_portable.models.version import Build

PACKAGE_BASENAME = "edgedb-server"
BLAKE2B_HEX_LENGTH = 128
BLAKE2B_DIGEST_SIZE = 64


def valid_hash(value: str) -> bool:
    """True if value is 128 hex chars decoding to a 64-byte Blake2b digest."""
    if len(value) != BLAKE2B_HEX_LENGTH:
        return False
    try:
        return len(binascii.unhexlify(value)) == BLAKE2B_DIGEST_SIZE
    except (binascii.Error, ValueError):
        return False


# =============================================================================
# Index wire models
# =============================================================================


class Verification(BaseModel):
    """Declared size and optional hash of an install reference."""

    size: int = Field(ge=0)
    blake2b: str | None = None


class InstallRef(BaseModel):
    """One downloadable artifact variant of a package."""

    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(alias="ref")
    kind: str = Field(alias="type")
    encoding: str | None = None
    verification: Verification


class PackageData(BaseModel):
    """Raw package entry of the index."""

    basename: str
    version: str
    installrefs: list[InstallRef]


class RepositoryData(BaseModel):
    """Whole index document."""

    packages: list[PackageData]


# =============================================================================
# Selected package
# =============================================================================


class PackageType(str, Enum):
    """Archive format of a package."""

    TAR_ZST = "tar_zst"

    @property
    def extension(self) -> str:
        return {PackageType.TAR_ZST: ".tar.zst"}[self]


class PackageHash(BaseModel):
    """
    Content hash of a package.

    Blake2b values are always 128 hex characters; anything else read from
    a "<algo>:<hex>" string is kept verbatim as "unknown".
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["blake2b", "unknown"]
    value: str

    @model_validator(mode="after")
    def _check_blake2b(self) -> PackageHash:
        if self.kind == "blake2b" and not valid_hash(self.value):
            raise InvalidHashError(self.value)
        return self

    @classmethod
    def blake2b(cls, value: str) -> PackageHash:
        if not valid_hash(value):
            raise InvalidHashError(value)
        return cls(kind="blake2b", value=value)

    @classmethod
    def unknown(cls, value: str) -> PackageHash:
        return cls(kind="unknown", value=value)

    @classmethod
    def parse(cls, text: str) -> PackageHash:
        """
        Inverse of str().

        Raises:
            InvalidHashError: If a "blake2b:" value has the wrong length.
        """
        if text.startswith("blake2b:"):
            value = text[len("blake2b:"):]
            if len(value) != BLAKE2B_HEX_LENGTH:
                raise InvalidHashError(value)
            return cls.blake2b(value)
        return cls.unknown(text)

    def short(self) -> str:
        """Seven-character abbreviation for file names."""
        if self.kind == "blake2b":
            return self.value[:7]
        _, sep, rest = self.value.partition(":")
        if sep:
            return rest[:7]
        return self.value[-7:]

    def __str__(self) -> str:
        if self.kind == "blake2b":
            return f"blake2b:{self.value}"
        return self.value


class PackageInfo(BaseModel):
    """Resolved, downloadable server package."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    version: Build
    url: str
    size: int
    hash: PackageHash
    kind: PackageType = PackageType.TAR_ZST

    @field_serializer("version")
    def _serialize_version(self, version: Build) -> str:
        return str(version)

    @field_serializer("hash")
    def _serialize_hash(self, value: PackageHash) -> str:
        return str(value)

    def cache_file_name(self) -> str:
        return f"{PACKAGE_BASENAME}_{self.version}_{self.hash.short()}{self.kind.extension}"

    def __str__(self) -> str:
        return f"{PACKAGE_BASENAME}@{self.version}"


__all__ = [
    "PACKAGE_BASENAME",
    "valid_hash",
    "Verification",
    "InstallRef",
    "PackageData",
    "RepositoryData",
    "PackageType",
    "PackageHash",
    "PackageInfo",
]
