"""
Server version algebra.

Specific versions ("2.1", "3.0-dev.7012", "1.0-rc.4"), version filters
("2", "2.1", "1.0-beta.2") and builds ("2.1+a4b3c2d").

Parsing and ordering go through packaging.version; only the projection
onto EdgeDB minor kinds and the filter compatibility rule live here.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from enum import IntEnum

from packaging.version import InvalidVersion, Version

from edgedb_portable.exceptions import FilterParseError, VersionParseError


class MinorKind(IntEnum):
    """Minor classification, ordered from least to most stable."""

    DEV = 0
    ALPHA = 1
    BETA = 2
    RC = 3
    MINOR = 4

    @property
    def is_prerelease(self) -> bool:
        return self in (MinorKind.ALPHA, MinorKind.BETA, MinorKind.RC)


# packaging pre-release letters
_KIND_BY_PRE = {
    "a": MinorKind.ALPHA,
    "b": MinorKind.BETA,
    "rc": MinorKind.RC,
}
_PRE_BY_KIND = {kind: pre for pre, kind in _KIND_BY_PRE.items()}


def _parse_pep440(text: str) -> Version | None:
    try:
        return Version(text)
    except InvalidVersion:
        return None


def _project(version: Version) -> tuple[int, int | None, MinorKind | None, int | None]:
    """Split version into (major, minor, kind, number); kind is None for X.Y."""
    major = version.release[0]
    minor = version.release[1] if len(version.release) > 1 else None
    if version.dev is not None:
        return major, minor, MinorKind.DEV, version.dev
    if version.pre is not None:
        pre, number = version.pre
        return major, minor, _KIND_BY_PRE[pre], number
    return major, minor, None, None


@dataclass(frozen=True, order=True)
class MinorVersion:
    """Minor part of a specific version, e.g. Rc(2) or Minor(1)."""

    kind: MinorKind
    value: int

    def __str__(self) -> str:
        if self.kind == MinorKind.MINOR:
            return str(self.value)
        return f"0-{self.kind.name.lower()}.{self.value}"


@functools.total_ordering
@dataclass(frozen=True)
class Specific:
    """Concrete comparable version: major plus minor classification."""

    major: int
    minor: MinorVersion

    @classmethod
    def parse(cls, text: str) -> Specific:
        """
        Parse "2.1", "3.0-dev.7012" or "1.0-rc.4".

        The legacy short prerelease form "1-alpha.3" is accepted too.
        Any other spelling PEP 440 would normalize ("2.1rc1", "v2.1",
        " 2.1") is rejected.

        Raises:
            VersionParseError: If text is not a valid version.
        """
        version = _parse_pep440(text)
        if version is None:
            raise VersionParseError(text)
        major, minor, kind, number = _project(version)
        if kind is None:
            if minor is None:
                raise VersionParseError(text)
            specific = cls(major, MinorVersion(MinorKind.MINOR, minor))
        else:
            specific = cls(major, MinorVersion(kind, number))
        if text not in (str(specific), specific._legacy_str()):
            raise VersionParseError(text)
        return specific

    @functools.cached_property
    def pep440(self) -> Version:
        """Equivalent packaging Version, used for ordering."""
        kind, value = self.minor.kind, self.minor.value
        if kind == MinorKind.MINOR:
            return Version(f"{self.major}.{value}")
        if kind == MinorKind.DEV:
            return Version(f"{self.major}.0.dev{value}")
        return Version(f"{self.major}.0{_PRE_BY_KIND[kind]}{value}")

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Specific):
            return NotImplemented
        return self.pep440 < other.pep440

    def _legacy_str(self) -> str | None:
        if self.minor.kind == MinorKind.MINOR:
            return None
        return f"{self.major}-{self.minor.kind.name.lower()}.{self.minor.value}"

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True)
class FilterMinor:
    """Minor constraint of a filter (no dev builds)."""

    kind: MinorKind
    value: int

    def __post_init__(self) -> None:
        if self.kind == MinorKind.DEV:
            raise ValueError("filters cannot constrain dev builds")

    def __str__(self) -> str:
        return str(MinorVersion(self.kind, self.value))


@dataclass(frozen=True)
class Filter:
    """Partial version used to select compatible builds."""

    major: int
    minor: FilterMinor | None = None

    @classmethod
    def parse(cls, text: str) -> Filter:
        """
        Parse "2", "2.1" or "1.0-beta.2".

        Raises:
            FilterParseError: If text is not a valid filter.
        """
        version = _parse_pep440(text)
        if version is None:
            raise FilterParseError(text)
        major, minor, kind, number = _project(version)
        if kind == MinorKind.DEV:
            raise FilterParseError(text)
        if minor is None:
            flt = cls(major) if kind is None else None
        elif kind is None:
            flt = cls(major, FilterMinor(MinorKind.MINOR, minor))
        else:
            flt = cls(major, FilterMinor(kind, number))
        if flt is None or str(flt) != text:
            raise FilterParseError(text)
        return flt

    def matches(self, build: Build) -> bool:
        """Check whether build is compatible with this filter."""
        return self.matches_specific(build.specific())

    def matches_specific(self, version: Specific) -> bool:
        if version.major != self.major:
            return False
        if self.minor is None:
            return True
        found = version.minor
        if found.kind == MinorKind.DEV:
            return False
        if found.kind == self.minor.kind:
            return found.value >= self.minor.value
        return found.kind > self.minor.kind

    def __str__(self) -> str:
        if self.minor is None:
            return str(self.major)
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True)
class Build:
    """Specific version plus optional build metadata ("2.1+a4b3c2d")."""

    text: str
    _specific: Specific = field(repr=False, compare=False)

    @classmethod
    def parse(cls, text: str) -> Build:
        """
        Parse a build version string as published in the package index.

        The metadata after "+" must be a valid PEP 440 local label.

        Raises:
            VersionParseError: If text is not a valid build version.
        """
        text = text.strip()
        if _parse_pep440(text) is None:
            raise VersionParseError(text)
        base = text.partition("+")[0]
        try:
            specific = Specific.parse(base)
        except VersionParseError:
            raise VersionParseError(text) from None
        return cls(text, specific)

    @property
    def metadata(self) -> str | None:
        _, sep, meta = self.text.partition("+")
        return meta if sep else None

    def specific(self) -> Specific:
        return self._specific

    def __str__(self) -> str:
        return self.text
