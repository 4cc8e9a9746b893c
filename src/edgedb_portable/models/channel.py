"""
Release channels and version queries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from edgedb_portable.exceptions import UnsupportedPrereleaseError
from edgedb_portable.models.version import (
    Build,
    Filter,
    FilterMinor,
    MinorKind,
    Specific,
)

NIGHTLY_TOKEN = "nightly"
STABLE_WILDCARD = "*"


class Channel(str, Enum):
    """Top-level release track."""

    STABLE = "stable"
    NIGHTLY = "nightly"

    @classmethod
    def from_version(cls, version: Specific) -> Channel:
        """
        Channel a concrete version is published in.

        Raises:
            UnsupportedPrereleaseError: For prereleases of major != 1.
        """
        kind = version.minor.kind
        if kind == MinorKind.DEV:
            return cls.NIGHTLY
        if kind == MinorKind.MINOR:
            return cls.STABLE
        # before 1.0 all prereleases went to the stable channel
        if version.major == 1:
            return cls.STABLE
        raise UnsupportedPrereleaseError(str(version))

    @classmethod
    def from_filter(cls, version: Filter) -> Channel:
        """
        Channel implied by a version filter.

        Raises:
            UnsupportedPrereleaseError: For prerelease filters of major != 1.
        """
        if version.minor is None or version.minor.kind == MinorKind.MINOR:
            return cls.STABLE
        if version.major == 1:
            return cls.STABLE
        raise UnsupportedPrereleaseError(str(version), "prerelease channel not supported yet")

    def as_str(self) -> str:
        return self.value


@dataclass(frozen=True)
class Query:
    """
    What the user asked for: a channel wildcard or a specific filter.

    Example:
        >>> Query.parse("*")
        Query(channel=<Channel.STABLE: 'stable'>, version=None)
        >>> Query.from_options(nightly=False, version="2.1").as_config_value()
        '2.1'
    """

    channel: Channel
    version: Filter | None = None

    @classmethod
    def stable(cls) -> Query:
        return cls(Channel.STABLE)

    @classmethod
    def nightly(cls) -> Query:
        return cls(Channel.NIGHTLY)

    @classmethod
    def from_filter(cls, version: Filter) -> Query:
        return cls(Channel.from_filter(version), version)

    @classmethod
    def from_version(cls, version: Specific) -> Query:
        """Query selecting version and anything compatible with it."""
        channel = Channel.from_version(version)
        if channel == Channel.NIGHTLY:
            return cls.nightly()
        minor = FilterMinor(version.minor.kind, version.minor.value)
        return cls(channel, Filter(version.major, minor))

    @classmethod
    def from_option(cls, version: str | None) -> Query:
        """Query from an optional version argument ("nightly" allowed)."""
        if version is None:
            return cls.stable()
        if version == NIGHTLY_TOKEN:
            return cls.nightly()
        return cls.from_filter(Filter.parse(version))

    @classmethod
    def from_options(cls, nightly: bool, version: str | None) -> Query:
        """
        Query from command-line style options.

        Args:
            nightly: Explicit nightly flag, overrides version.
            version: Version filter text, "nightly" or None.

        Raises:
            FilterParseError: If version is malformed.
            UnsupportedPrereleaseError: If version is an unsupported prerelease.
        """
        if nightly:
            return cls.nightly()
        return cls.from_option(version)

    @classmethod
    def parse(cls, token: str) -> Query:
        """Inverse of as_config_value()."""
        if token == STABLE_WILDCARD:
            return cls.stable()
        if token == NIGHTLY_TOKEN:
            return cls.nightly()
        return cls.from_filter(Filter.parse(token))

    def as_config_value(self) -> str:
        """Single-token form: "*", "nightly" or the filter text."""
        if self.version is not None:
            return str(self.version)
        if self.channel == Channel.NIGHTLY:
            return NIGHTLY_TOKEN
        return STABLE_WILDCARD

    def matches(self, build: Build) -> bool:
        """Check whether build satisfies this query."""
        if self.version is not None:
            return self.version.matches(build)
        try:
            return Channel.from_version(build.specific()) == self.channel
        except UnsupportedPrereleaseError:
            return False

    def __str__(self) -> str:
        if self.version is None:
            return self.channel.as_str()
        minor = self.version.minor
        if minor is None:
            return f"{self.version.major}.0"
        return f"{self.version.major}.{minor}"


__all__ = ["Channel", "Query", "NIGHTLY_TOKEN", "STABLE_WILDCARD"]
