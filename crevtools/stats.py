"""Crate statistics that can be accumulated over a dependency tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Hashable, Iterable, Mapping, Optional, TypeVar, Union

from semver import Version

from crevtools.term import VerificationStatus

T = TypeVar("T")


@dataclass(frozen=True)
class Progress:
    """How many of a number of items are done."""

    done: int
    total: int


@dataclass(frozen=True)
class CountWithTotal:
    """A count of something, plus the total number of that thing."""

    count: int = 0
    total: int = 0

    def __add__(self, other: CountWithTotal) -> CountWithTotal:
        if not isinstance(other, CountWithTotal):
            return NotImplemented
        return CountWithTotal(self.count + other.count, self.total + other.total)


@dataclass(frozen=True)
class DownloadsStats:
    """Download counts: of one version, of all versions, and recent ones."""

    version: int = 0
    total: int = 0
    recent: int = 0

    def __add__(self, other: DownloadsStats) -> DownloadsStats:
        if not isinstance(other, DownloadsStats):
            return NotImplemented
        return DownloadsStats(
            version=self.version + other.version,
            total=self.total + other.total,
            recent=self.recent + other.recent,
        )


class OwnerSetSet:
    """Owner sets, one per package."""

    def __init__(self, groups: Optional[Mapping[Hashable, Iterable[str]]] = None) -> None:
        self._groups: Dict[Hashable, FrozenSet[str]] = {
            pkg_id: frozenset(owners) for pkg_id, owners in (groups or {}).items()
        }

    @classmethod
    def for_package(cls, pkg_id: Hashable, owners: Iterable[str]) -> OwnerSetSet:
        """Build a set holding the owners of a single package."""
        return cls({pkg_id: owners})

    @property
    def groups(self) -> Dict[Hashable, FrozenSet[str]]:
        return dict(self._groups)

    def total_owners(self) -> int:
        """Number of distinct owners across all packages."""
        return len(frozenset().union(*self._groups.values()))

    def total_distinct_groups(self) -> int:
        """Number of owner groups that are not contained in another package's group."""
        groups = list(self._groups.values())
        return sum(
            1
            for index, group in enumerate(groups)
            if not any(
                group <= other
                for other_index, other in enumerate(groups)
                if other_index != index
            )
        )

    def __add__(self, other: OwnerSetSet) -> OwnerSetSet:
        if not isinstance(other, OwnerSetSet):
            return NotImplemented
        merged = dict(self._groups)
        merged.update(other._groups)
        return OwnerSetSet(merged)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OwnerSetSet):
            return NotImplemented
        return self._groups == other._groups

    def __repr__(self) -> str:
        return f"OwnerSetSet({self._groups!r})"


def sum_options(a: Optional[T], b: Optional[T]) -> Optional[T]:
    """Sum two optional values; None if either is missing."""
    if a is None or b is None:
        return None
    return a + b  # type: ignore[operator]


@dataclass(frozen=True)
class AccumulativeCrateDetails:
    """Crate details that can be combined by recursively including dependencies."""

    trust: VerificationStatus
    has_trusted_ids: bool
    trusted_issues: CountWithTotal
    verified: bool
    loc: Optional[int]
    geiger_count: Optional[int]
    has_custom_build: bool
    is_unmaintained: bool
    owner_set: OwnerSetSet
    is_local_source_code: bool

    def __add__(self, other: AccumulativeCrateDetails) -> AccumulativeCrateDetails:
        if not isinstance(other, AccumulativeCrateDetails):
            return NotImplemented
        return AccumulativeCrateDetails(
            trust=min(self.trust, other.trust),
            has_trusted_ids=self.has_trusted_ids or other.has_trusted_ids,
            trusted_issues=self.trusted_issues + other.trusted_issues,
            verified=self.verified and other.verified,
            loc=sum_options(self.loc, other.loc),
            geiger_count=sum_options(self.geiger_count, other.geiger_count),
            has_custom_build=self.has_custom_build or other.has_custom_build,
            is_unmaintained=self.is_unmaintained or other.is_unmaintained,
            owner_set=self.owner_set + other.owner_set,
            is_local_source_code=self.is_local_source_code or other.is_local_source_code,
        )


@dataclass(frozen=True)
class Details:
    """Summary of crate details as reported by the info command."""

    verified: bool
    loc: Optional[int]
    geiger_count: Optional[int]
    has_custom_build: bool
    unmaintained: bool

    def to_dict(self) -> Dict[str, Any]:
        """Return the details with kebab-case keys, ready for serialization."""
        return {
            "verified": self.verified,
            "loc": self.loc,
            "geiger-count": self.geiger_count,
            "has-custom-build": self.has_custom_build,
            "unmaintained": self.unmaintained,
        }


def details_from_accumulative(details: AccumulativeCrateDetails) -> Details:
    """Summarize accumulated crate details."""
    return Details(
        verified=details.verified,
        loc=details.loc,
        geiger_count=details.geiger_count,
        has_custom_build=details.has_custom_build,
        unmaintained=details.is_unmaintained,
    )


def _as_version(value: Union[str, Version]) -> Version:
    return value if isinstance(value, Version) else Version.parse(value)


def latest_trusted_version_string(
    base_version: Union[str, Version],
    latest_trusted_version: Union[None, str, Version],
) -> str:
    """Describe the latest trusted version relative to ``base_version``.

    ``↑`` or ``↓`` followed by the version when it is newer or older, ``=``
    when equal, and an empty string when there is no trusted version.
    """
    if latest_trusted_version is None:
        return ""
    base = _as_version(base_version)
    latest = _as_version(latest_trusted_version)
    if base < latest:
        return f"↑{latest}"
    if latest < base:
        return f"↓{latest}"
    return "="