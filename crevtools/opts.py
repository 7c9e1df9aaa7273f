"""Option structures shared by the command line and the commands it runs."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from semver import Version


class _Given:
    """Marker for an option that was given on the command line without a value."""

    _instance: Optional["_Given"] = None

    def __new__(cls) -> "_Given":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "GIVEN"


GIVEN = _Given()

Switch = Union[None, bool, _Given]


class Level(enum.IntEnum):
    """Quality level, ordered from ``none`` to ``high``."""

    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, text: str) -> "Level":
        """Parse ``none``, ``low``, ``medium`` or ``high``."""
        try:
            return cls[text.upper()] if text == text.lower() else cls._fail(text)
        except KeyError:
            return cls._fail(text)

    @classmethod
    def _fail(cls, text: str) -> "Level":
        raise ValueError(f"Can't parse level: {text!r}")


@dataclass
class CrateSelector:
    """Selects a crate by name and, optionally, version."""

    name: Optional[str] = None
    named_version: Optional[Version] = None
    unrelated: bool = False
    positional_version: Optional[Version] = None

    def version(self) -> Optional[Version]:
        """Return the selected version; raise ValueError if given twice."""
        positional, named = self.positional_version, self.named_version
        if positional is not None and named is not None:
            raise ValueError(
                f"Can't use both positional (`{positional}`) and "
                f"non-positional (`{named}`) version argument"
            )
        return positional if positional is not None else named

    def is_empty(self) -> bool:
        """True when neither a name nor a version option was given."""
        return self.name is None and self.named_version is None

    def ensure_name_given(self) -> None:
        """Raise ValueError unless a crate name was given."""
        if self.name is None:
            raise ValueError("Crate name argument required!")


@dataclass
class CargoOpts:
    """Options passed through to cargo.

    ``target`` is None when not given, an empty string to autodetect the
    host target, or a target triple.
    """

    features: Optional[str] = None
    all_features: bool = False
    no_default_features: bool = False
    no_dev_dependencies: bool = False
    manifest_path: Optional[Path] = None
    unstable_flags: List[str] = field(default_factory=list)
    target: Optional[str] = None


@dataclass
class TrustDistanceParams:
    """Parameters describing trust graph traversal."""

    depth: int = 10
    high_cost: int = 0
    medium_cost: int = 1
    low_cost: int = 5


@dataclass
class TrustLevelRequirements:
    """Minimum trust level required."""

    trust_level: Level = Level.LOW


@dataclass
class VerificationRequirements:
    """What a crate needs to count as verified."""

    trust_level: TrustLevelRequirements = field(default_factory=TrustLevelRequirements)
    redundancy: int = 1
    understanding_level: Level = Level.NONE
    thoroughness_level: Level = Level.NONE


@dataclass
class CrateVerifyCommon:
    """Options common to the commands that compute a web of trust."""

    trust_params: TrustDistanceParams = field(default_factory=TrustDistanceParams)
    requirements: VerificationRequirements = field(default_factory=VerificationRequirements)
    for_id: Optional[str] = None
    cargo_opts: CargoOpts = field(default_factory=CargoOpts)


@dataclass(frozen=True)
class CrateVerifyColumns:
    """Which columns the verification table shows.

    Each column switch is None when not given, ``GIVEN`` when given
    without a value, or an explicit bool.
    """

    digest: Switch = None
    leftpad_index: Switch = None
    downloads: Switch = None
    owners: Switch = None
    latest_trusted: Switch = None
    reviews: Switch = None
    loc: Switch = None
    issues: Switch = None
    geiger: Switch = None
    flags: Switch = None
    show_all: bool = False

    def _resolve(self, value: Switch, default: bool) -> bool:
        if value is None:
            return self.show_all
        if isinstance(value, _Given):
            return default
        return value

    def any_selected(self) -> bool:
        """True if any column switch or ``show_all`` was given."""
        switches = (
            self.digest, self.leftpad_index, self.downloads, self.owners,
            self.reviews, self.latest_trusted, self.flags, self.issues,
            self.loc, self.geiger,
        )
        return any(s is not None for s in switches) or self.show_all

    def show_digest(self) -> bool:
        return self.digest is True

    def show_reviews(self) -> bool:
        return self._resolve(self.reviews, False)

    def show_leftpad_index(self) -> bool:
        return self._resolve(self.leftpad_index, False)

    def show_downloads(self) -> bool:
        return self._resolve(self.downloads, False)

    def show_latest_trusted(self) -> bool:
        return self._resolve(self.latest_trusted, True)

    def show_flags(self) -> bool:
        return self._resolve(self.flags, True)

    def show_owners(self) -> bool:
        return self._resolve(self.owners, False)

    def show_issues(self) -> bool:
        return self._resolve(self.issues, True)

    def show_loc(self) -> bool:
        return self._resolve(self.loc, False)

    def show_geiger(self) -> bool:
        return self._resolve(self.geiger, False)


@dataclass
class CrateVerify:
    """Options of the dependency verification command."""

    common: CrateVerifyCommon = field(default_factory=CrateVerifyCommon)
    columns: CrateVerifyColumns = field(default_factory=CrateVerifyColumns)
    interactive: bool = False
    skip_verified: bool = False
    skip_known_owners: bool = False
    skip_indirect: bool = False
    recursive: bool = False


@dataclass
class CommonProofCreate:
    """Options common to commands that create proofs."""

    no_commit: bool = False
    print_unsigned: bool = False
    print_signed: bool = False
    no_store: bool = False


@dataclass
class ReviewOrGotoCommon:
    """The crate a review or goto command acts on."""

    crate: CrateSelector = field(default_factory=CrateSelector)


@dataclass
class CrateReview:
    """Options of the review command.

    ``diff`` is None for a full review, ``GIVEN`` to diff against the
    base recorded in review activity, or an explicit base version.
    """

    common: ReviewOrGotoCommon = field(default_factory=ReviewOrGotoCommon)
    common_proof_create: CommonProofCreate = field(default_factory=CommonProofCreate)
    advisory: bool = False
    affected: Optional[str] = None
    severity: Optional[Level] = None
    issue: bool = False
    skip_activity_check: bool = False
    diff: Union[None, _Given, Version] = None
    cargo_opts: CargoOpts = field(default_factory=CargoOpts)


@dataclass
class AdviseCommon:
    """Severity and affected version range of an advisory."""

    affected: str = "major"
    severity: Level = Level.MEDIUM