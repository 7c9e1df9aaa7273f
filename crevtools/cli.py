"""Command-line parsing for the ``cargo crev`` family of commands."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from semver import Version

from crevtools.opts import (
    GIVEN,
    CargoOpts,
    CommonProofCreate,
    CrateReview,
    CrateSelector,
    CrateVerify,
    CrateVerifyColumns,
    CrateVerifyCommon,
    Level,
    ReviewOrGotoCommon,
    TrustDistanceParams,
    TrustLevelRequirements,
    VerificationRequirements,
)

Builder = Callable[[argparse.Namespace], Dict[str, Any]]
Tree = Dict[str, "Tree"]

TRUST_LEVELS = ("distrust", "none", "low", "medium", "high")
VERSION_RANGES = ("all", "major", "minor")

_CREV_EPILOG = "All commands can be abbreviated."

_VERIFY_EPILOG = """\
Recursive mode will calculate most metrics for the crate together with all its transitive dependencies.

Column description:

- status     - Trust check result: `pass` for trusted, `none` for lacking reviews, `flagged` or `dangerous` for crates with problem reports. `N/A` when crev is not configured yet.
- reviews    - Number of reviews for the specific version and for all available versions (total)
- issues     - Number of issues repored (from trusted sources/all)
- owner
  - In non-recursive mode: Owner counts from crates.io (known/all)
  - In recursive mode:
    - Total number of owners from crates.io
    - Total number of owner groups ignoring subsets
- downloads  - Download counts from crates.io for the specific version and all versions
- loc        - Lines of Rust code
- lpidx      - "left-pad" index (ratio of downloads to lines of code)
- geiger     - Geiger score: number of `unsafe` lines
- flgs       - Flags for specific types of packages
  - CB         - Custom Build (runs arbitrary code at build time)
  - UM         - Unmaintained crate
- name       - Crate name
- version    - Crate version
- latest_t   - Latest trusted version
"""

_COLUMNS = (
    ("digest", "Show crate content digest"),
    ("leftpad-index", "Show crate leftpad index (recent downloads / loc)"),
    ("downloads", "Show crate download counts"),
    ("owners", "Show crate owners counts"),
    ("latest-trusted", "Show latest trusted version"),
    ("reviews", "Show reviews count"),
    ("loc", "Show Lines of Code"),
    ("issues", "Show count of issues reported"),
    ("geiger", "Show geiger (unsafe lines) count"),
    ("flags", "Show crate flags"),
)

_GIT_PATH = ("crev", "repo", "git")
_DIFF_PATH = ("crev", "crate", "diff")
_DIFF_VALUE_OPTIONS = frozenset(
    {
        "--src", "--dst", "--trust", "--redundancy", "--understanding",
        "--thoroughness", "--depth", "--high-cost", "--medium-cost", "--low-cost",
    }
)


@dataclass(frozen=True)
class ParsedCommand:
    """A parsed command: its subcommand path and its options.

    ``path`` names the subcommands after ``crev``, e.g. ``("crate", "verify")``.
    ``options`` maps field names to values; a command that wraps a single
    option structure stores it under ``"args"``.
    """

    path: Tuple[str, ...]
    options: Dict[str, Any] = field(default_factory=dict)


# -- value types -------------------------------------------------------------


def _version(text: str) -> Version:
    try:
        return Version.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid version: {text!r}") from exc


def _level(text: str) -> Level:
    try:
        return Level.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise argparse.ArgumentTypeError(f"expected `true` or `false`, got {text!r}")


def _u64(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"number must not be negative: {text!r}")
    return value


# -- argument groups ---------------------------------------------------------


def _configure_selector(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-u", "--unrelated", action="store_true",
        help="This crate is not neccesarily a dependency of the current cargo project",
    )
    p.add_argument("-v", "--vers", dest="vers", type=_version, default=None)
    p.add_argument("name", nargs="?", default=None)
    p.add_argument("version_positional", nargs="?", type=_version, default=None,
                   metavar="version")


def _selector(ns: argparse.Namespace) -> CrateSelector:
    return CrateSelector(
        name=ns.name,
        named_version=ns.vers,
        unrelated=ns.unrelated,
        positional_version=ns.version_positional,
    )


def _configure_cargo(p: argparse.ArgumentParser) -> None:
    p.add_argument("--features", metavar="FEATURES",
                   help="[cargo] Space-separated list of features to activate")
    p.add_argument("--all-features", action="store_true",
                   help="[cargo] Activate all available features")
    p.add_argument("--no-default-features", action="store_true",
                   help="[cargo] Do not activate the `default` feature")
    p.add_argument("--no-dev-dependencies", action="store_true",
                   help="[cargo] Skip dev dependencies.")
    p.add_argument("--manifest-path", metavar="PATH", type=Path,
                   help="[cargo] Path to Cargo.toml")
    p.add_argument("-Z", "--unstable-flags", dest="unstable_flags", metavar="FLAG",
                   action="append", default=None,
                   help="[cargo] Unstable (nightly-only) flags to Cargo")
    p.add_argument("--target", nargs="?", const="", default=None,
                   help="[cargo] Skip targets other than specified (no value = autodetect)")


def _cargo(ns: argparse.Namespace) -> CargoOpts:
    return CargoOpts(
        features=ns.features,
        all_features=ns.all_features,
        no_default_features=ns.no_default_features,
        no_dev_dependencies=ns.no_dev_dependencies,
        manifest_path=ns.manifest_path,
        unstable_flags=list(ns.unstable_flags or []),
        target=ns.target,
    )


def _configure_trust_params(p: argparse.ArgumentParser) -> None:
    p.add_argument("--depth", type=_u64, default=10,
                   help="[trust-graph-traversal] Maximum allowed distance from the root identity")
    p.add_argument("--high-cost", type=_u64, default=0,
                   help="[trust-graph-traversal] Cost of traversing an edge of high trust level")
    p.add_argument("--medium-cost", type=_u64, default=1,
                   help="[trust-graph-traversal] Cost of traversing an edge of medium trust level")
    p.add_argument("--low-cost", type=_u64, default=5,
                   help="[trust-graph-traversal] Cost of traversing an edge of low trust level")


def _trust_params(ns: argparse.Namespace) -> TrustDistanceParams:
    return TrustDistanceParams(
        depth=ns.depth, high_cost=ns.high_cost,
        medium_cost=ns.medium_cost, low_cost=ns.low_cost,
    )


def _configure_trust_level(p: argparse.ArgumentParser, default: Level) -> None:
    p.add_argument("--trust", dest="trust_level", type=_level, default=default,
                   help="Minimum trust level required")


def _configure_requirements(p: argparse.ArgumentParser) -> None:
    _configure_trust_level(p, Level.LOW)
    p.add_argument("--redundancy", type=_u64, default=1, help="Number of reviews required")
    p.add_argument("--understanding", dest="understanding_level", type=_level,
                   default=Level.NONE, help="Required understanding")
    p.add_argument("--thoroughness", dest="thoroughness_level", type=_level,
                   default=Level.NONE, help="Required thoroughness")


def _requirements(ns: argparse.Namespace) -> VerificationRequirements:
    return VerificationRequirements(
        trust_level=TrustLevelRequirements(trust_level=ns.trust_level),
        redundancy=ns.redundancy,
        understanding_level=ns.understanding_level,
        thoroughness_level=ns.thoroughness_level,
    )


def _configure_common(p: argparse.ArgumentParser) -> None:
    _configure_trust_params(p)
    _configure_requirements(p)
    p.add_argument("--for-id", default=None,
                   help="Root identity to calculate the Web of Trust for")
    _configure_cargo(p)


def _common(ns: argparse.Namespace) -> CrateVerifyCommon:
    return CrateVerifyCommon(
        trust_params=_trust_params(ns),
        requirements=_requirements(ns),
        for_id=ns.for_id,
        cargo_opts=_cargo(ns),
    )


def _configure_columns(p: argparse.ArgumentParser) -> None:
    for name, text in _COLUMNS:
        p.add_argument(f"--show-{name}", nargs="?", const=GIVEN, default=None,
                       type=_bool, metavar="BOOL", help=text)
    p.add_argument("--show-all", action="store_true", help="Show all")


def _columns(ns: argparse.Namespace) -> CrateVerifyColumns:
    return CrateVerifyColumns(
        digest=ns.show_digest,
        leftpad_index=ns.show_leftpad_index,
        downloads=ns.show_downloads,
        owners=ns.show_owners,
        latest_trusted=ns.show_latest_trusted,
        reviews=ns.show_reviews,
        loc=ns.show_loc,
        issues=ns.show_issues,
        geiger=ns.show_geiger,
        flags=ns.show_flags,
        show_all=ns.show_all,
    )


def _configure_verify(p: argparse.ArgumentParser) -> None:
    _configure_common(p)
    _configure_columns(p)
    p.add_argument("-i", "--interactive", action="store_true")
    p.add_argument("--skip-verified", action="store_true",
                   help="Display only crates not passing the verification")
    p.add_argument("--skip-known-owners", action="store_true",
                   help="Skip crate from known owners (use `edit known` to edit the list)")
    p.add_argument("--skip-indirect", action="store_true",
                   help="Skip dependencies that are not direct")
    p.add_argument("--recursive", action="store_true",
                   help="Calculate recursive metrics for your packages")
    _configure_selector(p)


def _verify(ns: argparse.Namespace) -> Dict[str, Any]:
    return {
        "crate": _selector(ns),
        "opts": CrateVerify(
            common=_common(ns),
            columns=_columns(ns),
            interactive=ns.interactive,
            skip_verified=ns.skip_verified,
            skip_known_owners=ns.skip_known_owners,
            skip_indirect=ns.skip_indirect,
            recursive=ns.recursive,
        ),
    }


def _configure_common_with_selector(p: argparse.ArgumentParser) -> None:
    _configure_common(p)
    _configure_selector(p)


def _common_with_selector(ns: argparse.Namespace) -> Dict[str, Any]:
    return {"crate": _selector(ns), "opts": _common(ns)}


def _configure_proof_create(p: argparse.ArgumentParser) -> None:
    p.add_argument("--no-commit", action="store_true",
                   help="Don't auto-commit local Proof Repository")
    p.add_argument("--print-unsigned", action="store_true",
                   help="Print unsigned proof content on stdout")
    p.add_argument("--print-signed", action="store_true",
                   help="Print signed proof content on stdout")
    p.add_argument("--no-store", action="store_true", help="Don't store the proof")


def _proof_create(ns: argparse.Namespace) -> CommonProofCreate:
    return CommonProofCreate(
        no_commit=ns.no_commit,
        print_unsigned=ns.print_unsigned,
        print_signed=ns.print_signed,
        no_store=ns.no_store,
    )


def _configure_review(p: argparse.ArgumentParser) -> None:
    _configure_selector(p)
    _configure_proof_create(p)
    p.add_argument("--advisory", action="store_true",
                   help="Create advisory urging to upgrade to a safe version")
    p.add_argument("--affected", choices=VERSION_RANGES, default=None,
                   help="This release contains advisory (important fix)")
    p.add_argument("--severity", type=_level, default=None,
                   help="Severity of bug/security issue [none low medium high]")
    p.add_argument("--issue", action="store_true",
                   help="Flag the crate as buggy/low-quality/dangerous")
    p.add_argument("--skip-activity-check", action="store_true")
    p.add_argument("--diff", nargs="?", const=GIVEN, default=None, type=_version,
                   metavar="base-version", help="Review the delta since the given version")
    _configure_cargo(p)


def _review(ns: argparse.Namespace) -> Dict[str, Any]:
    return {
        "args": CrateReview(
            common=ReviewOrGotoCommon(crate=_selector(ns)),
            common_proof_create=_proof_create(ns),
            advisory=ns.advisory,
            affected=ns.affected,
            severity=ns.severity,
            issue=ns.issue,
            skip_activity_check=ns.skip_activity_check,
            diff=ns.diff,
            cargo_opts=_cargo(ns),
        )
    }


def _goto(ns: argparse.Namespace) -> Dict[str, Any]:
    return {"args": ReviewOrGotoCommon(crate=_selector(ns))}


def _configure_open(p: argparse.ArgumentParser) -> None:
    p.add_argument("--cmd", default=None,
                   help="Shell command to execute with crate directory as an argument")
    p.add_argument("--cmd-save", action="store_true",
                   help="Save the `--cmd` argument to be used a default in the future")
    _configure_selector(p)


def _open(ns: argparse.Namespace) -> Dict[str, Any]:
    return {
        "cmd": ns.cmd,
        "cmd_save": ns.cmd_save,
        "common": ReviewOrGotoCommon(crate=_selector(ns)),
    }


def _update(ns: argparse.Namespace) -> Dict[str, Any]:
    return {"cargo_opts": _cargo(ns)}


def _configure_id_trust(p: argparse.ArgumentParser, ids_name: str, help_text: str) -> None:
    p.add_argument(ids_name, nargs="*", help=help_text)
    p.add_argument("--level", choices=TRUST_LEVELS, default=None,
                   help="Shortcut for setting trust level without editing")
    _configure_proof_create(p)


def _id_trust(ns: argparse.Namespace) -> Dict[str, Any]:
    return {
        "public_ids": list(ns.public_ids),
        "level": ns.level,
        "common_proof_create": _proof_create(ns),
    }


def _empty(ns: argparse.Namespace) -> Dict[str, Any]:
    return {}


# -- parser tree -------------------------------------------------------------


def _subparsers(parser: argparse.ArgumentParser) -> argparse._SubParsersAction:
    return parser.add_subparsers(dest="command", required=True, metavar="<command>")


def _group(sp: argparse._SubParsersAction, node: Tree, name: str,
           help_text: str) -> Tuple[argparse._SubParsersAction, Tree]:
    parser = sp.add_parser(name, help=help_text, description=help_text)
    child: Tree = {}
    node[name] = child
    return _subparsers(parser), child


def _leaf(sp: argparse._SubParsersAction, node: Tree, path: Tuple[str, ...],
          name: str, help_text: str, build: Builder,
          configure: Optional[Callable[[argparse.ArgumentParser], None]] = None,
          **kwargs: Any) -> argparse.ArgumentParser:
    parser = sp.add_parser(name, help=help_text, description=help_text, **kwargs)
    node[name] = {}
    if configure is not None:
        configure(parser)
    parser.set_defaults(_path=path + (name,), _build=build)
    return parser


def _add_config(sp: argparse._SubParsersAction, node: Tree) -> None:
    sub, child = _group(sp, node, "config", "Local configuration")
    path = ("config",)
    _leaf(sub, child, path, "edit", "Edit the config file", _empty)
    completions = _leaf(sub, child, path, "completions", "Completions",
                        lambda ns: {"shell": ns.shell})
    completions.add_argument("--shell", default=None)
    _leaf(sub, child, path, "dir", "Print the dir containing config files", _empty)


def _add_crate(sp: argparse._SubParsersAction, node: Tree) -> None:
    sub, child = _group(sp, node, "crate", "Crate related operations (review, verify...)")
    path = ("crate",)
    _leaf(sub, child, path, "goto",
          "Start a shell in source directory of a crate under review",
          _goto, _configure_selector)
    _leaf(sub, child, path, "open", "Open the source code of a crate", _open, _configure_open)
    _leaf(sub, child, path, "clean",
          "Clean the source code directory of a crate (eg. after review)",
          _goto, _configure_selector)

    def configure_diff(p: argparse.ArgumentParser) -> None:
        p.add_argument("--src", type=_version, default=None,
                       help="Source version - defaults to the last reviewed one")
        p.add_argument("--dst", type=_version, default=None,
                       help="Destination version - defaults to the current one")
        _configure_requirements(p)
        _configure_trust_params(p)
        p.add_argument("name", help="Crate name")

    def build_diff(ns: argparse.Namespace) -> Dict[str, Any]:
        return {
            "src": ns.src,
            "dst": ns.dst,
            "requirements": _requirements(ns),
            "trust_params": _trust_params(ns),
            "name": ns.name,
            "args": list(ns.trailing),
        }

    _leaf(sub, child, path, "diff", "Diff between two versions of a package",
          build_diff, configure_diff)
    _leaf(sub, child, path, "dir",
          "Display the path of the source code directory of a crate",
          lambda ns: {"common": ReviewOrGotoCommon(crate=_selector(ns))},
          _configure_selector)
    _leaf(sub, child, path, "verify", "Verify dependencies", _verify, _configure_verify,
          epilog=_VERIFY_EPILOG, formatter_class=argparse.RawDescriptionHelpFormatter)
    _leaf(sub, child, path, "mvp", "Most valuable players (reviewers)",
          _common_with_selector, _configure_common_with_selector)
    _leaf(sub, child, path, "review",
          "Review a crate (code review, security advisory, flag issues)",
          _review, _configure_review)
    _leaf(sub, child, path, "unreview", "Unreview (overwrite with an null review)",
          _review, _configure_review)

    def configure_search(p: argparse.ArgumentParser) -> None:
        p.add_argument("--count", type=_u64, default=10, help="Number of results")
        p.add_argument("query", help="Query to use")

    _leaf(sub, child, path, "search", "Search crates on crates.io sorting by review count",
          lambda ns: {"count": ns.count, "query": ns.query}, configure_search)
    _leaf(sub, child, path, "info", "Display rich info about the given crate",
          _common_with_selector, _configure_common_with_selector)


def _add_id(sp: argparse._SubParsersAction, node: Tree) -> None:
    sub, child = _group(sp, node, "id", "Id (own and of other users)")
    path = ("id",)

    def configure_new(p: argparse.ArgumentParser) -> None:
        p.add_argument("--url", default=None,
                       help="Publicly-visible HTTPS URL of a git repository for the new Id")
        p.add_argument("--github-username", default=None,
                       help="Github username (instead of --url)")
        p.add_argument("--https-push", dest="use_https_push", action="store_true",
                       help="Use public HTTP URL for both pulling and pushing")

    _leaf(sub, child, path, "new", "Create a new Id",
          lambda ns: {"url": ns.url, "github_username": ns.github_username,
                      "use_https_push": ns.use_https_push},
          configure_new)
    export = _leaf(sub, child, path, "export", "Export your own Id", lambda ns: {"id": ns.id})
    export.add_argument("id", nargs="?", default=None)
    _leaf(sub, child, path, "import", "Import an Id as your own", _empty)
    _leaf(sub, child, path, "current", "Show your current Id", _empty)
    switch = _leaf(sub, child, path, "switch", "Change current Id", lambda ns: {"id": ns.id})
    switch.add_argument("id", help="Id to switch to")
    _leaf(sub, child, path, "passwd", "Change passphrase", _empty)

    def configure_set_url(p: argparse.ArgumentParser) -> None:
        p.add_argument("--https-push", dest="use_https_push", action="store_true",
                       help="Setup `https` instead of recommended `ssh`-based push url")
        p.add_argument("url", help="Public read-only HTTPS git URL for the proofs repo")

    _leaf(sub, child, path, "set-url", "Change public HTTPS repo URL for the current Id",
          lambda ns: {"use_https_push": ns.use_https_push, "url": ns.url},
          configure_set_url)

    def configure_trust(p: argparse.ArgumentParser) -> None:
        _configure_id_trust(p, "public_ids", "Public IDs to create Trust Proof for")

    _leaf(sub, child, path, "trust", "Trust an Id", _id_trust, configure_trust)
    _leaf(sub, child, path, "untrust", "Untrust (remove) trust", _id_trust, configure_trust)
    _leaf(sub, child, path, "distrust", "Distrust an Id", _id_trust, configure_trust)

    qsub, qchild = _group(sub, child, "query", "Query Ids")
    qpath = path + ("query",)

    def configure_for_id(p: argparse.ArgumentParser) -> None:
        _configure_trust_params(p)
        p.add_argument("--for-id", default=None)

    def configure_trusted(p: argparse.ArgumentParser) -> None:
        configure_for_id(p)
        _configure_trust_level(p, Level.LOW)

    _leaf(qsub, qchild, qpath, "current", "Show current Id",
          lambda ns: {"trust_params": _trust_params(ns)}, _configure_trust_params)
    _leaf(qsub, qchild, qpath, "all", "Show all known Ids",
          lambda ns: {"trust_params": _trust_params(ns), "for_id": ns.for_id},
          configure_for_id)
    _leaf(qsub, qchild, qpath, "own", "Show own Ids",
          lambda ns: {"trust_params": _trust_params(ns)}, _configure_trust_params)
    _leaf(qsub, qchild, qpath, "trusted", "List trusted ids",
          lambda ns: {
              "trust_params": _trust_params(ns),
              "for_id": ns.for_id,
              "trust_level": TrustLevelRequirements(trust_level=ns.trust_level),
          },
          configure_trusted)


def _add_proof(sp: argparse._SubParsersAction, node: Tree) -> None:
    sub, child = _group(sp, node, "proof", "Find a proof in the proof repo")

    def configure_find(p: argparse.ArgumentParser) -> None:
        p.add_argument("--crate", dest="crate", default=None)
        p.add_argument("--vers", dest="vers", type=_version, default=None)
        p.add_argument("--author", default=None, help="Find a proof by a crev Id")

    _leaf(sub, child, ("proof",), "find", "Find a proof",
          lambda ns: {"crate": ns.crate, "version": ns.vers, "author": ns.author},
          configure_find)


def _add_repo(sp: argparse._SubParsersAction, node: Tree) -> None:
    sub, child = _group(sp, node, "repo", "Proof Repository")
    path = ("repo",)
    _leaf(sub, child, path, "publish", "Publish to remote repository", _empty)
    _leaf(sub, child, path, "update",
          "Update data from online sources (proof repositories, crates.io)",
          _update, _configure_cargo)
    _leaf(sub, child, path, "git", "Run raw git commands in the local proof repository",
          lambda ns: {"args": list(ns.trailing)})

    esub, echild = _group(sub, child, "edit", "Edit README.md of the current Id, ...")
    _leaf(esub, echild, path + ("edit",), "readme", "Edit your README.md file", _empty)
    _leaf(esub, echild, path + ("edit",), "known",
          "Edit your KNOWN_CRATE_OWNERS.md file", _empty)

    def configure_import(p: argparse.ArgumentParser) -> None:
        p.add_argument("--reset-date", action="store_true",
                       help="Reset proof date to current date")
        _configure_proof_create(p)

    _leaf(sub, child, path, "import", "Import proofs",
          lambda ns: {"reset_date": ns.reset_date, "common": _proof_create(ns)},
          configure_import)

    qsub, qchild = _group(sub, child, "query", "Query proofs")
    qpath = path + ("query",)
    _leaf(qsub, qchild, qpath, "review", "Query reviews",
          lambda ns: {"crate": _selector(ns)}, _configure_selector)
    _leaf(qsub, qchild, qpath, "advisory", "Query applicable advisories",
          lambda ns: {"crate": _selector(ns)}, _configure_selector)

    def configure_issue(p: argparse.ArgumentParser) -> None:
        _configure_selector(p)
        _configure_trust_params(p)
        _configure_trust_level(p, Level.NONE)

    _leaf(qsub, qchild, qpath, "issue", "Query applicable issues",
          lambda ns: {"crate": _selector(ns), "trust_params": _trust_params(ns),
                      "trust_level": ns.trust_level},
          configure_issue)

    fsub, fchild = _group(sub, child, "fetch", "Fetch proofs from external sources")
    fpath = path + ("fetch",)

    def configure_fetch_trusted(p: argparse.ArgumentParser) -> None:
        _configure_trust_params(p)
        p.add_argument("--for-id", default=None)

    _leaf(fsub, fchild, fpath, "trusted", "Fetch updates from trusted Ids",
          lambda ns: {"distance_params": _trust_params(ns), "for_id": ns.for_id},
          configure_fetch_trusted)
    url = _leaf(fsub, fchild, fpath, "url", "Fetch from a single public proof repository",
                lambda ns: {"url": ns.url})
    url.add_argument("url", help="URL to public proof repository")
    _leaf(fsub, fchild, fpath, "all",
          "Fetch all previously retrieved public proof repositories", _empty)
    _leaf(sub, child, path, "dir",
          "Print the dir containing local copy of the proof repository", _empty)


def _add_shortcuts(sp: argparse._SubParsersAction, node: Tree) -> None:
    root: Tuple[str, ...] = ()

    def configure_trust(p: argparse.ArgumentParser) -> None:
        _configure_id_trust(p, "public_ids_or_urls",
                            "Public IDs or proof repo URLs to create Trust Proof for")

    _leaf(sp, node, root, "trust", "Add a Trust proof by an Id or a URL",
          lambda ns: {
              "public_ids_or_urls": list(ns.public_ids_or_urls),
              "level": ns.level,
              "common_proof_create": _proof_create(ns),
          },
          configure_trust)
    _leaf(sp, node, root, "goto", "Shortcut for `crate goto`", _goto, _configure_selector)
    _leaf(sp, node, root, "open", "Shortcut for `crate open`", _open, _configure_open)
    _leaf(sp, node, root, "publish", "Shortcut for `repo publish`", _empty)
    _leaf(sp, node, root, "review", "Shortcut for `crate review`", _review, _configure_review)
    _leaf(sp, node, root, "update", "Shortcut for `repo update`", _update, _configure_cargo)
    _leaf(sp, node, root, "verify", "Shortcut for `crate verify`", _verify, _configure_verify,
          epilog=_VERIFY_EPILOG, formatter_class=argparse.RawDescriptionHelpFormatter)


def _build() -> Tuple[argparse.ArgumentParser, Tree]:
    parser = argparse.ArgumentParser(prog="cargo", description="Distributed code review system")
    top = parser.add_subparsers(dest="main", required=True, metavar="<command>")
    crev = top.add_parser("crev", help="Distributed code review system",
                          epilog=_CREV_EPILOG)
    commands: Tree = {}
    tree: Tree = {"crev": commands}
    sp = _subparsers(crev)
    _add_config(sp, commands)
    _add_crate(sp, commands)
    _add_id(sp, commands)
    _add_proof(sp, commands)
    _add_repo(sp, commands)
    _add_shortcuts(sp, commands)
    return parser, tree


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for ``cargo crev``."""
    return _build()[0]


# -- parsing -----------------------------------------------------------------


def _resolve_abbreviations(argv: List[str], tree: Tree) -> Tuple[List[str], Tuple[str, ...], int]:
    """Expand unambiguous subcommand prefixes; return argv, the path and its end."""
    resolved = list(argv)
    path: List[str] = []
    node = tree
    index = 0
    while node and index < len(resolved):
        token = resolved[index]
        if token.startswith("-"):
            break
        if token not in node:
            matches = [name for name in node if name.startswith(token)]
            if len(matches) != 1:
                break
            token = matches[0]
            resolved[index] = token
        path.append(token)
        node = node[token]
        index += 1
    return resolved, tuple(path), index


def _split_trailing(argv: List[str], path: Tuple[str, ...],
                    index: int) -> Tuple[List[str], List[str]]:
    if path == _GIT_PATH:
        return argv[:index], argv[index:]
    if path == _DIFF_PATH:
        position = index
        while position < len(argv):
            token = argv[position]
            if token.startswith("-") and len(token) > 1:
                position += 2 if token in _DIFF_VALUE_OPTIONS else 1
                continue
            rest = argv[position + 1:]
            if rest[:1] == ["--"]:
                rest = rest[1:]
            return argv[:position + 1], rest
    return argv, []


def parse_args(argv: Optional[Sequence[str]] = None) -> ParsedCommand:
    """Parse ``crev ...`` arguments; exits with status 2 on invalid input."""
    args = list(sys.argv[1:] if argv is None else argv)
    parser, tree = _build()
    args, path, index = _resolve_abbreviations(args, tree)
    head, trailing = _split_trailing(args, path, index)
    namespace = parser.parse_args(head)
    namespace.trailing = trailing
    return ParsedCommand(path=namespace._path, options=namespace._build(namespace))