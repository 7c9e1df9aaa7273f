# crevtools

Building blocks for a distributed code review workflow: atomic file
storage, interactive prompts and shell commands, the options and the
command-line parser of a review tool, crate statistics that add up over a
dependency tree, a crates.io client with an on-disk cache, and a
dependency graph with transitive lookups.

## Installing

The package needs Python 3.10 or later and depends on `pyyaml`, `semver`
and `requests`. The `test` extra adds `pytest`.

## What is inside

| Module | Purpose |
| --- | --- |
| `crevtools.fileio` | `store_to_file_with` and `store_str_to_file` (write to a `.tmp` file, then rename), `save_to_yaml_file`, `read_from_yaml_file`, `move_dir_content`, `append_to_path`, `YamlIOError` |
| `crevtools.interaction` | `now`, `yes_or_no_was_y`, `try_again_or_cancel`, `CancelledError` with a `CancelReason`, running a command through the shell (`run_with_shell_cmd`, `run_with_shell_cmd_capture_stdout`) |
| `crevtools.opts` | `Level`, `CrateSelector`, `CargoOpts`, `TrustDistanceParams`, `VerificationRequirements`, `CrateVerifyColumns`, `CrateVerify`, `CrateReview` and related option dataclasses |
| `crevtools.term` | colour-aware `Term` output, `VerificationStatus`, `Color`, `read_passphrase`, `read_new_passphrase` |
| `crevtools.cli` | `build_parser` and `parse_args`, returning a `ParsedCommand` |
| `crevtools.edit` | editing text or a file in the user's editor (`VISUAL`, `EDITOR`, git's `core.editor`, then `vi`) |
| `crevtools.stats` | `CountWithTotal`, `DownloadsStats`, `OwnerSetSet`, `AccumulativeCrateDetails`, `Details`, `latest_trusted_version_string` |
| `crevtools.crates_io` | `CratesIoApi` (rate-limited HTTP access) and `Client`, which caches responses for 72 hours |
| `crevtools.graph` | `DependencyGraph`, `split_features`, `find_pkg_id_by_selector` |

## Examples

Writing a file so that readers never see a half-written one:

```python
from crevtools.fileio import store_str_to_file, save_to_yaml_file, read_from_yaml_file

store_str_to_file("proofs/README.md", "# My proofs\n")
save_to_yaml_file("config/user.yaml", {"open-cmd": "xdg-open"})
print(read_from_yaml_file("config/user.yaml"))   # {'open-cmd': 'xdg-open'}
```

Choosing which columns a verification report shows. A column that was not
mentioned follows `show_all`; one given without a value uses its own
default; one given `true` or `false` is shown or hidden as asked:

```python
from crevtools.opts import GIVEN, CrateVerifyColumns

columns = CrateVerifyColumns()
print(columns.show_issues())      # False
print(columns.any_selected())     # False

print(CrateVerifyColumns(show_all=True).show_downloads())   # True
print(CrateVerifyColumns(issues=GIVEN).show_issues())       # True
```

Parsing a command line. Subcommands may be abbreviated as long as the
prefix is unambiguous:

```python
from crevtools.cli import parse_args

command = parse_args(["crev", "cr", "ver", "--show-downloads", "--recursive"])
print(command.path)                                        # ('crate', 'verify')
print(command.options["opts"].recursive)                   # True
print(command.options["opts"].columns.show_downloads())    # True
```

Walking a dependency graph:

```python
from crevtools.graph import DependencyGraph

graph = DependencyGraph()
graph.add_dependency("app", "serde", "normal")
graph.add_dependency("serde", "serde_derive", "normal")

print(sorted(graph.get_recursive_dependencies_of("app")))
# ['serde', 'serde_derive']
print(list(graph.get_reverse_dependencies_of("serde")))
# ['app']
```

Counting crate owners across packages:

```python
from crevtools.stats import OwnerSetSet

owners = OwnerSetSet({"a": {"alice", "bob"}, "b": {"alice"}})
print(owners.total_owners())           # 2
print(owners.total_distinct_groups())  # 1: {"alice"} is contained in {"alice", "bob"}
```

Download counts from crates.io, cached under a directory of your choice:

```python
from crevtools.crates_io import Client

client = Client("/tmp/crev-cache")
stats = client.get_downloads_count("serde", "1.0.0")
print(stats.version, stats.total, stats.recent)
print(client.get_owners("serde"))
```

Passphrases are taken from `CREV_PASSPHRASE` if set, otherwise from the
output of the shell command in `CREV_PASSPHRASE_CMD`, otherwise read from
the terminal.

## What this package does not do

`parse_args` only turns a command line into a `ParsedCommand`; there is no
installed command that carries the parsed commands out. The package has no
store of review and trust proofs, no identities or signing, no web of trust
calculation, no content digests or filesystem-safe name helpers, and it does
not resolve a cargo workspace: a `DependencyGraph` is filled in by the
caller.

## Running the tests

Install the package with its `test` extra and run `pytest` from the
project directory.