"""Building blocks for distributed code review: safe file storage, review options and parsing, crate statistics, a cached crates.io client and dependency graphs."""

__version__ = "0.1.0"