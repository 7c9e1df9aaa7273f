"""A caching client for crate metadata from crates.io."""

from __future__ import annotations

import json
import os
import time
from os import PathLike
from pathlib import Path
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple, Union
from urllib.parse import quote

import requests
from semver import Version

from crevtools.fileio import store_to_file_with
from crevtools.stats import DownloadsStats

StrPath = Union[str, "PathLike[str]"]

CRATES_IO_API_URL = "https://crates.io/api/v1"
USER_AGENT = "cargo-crev"
CACHE_TTL_SECONDS = 60 * 60 * 72
_REQUEST_TIMEOUT = 30


class CratesIoApi:
    """Minimal rate-limited client of the crates.io HTTP API."""

    def __init__(
        self,
        user_agent: str = USER_AGENT,
        rate_limit: float = 1.0,
        session: Optional[Any] = None,
        base_url: str = CRATES_IO_API_URL,
    ) -> None:
        self._user_agent = user_agent
        self._rate_limit = rate_limit
        self._session = session if session is not None else requests.Session()
        self._base_url = base_url.rstrip("/")
        self._last_request: Optional[float] = None

    def _get_json(self, path: str) -> Any:
        if self._last_request is not None:
            wait = self._rate_limit - (time.monotonic() - self._last_request)
            if wait > 0:
                time.sleep(wait)
        response = self._session.get(
            f"{self._base_url}{path}",
            headers={"User-Agent": self._user_agent},
            timeout=_REQUEST_TIMEOUT,
        )
        self._last_request = time.monotonic()
        response.raise_for_status()
        return response.json()

    def get_crate(self, name: str) -> Dict[str, Any]:
        """Return the full crate response for ``name``."""
        return self._get_json(f"/crates/{quote(name, safe='')}")

    def crate_owners(self, name: str) -> List[Dict[str, Any]]:
        """Return the user owners of ``name``."""
        data = self._get_json(f"/crates/{quote(name, safe='')}/owner_user")
        return list(data["users"])


def is_fresh(path: StrPath) -> bool:
    """True if the file at ``path`` was created within the last 72 hours."""
    stat = os.stat(path)
    created = getattr(stat, "st_birthtime", None)
    if created is None:
        created = stat.st_mtime
    now = time.time()
    return now - CACHE_TTL_SECONDS < created < now


def downloads_stats_from_response(
    response: Dict[str, Any], version: Union[str, Version]
) -> DownloadsStats:
    """Extract download counts for ``version`` from a crate response."""
    wanted = str(version)
    version_downloads = next(
        (v["downloads"] for v in response.get("versions", []) if v.get("num") == wanted),
        0,
    )
    crate = response["crate"]
    return DownloadsStats(
        version=version_downloads,
        total=crate["downloads"],
        recent=crate.get("recent_downloads") or 0,
    )


class _Kind(NamedTuple):
    subdir: str
    fetch: Callable[[Any, str], Any]


_CRATE = _Kind("crate", lambda api, name: api.get_crate(name))
_OWNERS = _Kind("owners", lambda api, name: {"users": api.crate_owners(name)})


class Client:
    """crates.io client caching responses on disk under ``root_cache_dir``."""

    def __init__(self, root_cache_dir: StrPath, api: Optional[Any] = None) -> None:
        self.cache_dir = Path(root_cache_dir) / "crates_io"
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self._api = api if api is not None else CratesIoApi()

    def _cache_path(self, kind: _Kind, name: str) -> Path:
        return self.cache_dir / kind.subdir / f"{name}.json"

    def _get_from_cache(self, kind: _Kind, name: str) -> Optional[Tuple[Any, bool]]:
        path = self._cache_path(kind, name)
        if not path.exists():
            return None
        value = json.loads(path.read_text(encoding="utf-8"))
        return value, is_fresh(path)

    def _fetch(self, kind: _Kind, name: str) -> Any:
        value = kind.fetch(self._api, name)
        data = json.dumps(value).encode("utf-8")
        store_to_file_with(self._cache_path(kind, name), lambda stream: stream.write(data))
        return value

    def _get(self, kind: _Kind, name: str) -> Any:
        cached = self._get_from_cache(kind, name)
        if cached is None:
            return self._fetch(kind, name)
        value, fresh = cached
        if fresh:
            return value
        try:
            return self._fetch(kind, name)
        except Exception:
            return value

    def get_downloads_count(self, crate: str, version: Union[str, Version]) -> DownloadsStats:
        """Return the download counts of ``crate`` at ``version``."""
        return downloads_stats_from_response(self._get(_CRATE, crate), version)

    def get_owners(self, crate: str) -> List[str]:
        """Return the logins of the owners of ``crate``."""
        owners = self._get(_OWNERS, crate)
        return [user["login"] for user in owners["users"]]