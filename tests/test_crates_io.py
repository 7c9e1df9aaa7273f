import time
from unittest.mock import patch

import pytest
import requests

from crevtools.crates_io import (
    Client,
    CratesIoApi,
    downloads_stats_from_response,
    is_fresh,
)
from crevtools.stats import DownloadsStats

RESPONSE = {
    "crate": {"name": "serde", "downloads": 1000, "recent_downloads": 100},
    "versions": [
        {"num": "1.0.0", "downloads": 600},
        {"num": "1.0.1", "downloads": 400},
    ],
}


class FakeApi:
    def __init__(self, crate=RESPONSE, owners=None, fail=False):
        self.crate = crate
        self.owners = owners or [{"login": "alice"}, {"login": "bob"}]
        self.fail = fail
        self.calls = 0

    def get_crate(self, name):
        self.calls += 1
        if self.fail:
            raise requests.ConnectionError("offline")
        return self.crate

    def crate_owners(self, name):
        self.calls += 1
        if self.fail:
            raise requests.ConnectionError("offline")
        return self.owners


class FakeResponse:
    def __init__(self, data, status=200):
        self._data = data
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")

    def json(self):
        return self._data


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.requests = []

    def get(self, url, headers=None, timeout=None):
        self.requests.append((url, headers))
        return self.response


def _later():
    return time.time() + 4 * 24 * 3600


def test_downloads_stats_for_known_version():
    stats = downloads_stats_from_response(RESPONSE, "1.0.0")
    assert stats == DownloadsStats(version=600, total=1000, recent=100)


def test_downloads_stats_for_unknown_version_is_zero():
    stats = downloads_stats_from_response(RESPONSE, "9.9.9")
    assert stats.version == 0
    assert stats.total == 1000


def test_downloads_stats_missing_recent_is_zero():
    response = {"crate": {"downloads": 5, "recent_downloads": None}, "versions": []}
    assert downloads_stats_from_response(response, "1.0.0").recent == 0


def test_is_fresh_for_new_file(tmp_path):
    path = tmp_path / "x.json"
    path.write_text("{}")
    assert is_fresh(path) is True


def test_is_fresh_false_after_three_days(tmp_path):
    path = tmp_path / "x.json"
    path.write_text("{}")
    with patch("time.time", return_value=_later()):
        assert is_fresh(path) is False


def test_client_caches_response(tmp_path):
    api = FakeApi()
    client = Client(tmp_path, api=api)
    first = client.get_downloads_count("serde", "1.0.1")
    second = client.get_downloads_count("serde", "1.0.1")
    assert first == second
    assert first.version == 400
    assert api.calls == 1
    assert (tmp_path / "crates_io" / "crate" / "serde.json").exists()


def test_client_stale_cache_used_when_fetch_fails(tmp_path):
    Client(tmp_path, api=FakeApi()).get_downloads_count("serde", "1.0.0")
    failing = FakeApi(fail=True)
    with patch("time.time", return_value=_later()):
        stats = Client(tmp_path, api=failing).get_downloads_count("serde", "1.0.0")
    assert failing.calls == 1
    assert stats.version == 600


def test_client_stale_cache_refreshed(tmp_path):
    Client(tmp_path, api=FakeApi()).get_downloads_count("serde", "1.0.0")
    updated = {
        "crate": {"downloads": 2000, "recent_downloads": 7},
        "versions": [{"num": "1.0.0", "downloads": 1500}],
    }
    with patch("time.time", return_value=_later()):
        stats = Client(tmp_path, api=FakeApi(crate=updated)).get_downloads_count(
            "serde", "1.0.0"
        )
    assert stats == DownloadsStats(version=1500, total=2000, recent=7)


def test_client_without_cache_propagates_errors(tmp_path):
    client = Client(tmp_path, api=FakeApi(fail=True))
    with pytest.raises(requests.ConnectionError):
        client.get_owners("serde")


def test_client_get_owners(tmp_path):
    api = FakeApi()
    client = Client(tmp_path, api=api)
    assert client.get_owners("serde") == ["alice", "bob"]
    assert client.get_owners("serde") == ["alice", "bob"]
    assert api.calls == 1


def test_api_get_crate_request():
    session = FakeSession(FakeResponse(RESPONSE))
    api = CratesIoApi(rate_limit=0, session=session, base_url="https://example.com/api/v1")
    assert api.get_crate("serde") == RESPONSE
    url, headers = session.requests[0]
    assert url == "https://example.com/api/v1/crates/serde"
    assert headers["User-Agent"] == "cargo-crev"


def test_api_crate_owners():
    session = FakeSession(FakeResponse({"users": [{"login": "alice"}]}))
    api = CratesIoApi(rate_limit=0, session=session, base_url="https://example.com/api/v1")
    assert api.crate_owners("serde") == [{"login": "alice"}]
    assert session.requests[0][0] == "https://example.com/api/v1/crates/serde/owner_user"


def test_api_http_error_raises():
    session = FakeSession(FakeResponse({}, status=404))
    api = CratesIoApi(rate_limit=0, session=session)
    with pytest.raises(requests.HTTPError):
        api.get_crate("missing")