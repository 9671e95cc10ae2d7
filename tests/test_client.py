import time
from unittest.mock import patch, MagicMock

import pytest
import requests

from divot_lab.cache import DataGolfCache
from divot_lab.client import DataGolfClient


@pytest.fixture
def tmp_cache(tmp_path):
    return DataGolfCache(cache_dir=tmp_path)


@pytest.fixture
def client(tmp_path):
    return DataGolfClient(api_key="test_key", cache_dir=str(tmp_path))


def _response(payload):
    mock_response = MagicMock()
    mock_response.json.return_value = payload
    mock_response.raise_for_status = MagicMock()
    return mock_response


class TestDataGolfCache:
    def test_miss_returns_none(self, tmp_cache):
        assert tmp_cache.get("/field-updates", {"tour": "pga"}) is None

    def test_set_then_get(self, tmp_cache):
        data = {"event_name": "The Genesis Invitational", "field": []}
        tmp_cache.set("/field-updates", {"tour": "pga"}, data)
        assert tmp_cache.get("/field-updates", {"tour": "pga"}) == data

    def test_different_params_are_different_keys(self, tmp_cache):
        tmp_cache.set("/get-schedule", {"season": 2025}, {"schedule": ["a"]})
        tmp_cache.set("/get-schedule", {"season": 2026}, {"schedule": ["b"]})
        assert tmp_cache.get("/get-schedule", {"season": 2025}) == {"schedule": ["a"]}
        assert tmp_cache.get("/get-schedule", {"season": 2026}) == {"schedule": ["b"]}

    def test_ttl_per_endpoint(self, tmp_cache):
        assert tmp_cache.ttl_for("/get-schedule") == 604800
        assert tmp_cache.ttl_for("/preds/skill-ratings") == 86400
        assert tmp_cache.ttl_for("/preds/get-dg-rankings") == 86400
        assert tmp_cache.ttl_for("/preds/pre-tournament") == 21600
        assert tmp_cache.ttl_for("/field-updates") == 3600
        assert tmp_cache.ttl_for("/preds/in-play") == 300
        assert tmp_cache.ttl_for("/get-player-list") == DataGolfCache.DEFAULT_TTL

    def test_expired_entry_is_dropped(self, tmp_cache):
        tmp_cache.set("/preds/in-play", {"tour": "pga"}, {"data": []})
        with patch("divot_lab.cache.time.time", return_value=time.time() + 301):
            assert tmp_cache.get("/preds/in-play", {"tour": "pga"}) is None
        assert not list(tmp_cache.cache_dir.glob("*.json"))

    @pytest.mark.parametrize("contents", [
        '{"timestamp": 1, "data": {"event_na',
        '{"data": {"event_name": "X"}}',
        '["not", "an", "entry"]',
        "",
    ])
    def test_unreadable_entry_is_a_miss_and_evicted(self, tmp_cache, contents):
        path = tmp_cache.path_for("/field-updates", {"tour": "pga"})
        path.write_text(contents)
        assert tmp_cache.get("/field-updates", {"tour": "pga"}) is None
        assert not path.exists()

    def test_set_leaves_no_temp_files(self, tmp_cache):
        tmp_cache.set("/field-updates", {"tour": "pga"}, {"event_name": "X"})
        tmp_cache.set("/field-updates", {"tour": "pga"}, {"event_name": "Y"})
        files = [p.name for p in tmp_cache.cache_dir.iterdir()]
        assert len(files) == 1
        assert files[0].endswith(".json")
        assert tmp_cache.get("/field-updates", {"tour": "pga"}) == {"event_name": "Y"}

    def test_failed_write_keeps_previous_entry(self, tmp_cache):
        tmp_cache.set("/get-schedule", {}, {"schedule": ["old"]})
        with patch("divot_lab.cache.json.dump", side_effect=TypeError("not serializable")):
            with pytest.raises(TypeError):
                tmp_cache.set("/get-schedule", {}, {"schedule": ["new"]})
        assert tmp_cache.get("/get-schedule", {}) == {"schedule": ["old"]}
        assert len(list(tmp_cache.cache_dir.iterdir())) == 1

    def test_clear(self, tmp_cache):
        tmp_cache.set("/a", {}, 1)
        tmp_cache.set("/b", {}, 2)
        assert tmp_cache.clear() == 2
        assert tmp_cache.get("/a", {}) is None


class TestDataGolfClient:
    def test_get_uses_cache_on_second_call(self, client):
        with patch("requests.get", return_value=_response({"schedule": []})) as mock_get:
            client.get_schedule(tour="pga")
            client.get_schedule(tour="pga")
            assert mock_get.call_count == 1  # second call served from cache

    def test_corrupt_cache_file_refetched(self, client):
        path = client.cache.path_for("/field-updates", {"tour": "pga", "file_format": "json"})
        path.write_text('{"timestamp": 1, "data": {"event_na')
        payload = {"event_name": "The Genesis Invitational", "field": []}
        with patch("requests.get", return_value=_response(payload)) as mock_get:
            assert client.get_field_updates() == payload
            assert client.get_field_updates() == payload
        assert mock_get.call_count == 1

    def test_api_key_not_cached(self, client, tmp_path):
        with patch("requests.get", return_value=_response({"players": []})):
            client.get_skill_ratings()

        for cache_file in tmp_path.glob("*.json"):
            assert "test_key" not in cache_file.read_text()

    def test_request_carries_key_and_format(self, client):
        with patch("requests.get", return_value=_response({"data": []})) as mock_get:
            client.get_in_play_predictions(tour="pga")
        url = mock_get.call_args.args[0]
        params = mock_get.call_args.kwargs["params"]
        assert url.endswith("/preds/in-play")
        assert params["key"] == "test_key"
        assert params["file_format"] == "json"
        assert params["odds_format"] == "percent"

    def test_http_error_propagates(self, client):
        failing = _response({})
        failing.raise_for_status.side_effect = requests.HTTPError("500")
        with patch("requests.get", return_value=failing):
            with pytest.raises(requests.HTTPError):
                client.get_field_updates()

    def test_missing_api_key_raises(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DATAGOLF_API_KEY", raising=False)
        with pytest.raises(KeyError):
            DataGolfClient(cache_dir=str(tmp_path))

    def test_dg_rankings_endpoint(self, client):
        with patch("requests.get", return_value=_response({"rankings": []})) as mock_get:
            assert client.get_dg_rankings() == {"rankings": []}
        assert mock_get.call_args.args[0].endswith("/preds/get-dg-rankings")
        assert mock_get.call_args.kwargs["params"] == {"file_format": "json", "key": "test_key"}
