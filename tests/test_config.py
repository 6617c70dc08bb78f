"""
Configuration Tests

Test Scenarios:
---------------
1. DiscoveryConfig validation rejects inconsistent tuning
2. from_dict merges nested JSON sections with the defaults
3. compute_parameters derives read-only values
4. Session seeds are stable within a window and differ across users and windows;
   unpinned request RNGs draw fresh entropy
5. Preference and content models normalize their inputs
6. Engine and server config loading
"""

import asyncio
import json
from datetime import timedelta

import pytest
from pydantic import ValidationError

from discovery import compute_parameters
from discovery.errors import ConfigError
from discovery.models.config import DEFAULT_CONFIG, DiscoveryConfig, TrendingWindow, resolve_config
from discovery.models.content import ContentItem, domain_from_url
from discovery.models.preferences import UserPreferences
from discovery.utils.seeds import request_rng, session_seed, session_window
from server.config import ServerConfig
from server.services import InMemoryDiscoveryStore, load_engine_config


class TestDiscoveryConfig:
    def test_defaults(self):
        assert resolve_config(None) is DEFAULT_CONFIG
        assert DEFAULT_CONFIG.max_per_domain == 20
        assert DEFAULT_CONFIG.candidate_pool_size == 300
        assert DEFAULT_CONFIG.superset_fetch_limit == 500
        assert DEFAULT_CONFIG.trending_window == TrendingWindow.WEEK

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValidationError):
            DiscoveryConfig(weight_quality=0.9)

    def test_fetch_limits_ordered(self):
        with pytest.raises(ValidationError):
            DiscoveryConfig(superset_fetch_limit=800, max_superset_fetch_limit=600)

    def test_topic_cap_must_allow_two_matches(self):
        with pytest.raises(ValidationError):
            DiscoveryConfig(topic_boost_cap=1.5)

    def test_randomness_bounded(self):
        with pytest.raises(ValidationError):
            DiscoveryConfig(base_randomness=0.6, wildness_randomness=0.6)

    def test_from_dict_sections(self):
        config = DiscoveryConfig.from_dict({
            "diversity": {"max_per_domain": 10, "min_viable_pool_size": 20},
            "scoring": {"weight_quality": 0.6, "weight_freshness": 0.2, "weight_trending": 0.2},
            "topic_match": {"boost_cap": None, "mismatch_penalty": 0.7},
            "trending": {"window": "day", "windows": {"hour": {"half_life_hours": 1, "max_age_hours": 12}}},
            "algorithm_version": "v2.1-test",
            "unknown_key": 1,
        })
        assert config.max_per_domain == 10
        assert config.weight_quality == pytest.approx(0.6)
        assert config.topic_boost_cap is None
        assert config.topic_mismatch_penalty == pytest.approx(0.7)
        assert config.trending_window == TrendingWindow.DAY
        assert config.trending_windows[TrendingWindow.HOUR].half_life_hours == 1
        assert config.trending_windows[TrendingWindow.WEEK].half_life_hours == 72
        assert config.algorithm_version == "v2.1-test"


class TestComputedParameters:
    def test_defaults(self):
        computed = compute_parameters()
        assert computed["min_randomness"] == pytest.approx(0.3)
        assert computed["max_randomness"] == pytest.approx(0.8)
        assert computed["matches_until_cap"] == 4
        assert computed["default_reputation_multiplier"] == pytest.approx(0.85)
        total = (
            computed["normalized_weight_quality"]
            + computed["normalized_weight_freshness"]
            + computed["normalized_weight_trending"]
        )
        assert total == pytest.approx(1.0)
        assert set(computed["trending_lambda_per_hour"]) == {"hour", "day", "week"}
        assert "randomness" not in computed

    def test_at_wildness(self):
        computed = compute_parameters(DEFAULT_CONFIG, wildness=500)
        assert computed["wildness"] == 100
        assert computed["randomness"] == pytest.approx(0.8)
        assert computed["mismatch_multiplier"] == pytest.approx(1.0)
        assert computed["exploration_pick"] is True

    def test_uncapped_boost(self):
        computed = compute_parameters(DiscoveryConfig(topic_boost_cap=None))
        assert computed["matches_until_cap"] is None


class TestSeeds:
    def test_window_and_seed(self, now):
        window = session_window(now, 60)
        assert session_window(now + timedelta(minutes=59 - now.minute), 60) == window
        assert session_window(now + timedelta(hours=1), 60) == window + 1
        assert session_seed("user-1", window) == session_seed("user-1", window)
        assert session_seed("user-1", window) != session_seed("user-2", window)
        assert session_seed("user-1", window) != session_seed("user-1", window + 1)

    def test_request_rng_depends_on_session_position(self):
        first = request_rng(42, ["a"]).random()
        assert request_rng(42, ["b"]).random() == first
        assert request_rng(42, ["a", "b"]).random() != first

    def test_unpinned_request_rng_uses_fresh_entropy(self):
        draws = {request_rng(None, ["a"]).random() for _ in range(5)}
        assert len(draws) == 5


class TestModels:
    def test_wildness_clamped_and_domains_normalized(self):
        prefs = UserPreferences(user_id="u", wildness=250, blocked_domains=["WWW.Example.com", ""])
        assert prefs.wildness == 100
        assert prefs.blocked_domains == ["example.com"]
        assert UserPreferences(user_id="u", wildness=-5).wildness == 0

    def test_domain_derived_from_url(self):
        assert domain_from_url("https://www.News.example.com/a") == "news.example.com"
        assert domain_from_url(None) == "unknown"
        assert ContentItem(id="x", url="http://www.site.org/p").domain == "site.org"
        assert ContentItem(id="y", url="http://site.org/p", domain="given.org").domain == "given.org"


class TestConfigLoading:
    def test_load_engine_config(self, tmp_path):
        path = tmp_path / "discovery.json"
        path.write_text(json.dumps({"diversity": {"max_per_domain": 7}}))
        assert load_engine_config(path).max_per_domain == 7
        assert load_engine_config(None) is DEFAULT_CONFIG

    def test_unreadable_engine_config(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_engine_config(path)

    def test_invalid_engine_config(self, tmp_path):
        path = tmp_path / "weights.json"
        path.write_text(json.dumps({"scoring": {"weight_quality": 0.9}}))
        with pytest.raises(ValidationError):
            load_engine_config(path)

    def test_server_config_validation(self, tmp_path):
        valid, errors = ServerConfig(data_source="json").validate()
        assert not valid
        assert errors == ["DATA_SOURCE=json requires CONTENT_JSON_PATH"]
        valid, errors = ServerConfig(data_source="supabase").validate()
        assert not valid
        assert ServerConfig().validate() == (True, [])

    def test_server_config_from_env(self, monkeypatch):
        monkeypatch.setenv("DATA_SOURCE", "bogus")
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        config = ServerConfig.from_env()
        assert config.data_source == "memory"
        assert config.request_timeout_seconds == 2.5
        assert config.log_level == "DEBUG"

    def test_json_catalog(self, tmp_path, catalog):
        path = tmp_path / "content.json"
        path.write_text(json.dumps({"content": catalog[:3], "domain_reputation": {"alpha.com": 0.9}}))
        store = InMemoryDiscoveryStore.from_json_file(path)
        rows = asyncio.run(store.fetch_candidates([], [], 10))
        assert len(rows) == 3
        assert asyncio.run(store.fetch_domain_reputations(["alpha.com", "beta.org"])) == {"alpha.com": 0.9}
