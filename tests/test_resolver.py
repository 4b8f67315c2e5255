"""Tests for Farcaster user data resolution and the profile caches."""

import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from app.schemas.user import UserProfile
from app.services.farcaster import (
    ErrorKind,
    MemoryProfileCache,
    RedisProfileCache,
    ResolutionError,
    parse_identifier,
)
from app.services.farcaster.resolver import Transfer, earliest_transfer

from conftest import JAN_15_2021, social_payload


def resolve(resolver, identifier):
    return asyncio.run(resolver.resolve(identifier))


class TestParseIdentifier:
    @pytest.mark.parametrize(("value", "expected"), [(1, 1), (500, 500), ("42", 42), (" 7 ", 7)])
    def test_accepts_positive_integers(self, value, expected: int):
        assert parse_identifier(value) == expected

    @pytest.mark.parametrize("value", [None, 0, -3, "0", "", "abc", "12a", "-5", 1.5, True, [1]])
    def test_rejects_everything_else(self, value):
        with pytest.raises(ResolutionError) as exc_info:
            parse_identifier(value)
        assert exc_info.value.kind == ErrorKind.INVALID_IDENTIFIER


class TestEarliestTransfer:
    def test_selects_minimum_not_first(self):
        transfers = [Transfer(300, "c"), Transfer(100, "a"), Transfer(200, "b")]
        assert earliest_transfer(transfers) == Transfer(100, "a")

    def test_empty_is_none(self):
        assert earliest_transfer([]) is None


class TestResolve:
    """Merging the social graph and the fname registry."""

    def test_resolves_profile_from_both_sources(self, make_resolver, upstream):
        profile = resolve(make_resolver(), 500)

        assert profile.fid == 500
        assert profile.created_at == datetime(2021, 1, 15, tzinfo=timezone.utc)
        assert profile.display_name == "Alice"
        assert profile.username == "alice"
        assert profile.profile_image == "https://img.example/alice.png"

        registry_call = upstream.calls_to("fnames.example")[0]
        assert registry_call.url.params["fid"] == "500"
        airstack_call = upstream.calls_to("airstack.example")[0]
        assert airstack_call.headers["Authorization"] == "test-key"
        assert upstream.graphql_variables() == [{"fid": "500"}]

    def test_out_of_order_transfers_use_earliest(self, make_resolver, upstream):
        upstream.transfers = {
            "transfers": [
                {"timestamp": JAN_15_2021 + 86400 * 30, "username": "renamed"},
                {"timestamp": JAN_15_2021, "username": "original"},
                {"timestamp": JAN_15_2021 + 86400, "username": "second"},
            ]
        }
        profile = resolve(make_resolver(), "500")
        assert profile.created_at == datetime(2021, 1, 15, tzinfo=timezone.utc)

    def test_no_transfers_is_user_not_found(self, make_resolver, upstream):
        upstream.transfers = {"transfers": []}
        with pytest.raises(ResolutionError) as exc_info:
            resolve(make_resolver(), 500)
        assert exc_info.value.kind == ErrorKind.USER_NOT_FOUND

    def test_missing_transfers_key_is_user_not_found(self, make_resolver, upstream):
        upstream.transfers = {}
        with pytest.raises(ResolutionError) as exc_info:
            resolve(make_resolver(), 500)
        assert exc_info.value.kind == ErrorKind.USER_NOT_FOUND

    def test_invalid_identifier_makes_no_upstream_calls(self, make_resolver, upstream):
        with pytest.raises(ResolutionError) as exc_info:
            resolve(make_resolver(), "not-a-fid")
        assert exc_info.value.kind == ErrorKind.INVALID_IDENTIFIER
        assert upstream.requests == []

    def test_social_failure_still_yields_profile(self, make_resolver, upstream):
        upstream.social = httpx.ConnectError("airstack down")
        profile = resolve(make_resolver(), 500)

        assert profile.created_at == datetime(2021, 1, 15, tzinfo=timezone.utc)
        assert profile.display_name is None
        # username falls back to the registry's earliest transfer
        assert profile.username == "alice"

    def test_social_error_status_is_not_fatal(self, make_resolver, upstream):
        upstream.social = httpx.Response(500, json={"message": "boom"})
        profile = resolve(make_resolver(), 500)
        assert profile.display_name is None

    def test_social_graphql_errors_are_not_fatal(self, make_resolver, upstream):
        upstream.social = {"data": None, "errors": [{"message": "bad query"}]}
        profile = resolve(make_resolver(), 500)
        assert profile.display_name is None

    def test_social_without_match_is_not_fatal(self, make_resolver, upstream):
        upstream.social = {"data": {"Socials": {"Social": None}}}
        profile = resolve(make_resolver(), 500)
        assert profile.display_name is None

    def test_display_name_falls_back_to_username(self, make_resolver, upstream):
        upstream.social = social_payload(display_name=None)
        profile = resolve(make_resolver(), 500)
        assert profile.display_name == "alice"

    def test_missing_api_key_skips_social_lookup(self, make_resolver, upstream, settings):
        keyless = settings.model_copy(update={"AIRSTACK_API_KEY": ""})
        profile = resolve(make_resolver(resolver_settings=keyless), 500)

        assert profile.display_name is None
        assert upstream.calls_to("airstack.example") == []

    @pytest.mark.parametrize(
        "failure",
        [
            httpx.ConnectError("registry down"),
            httpx.ReadTimeout("registry slow"),
            httpx.Response(503, text="unavailable"),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json=["unexpected", "list"]),
        ],
    )
    def test_registry_failure_is_upstream_unavailable(self, make_resolver, upstream, failure):
        upstream.transfers = failure
        with pytest.raises(ResolutionError) as exc_info:
            resolve(make_resolver(), 500)
        assert exc_info.value.kind == ErrorKind.UPSTREAM_UNAVAILABLE

    def test_transfers_without_timestamps_are_skipped(self, make_resolver, upstream):
        upstream.transfers = {"transfers": [{"username": "ghost"}, {"timestamp": JAN_15_2021}]}
        profile = resolve(make_resolver(), 500)
        assert profile.created_at == datetime(2021, 1, 15, tzinfo=timezone.utc)


class TestResolveWithCache:
    def test_cache_hit_skips_upstream(self, make_resolver, upstream):
        resolver = make_resolver(cache=MemoryProfileCache(ttl_seconds=60))

        first = resolve(resolver, 500)
        request_count = len(upstream.requests)
        second = resolve(resolver, 500)

        assert second == first
        assert len(upstream.requests) == request_count

    def test_clear_forces_fresh_lookup(self, make_resolver, upstream):
        resolver = make_resolver(cache=MemoryProfileCache(ttl_seconds=60))

        resolve(resolver, 500)
        asyncio.run(resolver.clear_cache(500))
        upstream.transfers = {"transfers": [{"timestamp": JAN_15_2021 - 86400}]}
        profile = resolve(resolver, 500)

        assert profile.created_at == datetime(2021, 1, 14, tzinfo=timezone.utc)

    def test_failures_are_not_cached(self, make_resolver, upstream):
        cache = MemoryProfileCache(ttl_seconds=60)
        resolver = make_resolver(cache=cache)
        upstream.transfers = {"transfers": []}

        with pytest.raises(ResolutionError):
            resolve(resolver, 500)
        assert asyncio.run(cache.get(500)) is None


class TestMemoryProfileCache:
    def test_entries_expire_after_ttl(self):
        cache = MemoryProfileCache(ttl_seconds=0)
        asyncio.run(cache.set(UserProfile(fid=1)))
        assert asyncio.run(cache.get(1)) is None

    def test_clear_all(self):
        cache = MemoryProfileCache(ttl_seconds=60)
        asyncio.run(cache.set(UserProfile(fid=1)))
        asyncio.run(cache.set(UserProfile(fid=2)))

        asyncio.run(cache.clear())

        assert asyncio.run(cache.get(1)) is None
        assert asyncio.run(cache.get(2)) is None

    def test_clear_single_entry(self):
        cache = MemoryProfileCache(ttl_seconds=60)
        asyncio.run(cache.set(UserProfile(fid=1)))
        asyncio.run(cache.set(UserProfile(fid=2)))

        asyncio.run(cache.clear(1))

        assert asyncio.run(cache.get(1)) is None
        assert asyncio.run(cache.get(2)) == UserProfile(fid=2)


class FakeRedis:
    """Minimal async stand-in for the Upstash client."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.expiry: dict[str, int] = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.expiry[key] = ex

    async def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)

    async def scan(self, cursor, match=None):
        prefix = match.rstrip("*") if match else ""
        return 0, [key for key in self.store if key.startswith(prefix)]


class TestRedisProfileCache:
    def test_round_trips_profile_with_ttl(self):
        redis = FakeRedis()
        cache = RedisProfileCache(redis, ttl_seconds=120)
        profile = UserProfile(fid=7, created_at=datetime(2021, 1, 15, tzinfo=timezone.utc))

        asyncio.run(cache.set(profile))

        assert redis.expiry["fc-anniversary:profile:7"] == 120
        assert asyncio.run(cache.get(7)) == profile

    def test_malformed_entry_is_discarded(self):
        redis = FakeRedis()
        redis.store["fc-anniversary:profile:7"] = "{not json"
        cache = RedisProfileCache(redis)

        assert asyncio.run(cache.get(7)) is None
        assert "fc-anniversary:profile:7" not in redis.store

    def test_clear_all_only_touches_profile_keys(self):
        redis = FakeRedis()
        redis.store["other:key"] = "keep"
        cache = RedisProfileCache(redis)
        asyncio.run(cache.set(UserProfile(fid=1)))
        asyncio.run(cache.set(UserProfile(fid=2)))

        asyncio.run(cache.clear())

        assert redis.store == {"other:key": "keep"}


class UnavailableCache:
    """Cache whose backend is unreachable."""

    async def get(self, fid):
        raise ConnectionError("cache unreachable")

    async def set(self, profile):
        raise ConnectionError("cache unreachable")

    async def clear(self, fid=None):
        raise ConnectionError("cache unreachable")


class TestUnavailableCache:
    """Cache failures never fail a resolution."""

    def test_resolves_upstream_when_cache_is_down(self, make_resolver, upstream):
        profile = resolve(make_resolver(cache=UnavailableCache()), 500)

        assert profile.created_at == datetime(2021, 1, 15, tzinfo=timezone.utc)
        assert upstream.calls_to("fnames.example")

    def test_clear_is_ignored_when_cache_is_down(self, make_resolver):
        resolver = make_resolver(cache=UnavailableCache())
        asyncio.run(resolver.clear_cache(500))


class TestMalformedUpstreamFields:
    def test_non_string_registry_username_is_dropped(self, make_resolver, upstream, settings):
        keyless = settings.model_copy(update={"AIRSTACK_API_KEY": ""})
        upstream.transfers = {"transfers": [{"timestamp": JAN_15_2021, "username": 123}]}

        profile = resolve(make_resolver(resolver_settings=keyless), 500)

        assert profile.created_at == datetime(2021, 1, 15, tzinfo=timezone.utc)
        assert profile.username is None

    def test_non_string_social_fields_are_dropped(self, make_resolver, upstream):
        upstream.social = social_payload(username=42, display_name=["Alice"], profile_image={"url": "x"})
        upstream.transfers = {"transfers": [{"timestamp": JAN_15_2021, "username": "alice"}]}

        profile = resolve(make_resolver(), 500)

        assert profile.username == "alice"
        assert profile.display_name == "alice"
        assert profile.profile_image is None


class TestResolutionFailureLogging:
    def test_registry_failure_is_left_to_callers_to_log(self, make_resolver, upstream, caplog):
        upstream.transfers = httpx.ConnectError("registry down")

        with caplog.at_level("DEBUG", logger="app.services.farcaster.resolver"):
            with pytest.raises(ResolutionError):
                resolve(make_resolver(), 500)

        resolver_warnings = [
            r for r in caplog.records
            if r.name == "app.services.farcaster.resolver" and r.levelname in ("WARNING", "ERROR")
        ]
        assert resolver_warnings == []
