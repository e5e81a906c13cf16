import time

import pytest

from cryptoquote.infrastructure.cache import TTLCache

T = 30_000


@pytest.fixture
def cache(clock) -> TTLCache:
    return TTLCache(T, clock=clock)


@pytest.mark.parametrize("ttl", [0, -1, -30_000])
def test_non_positive_ttl_is_rejected(ttl):
    with pytest.raises(ValueError):
        TTLCache(ttl)


@pytest.mark.parametrize("ttl", [1.5, "30000", None, True])
def test_non_integer_ttl_is_rejected(ttl):
    with pytest.raises(TypeError):
        TTLCache(ttl)


def test_ttl_is_exposed_read_only(cache: TTLCache):
    assert cache.ttl_ms == T
    with pytest.raises(AttributeError):
        cache.ttl_ms = 1


def test_get_returns_value_right_after_set(cache: TTLCache):
    value = {"bitcoin": {"usd": 1.0}}
    cache.set("k", value)
    assert cache.get("k") is value


def test_get_on_unknown_key_is_a_miss(cache: TTLCache):
    assert cache.get("never-written") is None
    assert cache.get("") is None


def test_entry_is_present_just_before_expiry_and_gone_after(cache: TTLCache, clock):
    cache.set("k", "v")
    clock.advance_ms(T - 1)
    assert cache.get("k") == "v"
    clock.advance_ms(2)
    assert cache.get("k") is None


def test_entry_expires_exactly_at_ttl(cache: TTLCache, clock):
    cache.set("k", "v")
    clock.advance_ms(T)
    assert cache.get("k") is None


def test_overwrite_resets_value_and_expiry(cache: TTLCache, clock):
    cache.set("k", "v1")
    clock.advance_ms(T / 2)
    cache.set("k", "v2")
    clock.advance_ms(T / 2 + T / 4)  # t0 + 1.25T
    assert cache.get("k") == "v2"


def test_overwrite_with_read_in_between_at_boundary(cache: TTLCache, clock):
    cache.set("k", "v1")
    clock.advance_ms(T - 1)
    assert cache.get("k") == "v1"
    cache.set("k", "v2")
    # One ms past the first write's expiry: the second write keeps it alive.
    clock.advance_ms(2)
    assert cache.get("k") == "v2"
    clock.advance_ms(T)
    assert cache.get("k") is None


def test_set_after_expiry_revives_the_key(cache: TTLCache, clock):
    cache.set("k", "old")
    clock.advance_ms(T + 1)
    cache.set("k", "new")
    assert cache.get("k") == "new"


def test_repeated_reads_after_expiry_are_misses(cache: TTLCache, clock):
    cache.set("k", "v")
    clock.advance_ms(T + 1)
    assert cache.get("k") is None
    assert cache.get("k") is None


def test_expired_entry_is_removed_lazily_on_read(cache: TTLCache, clock):
    cache.set("a", 1)
    cache.set("b", 2)
    clock.advance_ms(T + 1)
    assert len(cache) == 2  # nothing sweeps in the background
    assert cache.get("a") is None
    assert len(cache) == 1


def test_keys_expire_independently(cache: TTLCache, clock):
    cache.set("a", 1)
    clock.advance_ms(T / 2)
    cache.set("b", 2)
    clock.advance_ms(T / 2)
    assert cache.get("a") is None
    assert cache.get("b") == 2


def test_falsy_values_are_still_hits(cache: TTLCache):
    cache.set("empty-list", [])
    cache.set("zero", 0)
    assert cache.get("empty-list") == []
    assert cache.get("zero") == 0


def test_spot_price_scenario(clock):
    cache = TTLCache(30_000, clock=clock)
    prices = {"btc": {"usd": 50000}, "eth": {"usd": 3000}}
    cache.set("btc,eth", prices)
    clock.advance_ms(10_000)
    assert cache.get("btc,eth") == prices
    clock.advance_ms(21_000)
    assert cache.get("btc,eth") is None


def test_history_scenario(clock):
    cache = TTLCache(300_000, clock=clock)
    series = [[i * 86_400_000, 100.0 + i] for i in range(1, 8)]
    cache.set("bitcoin:7", series)
    got = cache.get("bitcoin:7")
    assert got == series
    assert len(got) == 7


def test_default_clock_expires_entries_in_real_time():
    cache = TTLCache(1)
    cache.set("a", 1)
    time.sleep(0.01)
    assert cache.get("a") is None

    cache = TTLCache(60_000)
    cache.set("a", 1)
    assert cache.get("a") == 1
