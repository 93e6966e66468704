import pytest

from movie_tracker.utils.cache import CachePolicy, CacheStore, POLICIES, make_key


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def store(clock):
    return CacheStore(max_size=3, clock=clock)


def test_policies_have_ordered_windows():
    for policy in POLICIES.values():
        assert policy.stale <= policy.revalidate <= policy.expire

    assert (POLICIES["trending"].stale, POLICIES["trending"].revalidate, POLICIES["trending"].expire) == (3600, 7200, 86400)
    assert (POLICIES["movie"].stale, POLICIES["movie"].revalidate, POLICIES["movie"].expire) == (86400, 172800, 604800)
    assert (POLICIES["search"].stale, POLICIES["search"].revalidate, POLICIES["search"].expire) == (300, 600, 3600)
    assert (POLICIES["genres"].stale, POLICIES["genres"].revalidate, POLICIES["genres"].expire) == (86400, 604800, 2592000)


def test_policy_rejects_unordered_windows():
    with pytest.raises(ValueError):
        CachePolicy("broken", stale=100, revalidate=50, expire=200)


def test_cache_control_header():
    assert POLICIES["search"].cache_control() == (
        "public, max-age=300, s-maxage=600, stale-while-revalidate=3000"
    )


def test_make_key_depends_on_every_parameter():
    base = make_key("get_popular", "en", 1, [])
    assert base == make_key("get_popular", "en", 1, [])
    assert base != make_key("get_popular", "es", 1, [])
    assert base != make_key("get_popular", "en", 2, [])
    assert base != make_key("get_top_rated", "en", 1, [])
    assert make_key("search_movies", "en", 1, [("query", "batman")]) != make_key(
        "search_movies", "en", 1, [("query", "dune")]
    )


def test_make_key_ignores_param_order():
    assert make_key("discover_movies", "en", 1, [("year", 2023), ("sort_by", "title.asc")]) == make_key(
        "discover_movies", "en", 1, [("sort_by", "title.asc"), ("year", 2023)]
    )


def test_entry_goes_fresh_then_stale_then_expired(store, clock):
    policy = POLICIES["search"]
    store.set("k", {"v": 1}, policy)

    clock.now = policy.stale - 1
    assert store.get("k") == {"v": 1}

    clock.now = policy.stale
    entry = store.get_entry("k")
    assert entry is not None
    assert not entry.is_fresh(clock.now)
    assert store.get("k") is None

    clock.now = policy.expire
    assert store.get_entry("k") is None
    assert len(store) == 0


def test_lru_eviction(store):
    policy = POLICIES["movie"]
    store.set("a", 1, policy)
    store.set("b", 2, policy)
    store.set("c", 3, policy)

    # Touch "a" so "b" becomes the least recently used
    assert store.get("a") == 1
    store.set("d", 4, policy)

    assert store.get("b") is None
    assert store.get("a") == 1
    assert store.get_stats()["evictions"] == 1


def test_invalidate_tag_only_removes_tagged_entries(store):
    policy = POLICIES["movie"]
    store.set("details", {}, policy, tags=("movie-550",))
    store.set("credits", {}, policy, tags=("movie-550", "movie-550-credits"))
    store.set("other", {}, policy, tags=("movie-13",))

    assert store.invalidate_tag("movie-550") == 2
    assert store.get("details") is None
    assert store.get("credits") is None
    assert store.get("other") == {}


def test_stats_count_hits_and_misses(store):
    store.set("k", 1, POLICIES["trending"])
    store.get("k")
    store.get("missing")

    stats = store.get_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["size"] == 1
    assert "trending" in stats["policies"]

    store.clear()
    assert store.get_stats()["hits"] == 0
    assert len(store) == 0


class RecordingLock:
    def __init__(self):
        self.acquired = 0

    def __enter__(self):
        self.acquired += 1
        return self

    def __exit__(self, *exc):
        return False


def test_stats_and_len_read_under_lock(store):
    store.set("k", 1, POLICIES["trending"])
    store._lock = RecordingLock()

    assert len(store) == 1
    assert store.get_stats()["size"] == 1
    assert store._lock.acquired == 2
