import pytest

from movie_tracker.services.metadata import Endpoint, MetadataRequest
from movie_tracker.services.mock_data import mock_for
from movie_tracker.services.tmdb_service import TMDBService
from movie_tracker.utils.cache import POLICIES

LIVE_PAGE = {"page": 1, "results": [{"id": 550, "title": "Fight Club"}], "total_pages": 1, "total_results": 1}


def test_operations_are_bound_to_policies():
    assert TMDBService.get_trending.policy is POLICIES["trending"]
    assert TMDBService.get_popular.policy is POLICIES["trending"]
    assert TMDBService.search_movies.policy is POLICIES["search"]
    assert TMDBService.discover_movies.policy is POLICIES["search"]
    assert TMDBService.get_movie_details.policy is POLICIES["movie"]
    assert TMDBService.get_similar_movies.policy is POLICIES["movie"]
    assert TMDBService.get_genres.policy is POLICIES["genres"]


def test_fresh_hit_makes_one_upstream_call(service_factory, fake_session, fake_clock, make_response):
    fake_session.queue(make_response(200, LIVE_PAGE))
    service = service_factory(session=fake_session, clock=fake_clock)

    first = service.get_popular("en", 1)
    fake_clock.advance(POLICIES["trending"].stale - 1)
    second = service.get_popular("en", 1)

    assert first == second == LIVE_PAGE
    assert len(fake_session.calls) == 1


def test_cached_value_is_not_shared_with_callers(service_factory, fake_session, make_response):
    fake_session.queue(make_response(200, LIVE_PAGE))
    service = service_factory(session=fake_session)

    first = service.get_popular()
    first["results"].clear()

    assert service.get_popular()["results"] == LIVE_PAGE["results"]


def test_stale_entry_is_refetched(service_factory, fake_session, fake_clock, make_response):
    newer = dict(LIVE_PAGE, total_results=2)
    fake_session.queue(make_response(200, LIVE_PAGE))
    fake_session.queue(make_response(200, newer))
    service = service_factory(session=fake_session, clock=fake_clock)

    service.get_genres("en")
    fake_clock.advance(POLICIES["genres"].stale)
    assert service.get_genres("en") == newer
    assert len(fake_session.calls) == 2


def test_different_parameters_use_different_entries(service_factory, fake_session):
    service = service_factory(session=fake_session)

    service.get_popular("en", 1)
    service.get_popular("es", 1)
    service.get_popular("en", 2)
    service.get_popular("en", 1)

    assert len(fake_session.calls) == 3


def test_upstream_request_shape(service_factory, fake_session):
    service = service_factory(session=fake_session)

    service.search_movies("  batman ", "es", 2)
    service.get_trending("ca", "day")

    search_call, trending_call = fake_session.calls
    assert search_call["url"].endswith("/search/movie")
    assert search_call["params"] == {"language": "es", "page": "2", "query": "batman", "include_adult": "false"}
    assert trending_call["url"].endswith("/trending/movie/day")
    assert trending_call["params"]["language"] == "ca"


def test_placeholder_credential_serves_mock_for_every_operation(tmdb_service, fake_session):
    results = [
        tmdb_service.get_trending("en", "week"),
        tmdb_service.get_popular(),
        tmdb_service.get_top_rated(),
        tmdb_service.get_now_playing(),
        tmdb_service.get_upcoming(),
        tmdb_service.search_movies("batman"),
        tmdb_service.discover_movies(year=2023),
        tmdb_service.get_movie_details(2),
        tmdb_service.get_movie_credits(2),
        tmdb_service.get_movie_recommendations(2),
        tmdb_service.get_similar_movies(2),
        tmdb_service.get_genres(),
    ]

    assert all(isinstance(result, dict) for result in results)
    assert results[5]["results"][0]["title"] == "The Batman"
    assert results[7]["id"] == 2
    assert len(results[11]["genres"]) == 19
    assert fake_session.calls == []
    assert not tmdb_service.is_live


def test_mock_data_is_never_cached(tmdb_service):
    tmdb_service.get_popular()
    tmdb_service.get_popular()

    stats = tmdb_service.cache_stats()
    assert stats["size"] == 0
    assert stats["upstream"] == "mock"


@pytest.mark.parametrize("status_code", [401, 500])
def test_http_failures_fall_back_to_mock(service_factory, fake_session, make_response, status_code):
    fake_session.queue(make_response(status_code, {}, reason="error"))
    service = service_factory(session=fake_session)

    result = service.get_popular("en", 1)

    assert result == mock_for(MetadataRequest.build(Endpoint.POPULAR, "en", 1))
    assert service.cache_stats()["size"] == 0


def test_network_failure_falls_back_to_mock(service_factory, fake_session, network_error):
    fake_session.error = network_error
    service = service_factory(session=fake_session)

    result = service.search_movies("batman")

    assert [movie["id"] for movie in result["results"]] == [2]


def test_failing_mock_provider_serves_stale_entry(service_factory, fake_session, fake_clock, make_response, network_error):
    def broken_mock(request):
        raise RuntimeError("mock dataset unavailable")

    fake_session.queue(make_response(200, LIVE_PAGE))
    service = service_factory(session=fake_session, clock=fake_clock, mock_provider=broken_mock)

    service.get_top_rated("en", 1)
    fake_clock.advance(POLICIES["trending"].stale + 1)
    fake_session.error = network_error

    assert service.get_top_rated("en", 1) == LIVE_PAGE


def test_failing_mock_provider_without_cache_returns_empty_payload(service_factory, fake_session, network_error):
    def broken_mock(request):
        raise RuntimeError("mock dataset unavailable")

    fake_session.error = network_error
    service = service_factory(session=fake_session, mock_provider=broken_mock)

    assert service.get_popular("en", 3) == {"page": 3, "results": [], "total_pages": 0, "total_results": 0}
    assert service.get_genres() == {"genres": []}
    assert service.get_movie_credits(7) == {"id": 7, "cast": [], "crew": []}


def test_invalidate_tag_forces_refetch(service_factory, fake_session):
    service = service_factory(session=fake_session)

    service.get_movie_details(550)
    service.get_movie_credits(550)
    service.get_popular()
    assert service.invalidate("movie-550") == 2

    service.get_movie_details(550)
    service.get_popular()
    assert len(fake_session.calls) == 4


def test_clear_cache(service_factory, fake_session):
    service = service_factory(session=fake_session)
    service.get_genres()
    service.clear_cache()
    service.get_genres()

    assert len(fake_session.calls) == 2
    assert service.cache_stats()["upstream"] == "live"
