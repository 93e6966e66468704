from movie_tracker.main import app
from movie_tracker.models.view_history import ViewHistory
from movie_tracker.utils.cache import POLICIES
from movie_tracker.utils.dependencies import get_tmdb_service


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "healthy"

    health = client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["upstream"] == "mock"


def test_trending_serves_mock_with_cache_headers(client):
    response = client.get("/api/movies/trending/week")

    assert response.status_code == 200
    assert [movie["id"] for movie in response.json()["results"]] == [1, 2, 3, 4, 5]
    assert response.headers["cache-control"] == POLICIES["trending"].cache_control()


def test_invalid_time_window(client):
    assert client.get("/api/movies/trending/month").status_code == 422


def test_list_endpoints(client):
    for path in ("popular", "top-rated", "now-playing", "upcoming"):
        response = client.get(f"/api/movies/{path}")
        assert response.status_code == 200, path
        assert response.json()["results"], path


def test_browse_categories(client):
    default = client.get("/api/movies/browse").json()
    trending = client.get("/api/movies/browse?category=trending").json()

    assert [m["id"] for m in default["results"]] == [6, 7, 8, 9, 10]
    assert [m["id"] for m in trending["results"]] == [1, 2, 3, 4, 5]
    assert client.get("/api/movies/browse?category=unknown").status_code == 422


def test_search(client):
    response = client.get("/api/movies/search?query=batman")

    assert response.status_code == 200
    assert [movie["title"] for movie in response.json()["results"]] == ["The Batman"]
    assert response.headers["cache-control"] == POLICIES["search"].cache_control()


def test_empty_search(client):
    response = client.get("/api/movies/search")
    assert response.json() == {"page": 1, "results": [], "total_pages": 0, "total_results": 0}


def test_search_rejects_script(client):
    assert client.get("/api/movies/search", params={"query": "<script>x</script>"}).status_code == 422


def test_discover(client):
    response = client.get("/api/movies/discover?genre=28,12&sort_by=vote_average.desc")

    assert response.status_code == 200
    assert [m["id"] for m in response.json()["results"]] == [3, 9, 5]
    assert client.get("/api/movies/discover?genre=action").status_code == 422


def test_genres(client):
    response = client.get("/api/movies/genres?locale=es")

    assert response.status_code == 200
    assert {"id": 28, "name": "Action"} in response.json()["genres"]
    assert response.headers["cache-control"] == POLICIES["genres"].cache_control()


def test_unsupported_locale_falls_back(client, fake_session, service_factory):
    live = service_factory(session=fake_session)
    app.dependency_overrides[get_tmdb_service] = lambda: live

    client.get("/api/movies/popular?locale=de")
    client.get("/api/movies/popular?locale=ca")

    assert [call["params"]["language"] for call in fake_session.calls] == ["en", "ca"]


def test_movie_details_anonymous(client, db_session):
    response = client.get("/api/movies/6")

    assert response.status_code == 200
    assert response.json()["title"] == "Oppenheimer"
    assert response.headers["cache-control"] == POLICIES["movie"].cache_control()
    assert db_session.query(ViewHistory).count() == 0


def test_movie_details_records_view_history(client, auth_headers, test_user, db_session):
    response = client.get("/api/movies/2", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["cache-control"] == "private, no-store"

    rows = db_session.query(ViewHistory).filter(ViewHistory.user_id == test_user.id).all()
    assert len(rows) == 1
    assert rows[0].movie_id == 2
    assert rows[0].title == "The Batman"


def test_credits_recommendations_similar(client):
    credits = client.get("/api/movies/2/credits")
    recommendations = client.get("/api/movies/2/recommendations")
    similar = client.get("/api/movies/2/similar")

    assert credits.json()["cast"] == []
    assert recommendations.status_code == 200
    assert 2 not in [m["id"] for m in similar.json()["results"]]


def test_invalid_movie_id(client):
    assert client.get("/api/movies/0").status_code == 422


def test_security_headers(client):
    response = client.get("/")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert "content-security-policy" in response.headers


def test_unknown_movie_fallback_is_not_recorded(client, auth_headers, test_user, db_session):
    response = client.get("/api/movies/987654", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["id"] != 987654
    assert client.get("/api/history/", headers=auth_headers).json() == []
    assert db_session.query(ViewHistory).filter(ViewHistory.user_id == test_user.id).count() == 0


def test_empty_details_payload_is_not_recorded(client, auth_headers, db_session, service_factory):
    def failing_provider(request):
        raise RuntimeError("mock data unavailable")

    app.dependency_overrides[get_tmdb_service] = lambda: service_factory(token="", mock_provider=failing_provider)

    response = client.get("/api/movies/2", headers=auth_headers)

    assert response.json() == {"id": 2}
    assert db_session.query(ViewHistory).count() == 0
