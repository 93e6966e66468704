from movie_tracker.models.watchlist import WatchlistItem

MOVIE = {"movie_id": 550, "title": "Fight Club", "poster_path": "/fc.jpg", "vote_average": 8.4}


def test_add_check_remove(client, auth_headers):
    added = client.post("/api/watchlist/", json=MOVIE, headers=auth_headers)
    assert added.status_code == 201
    assert added.json() == {"success": True, "error": None}

    check = client.get("/api/watchlist/check/550", headers=auth_headers)
    assert check.json() == {"movie_id": 550, "in_watchlist": True}

    removed = client.delete("/api/watchlist/550", headers=auth_headers)
    assert removed.status_code == 200
    assert removed.json()["success"] is True

    check = client.get("/api/watchlist/check/550", headers=auth_headers)
    assert check.json()["in_watchlist"] is False


def test_duplicate_add_conflicts_and_keeps_one_row(client, auth_headers, db_session):
    client.post("/api/watchlist/", json=MOVIE, headers=auth_headers)
    response = client.post("/api/watchlist/", json=MOVIE, headers=auth_headers)

    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "Movie already in watchlist"}
    assert db_session.query(WatchlistItem).filter(WatchlistItem.movie_id == 550).count() == 1


def test_anonymous_add_is_rejected(client, db_session):
    response = client.post("/api/watchlist/", json=MOVIE)

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Please login to add movies to your watchlist"}
    assert db_session.query(WatchlistItem).count() == 0


def test_anonymous_check_is_false(client):
    response = client.get("/api/watchlist/check/550")

    assert response.status_code == 200
    assert response.json()["in_watchlist"] is False


def test_anonymous_remove_is_rejected(client):
    response = client.delete("/api/watchlist/550")

    assert response.status_code == 401
    assert response.json()["error"] == "Please login first"


def test_remove_missing_movie(client, auth_headers):
    response = client.delete("/api/watchlist/13", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Movie not in watchlist"


def test_list_is_newest_first(client, auth_headers, test_user):
    client.post("/api/watchlist/", json=MOVIE, headers=auth_headers)
    client.post("/api/watchlist/", json=dict(MOVIE, movie_id=13, title="Forrest Gump"), headers=auth_headers)

    response = client.get("/api/watchlist/", headers=auth_headers)

    assert response.status_code == 200
    items = response.json()
    assert [item["movie_id"] for item in items] == [13, 550]
    assert items[0]["user_id"] == test_user.id
    assert items[1]["title"] == "Fight Club"


def test_list_requires_login(client):
    assert client.get("/api/watchlist/").status_code == 401


def test_add_validates_payload(client, auth_headers):
    assert client.post("/api/watchlist/", json=dict(MOVIE, movie_id=0), headers=auth_headers).status_code == 422
    assert client.post("/api/watchlist/", json=dict(MOVIE, vote_average=11), headers=auth_headers).status_code == 422


def test_title_is_sanitized(client, auth_headers, db_session):
    client.post("/api/watchlist/", json=dict(MOVIE, title="<span>Fight</span> Club"), headers=auth_headers)

    item = db_session.query(WatchlistItem).first()
    assert item.title == "Fight Club"


def test_script_in_title_is_rejected(client, auth_headers):
    response = client.post("/api/watchlist/", json=dict(MOVIE, title="<script>alert(1)</script>"), headers=auth_headers)
    assert response.status_code == 422
