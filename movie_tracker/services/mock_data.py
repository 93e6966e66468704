"""
Mock TMDB dataset
=================
Deterministic stand-in for the TMDB API, served whenever the real API cannot
be used (no/placeholder credential, 401/403, HTTP or network failure).

mock_for() is pure: no I/O, never fails, and always returns fresh copies.
"""
from copy import deepcopy
from math import ceil
from typing import Any, Callable, Dict, List

from movie_tracker.services.metadata import Endpoint, MetadataRequest, PAGE_SIZE, empty_page

MOCK_MOVIES: List[Dict[str, Any]] = [
    {
        "id": 1,
        "title": "Dune: Part Two",
        "poster_path": "/1pdfLvkbY9ohJlCjQH2CZjjYVvJ.jpg",
        "backdrop_path": "/b0PlSFdDwbyK0cf5RxwDpaOJQvQ.jpg",
        "vote_average": 8.3,
        "release_date": "2024-02-27",
        "overview": "Paul Atreides unites with Chani and the Fremen while seeking revenge against "
                    "the conspirators who destroyed his family.",
        "genres": [{"id": 878, "name": "Science Fiction"}, {"id": 12, "name": "Adventure"}],
        "runtime": 166,
        "status": "Released",
        "budget": 190000000,
        "revenue": 714400000,
        "genre_ids": [878, 12],
    },
    {
        "id": 2,
        "title": "The Batman",
        "poster_path": "/74xTEgt7R36Fpooo50r9T25onhq.jpg",
        "backdrop_path": "/b0PlSFdDwbyK0cf5RxwDpaOJQvQ.jpg",
        "vote_average": 7.8,
        "release_date": "2022-03-01",
        "overview": "When a sadistic serial killer begins murdering key political figures in Gotham, "
                    "Batman is forced to investigate the city's hidden corruption.",
        "genres": [{"id": 80, "name": "Crime"}, {"id": 18, "name": "Drama"}],
        "runtime": 176,
        "status": "Released",
        "budget": 185000000,
        "revenue": 770836163,
        "genre_ids": [80, 18],
    },
    {
        "id": 3,
        "title": "Spider-Man: No Way Home",
        "poster_path": "/1g0dhYtq4irTY1GPXvft6k4YLjm.jpg",
        "backdrop_path": "/iQFcwSGbZXMkeyKrxbPnwnRo5fl.jpg",
        "vote_average": 8.1,
        "release_date": "2021-12-15",
        "overview": "Peter Parker is unmasked and no longer able to separate his normal life from "
                    "the high-stakes of being a super-hero.",
        "genres": [{"id": 28, "name": "Action"}, {"id": 12, "name": "Adventure"}],
        "runtime": 148,
        "status": "Released",
        "budget": 200000000,
        "revenue": 1921847111,
        "genre_ids": [28, 12],
    },
    {
        "id": 4,
        "title": "Top Gun: Maverick",
        "poster_path": "/62HCnUTziyWcpDaBO2i1DX17ljH.jpg",
        "backdrop_path": "/odJ4hx6g6vBt4lBWKFD1tI8WS4x.jpg",
        "vote_average": 8.2,
        "release_date": "2022-05-24",
        "overview": "After thirty years, Maverick is still pushing the envelope as a top naval aviator.",
        "genres": [{"id": 28, "name": "Action"}, {"id": 18, "name": "Drama"}],
        "runtime": 131,
        "status": "Released",
        "budget": 170000000,
        "revenue": 1488732821,
        "genre_ids": [28, 18],
    },
    {
        "id": 5,
        "title": "Black Panther: Wakanda Forever",
        "poster_path": "/sv1xJUazXeYqALzczSZ3O6nkH75.jpg",
        "backdrop_path": "/yYrvN5WFeGYjJnRzhY0QXuo4Isw.jpg",
        "vote_average": 7.2,
        "release_date": "2022-11-09",
        "overview": "Queen Ramonda, Shuri, M'Baku, Okoye and the Dora Milaje fight to protect their "
                    "nation from intervening world powers.",
        "genres": [{"id": 28, "name": "Action"}, {"id": 12, "name": "Adventure"}],
        "runtime": 161,
        "status": "Released",
        "budget": 250000000,
        "revenue": 828058927,
        "genre_ids": [28, 12],
    },
    {
        "id": 6,
        "title": "Oppenheimer",
        "poster_path": "/8Gxv2mEhG19m2JsCdPmI6HZwS1m.jpg",
        "backdrop_path": "/fm610VOFv9R179D7rq69vI3p29I.jpg",
        "vote_average": 8.1,
        "release_date": "2023-07-19",
        "overview": "The story of J. Robert Oppenheimer's role in the development of the atomic bomb.",
        "genres": [{"id": 18, "name": "Drama"}, {"id": 36, "name": "History"}],
        "runtime": 180,
        "status": "Released",
        "budget": 100000000,
        "revenue": 960000000,
        "genre_ids": [18, 36],
    },
    {
        "id": 7,
        "title": "Barbie",
        "poster_path": "/iuFNMSv95O9vSUEs3zrjHm0xYpB.jpg",
        "backdrop_path": "/ctM8G2o4oZ0vMWq9zcyuRLoqSIa.jpg",
        "vote_average": 7.2,
        "release_date": "2023-07-19",
        "overview": "Barbie and Ken are having the time of their lives in the colorful and seemingly "
                    "perfect world of Barbie Land.",
        "genres": [{"id": 35, "name": "Comedy"}, {"id": 12, "name": "Adventure"}, {"id": 14, "name": "Fantasy"}],
        "runtime": 114,
        "status": "Released",
        "budget": 145000000,
        "revenue": 1445638421,
        "genre_ids": [35, 12, 14],
    },
    {
        "id": 8,
        "title": "The Super Mario Bros. Movie",
        "poster_path": "/qNBAXBIQlnOzb6Uhw68Bqef7SUI.jpg",
        "backdrop_path": "/9n2tI3uW7vMvz70QYMvH1uLpSg8.jpg",
        "vote_average": 7.8,
        "release_date": "2023-04-05",
        "overview": "While working underground to fix a water main, Brooklyn plumbers and brothers "
                    "Mario and Luigi are transported down a mysterious pipe and wander into a "
                    "magical new world.",
        "genres": [
            {"id": 16, "name": "Animation"},
            {"id": 10751, "name": "Family"},
            {"id": 12, "name": "Adventure"},
            {"id": 14, "name": "Fantasy"},
            {"id": 35, "name": "Comedy"},
        ],
        "runtime": 92,
        "status": "Released",
        "budget": 100000000,
        "revenue": 1361975039,
        "genre_ids": [16, 10751, 12, 14, 35],
    },
    {
        "id": 9,
        "title": "Guardians of the Galaxy Vol. 3",
        "poster_path": "/r2J02Z2OpNT4NNm1pYybYnL3Obr.jpg",
        "backdrop_path": "/5YZbUmjbMa39vS9z9Pk39Uv365L.jpg",
        "vote_average": 8.0,
        "release_date": "2023-05-03",
        "overview": "Peter Quill, still reeling from the loss of Gamora, must rally his team around "
                    "him to defend the universe along with protecting one of their own.",
        "genres": [{"id": 878, "name": "Science Fiction"}, {"id": 12, "name": "Adventure"}, {"id": 28, "name": "Action"}],
        "runtime": 150,
        "status": "Released",
        "budget": 250000000,
        "revenue": 845555777,
        "genre_ids": [878, 12, 28],
    },
    {
        "id": 10,
        "title": "John Wick: Chapter 4",
        "poster_path": "/vZloYm7pZ7QrETv3tvySBUpxQSJ.jpg",
        "backdrop_path": "/h8gH9u7vF9jS0eUqPT8fsWp8Z1I.jpg",
        "vote_average": 7.8,
        "release_date": "2023-03-22",
        "overview": "With the price on his head ever increasing, John Wick uncovers a path to "
                    "defeating The High Table.",
        "genres": [{"id": 28, "name": "Action"}, {"id": 53, "name": "Thriller"}, {"id": 80, "name": "Crime"}],
        "runtime": 169,
        "status": "Released",
        "budget": 100000000,
        "revenue": 440146694,
        "genre_ids": [28, 53, 80],
    },
]

MOCK_GENRES: List[Dict[str, Any]] = [
    {"id": 28, "name": "Action"},
    {"id": 12, "name": "Adventure"},
    {"id": 16, "name": "Animation"},
    {"id": 35, "name": "Comedy"},
    {"id": 80, "name": "Crime"},
    {"id": 99, "name": "Documentary"},
    {"id": 18, "name": "Drama"},
    {"id": 10751, "name": "Family"},
    {"id": 14, "name": "Fantasy"},
    {"id": 36, "name": "History"},
    {"id": 27, "name": "Horror"},
    {"id": 10402, "name": "Music"},
    {"id": 9648, "name": "Mystery"},
    {"id": 10749, "name": "Romance"},
    {"id": 878, "name": "Science Fiction"},
    {"id": 10770, "name": "TV Movie"},
    {"id": 53, "name": "Thriller"},
    {"id": 10752, "name": "War"},
    {"id": 37, "name": "Western"},
]

# Fixed slices of MOCK_MOVIES per list endpoint
MOCK_LISTS = {
    Endpoint.TRENDING: slice(0, 5),
    Endpoint.POPULAR: slice(5, 10),
    Endpoint.TOP_RATED: slice(3, 8),
    Endpoint.NOW_PLAYING: slice(2, 7),
    Endpoint.UPCOMING: slice(6, 10),
}

# Discover sort fields the mock dataset carries
SORTABLE_FIELDS = {"vote_average", "release_date", "title", "revenue"}


def paginate(movies: List[Dict[str, Any]], page: int) -> Dict[str, Any]:
    """Build a TMDB-style page out of an in-memory list"""
    page = max(1, page)
    start = (page - 1) * PAGE_SIZE
    return {
        "page": page,
        "results": deepcopy(movies[start:start + PAGE_SIZE]),
        "total_pages": ceil(len(movies) / PAGE_SIZE),
        "total_results": len(movies),
    }


def search_mock_movies(query: str, page: int = 1) -> Dict[str, Any]:
    """Case-insensitive substring search over title and overview"""
    needle = (query or "").strip().lower()
    if not needle:
        return empty_page(1)

    matches = [
        movie for movie in MOCK_MOVIES
        if needle in movie["title"].lower() or needle in movie["overview"].lower()
    ]
    return paginate(matches, page)


def find_mock_movie(movie_id) -> Dict[str, Any]:
    """Dataset movie with movie_id, falling back to the first one"""
    for movie in MOCK_MOVIES:
        if movie["id"] == movie_id:
            return movie
    return MOCK_MOVIES[0]


def related_mock_movies(movie_id) -> List[Dict[str, Any]]:
    """Movies sharing at least one genre with movie_id, excluding it"""
    base = find_mock_movie(movie_id)
    genre_ids = set(base["genre_ids"])
    return [
        movie for movie in MOCK_MOVIES
        if movie["id"] != base["id"] and genre_ids & set(movie["genre_ids"])
    ]


def discover_mock_movies(request: MetadataRequest) -> Dict[str, Any]:
    """Apply discover filters to the dataset"""
    movies = list(MOCK_MOVIES)

    with_genres = request.param("with_genres")
    if with_genres:
        required = {int(g) for g in str(with_genres).split(",") if g.strip().isdigit()}
        movies = [m for m in movies if required.issubset(m["genre_ids"])]

    year = request.param("primary_release_year")
    if year:
        movies = [m for m in movies if m["release_date"][:4] == str(year)]

    min_vote = request.param("vote_average.gte")
    if min_vote is not None:
        movies = [m for m in movies if m["vote_average"] >= float(min_vote)]

    sort_by = str(request.param("sort_by", "popularity.desc"))
    field_name, _, direction = sort_by.partition(".")
    if field_name in SORTABLE_FIELDS:
        movies.sort(key=lambda m: m[field_name], reverse=(direction != "asc"))

    return paginate(movies, request.page)


def mock_for(request: MetadataRequest) -> Dict[str, Any]:
    """
    Canned response for a TMDB request.

    Args:
        request: The request that could not be served by TMDB

    Returns:
        Payload shaped like the real TMDB response
    """
    endpoint = request.endpoint

    if endpoint in MOCK_LISTS:
        return paginate(MOCK_MOVIES[MOCK_LISTS[endpoint]], request.page)

    if endpoint == Endpoint.SEARCH:
        return search_mock_movies(request.param("query", ""), request.page)

    if endpoint == Endpoint.MOVIE_DETAILS:
        details = deepcopy(find_mock_movie(request.movie_id))
        details.update({
            "videos": {"results": []},
            "credits": {"cast": [], "crew": []},
            "recommendations": {"results": []},
        })
        return details

    if endpoint == Endpoint.MOVIE_CREDITS:
        return {"id": request.movie_id, "cast": [], "crew": []}

    if endpoint in (Endpoint.RECOMMENDATIONS, Endpoint.SIMILAR):
        return paginate(related_mock_movies(request.movie_id), request.page)

    if endpoint == Endpoint.GENRES:
        return {"genres": deepcopy(MOCK_GENRES)}

    if endpoint == Endpoint.DISCOVER:
        return discover_mock_movies(request)

    return empty_page(request.page)


MockProvider = Callable[[MetadataRequest], Dict[str, Any]]
