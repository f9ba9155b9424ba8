"""
Reponses TMDB simulees pour les tests.

Utilisees avec respx pour simuler les appels httpx.
"""

# GET /search/movie?query=Inception&language=fr-FR
TMDB_MOVIE_SEARCH_RESPONSE = {
    "page": 1,
    "results": [
        {
            "id": 503314,
            "title": "Inception Chronicles",
            "original_title": "Inception Chronicles",
            "overview": "Documentaire.",
            "poster_path": "/chronicles.jpg",
            "release_date": "2016-03-01",
            "genre_ids": [16, 28],
        },
        {
            "id": 27205,
            "title": "Inception",
            "original_title": "Inception",
            "overview": "Dom Cobb est un voleur experimente dans l'art de l'extraction.",
            "poster_path": "/inception.jpg",
            "release_date": "2010-07-15",
            "genre_ids": [28, 878, 12],
        },
    ],
    "total_pages": 1,
    "total_results": 2,
}

# GET /search/movie sans resultat
TMDB_SEARCH_EMPTY_RESPONSE = {
    "page": 1,
    "results": [],
    "total_pages": 0,
    "total_results": 0,
}

# GET /search/tv?query=Breaking Bad&language=fr-FR
TMDB_TV_SEARCH_RESPONSE = {
    "page": 1,
    "results": [
        {
            "id": 1396,
            "name": "Breaking Bad",
            "original_name": "Breaking Bad",
            "overview": "Un professeur de chimie atteint d'un cancer.",
            "poster_path": "/breaking.jpg",
            "first_air_date": "2008-01-20",
            "genre_ids": [18, 80],
        }
    ],
    "total_pages": 1,
    "total_results": 1,
}

# GET /tv/1396/season/1/episode/1?language=fr-FR
TMDB_EPISODE_RESPONSE = {
    "id": 62085,
    "name": "Chute libre",
    "overview": "Walter White, professeur de chimie, apprend qu'il est atteint d'un cancer.",
    "season_number": 1,
    "episode_number": 1,
    "air_date": "2008-01-20",
}
