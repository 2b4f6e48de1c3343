"""
Domain constants shared by the validator, prompt builder and generator.

Each domain names its creator differently (artist, director, creator); the
tables below are the only place that mapping lives.
"""

from enum import Enum
from typing import Dict, List


class Domain(str, Enum):
    """Content category a recommendation request concerns."""
    SONGS = "songs"
    MOVIES = "movies"
    TVSHOWS = "tvshows"


CREATOR_FIELDS: Dict[Domain, str] = {
    Domain.SONGS: "artist",
    Domain.MOVIES: "director",
    Domain.TVSHOWS: "creator",
}

UNKNOWN_CREATORS: Dict[Domain, str] = {
    Domain.SONGS: "Unknown Artist",
    Domain.MOVIES: "Unknown Director",
    Domain.TVSHOWS: "Unknown Creator",
}

# Request bounds
MIN_SEEDS = 1
MAX_SEEDS = 5
MIN_COUNT = 1
MAX_COUNT = 20
MIN_TITLE_LENGTH = 2
MAX_TITLE_LENGTH = 120

# Recommendation field bounds
MIN_YEAR = 1900
MAX_YEAR = 2030
DEFAULT_YEAR = 2020
MAX_GENRES = 5
MAX_WHY_LENGTH = 220
DEFAULT_WHY = "Similar to your seeds"
DEFAULT_CONFIDENCE = 0.5

# Sample seeds for the empty state of each page
SAMPLE_SEEDS: Dict[Domain, List[Dict[str, str]]] = {
    Domain.SONGS: [
        {"title": "Bohemian Rhapsody", "by": "Queen"},
        {"title": "Smells Like Teen Spirit", "by": "Nirvana"},
        {"title": "Hotel California", "by": "Eagles"},
        {"title": "Billie Jean", "by": "Michael Jackson"},
        {"title": "Stairway to Heaven", "by": "Led Zeppelin"},
    ],
    Domain.MOVIES: [
        {"title": "Pulp Fiction", "by": "Quentin Tarantino"},
        {"title": "The Shawshank Redemption", "by": "Frank Darabont"},
        {"title": "Inception", "by": "Christopher Nolan"},
        {"title": "The Godfather", "by": "Francis Ford Coppola"},
        {"title": "Spirited Away", "by": "Hayao Miyazaki"},
    ],
    Domain.TVSHOWS: [
        {"title": "Breaking Bad", "by": "Vince Gilligan"},
        {"title": "The Wire", "by": "David Simon"},
        {"title": "Game of Thrones", "by": "David Benioff & D.B. Weiss"},
        {"title": "The Sopranos", "by": "David Chase"},
        {"title": "Stranger Things", "by": "The Duffer Brothers"},
    ],
}
