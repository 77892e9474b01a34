"""
Category to genre mapping for extracted records.

Catalog categories are free-form strings. They are mapped onto a fixed genre
vocabulary in two tiers: an exact lookup, then (only if the exact tier found
nothing) a substring match against the genre names. The substring tier is a
heuristic and can pick an unrelated genre that happens to share a substring.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_GENRE = "Fiction"

DEFAULT_CATEGORY_MAP: Dict[str, str] = {
    # Fiction
    "Fiction": "Fiction",
    "Literary Fiction": "Fiction",
    "General Fiction": "Fiction",
    # Science fiction & fantasy
    "Science Fiction": "Science Fiction",
    "Fantasy": "Fantasy",
    "Dystopian": "Science Fiction",
    "Speculative Fiction": "Science Fiction",
    # Mystery & thriller
    "Mystery": "Mystery",
    "Detective": "Mystery",
    "Crime": "Mystery",
    "Thriller": "Thriller",
    "Suspense": "Thriller",
    "Romance": "Romance",
    "Love Stories": "Romance",
    "Horror": "Horror",
    "Ghost Stories": "Horror",
    # Young adult & children
    "Young Adult Fiction": "Young Adult",
    "Teen Fiction": "Young Adult",
    "Juvenile Fiction": "Children",
    "Children's Books": "Children",
    "Picture Books": "Children",
    # Non-fiction
    "Biography & Autobiography": "Biography",
    "Biography": "Biography",
    "Autobiography": "Biography",
    "Memoir": "Biography",
    "History": "History",
    "Historical": "History",
    "Self-Help": "Self-Help",
    "Personal Growth": "Self-Help",
    "Motivational": "Self-Help",
    "Business & Economics": "Business",
    "Business": "Business",
    "Economics": "Economics",
    "Finance": "Economics",
    "Health & Fitness": "Health",
    "Health": "Health",
    "Medical": "Health",
    "Fitness": "Health",
    "Cooking": "Cooking",
    "Food & Wine": "Cooking",
    "Recipes": "Cooking",
    "Travel": "Travel",
    "Travel Guides": "Travel",
    "Poetry": "Poetry",
    "Poems": "Poetry",
    "Drama": "Drama",
    "Plays": "Drama",
    "Theater": "Drama",
    "Philosophy": "Philosophy",
    "Religion": "Religion",
    "Spirituality": "Religion",
    "Science": "Science",
    "Nature": "Science",
    "Popular Science": "Science",
    "Technology": "Technology",
    "Computers": "Technology",
    "Internet": "Technology",
    "Art": "Art",
    "Design": "Art",
    "Photography": "Art",
    "Music": "Music",
    "Musicians": "Music",
    "Sports & Recreation": "Sports",
    "Sports": "Sports",
    "Athletics": "Sports",
    "Political Science": "Politics",
    "Politics": "Politics",
    "Government": "Politics",
    "Psychology": "Psychology",
    "Social Psychology": "Psychology",
    "Education": "Education",
    "Teaching": "Education",
    "Study Aids": "Education",
    "Reference": "Reference",
    "Dictionaries": "Reference",
    "Encyclopedias": "Reference",
}


class GenreMapper:
    """Maps catalog categories onto a fixed genre vocabulary."""

    def __init__(
        self,
        category_map: Optional[Mapping[str, str]] = None,
        default_genre: str = DEFAULT_GENRE,
    ) -> None:
        self.category_map: Dict[str, str] = dict(DEFAULT_CATEGORY_MAP if category_map is None else category_map)
        self.default_genre = default_genre
        self._genres: List[str] = sorted(set(self.category_map.values()) | {default_genre})

    @property
    def known_genres(self) -> List[str]:
        return list(self._genres)

    def exact_matches(self, categories: Iterable[str]) -> List[str]:
        genres: List[str] = []
        for category in categories:
            genre = self.category_map.get(category)
            if genre is not None and genre not in genres:
                genres.append(genre)
        return genres

    def partial_match(self, category: str) -> Optional[str]:
        """First known genre that contains ``category`` or is contained in it."""
        needle = category.strip().lower()
        if not needle:
            return None
        for genre in self._genres:
            name = genre.lower()
            if needle in name or name in needle:
                return genre
        return None

    def map_categories(self, categories: Optional[Iterable[str]]) -> List[str]:
        """
        Map ``categories`` to genres.

        Returns:
            Ordered, de-duplicated genre names; never empty
        """
        items = [category for category in (categories or ()) if category]
        if not items:
            return [self.default_genre]

        genres = self.exact_matches(items)
        if genres:
            return genres

        for category in items:
            genre = self.partial_match(category)
            if genre is not None:
                logger.debug("Genre chosen by partial match", category=category, genre=genre)
                return [genre]

        return [self.default_genre]
