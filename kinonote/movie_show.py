"""
Normalized, template-ready movie/series record.

Most fields are lists of already-encoded strings so that a template can
tell "absent" (empty list) from "present" without caring about the source
shape. URLs stay unquoted, numeric fields keep their numeric types and the
``*ForFile`` fields are plain strings reserved for file naming.

Field aliases are the placeholder names used in templates, e.g.
``poster_image_link`` is substituted for ``{{posterImageLink}}``.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MovieShow(BaseModel):
    """Flat projection of a catalog record used for rendering and naming."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    # Basic information
    id: int = 0
    name: List[str] = Field(default_factory=list)
    alternative_name: List[str] = Field(default_factory=list)
    year: int = 0
    description: List[str] = Field(default_factory=list)
    short_description: List[str] = Field(default_factory=list)

    # Images: raw URLs or local paths, never quoted
    poster_url: List[str] = Field(default_factory=list)
    cover_url: List[str] = Field(default_factory=list)
    logo_url: List[str] = Field(default_factory=list)

    # Embeddable references: ![[file]] for local files, ![](url) for web links
    poster_image_link: List[str] = Field(default_factory=list)
    cover_image_link: List[str] = Field(default_factory=list)
    logo_image_link: List[str] = Field(default_factory=list)

    # Classification
    genres: List[str] = Field(default_factory=list)
    genres_links: List[str] = Field(default_factory=list)
    countries: List[str] = Field(default_factory=list)
    countries_links: List[str] = Field(default_factory=list)
    type: List[str] = Field(default_factory=list)
    sub_type: List[str] = Field(default_factory=list)

    # People
    director: List[str] = Field(default_factory=list)
    directors_links: List[str] = Field(default_factory=list)
    actors: List[str] = Field(default_factory=list)
    actors_links: List[str] = Field(default_factory=list)
    writers: List[str] = Field(default_factory=list)
    writers_links: List[str] = Field(default_factory=list)
    producers: List[str] = Field(default_factory=list)
    producers_links: List[str] = Field(default_factory=list)

    # Runtime and seasons
    movie_length: int = 0
    is_series: bool = False
    series_length: int = 0
    total_series_length: int = 0
    is_complete: bool = False
    seasons_count: int = 0
    series_in_season_count: int = 0  # average episodes per season

    # Ratings and votes
    rating_kp: float = 0
    rating_imdb: float = 0
    rating_film_critics: float = 0
    rating_russian_film_critics: float = 0
    votes_kp: int = 0
    votes_imdb: int = 0
    votes_film_critics: int = 0
    votes_russian_film_critics: int = 0

    # External identifiers
    kinopoisk_url: List[str] = Field(default_factory=list)
    imdb_id: List[str] = Field(default_factory=list)
    tmdb_id: int = 0
    kp_hd_id: List[str] = Field(default_factory=list, alias="kpHDId")

    # Additional information
    slogan: List[str] = Field(default_factory=list)
    age_rating: int = 0
    rating_mpaa: List[str] = Field(default_factory=list)

    # Finance
    budget_value: float = 0
    budget_currency: List[str] = Field(default_factory=list)
    fees_world_value: float = 0
    fees_world_currency: List[str] = Field(default_factory=list)
    fees_russia_value: float = 0
    fees_russia_currency: List[str] = Field(default_factory=list)
    fees_usa_value: float = 0
    fees_usa_currency: List[str] = Field(default_factory=list)

    # Premiere dates (YYYY-MM-DD)
    premiere_world: List[str] = Field(default_factory=list)
    premiere_russia: List[str] = Field(default_factory=list)
    premiere_digital: List[str] = Field(default_factory=list)
    premiere_cinema: List[str] = Field(default_factory=list)

    # Release period
    release_years_start: int = 0
    release_years_end: int = 0

    # Top lists
    top10: int = 0
    top250: int = 0

    # Facts: spoilers removed, HTML stripped, at most five
    facts: List[str] = Field(default_factory=list)

    # Other names
    all_names_string: List[str] = Field(default_factory=list)
    en_name: List[str] = Field(default_factory=list)

    # Networks and companies
    networks: List[str] = Field(default_factory=list)
    networks_links: List[str] = Field(default_factory=list)
    production_companies: List[str] = Field(default_factory=list)
    production_companies_links: List[str] = Field(default_factory=list)

    # Distribution
    distributor: List[str] = Field(default_factory=list)
    distributor_release: List[str] = Field(default_factory=list)

    # Related titles
    sequels_and_prequels: List[str] = Field(default_factory=list)
    sequels_and_prequels_links: List[str] = Field(default_factory=list)

    # File naming: colon-free, never quoted or linked
    name_for_file: str = ""
    alternative_name_for_file: str = ""
    en_name_for_file: str = ""

    def placeholder_values(self) -> dict:
        """Return field values keyed by their template placeholder names."""
        return self.model_dump(by_alias=True)
