"""
Pydantic models for kinopoisk.dev API responses.

The API returns camelCase JSON where almost every field may be missing or
``null``. The models here accept that shape as-is: unknown keys are ignored,
``null`` lists become empty lists and ``null`` counters become zero, so that
the normalizer can read every attribute without presence checks scattered
through its code.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CatalogModel(BaseModel):
    """Base model accepting camelCase API payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


class ImageUrl(CatalogModel):
    """Image reference with an optional preview."""

    url: Optional[str] = None
    preview_url: Optional[str] = None


class SimpleItem(CatalogModel):
    """Named entity such as a genre, country or network."""

    name: Optional[str] = None


class Person(CatalogModel):
    """Cast or crew member."""

    id: Optional[int] = None
    name: Optional[str] = None
    en_name: Optional[str] = None
    description: Optional[str] = None
    profession: Optional[str] = None
    en_profession: Optional[str] = None
    photo: Optional[str] = None


class SeasonInfo(CatalogModel):
    """Episode count of a single season."""

    number: Optional[int] = None
    episodes_count: int = 0

    @field_validator("episodes_count", mode="before")
    @classmethod
    def validate_episodes_count(cls, v):
        return v or 0


class Ratings(CatalogModel):
    """Ratings or vote counts per source."""

    kp: Optional[float] = None
    imdb: Optional[float] = None
    film_critics: Optional[float] = None
    russian_film_critics: Optional[float] = None


class ExternalIds(CatalogModel):
    """Identifiers in other catalogs."""

    imdb: Optional[str] = None
    tmdb: Optional[int] = None
    kp_hd: Optional[str] = Field(None, alias="kpHD")


class Money(CatalogModel):
    """Monetary amount with currency sign."""

    value: Optional[float] = None
    currency: Optional[str] = None


class Fees(CatalogModel):
    """Box office per region."""

    world: Optional[Money] = None
    russia: Optional[Money] = None
    usa: Optional[Money] = None


class Premiere(CatalogModel):
    """Premiere dates per release channel (ISO strings)."""

    world: Optional[str] = None
    russia: Optional[str] = None
    digital: Optional[str] = None
    cinema: Optional[str] = None


class Fact(CatalogModel):
    """Trivia entry, possibly a spoiler, possibly containing HTML."""

    value: Optional[str] = None
    type: Optional[str] = None
    spoiler: bool = False

    @field_validator("spoiler", mode="before")
    @classmethod
    def validate_spoiler(cls, v):
        return bool(v)


class ReleaseYears(CatalogModel):
    """Release period of a series."""

    start: Optional[int] = None
    end: Optional[int] = None


class AlternativeName(CatalogModel):
    """Title in another language or script."""

    name: Optional[str] = None
    language: Optional[str] = None
    type: Optional[str] = None


class Networks(CatalogModel):
    """TV networks that aired a series."""

    items: List[SimpleItem] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def validate_items(cls, v):
        return _none_to_list(v)


class RelatedMovie(CatalogModel):
    """Sequel, prequel or otherwise related title."""

    id: Optional[int] = None
    name: Optional[str] = None
    alternative_name: Optional[str] = None
    en_name: Optional[str] = None
    type: Optional[str] = None
    poster: Optional[ImageUrl] = None
    rating: Optional[Ratings] = None
    year: Optional[int] = None


class ProductionCompany(CatalogModel):
    """Production company."""

    name: Optional[str] = None
    url: Optional[str] = None
    preview_url: Optional[str] = None


class Distributors(CatalogModel):
    """Distribution information."""

    distributor: Optional[str] = None
    distributor_release: Optional[str] = None


class SearchItem(CatalogModel):
    """Entry of a ``/movie/search`` response."""

    id: int
    name: Optional[str] = None
    alternative_name: Optional[str] = None
    type: Optional[str] = None
    year: Optional[int] = None
    poster: Optional[ImageUrl] = None

    @property
    def display_name(self) -> str:
        return self.name or self.alternative_name or ""


class SearchResponse(CatalogModel):
    """Paged search result."""

    docs: List[SearchItem] = Field(default_factory=list)

    @field_validator("docs", mode="before")
    @classmethod
    def validate_docs(cls, v):
        return _none_to_list(v)


class RawCatalogRecord(CatalogModel):
    """Full movie or series description as returned by ``/movie/{id}``."""

    id: int = Field(..., ge=0, description="Catalog identifier")
    name: str = Field(..., description="Primary (localized) title")
    is_series: bool = Field(..., description="Series flag")

    alternative_name: Optional[str] = None
    en_name: Optional[str] = None
    type: Optional[str] = None
    sub_type: Optional[str] = None
    type_number: Optional[int] = None
    year: Optional[int] = None
    status: Optional[str] = None

    description: Optional[str] = None
    short_description: Optional[str] = None
    slogan: Optional[str] = None

    poster: Optional[ImageUrl] = None
    backdrop: Optional[ImageUrl] = None
    logo: Optional[ImageUrl] = None

    genres: List[SimpleItem] = Field(default_factory=list)
    countries: List[SimpleItem] = Field(default_factory=list)
    persons: List[Person] = Field(default_factory=list)
    names: List[AlternativeName] = Field(default_factory=list)
    facts: List[Fact] = Field(default_factory=list)
    seasons_info: List[SeasonInfo] = Field(default_factory=list)
    release_years: List[ReleaseYears] = Field(default_factory=list)
    sequels_and_prequels: List[RelatedMovie] = Field(default_factory=list)
    production_companies: List[ProductionCompany] = Field(default_factory=list)
    networks: Optional[Networks] = None

    movie_length: Optional[int] = None
    series_length: Optional[int] = None
    total_series_length: Optional[int] = None

    rating: Optional[Ratings] = None
    votes: Optional[Ratings] = None
    external_id: Optional[ExternalIds] = None

    age_rating: Optional[int] = None
    rating_mpaa: Optional[str] = None

    budget: Optional[Money] = None
    fees: Optional[Fees] = None
    premiere: Optional[Premiere] = None
    distributors: Optional[Distributors] = None

    top10: Optional[int] = None
    top250: Optional[int] = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        # Untitled entries come back with ``name: null``
        return v or ""

    @field_validator(
        "genres",
        "countries",
        "persons",
        "names",
        "facts",
        "seasons_info",
        "release_years",
        "sequels_and_prequels",
        "production_companies",
        mode="before",
    )
    @classmethod
    def validate_lists(cls, v):
        return _none_to_list(v)
