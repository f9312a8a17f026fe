"""
Transformation of kinopoisk.dev records into template-ready MovieShow objects.

The normalizer is a pure function of its input: missing nested objects at any
depth resolve to the empty value of the target field, and no data problem
raises. Only a missing record (or one failing schema validation) is an error.
"""

import logging
import math
from typing import Any, Dict, List, Mapping, Union

from .catalog_schema import Fact, Person, RawCatalogRecord, SeasonInfo
from .formatting import (
    MAX_FACTS_COUNT,
    FormatMode,
    capitalize_first_letter,
    clean_text_for_metadata,
    create_image_link,
    format_date,
    format_values,
    strip_html_tags,
)
from .movie_show import MovieShow

logger = logging.getLogger(__name__)

KINOPOISK_FILM_URL = "https://www.kinopoisk.ru/film/{id}/"

# Display labels for catalog type codes
TYPE_TRANSLATIONS = {
    "animated-series": "Анимационный сериал",
    "anime": "Аниме",
    "cartoon": "Мультфильм",
    "movie": "Фильм",
    "tv-series": "Сериал",
}

PROFESSION_BUCKETS = {
    "director": "directors",
    "actor": "actors",
    "writer": "writers",
    "producer": "producers",
}


def translate_type(type_code: str) -> str:
    """Map a catalog type code to its label; unknown codes pass through."""
    return TYPE_TRANSLATIONS.get(type_code, type_code)


def calculate_seasons_data(seasons_info: List[SeasonInfo]) -> Dict[str, int]:
    """Return the season count and the rounded-up average episodes per season."""
    if not seasons_info:
        return {"count": 0, "average_episodes_per_season": 0}

    total_episodes = sum(season.episodes_count for season in seasons_info)
    return {
        "count": len(seasons_info),
        "average_episodes_per_season": math.ceil(total_episodes / len(seasons_info)),
    }


def extract_people(persons: List[Person]) -> Dict[str, List[str]]:
    """Split the persons list into director/actor/writer/producer buckets."""
    result: Dict[str, List[str]] = {bucket: [] for bucket in PROFESSION_BUCKETS.values()}

    for person in persons:
        if not person.name or not person.en_profession:
            continue
        bucket = PROFESSION_BUCKETS.get(person.en_profession)
        if bucket:
            result[bucket].append(person.name)

    return result


def process_facts(facts: List[Fact]) -> List[str]:
    """Drop spoilers and empty entries, keep the first five, strip HTML."""
    visible = [fact for fact in facts if not fact.spoiler and fact.value and fact.value.strip()]
    return [strip_html_tags(fact.value) for fact in visible[:MAX_FACTS_COUNT]]


def _names(items: List[Any]) -> List[str]:
    return [item.name for item in items if item.name and item.name.strip()]


def _value(obj: Any, attribute: str, default: Any = 0) -> Any:
    """Read ``obj.attribute`` treating a missing object or falsy value as default."""
    if obj is None:
        return default
    return getattr(obj, attribute, None) or default


class RecordNormalizer:
    """Builds MovieShow records from raw catalog responses."""

    def normalize(self, raw: Union[RawCatalogRecord, Mapping[str, Any]]) -> MovieShow:
        """
        Normalize a raw catalog record.

        Args:
            raw: A parsed RawCatalogRecord or the decoded JSON mapping

        Returns:
            A fully populated MovieShow

        Raises:
            ValueError: If no record is given
            pydantic.ValidationError: If the mapping lacks required keys
        """
        if raw is None:
            raise ValueError("A catalog record is required for normalization")

        if not isinstance(raw, RawCatalogRecord):
            raw = RawCatalogRecord.model_validate(raw)

        seasons = calculate_seasons_data(raw.seasons_info)
        people = extract_people(raw.persons)
        facts = process_facts(raw.facts)
        genres = [capitalize_first_letter(genre.name) for genre in raw.genres if genre.name]
        countries = _names(raw.countries)
        networks = _names(raw.networks.items) if raw.networks else []
        production_companies = _names(raw.production_companies)
        sequels_and_prequels = _names(raw.sequels_and_prequels)
        all_names = _names(raw.names)

        poster_url = _value(raw.poster, "url", "")
        cover_url = _value(raw.backdrop, "url", "")
        logo_url = _value(raw.logo, "url", "")

        fees = raw.fees
        world_fees = fees.world if fees else None
        russia_fees = fees.russia if fees else None
        usa_fees = fees.usa if fees else None

        first_release = raw.release_years[0] if raw.release_years else None
        distributor_release = _value(raw.distributors, "distributor_release", "")

        record = MovieShow(
            # Basic information
            id=raw.id,
            name=format_values([raw.name], FormatMode.PLAIN),
            alternative_name=format_values([raw.alternative_name], FormatMode.PLAIN),
            year=raw.year or 0,
            description=format_values([raw.description], FormatMode.QUOTED_TEXT),
            short_description=format_values([raw.short_description], FormatMode.QUOTED_TEXT),
            # File naming
            name_for_file=clean_text_for_metadata(raw.name),
            alternative_name_for_file=clean_text_for_metadata(raw.alternative_name),
            en_name_for_file=clean_text_for_metadata(raw.en_name),
            # Images
            poster_url=format_values([poster_url], FormatMode.URL),
            cover_url=format_values([cover_url], FormatMode.URL),
            logo_url=format_values([logo_url], FormatMode.URL),
            poster_image_link=create_image_link(poster_url),
            cover_image_link=create_image_link(cover_url),
            logo_image_link=create_image_link(logo_url),
            # Classification
            genres=format_values(genres, FormatMode.PLAIN),
            genres_links=format_values(genres, FormatMode.LINK),
            countries=format_values(countries, FormatMode.PLAIN),
            countries_links=format_values(countries, FormatMode.LINK),
            type=format_values([translate_type(raw.type or "")], FormatMode.PLAIN),
            sub_type=format_values([raw.sub_type], FormatMode.PLAIN),
            # People
            director=format_values(people["directors"], FormatMode.PLAIN),
            directors_links=format_values(people["directors"], FormatMode.LINK),
            actors=format_values(people["actors"], FormatMode.PLAIN),
            actors_links=format_values(people["actors"], FormatMode.LINK),
            writers=format_values(people["writers"], FormatMode.PLAIN),
            writers_links=format_values(people["writers"], FormatMode.LINK),
            producers=format_values(people["producers"], FormatMode.PLAIN),
            producers_links=format_values(people["producers"], FormatMode.LINK),
            # Runtime and seasons
            movie_length=raw.movie_length or 0,
            is_series=raw.is_series,
            series_length=raw.series_length or 0,
            total_series_length=raw.total_series_length or 0,
            is_complete=(raw.status or "") == "completed",
            seasons_count=seasons["count"],
            series_in_season_count=seasons["average_episodes_per_season"],
            # Ratings and votes
            rating_kp=_value(raw.rating, "kp"),
            rating_imdb=_value(raw.rating, "imdb"),
            rating_film_critics=_value(raw.rating, "film_critics"),
            rating_russian_film_critics=_value(raw.rating, "russian_film_critics"),
            votes_kp=int(_value(raw.votes, "kp")),
            votes_imdb=int(_value(raw.votes, "imdb")),
            votes_film_critics=int(_value(raw.votes, "film_critics")),
            votes_russian_film_critics=int(_value(raw.votes, "russian_film_critics")),
            # External identifiers
            kinopoisk_url=format_values([KINOPOISK_FILM_URL.format(id=raw.id)], FormatMode.URL),
            imdb_id=format_values([_value(raw.external_id, "imdb", "")], FormatMode.PLAIN),
            tmdb_id=_value(raw.external_id, "tmdb"),
            kp_hd_id=format_values([_value(raw.external_id, "kp_hd", "")], FormatMode.PLAIN),
            # Additional information
            slogan=format_values([raw.slogan], FormatMode.QUOTED_TEXT),
            age_rating=raw.age_rating or 0,
            rating_mpaa=format_values([raw.rating_mpaa], FormatMode.PLAIN),
            # Finance
            budget_value=_value(raw.budget, "value"),
            budget_currency=format_values([_value(raw.budget, "currency", "")], FormatMode.PLAIN),
            fees_world_value=_value(world_fees, "value"),
            fees_world_currency=format_values([_value(world_fees, "currency", "")], FormatMode.PLAIN),
            fees_russia_value=_value(russia_fees, "value"),
            fees_russia_currency=format_values([_value(russia_fees, "currency", "")], FormatMode.PLAIN),
            fees_usa_value=_value(usa_fees, "value"),
            fees_usa_currency=format_values([_value(usa_fees, "currency", "")], FormatMode.PLAIN),
            # Premiere dates
            premiere_world=format_values([format_date(_value(raw.premiere, "world", ""))], FormatMode.PLAIN),
            premiere_russia=format_values([format_date(_value(raw.premiere, "russia", ""))], FormatMode.PLAIN),
            premiere_digital=format_values([format_date(_value(raw.premiere, "digital", ""))], FormatMode.PLAIN),
            premiere_cinema=format_values([format_date(_value(raw.premiere, "cinema", ""))], FormatMode.PLAIN),
            # Release period
            release_years_start=_value(first_release, "start"),
            release_years_end=_value(first_release, "end"),
            # Top lists
            top10=raw.top10 or 0,
            top250=raw.top250 or 0,
            # Facts
            facts=format_values(facts, FormatMode.QUOTED_TEXT, max_items=MAX_FACTS_COUNT),
            # Other names
            all_names_string=format_values(all_names, FormatMode.PLAIN),
            en_name=format_values([raw.en_name], FormatMode.PLAIN),
            # Networks and companies
            networks=format_values(networks, FormatMode.PLAIN),
            networks_links=format_values(networks, FormatMode.LINK),
            production_companies=format_values(production_companies, FormatMode.PLAIN),
            production_companies_links=format_values(production_companies, FormatMode.LINK),
            # Distribution
            distributor=format_values([_value(raw.distributors, "distributor", "")], FormatMode.PLAIN),
            distributor_release=format_values(
                [format_date(distributor_release) or distributor_release], FormatMode.PLAIN
            ),
            # Related titles
            sequels_and_prequels=format_values(sequels_and_prequels, FormatMode.PLAIN),
            sequels_and_prequels_links=format_values(sequels_and_prequels, FormatMode.LINK),
        )

        logger.debug(f"Normalized catalog record {raw.id} ({record.name_for_file or 'untitled'})")
        return record


def normalize_record(raw: Union[RawCatalogRecord, Mapping[str, Any]]) -> MovieShow:
    """Module-level shortcut for ``RecordNormalizer().normalize``."""
    return RecordNormalizer().normalize(raw)
