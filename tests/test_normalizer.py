"""
Tests for catalog record normalization.
"""

import unittest

import pytest
from pydantic import ValidationError

from kinonote.catalog_schema import Fact, RawCatalogRecord, SeasonInfo
from kinonote.movie_show import MovieShow
from kinonote.normalizer import (
    RecordNormalizer,
    calculate_seasons_data,
    normalize_record,
    process_facts,
    translate_type,
)
from tests.test_utils.kinopoisk_mock import (
    GAME_OF_THRONES_ID,
    INCEPTION_ID,
    get_mock_movie,
    minimal_record,
)


class TestNormalizeMovie(unittest.TestCase):
    """Normalization of a full movie record."""

    def setUp(self):
        self.record = RecordNormalizer().normalize(get_mock_movie(INCEPTION_ID))

    def test_basic_fields(self):
        self.assertEqual(self.record.id, INCEPTION_ID)
        self.assertEqual(self.record.name, ["Начало"])
        self.assertEqual(self.record.alternative_name, ["Inception"])
        self.assertEqual(self.record.year, 2010)
        self.assertFalse(self.record.is_series)
        self.assertEqual(self.record.movie_length, 148)

    def test_descriptions_are_quoted_single_line(self):
        self.assertEqual(len(self.record.description), 1)
        description = self.record.description[0]
        self.assertTrue(description.startswith('"') and description.endswith('"'))
        self.assertNotIn("\n", description)

    def test_file_name_fields(self):
        self.assertEqual(self.record.name_for_file, "Начало")
        self.assertEqual(self.record.alternative_name_for_file, "Inception")
        self.assertEqual(self.record.en_name_for_file, "")

    def test_genres_capitalized_and_linked(self):
        self.assertEqual(self.record.genres, ["Фантастика", "Боевик", "Триллер"])
        self.assertEqual(self.record.genres_links[0], '"[[Фантастика]]"')

    def test_people_buckets(self):
        self.assertEqual(self.record.director, ["Кристофер Нолан"])
        self.assertEqual(self.record.actors, ["Леонардо ДиКаприо", "Джозеф Гордон-Левитт"])
        self.assertEqual(self.record.writers, ["Кристофер Нолан"])
        self.assertEqual(self.record.producers, ["Эмма Томас"])
        self.assertEqual(self.record.actors_links, ['"[[Леонардо ДиКаприо]]"', '"[[Джозеф Гордон-Левитт]]"'])

    def test_type_translated(self):
        self.assertEqual(self.record.type, ["Фильм"])

    def test_images(self):
        poster = "https://image.openmoviedb.com/kinopoisk-images/447301/poster.jpg"
        self.assertEqual(self.record.poster_url, [poster])
        self.assertEqual(self.record.poster_image_link, [f"![]({poster})"])
        self.assertEqual(self.record.logo_url, [])
        self.assertEqual(self.record.logo_image_link, [])

    def test_ratings_and_votes(self):
        self.assertAlmostEqual(self.record.rating_kp, 8.668)
        self.assertEqual(self.record.rating_imdb, 8.8)
        self.assertEqual(self.record.votes_kp, 1042371)
        self.assertEqual(self.record.votes_russian_film_critics, 22)

    def test_external_ids(self):
        self.assertEqual(self.record.kinopoisk_url, ["https://www.kinopoisk.ru/film/447301/"])
        self.assertEqual(self.record.imdb_id, ["tt1375666"])
        self.assertEqual(self.record.tmdb_id, 27205)
        self.assertEqual(self.record.kp_hd_id, ["46b2ab3aeb4ae0f0ad5e1f5a0b11cd4e"])

    def test_finance(self):
        self.assertEqual(self.record.budget_value, 160000000)
        self.assertEqual(self.record.budget_currency, ["$"])
        self.assertEqual(self.record.fees_world_value, 828322032)
        self.assertEqual(self.record.fees_usa_currency, ["$"])

    def test_dates(self):
        self.assertEqual(self.record.premiere_world, ["2010-07-08"])
        self.assertEqual(self.record.premiere_russia, ["2010-07-22"])
        self.assertEqual(self.record.premiere_digital, [])
        self.assertEqual(self.record.distributor_release, ["2010-07-22"])
        self.assertEqual(self.record.distributor, ["Каро-Премьер"])

    def test_facts_skip_spoilers_and_strip_html(self):
        self.assertEqual(self.record.facts, ['"Бюджет фильма составил 160 миллионов долларов."'])

    def test_other_lists(self):
        self.assertEqual(self.record.all_names_string, ["Начало", "Inception", "Origen"])
        self.assertEqual(self.record.production_companies, ["Warner Bros.", "Legendary Pictures", "Syncopy"])
        self.assertEqual(self.record.networks, [])
        self.assertEqual(self.record.sequels_and_prequels, [])

    def test_additional_information(self):
        self.assertEqual(self.record.age_rating, 12)
        self.assertEqual(self.record.rating_mpaa, ["pg13"])
        self.assertEqual(self.record.top250, 11)
        self.assertEqual(self.record.top10, 0)
        self.assertEqual(self.record.slogan, ['"Твой разум — место преступления"'])


class TestNormalizeSeries(unittest.TestCase):
    """Normalization of a series record."""

    def setUp(self):
        self.record = normalize_record(get_mock_movie(GAME_OF_THRONES_ID))

    def test_seasons(self):
        self.assertEqual(self.record.seasons_count, 3)
        self.assertEqual(self.record.series_in_season_count, 11)

    def test_facts_limited_to_five_non_spoilers(self):
        self.assertEqual(
            self.record.facts,
            ['"Факт 1"', '"Факт 3"', '"Факт 5"', '"Факт 6"', '"Факт 7"'],
        )

    def test_series_fields(self):
        self.assertTrue(self.record.is_series)
        self.assertTrue(self.record.is_complete)
        self.assertEqual(self.record.type, ["Сериал"])
        self.assertEqual(self.record.release_years_start, 2011)
        self.assertEqual(self.record.release_years_end, 2019)
        self.assertEqual(self.record.networks, ["HBO"])
        self.assertEqual(self.record.networks_links, ['"[[HBO]]"'])
        self.assertEqual(self.record.sequels_and_prequels, ["Дом Дракона"])


class TestNormalizeEdgeCases(unittest.TestCase):
    """Absent and malformed data."""

    def test_minimal_record_has_only_empty_values(self):
        record = normalize_record(minimal_record())

        self.assertEqual(record.kinopoisk_url, ["https://www.kinopoisk.ru/film/1/"])
        for field_name, value in record:
            if field_name == "kinopoisk_url":
                continue
            if isinstance(value, list):
                self.assertEqual(value, [], field_name)
            elif isinstance(value, bool):
                self.assertFalse(value, field_name)
            elif field_name != "id":
                self.assertFalse(value, field_name)

    def test_null_nested_objects(self):
        raw = minimal_record(
            rating=None,
            votes=None,
            externalId=None,
            fees={"world": None, "russia": {"value": None, "currency": None}},
            premiere=None,
            persons=None,
            facts=None,
            seasonsInfo=[{"number": 1, "episodesCount": None}],
            networks={"items": None},
        )
        record = normalize_record(raw)

        self.assertEqual(record.rating_kp, 0)
        self.assertEqual(record.fees_world_value, 0)
        self.assertEqual(record.fees_russia_currency, [])
        self.assertEqual(record.seasons_count, 1)
        self.assertEqual(record.series_in_season_count, 0)
        self.assertEqual(record.networks, [])

    def test_name_null_is_empty(self):
        record = normalize_record(minimal_record(name=None))
        self.assertEqual(record.name, [])
        self.assertEqual(record.name_for_file, "")

    def test_colon_removed_from_file_name(self):
        record = normalize_record(minimal_record(name="Star Wars: A New Hope"))
        self.assertEqual(record.name_for_file, "Star Wars A New Hope")

    def test_unknown_type_passes_through(self):
        record = normalize_record(minimal_record(type="tv-special"))
        self.assertEqual(record.type, ["tv-special"])

    def test_out_of_range_premiere_is_dropped(self):
        record = normalize_record(minimal_record(premiere={"world": "1799-12-31T00:00:00.000Z"}))
        self.assertEqual(record.premiere_world, [])

    def test_date_at_calendar_edge_is_dropped(self):
        record = normalize_record(
            minimal_record(
                premiere={"world": "0001-01-01T00:00:00+01:00", "russia": "2010-07-22"},
                distributors={"distributorRelease": "9999-12-31T23:00:00-05:00"},
            )
        )
        self.assertEqual(record.premiere_world, [])
        self.assertEqual(record.premiere_russia, ["2010-07-22"])
        self.assertEqual(record.distributor_release, ["9999-12-31T23:00:00-05:00"])

    def test_unparseable_distributor_release_kept_as_text(self):
        record = normalize_record(minimal_record(distributors={"distributorRelease": "весна 2010"}))
        self.assertEqual(record.distributor_release, ["весна 2010"])

    def test_accepts_parsed_model(self):
        raw = RawCatalogRecord.model_validate(minimal_record(id=7, name="Seven"))
        self.assertEqual(normalize_record(raw).name, ["Seven"])

    def test_none_raises(self):
        with self.assertRaises(ValueError):
            RecordNormalizer().normalize(None)

    def test_missing_required_keys_raise(self):
        with self.assertRaises(ValidationError):
            normalize_record({"name": "No id"})

    def test_result_is_frozen(self):
        record = normalize_record(minimal_record())
        self.assertIsInstance(record, MovieShow)
        with self.assertRaises(ValidationError):
            record.year = 2000


class TestHelpers:
    """Standalone helper behaviour."""

    def test_seasons_average_rounds_up(self):
        seasons = [SeasonInfo(episodes_count=n) for n in (10, 10, 11)]
        assert calculate_seasons_data(seasons) == {"count": 3, "average_episodes_per_season": 11}

    def test_seasons_empty(self):
        assert calculate_seasons_data([]) == {"count": 0, "average_episodes_per_season": 0}

    def test_process_facts(self):
        facts = [Fact(value=f"<i>fact {i}</i>", spoiler=(i % 3 == 0)) for i in range(10)]
        facts.append(Fact(value="   "))
        result = process_facts(facts)
        assert result == ["fact 1", "fact 2", "fact 4", "fact 5", "fact 7"]

    @pytest.mark.parametrize(
        "code,label",
        [
            ("movie", "Фильм"),
            ("tv-series", "Сериал"),
            ("cartoon", "Мультфильм"),
            ("anime", "Аниме"),
            ("animated-series", "Анимационный сериал"),
            ("other", "other"),
        ],
    )
    def test_translate_type(self, code, label):
        assert translate_type(code) == label
