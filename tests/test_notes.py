"""
Tests for template loading and the note creation workflow.
"""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock

from kinonote.config import KinonoteSettings
from kinonote.errors import KinopoiskError
from kinonote.i18n import MessageCatalog
from kinonote.images import ImageProcessor
from kinonote.normalizer import normalize_record
from kinonote.notes import NoteCreator
from kinonote.templates import load_template
from tests.test_utils.kinopoisk_mock import GAME_OF_THRONES_ID, INCEPTION_ID, get_mock_movie

MOVIE_TEMPLATE = """---
title: {{name}}
genres: [{{genresLinks}}]
rating: {{ratingKp}}
---
# {{alternativeName}}

{{description}}
"""

SERIES_TEMPLATE = "Seasons: {{seasonsCount}}, episodes per season: {{seriesInSeasonCount}}"


class TestLoadTemplate(unittest.TestCase):
    """Template source behaviour."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.vault = Path(self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_reads_relative_to_vault(self):
        (self.vault / "Templates").mkdir()
        (self.vault / "Templates" / "movie.md").write_text("{{name}}", encoding="utf-8")

        self.assertEqual(load_template(self.vault, "Templates/movie.md"), "{{name}}")
        self.assertEqual(load_template(self.vault, "/Templates/movie.md"), "{{name}}")

    def test_unset_path(self):
        self.assertEqual(load_template(self.vault, ""), "")
        self.assertEqual(load_template(self.vault, "/"), "")
        self.assertEqual(load_template(self.vault, None), "")

    def test_missing_file(self):
        with self.assertLogs("kinonote.templates", level="WARNING"):
            self.assertEqual(load_template(self.vault, "Templates/absent.md"), "")

    def test_unreadable_file(self):
        (self.vault / "binary.md").write_bytes(b"\xff\xfe\xfa")
        with self.assertLogs("kinonote.templates", level="ERROR"):
            self.assertEqual(load_template(self.vault, "binary.md"), "")


class TestNoteCreator(unittest.TestCase):
    """End-to-end note creation with a mocked client."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.vault = Path(self.temp_dir.name)
        (self.vault / "Templates").mkdir()
        (self.vault / "Templates" / "movie.md").write_text(MOVIE_TEMPLATE, encoding="utf-8")
        (self.vault / "Templates" / "series.md").write_text(SERIES_TEMPLATE, encoding="utf-8")

        self.settings = KinonoteSettings(
            vault_path=str(self.vault),
            movie_folder="Movies",
            movie_template_file="Templates/movie.md",
            series_folder="/Series/",
            series_template_file="Templates/series.md",
            series_file_name_format="{{nameForFile}} [{{releaseYearsStart}}-{{releaseYearsEnd}}]",
        )

        self.client = Mock()
        self.client.get_movie_by_id.side_effect = lambda movie_id: normalize_record(get_mock_movie(movie_id))
        self.images = Mock(spec=ImageProcessor)
        self.images.process_images.side_effect = lambda record, settings, callback: record

        self.creator = NoteCreator(self.settings, client=self.client, messages=MessageCatalog("en"), image_processor=self.images)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_create_movie_note(self):
        path = self.creator.create_note(INCEPTION_ID)

        self.assertEqual(path, self.vault / "Movies" / "Начало (2010).md")
        contents = path.read_text(encoding="utf-8")
        self.assertTrue(contents.startswith("---\ntitle: Начало\n"))
        self.assertIn('genres: ["[[Фантастика]]", "[[Боевик]]", "[[Триллер]]"]', contents)
        self.assertIn("rating: 8.668", contents)
        self.assertIn("# Inception", contents)
        self.images.process_images.assert_called_once()

    def test_second_note_gets_copy_suffix(self):
        first = self.creator.create_note(INCEPTION_ID)
        second = self.creator.create_note(INCEPTION_ID)

        self.assertEqual(first.name, "Начало (2010).md")
        self.assertEqual(second.name, "Начало (2010) (Copy[1]).md")

    def test_create_series_note_uses_series_settings(self):
        path = self.creator.create_note(GAME_OF_THRONES_ID)

        self.assertEqual(path, self.vault / "Series" / "Игра престолов [2011-2019].md")
        self.assertEqual(path.read_text(encoding="utf-8"), "Seasons: 3, episodes per season: 11")

    def test_no_template_writes_empty_note(self):
        self.settings.movie_template_file = ""

        path = self.creator.create_note(INCEPTION_ID)

        self.assertEqual(path.read_text(encoding="utf-8"), "")

    def test_client_errors_propagate(self):
        self.client.get_movie_by_id.side_effect = KinopoiskError("Unauthorized", status=401)

        with self.assertRaises(KinopoiskError):
            self.creator.create_note(INCEPTION_ID)

        self.assertFalse((self.vault / "Movies").exists())

    def test_progress_callback_passed_to_images(self):
        callback = Mock()
        self.creator.create_note(INCEPTION_ID, callback)

        args = self.images.process_images.call_args[0]
        self.assertIs(args[1], self.settings)
        self.assertIs(args[2], callback)
