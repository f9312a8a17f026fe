"""
Note creation workflow: fetch, normalize, localize images, render and write.
"""

import logging
from pathlib import Path
from typing import Optional

from .config import KinonoteSettings
from .file_naming import FileNamer
from .i18n import MessageCatalog
from .images import ImageProcessor, ProgressCallback
from .kinopoisk_client import KinopoiskClient
from .movie_show import MovieShow
from .templates import load_template
from .templating import TemplateSubstitutor

logger = logging.getLogger(__name__)


class NoteCreator:
    """Creates vault notes for catalog titles."""

    def __init__(
        self,
        settings: KinonoteSettings,
        client: Optional[KinopoiskClient] = None,
        messages: Optional[MessageCatalog] = None,
        image_processor: Optional[ImageProcessor] = None,
    ):
        self.settings = settings
        self.vault_root = settings.vault_root
        self.messages = messages or MessageCatalog(settings.language)
        self.client = client or KinopoiskClient(settings.api_token, self.messages)
        self.image_processor = image_processor or ImageProcessor(self.vault_root, self.messages)
        self.substitutor = TemplateSubstitutor()
        self.file_namer = FileNamer(self.messages, self.substitutor)

    def _template_path(self, record: MovieShow) -> str:
        if record.is_series:
            return self.settings.series_template_file
        return self.settings.movie_template_file

    def _folder(self, record: MovieShow) -> str:
        folder = self.settings.series_folder if record.is_series else self.settings.movie_folder
        return folder.strip().strip("/")

    def _name_format(self, record: MovieShow) -> str:
        if record.is_series:
            return self.settings.series_file_name_format
        return self.settings.movie_file_name_format

    def render_contents(self, record: MovieShow) -> str:
        """Render the configured template for a record; "" without a template."""
        template = load_template(self.vault_root, self._template_path(record))
        if not template:
            return ""

        result = self.substitutor.render_with_diagnostics(record, template)
        for diagnostic in result.diagnostics:
            logger.debug(f"Substitution problem in {diagnostic['region']}: {diagnostic['field']}")
        return result.text

    def _exists(self, relative_path: str) -> bool:
        return (self.vault_root / relative_path).exists()

    def write_note(self, record: MovieShow, contents: str) -> Path:
        """Write rendered contents to a collision-free path and return it."""
        folder = self._folder(record)
        (self.vault_root / folder).mkdir(parents=True, exist_ok=True)

        file_name = self.file_namer.make_file_name(
            record,
            name_format=self._name_format(record) or None,
            exists=self._exists,
            folder=folder,
        )

        path = self.vault_root / folder / file_name
        path.write_text(contents, encoding="utf-8")
        logger.info(f"Created note {path}")
        return path

    def create_note(self, movie_id: int, progress_callback: Optional[ProgressCallback] = None) -> Path:
        """
        Create a note for a catalog identifier.

        Raises:
            KinopoiskError: If the record cannot be fetched
            OSError: If the note cannot be written
        """
        record = self.client.get_movie_by_id(movie_id)
        record = self.image_processor.process_images(record, self.settings, progress_callback)
        contents = self.render_contents(record)
        return self.write_note(record, contents)
