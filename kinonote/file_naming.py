"""
Collision-free note file names.

The base name comes either from a user-defined name format rendered with the
body encoding (``{{nameForFile}} ({{year}})``) or from ``<title> (<year>)``.
Illegal characters are stripped, ``.md`` is appended and, if a note with that
name already exists, a localized copy suffix with an increasing index is
added until a free name is found.
"""

import logging
from typing import Callable, Optional

from .formatting import replace_illegal_file_name_characters
from .i18n import MessageCatalog
from .movie_show import MovieShow
from .templating import TemplateSubstitutor

logger = logging.getLogger(__name__)

NOTE_EXTENSION = ".md"


def _join(folder: Optional[str], file_name: str) -> str:
    if not folder:
        return file_name
    return f"{folder.rstrip('/')}/{file_name}"


class FileNamer:
    """Derives destination note names for normalized records."""

    def __init__(
        self,
        messages: Optional[MessageCatalog] = None,
        substitutor: Optional[TemplateSubstitutor] = None,
    ):
        self.messages = messages or MessageCatalog()
        self.substitutor = substitutor or TemplateSubstitutor()

    def base_name(self, record: MovieShow, name_format: Optional[str] = None) -> str:
        """Return the cleaned base name (no extension, no collision suffix)."""
        unknown = self.messages.lookup("utils.unknownMovie")

        if name_format:
            base_name = self.substitutor.render_plain(record, name_format)
        else:
            base_name = f"{record.name_for_file or unknown} ({record.year or unknown})"

        cleaned = replace_illegal_file_name_characters(base_name).strip()
        return cleaned or unknown

    def make_file_name(
        self,
        record: MovieShow,
        exists: Callable[[str], bool],
        name_format: Optional[str] = None,
        folder: Optional[str] = None,
    ) -> str:
        """
        Return the first free ``.md`` file name for a record.

        Args:
            record: Normalized record
            exists: Existence check for a folder-relative path
            name_format: Optional placeholder format for the name
            folder: Folder the note is created in

        Returns:
            File name (without folder) that ``exists`` reports as free
        """
        base_name = self.base_name(record, name_format)
        file_name = base_name + NOTE_EXTENSION

        if not exists(_join(folder, file_name)):
            return file_name

        copy_prefix = self.messages.lookup("utils.copyPrefix")
        copy_number = 1
        while True:
            copy_file_name = f"{base_name} ({copy_prefix}[{copy_number}]){NOTE_EXTENSION}"
            if not exists(_join(folder, copy_file_name)):
                logger.debug(f"{file_name} exists, using {copy_file_name}")
                return copy_file_name
            copy_number += 1


def make_file_name(
    record: MovieShow,
    exists: Callable[[str], bool],
    name_format: Optional[str] = None,
    messages: Optional[MessageCatalog] = None,
    folder: Optional[str] = None,
) -> str:
    """Module-level shortcut for ``FileNamer.make_file_name``."""
    return FileNamer(messages).make_file_name(record, exists, name_format, folder)
