"""
kinonote

Turns kinopoisk.dev movie and series records into Markdown notes: records are
normalized into template-ready fields, substituted into user templates and
written under collision-free file names.
"""

__version__ = "0.1.0"

from .config import KinonoteSettings, load_settings, setup_logging
from .errors import ConfigError, ImageDownloadError, KinonoteError, KinopoiskError
from .file_naming import FileNamer, make_file_name
from .formatting import FormatMode, format_values
from .i18n import MessageCatalog
from .kinopoisk_client import KinopoiskClient
from .movie_show import MovieShow
from .normalizer import RecordNormalizer, normalize_record
from .notes import NoteCreator
from .templating import RenderResult, TemplateSubstitutor, replace_variable_syntax

__all__ = [
    "FormatMode",
    "format_values",
    "MovieShow",
    "RecordNormalizer",
    "normalize_record",
    "TemplateSubstitutor",
    "RenderResult",
    "replace_variable_syntax",
    "FileNamer",
    "make_file_name",
    "MessageCatalog",
    "KinopoiskClient",
    "NoteCreator",
    "KinonoteSettings",
    "load_settings",
    "setup_logging",
    "KinonoteError",
    "ConfigError",
    "KinopoiskError",
    "ImageDownloadError",
]
