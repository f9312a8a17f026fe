"""Template file loading."""

import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


def load_template(vault_root: Union[str, Path], template_path: Optional[str]) -> str:
    """
    Read a template file relative to the vault root.

    An unset path (or ``/``) means "no template". A missing or unreadable file
    is logged and treated as an empty template.
    """
    if not template_path or template_path.strip() in ("", "/"):
        return ""

    path = Path(vault_root) / template_path.strip().lstrip("/")

    if not path.is_file():
        logger.warning(f"Template not found: {path}")
        return ""

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read template file {path}: {e}")
        return ""
