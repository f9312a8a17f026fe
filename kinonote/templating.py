"""
Placeholder substitution for note templates.

A template may start with a header block delimited by ``---`` lines. The same
``{{field}}`` placeholder renders differently in the two regions:

- header: values keep their quoting so the block stays valid metadata
  (long texts stay quoted with inner quotes escaped, embedded image references
  get wrapped in quotes)
- body: surrounding quotes are removed and numbers render as numbers

Sequences collapse to their single element, or to a ", "-joined string when
they hold several. Placeholders that match no field are removed.
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Mapping, Union

from pydantic import BaseModel, Field

from .movie_show import MovieShow

logger = logging.getLogger(__name__)

HEADER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*\n(.*)$", re.DOTALL)
STRAY_PLACEHOLDER_PATTERN = re.compile(r"{{\w+}}", re.IGNORECASE)
WRAPPING_QUOTES_PATTERN = re.compile(r'^"(.*)"$')

EMBED_PREFIXES = ("![[", "![](")

HEADER_REGION = "header"
BODY_REGION = "body"


class RenderResult(BaseModel):
    """Rendered text plus the per-field problems met on the way."""

    text: str = ""
    diagnostics: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def has_diagnostics(self) -> bool:
        return bool(self.diagnostics)

    def add_diagnostic(self, region: str, field: str, message: str):
        """Record a substitution problem."""
        self.diagnostics.append(
            {
                "region": region,
                "field": field,
                "message": message,
                "timestamp": datetime.now().isoformat(),
            }
        )


def looks_pre_quoted(text: str) -> bool:
    """Heuristic: the value was already wrapped in quotes by the formatter."""
    return text.startswith('"') and text.endswith('"')


def looks_like_embed(text: str) -> bool:
    """Heuristic: the value is an embedded image reference."""
    return text.startswith(EMBED_PREFIXES)


def _scalar_text(value: Any) -> str:
    """Text of a scalar the way the note format expects it (true/false, 7 not 7.0)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _escape_inner_quotes(text: str) -> str:
    if looks_pre_quoted(text):
        inner = text[1:-1].replace('"', '\\"')
        return f'"{inner}"'
    return text


def _quote_item(item: Any) -> str:
    text = _scalar_text(item)
    if looks_like_embed(text) and not text.startswith('"') and not text.endswith('"'):
        return f'"{text}"'
    return _escape_inner_quotes(text)


def _unquote_item(item: Any) -> str:
    if isinstance(item, str):
        return WRAPPING_QUOTES_PATTERN.sub(r"\1", item)
    return _scalar_text(item)


def quoted_value(value: Any) -> str:
    """Encode a field value for the header block."""
    if isinstance(value, (list, tuple)):
        if not value:
            return ""
        if len(value) == 1:
            return _quote_item(value[0] if value[0] is not None else "")
        return ", ".join(_quote_item(item) for item in value if item is not None)

    if not value:
        return ""
    return _escape_inner_quotes(_scalar_text(value))


def plain_value(value: Any) -> str:
    """Encode a field value for body text."""
    if isinstance(value, (list, tuple)):
        if not value:
            return ""
        if len(value) == 1:
            return _unquote_item(value[0] if value[0] is not None else "")
        return ", ".join(_unquote_item(item) for item in value if item is not None)

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _scalar_text(value)

    if not value:
        return ""
    return _scalar_text(value)


def _placeholder_pattern(key: str) -> re.Pattern:
    return re.compile("{{" + re.escape(key) + "}}", re.IGNORECASE)


class TemplateSubstitutor:
    """Renders note templates from MovieShow records."""

    def _values(self, record: Union[MovieShow, Mapping[str, Any]]) -> Dict[str, Any]:
        if isinstance(record, MovieShow):
            return record.placeholder_values()
        return dict(record.items())

    def _substitute(self, values: Dict[str, Any], text: str, region: str, encoder, result: RenderResult) -> str:
        for key, value in values.items():
            try:
                encoded = encoder(value)
            except Exception as e:
                logger.warning(f"Failed to substitute {region} variable {key}: {e}")
                result.add_diagnostic(region, key, str(e))
                continue
            text = _placeholder_pattern(key).sub(lambda _match: encoded, text)
        return text

    def render_with_diagnostics(self, record: Union[MovieShow, Mapping[str, Any]], template: str) -> RenderResult:
        """
        Render a template and report fields that could not be substituted.

        A field whose value cannot be encoded is skipped; its placeholder is then
        removed together with other unknown placeholders. If rendering fails as a
        whole, the original template text is returned unchanged.

        Args:
            record: Normalized record (or a mapping of placeholder name to value)
            template: Template text

        Returns:
            RenderResult with the rendered text and diagnostics
        """
        result = RenderResult()

        if not template or not template.strip():
            return result

        try:
            values = self._values(record)
            match = HEADER_PATTERN.match(template)

            if match:
                header, body = match.group(1), match.group(2)
                header = self._substitute(values, header, HEADER_REGION, quoted_value, result)
                body = self._substitute(values, body, BODY_REGION, plain_value, result)
                rendered = f"---\n{header}\n---\n{body}"
            else:
                rendered = self._substitute(values, template, BODY_REGION, plain_value, result)

            result.text = STRAY_PLACEHOLDER_PATTERN.sub("", rendered).strip()

        except Exception as e:
            logger.error(f"Error rendering template: {e}")
            result.add_diagnostic("template", "", str(e))
            result.text = template

        return result

    def render(self, record: Union[MovieShow, Mapping[str, Any]], template: str) -> str:
        """Render a template; see ``render_with_diagnostics``."""
        return self.render_with_diagnostics(record, template).text

    def render_plain(self, record: Union[MovieShow, Mapping[str, Any]], text: str) -> str:
        """Substitute using the body encoding only (no header detection)."""
        if not text or not text.strip():
            return ""

        result = RenderResult()
        try:
            rendered = self._substitute(self._values(record), text, BODY_REGION, plain_value, result)
        except Exception as e:
            logger.error(f"Error rendering text: {e}")
            return text
        return STRAY_PLACEHOLDER_PATTERN.sub("", rendered).strip()


def replace_variable_syntax(record: Union[MovieShow, Mapping[str, Any]], template: str) -> str:
    """Module-level shortcut for ``TemplateSubstitutor().render``."""
    return TemplateSubstitutor().render(record, template)
