"""
Input validation for catalog API requests.

Checks run before any request is made so that obviously bad tokens, queries
and identifiers never reach the network.
"""

import re
from typing import Any, List, Optional, Tuple

from .i18n import MessageCatalog

TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
TOKEN_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9_-]")
MIN_TOKEN_LENGTH = 10
MAX_TOKEN_LENGTH = 100

MAX_QUERY_LENGTH = 200
SUSPICIOUS_QUERY_PATTERNS = [
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"<%"),
    re.compile(r"%>"),
]

MIN_MOVIE_ID = 1
MAX_MOVIE_ID = 99999999
MAX_PAGE = 1000
MAX_LIMIT = 250


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ApiValidator:
    """Validates and sanitizes catalog API request parameters."""

    @staticmethod
    def is_valid_token(token: Any) -> bool:
        """Token: 10-100 characters of letters, digits, ``_`` and ``-``."""
        if not isinstance(token, str):
            return False

        trimmed = token.strip()
        if not MIN_TOKEN_LENGTH <= len(trimmed) <= MAX_TOKEN_LENGTH:
            return False

        return bool(TOKEN_PATTERN.match(trimmed))

    @staticmethod
    def is_valid_search_query(query: Any) -> bool:
        """Query: 1-200 characters without markup or script injection."""
        if not isinstance(query, str):
            return False

        trimmed = query.strip()
        if not 0 < len(trimmed) <= MAX_QUERY_LENGTH:
            return False

        return not any(pattern.search(trimmed) for pattern in SUSPICIOUS_QUERY_PATTERNS)

    @staticmethod
    def is_valid_movie_id(movie_id: Any) -> bool:
        """Identifier: positive integer up to eight digits."""
        return _is_int(movie_id) and MIN_MOVIE_ID <= movie_id <= MAX_MOVIE_ID

    @staticmethod
    def is_valid_pagination_params(page: Any, limit: Any) -> bool:
        return _is_int(page) and _is_int(limit) and 1 <= page <= MAX_PAGE and 1 <= limit <= MAX_LIMIT

    @staticmethod
    def sanitize_query(query: Any) -> str:
        """Trim, collapse whitespace, drop angle brackets and cut to length."""
        if not isinstance(query, str):
            return ""

        sanitized = re.sub(r"\s+", " ", query.strip())
        sanitized = re.sub(r"[<>]", "", sanitized)
        return sanitized[:MAX_QUERY_LENGTH]

    @staticmethod
    def sanitize_token(token: Any) -> str:
        if not isinstance(token, str):
            return ""

        return TOKEN_DISALLOWED_CHARS.sub("", token.strip())[:MAX_TOKEN_LENGTH]

    @classmethod
    def validate_request_config(
        cls,
        token: Any,
        query: Optional[Any] = None,
        movie_id: Optional[Any] = None,
        page: Optional[Any] = None,
        limit: Optional[Any] = None,
        messages: Optional[MessageCatalog] = None,
    ) -> Tuple[bool, List[str]]:
        """
        Validate a complete request configuration.

        Only the parameters that are given are checked, except the token which
        is always required.

        Returns:
            Tuple of (is_valid, localized error messages)
        """
        messages = messages or MessageCatalog()
        errors: List[str] = []

        if not cls.is_valid_token(token):
            errors.append(messages.lookup("validation.invalidApiToken"))

        if query is not None and not cls.is_valid_search_query(query):
            errors.append(messages.lookup("validation.invalidSearchQuery"))

        if movie_id is not None and not cls.is_valid_movie_id(movie_id):
            errors.append(messages.lookup("validation.invalidMovieId"))

        if (page is not None or limit is not None) and not cls.is_valid_pagination_params(
            page if page is not None else 1, limit if limit is not None else 1
        ):
            errors.append(messages.lookup("validation.invalidPaginationParams"))

        return len(errors) == 0, errors
