"""
kinopoisk.dev API client.

Wraps the ``/movie/search``, ``/movie/{id}`` and ``/movie`` endpoints with:
- request validation before anything is sent
- a requests session with retry on rate limiting and server errors
- mapping of failures to localized KinopoiskError messages
- normalization of full records into MovieShow
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .api_errors import ApiErrorHandler
from .catalog_schema import RawCatalogRecord, SearchItem, SearchResponse
from .errors import KinopoiskError
from .i18n import MessageCatalog
from .movie_show import MovieShow
from .normalizer import RecordNormalizer
from .validators import ApiValidator

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.kinopoisk.dev/v1.4"
MAX_SEARCH_RESULTS = 50


class KinopoiskClient:
    """Client for the kinopoisk.dev catalog API."""

    def __init__(
        self,
        api_token: Optional[str] = None,
        messages: Optional[MessageCatalog] = None,
        base_url: str = API_BASE_URL,
        max_retries: int = 3,
        retry_backoff_factor: float = 1.0,
        timeout: int = 30,
    ):
        """
        Initialize the client.

        Args:
            api_token: API token (falls back to KINOPOISK_API_TOKEN)
            messages: Message catalog for user-facing errors
            base_url: API root
            max_retries: Retries for rate-limited and server-error responses
            retry_backoff_factor: Backoff factor between retries
            timeout: Request timeout in seconds
        """
        self.api_token = api_token or os.getenv("KINOPOISK_API_TOKEN", "")
        self.messages = messages or MessageCatalog()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.validator = ApiValidator()
        self.error_handler = ApiErrorHandler(self.messages)
        self.normalizer = RecordNormalizer()

        # Final failing response is returned so its status can be reported
        self.session = requests.Session()
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=retry_backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _token(self, token: Optional[str]) -> str:
        return (token if token is not None else self.api_token) or ""

    def _get(self, endpoint: str, token: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET an endpoint and return the decoded JSON body."""
        if not self.validator.is_valid_token(token):
            raise KinopoiskError(self.messages.lookup("provider.tokenRequired"))

        url = f"{self.base_url}{endpoint}"
        query = {key: value for key, value in (params or {}).items() if value is not None and value != ""}
        headers = {"Accept": "*/*", "X-API-KEY": self.validator.sanitize_token(token)}

        try:
            logger.debug(f"Making request: GET {url} {query}")
            response = self.session.get(url, params=query, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            self.error_handler.log_error(f"GET {endpoint}", e)
            raise self.error_handler.handle_api_error(e) from e

    def search_by_query(self, query: str, token: Optional[str] = None) -> List[SearchItem]:
        """
        Search titles by name.

        Raises:
            KinopoiskError: On an invalid query or token, a failed request or no results
        """
        if not self.validator.is_valid_search_query(query):
            raise KinopoiskError(self.messages.lookup("provider.enterMovieTitle"))

        data = self._get(
            "/movie/search",
            self._token(token),
            {"query": self.validator.sanitize_query(query), "limit": MAX_SEARCH_RESULTS},
        )
        results = SearchResponse.model_validate(data or {})

        if not results.docs:
            message = self.messages.lookup_with_params("provider.nothingFound", {"query": query})
            raise KinopoiskError(f"{message} {self.messages.lookup('provider.tryChangeQuery')}")

        logger.debug(f"Search '{query}' returned {len(results.docs)} results")
        return results.docs

    def get_raw_movie(self, movie_id: int, token: Optional[str] = None) -> RawCatalogRecord:
        """Fetch the full catalog record for an identifier."""
        token = self._token(token)

        if not self.validator.is_valid_movie_id(movie_id):
            raise KinopoiskError(self.messages.lookup("provider.invalidMovieId"))

        if not self.validator.is_valid_token(token):
            raise KinopoiskError(self.messages.lookup("provider.tokenRequiredForMovie"))

        data = self._get(f"/movie/{movie_id}", token)
        if not data:
            raise KinopoiskError(self.messages.lookup("provider.movieInfoError"))

        return RawCatalogRecord.model_validate(data)

    def get_movie_by_id(self, movie_id: int, token: Optional[str] = None) -> MovieShow:
        """Fetch and normalize a catalog record."""
        raw = self.get_raw_movie(movie_id, token)
        return self.normalizer.normalize(raw)

    def validate_token(self, token: Optional[str] = None) -> bool:
        """Check a token against the API; never raises."""
        token = self._token(token)
        params = {"page": 1, "limit": 1}
        is_valid, errors = self.validator.validate_request_config(token, messages=self.messages, **params)
        if not is_valid:
            logger.debug(f"Token check skipped: {', '.join(errors)}")
            return False

        try:
            self._get("/movie", token, params)
            return True
        except KinopoiskError:
            return False
