"""Exception hierarchy for kinonote."""

from typing import Optional


class KinonoteError(Exception):
    """Base exception for kinonote failures."""

    pass


class ConfigError(KinonoteError):
    """Raised when settings cannot be parsed or hold invalid values."""

    pass


class KinopoiskError(KinonoteError):
    """Catalog API failure with a user-facing message."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ImageDownloadError(KinonoteError):
    """Raised when an image cannot be downloaded or saved."""

    def __init__(self, message: str, is_network_error: bool = False):
        super().__init__(message)
        self.is_network_error = is_network_error
