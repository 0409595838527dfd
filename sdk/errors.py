# sdk/errors.py
from typing import Optional


class ApiError(Exception):
    """Raised by SuperGainsClient for non-2xx responses and transport failures.

    status_code is None when the request never got a response (connection
    refused, timeout, ...).
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    def __str__(self):
        if self.status_code is None:
            return self.message
        return f"HTTP {self.status_code}: {self.message}"
