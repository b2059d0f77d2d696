from typing import List, Optional


class BazarError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BazarError):
    """
    Malformed or out-of-range input.

    Product validation collects every failing rule into `errors`; sale
    validation stops at the first one and only sets `message`.
    """

    status_code = 400

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors


class NotFoundError(BazarError):
    status_code = 404


class ConflictError(BazarError):
    # business-rule violation (inactive product), reported as a bad request
    status_code = 400


class UploadError(BazarError):
    status_code = 400


class PersistenceError(BazarError):
    status_code = 500
