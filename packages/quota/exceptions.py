from common.core.exceptions import ConflictError


class QuotaExhaustedError(ConflictError):
    """No bucket has enough remaining quota for the request."""

    status_code = 429

    def __init__(self, message: str = "Quota exhausted, please purchase more"):
        super().__init__(message)
