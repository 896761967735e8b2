__all__ = [
    "BaseError",
    "BadRequestError",
    "ConfigurationError",
    "ConflictError",
    "InternalError",
    "LoadError",
    "NotFoundError",
    "NotImplementedYetError",
    "NotSupportedError",
    "OperationTimeoutError",
    "ProviderCallError",
    "UnsupportedOperationError",
]


class BaseError(Exception):
    status_code: int


class BadRequestError(BaseError):
    status_code = 400


class ConfigurationError(BadRequestError):
    """Invalid or incomplete configuration.

    Raised before any provider is contacted: missing or unknown
    platform, missing bucket, malformed mount, missing program.
    """


class NotFoundError(BaseError):
    status_code = 404


class ConflictError(BaseError):
    status_code = 409


class NotSupportedError(BaseError):
    status_code = 415


class UnsupportedOperationError(NotSupportedError):
    """The backend cannot perform the requested operation."""


class NotImplementedYetError(UnsupportedOperationError):
    """The operation exists but is not implemented for this backend yet."""


class InternalError(Exception):
    status_code = 500


class ProviderCallError(InternalError):
    """A backend SDK or tool call failed.

    The original exception is chained as ``__cause__``.
    """


class OperationTimeoutError(ProviderCallError):
    """A bounded wait ran out of attempts."""

    status_code = 504

    elapsed: float

    def __init__(self, message: str, elapsed: float = 0.0):
        super().__init__(message)
        self.elapsed = elapsed


class LoadError(Exception):
    status_code = 500
