"""
Domain exceptions raised by the storage layer and the marketplace services.
Routes translate them into HTTP responses.
"""


class MarketplaceError(Exception):
    """
    Base class for errors reported back to the caller as a failed result
    """
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidInputError(MarketplaceError):
    """
    Exception raised when a payload field or identifier argument is missing or malformed
    """


class NotFoundError(MarketplaceError):
    """
    Exception raised when a lookup by id yields no row
    """


class UnauthorizedError(MarketplaceError):
    """
    Exception raised when the caller does not own the entity it tries to mutate
    """
    def __init__(self, message: str = "Caller does not own this store"):
        super().__init__(message)


class StorageEncodingError(RuntimeError):
    """
    Exception raised when a key or serialized value exceeds the durable map bounds.

    Not a MarketplaceError: an oversized row is a programming or data error,
    not something the caller can correct by resubmitting.
    """
