"""Client exceptions."""


class ESException(Exception):
    """Raised for any failure talking to Elasticsearch.

    Transport failures and document decode failures both surface as this
    type; only the message tells them apart.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientNotInitializedError(ESException):
    """Raised when the client is used before ``initialize()`` or after ``shutdown()``."""


class DocumentDecodeError(ValueError):
    """A stored document did not match its model."""
