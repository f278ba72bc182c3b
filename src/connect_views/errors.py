"""Exceptions raised by the Connect views client."""


class ConnectError(Exception):
    """Base class for all connect_views errors."""


class InitializationError(ConnectError, RuntimeError):
    """Raised when the session-establishing request does not return 200."""

    def __init__(self, uri: str, status_code: int):
        super().__init__(
            f"Initializing session failed: GET {uri} returned a response "
            f"status of {status_code}"
        )
        self.uri = uri
        self.status_code = status_code


class URIConstructionError(ConnectError, ValueError):
    """Raised when a server URL and path cannot form a valid request URI."""


class ResponseParseError(ConnectError, ValueError):
    """Raised when a response body is not JSON or lacks the expected keys."""


class RemoteCallError(ConnectError, RuntimeError):
    """Raised when a view contents request returns a status other than 200.

    Carries the requested URI, the status code and the response body so the
    caller can report exactly what the server said.
    """

    def __init__(self, uri: str, status_code: int, body: str):
        super().__init__(
            f"GET {uri} returned a response status of {status_code}: {body}"
        )
        self.uri = uri
        self.status_code = status_code
        self.body = body


class ConfigError(ConnectError, ValueError):
    """Raised when required settings cannot be resolved."""
