"""Utility functions for Connect views."""

import logging
from http.cookiejar import DefaultCookiePolicy
from sys import stderr
from urllib.parse import urlsplit

from requests import PreparedRequest, Session
from requests.exceptions import InvalidSchema, InvalidURL, MissingSchema

from .errors import URIConstructionError

logger = logging.getLogger(__name__)


class NoStoreCookiePolicy(DefaultCookiePolicy):
    """Cookie policy that keeps Set-Cookie headers out of the session jar.

    Cookies still show up on ``Response.cookies``; they are only sent back
    when a caller passes them explicitly.
    """

    def set_ok(self, cookie, request) -> bool:
        return False


def new_http_session(verify: bool | str = True, auth=None) -> Session:
    """Create a requests Session that never stores cookies on its own."""
    session = Session()
    session.cookies.set_policy(NoStoreCookiePolicy())
    session.verify = verify
    if auth is not None:
        session.auth = auth
    logger.debug(f"Created HTTP session (verify={verify!r})")
    return session


def build_url(base_url: str, *parts: str, params: dict | None = None) -> str:
    """Join path parts onto base_url and encode params as a query string.

    Parts are appended verbatim, so callers must quote user-supplied segments.

    Raises:
        URIConstructionError: If the result is not an absolute http(s) URL
    """
    url = "/".join([str(base_url).rstrip("/")] + [part.strip("/") for part in parts])
    split = urlsplit(url)
    if split.scheme.lower() not in ("http", "https") or not split.netloc:
        raise URIConstructionError(f"Invalid request URI {url!r}: expected an absolute http(s) URL")
    request = PreparedRequest()
    try:
        request.prepare_url(url, params)
    except (InvalidURL, InvalidSchema, MissingSchema) as e:
        raise URIConstructionError(f"Invalid request URI {url!r}: {e}") from e
    return request.url


def print_cookies(cookies) -> None:
    """Print all session cookies."""
    if cookies:
        print("Cookies received:")
        for name, value in cookies.items():
            print(f"  {name}: {value}")
    else:
        print("No cookies received")


def err(*objects, sep=" ", end="\n", flush=False) -> None:
    """Print to stderr"""
    print(*objects, sep=sep, end=end, flush=flush, file=stderr)
