"""ViewsService class for the Connect views JSON API."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from urllib.parse import quote

from requests import Response, Session

from .errors import (
    InitializationError,
    RemoteCallError,
    ResponseParseError,
    URIConstructionError,
)
from .parser import ViewDescriptor, parse_json_object, parse_views, unwrap_view_contents
from .utils import build_url, new_http_session

logger = logging.getLogger(__name__)

VIEWS_PATH = "api/views/v1"
VIEW_CONTENTS_PATH = "api/viewContentsV1/issues/v1"
# characters legal in a URI path; everything else is percent-encoded
PATH_SAFE_CHARS = "/:@!$&'()*+,;="


@dataclass
class ViewContents:
    """One page of a view, as returned under viewContentsV1.

    ``data`` is the server payload, unchanged. ``degraded`` is True when the
    page is an empty stand-in for a response that could not be built or parsed.
    """

    data: dict[str, Any] = field(default_factory=dict)
    degraded: bool = False

    @property
    def rows(self) -> list[Any]:
        return self.data.get("rows") or []

    @property
    def total_rows(self) -> int | None:
        return self.data.get("totalRows")


class ViewsService:
    """Client for the views and view contents endpoints of a Connect server.

    Construction performs one GET of the views endpoint to establish a session
    and keeps the cookies it returns. Those cookies are replayed on every view
    contents request and, if ``send_cookies_on_listing`` is set, on view
    listings as well.

    Args:
        server_url: Base URL of the server, e.g. ``https://connect:8443/``
        http_client: requests Session to issue GETs with; a cookie-less one
            from ``new_http_session`` is created when omitted
        send_cookies_on_listing: Attach session cookies to ``get_views``

    Raises:
        InitializationError: If the session request does not return 200
    """

    def __init__(
        self,
        server_url: str,
        http_client: Session | None = None,
        *,
        send_cookies_on_listing: bool = False,
    ):
        self.server_url = server_url
        self._owns_client = http_client is None
        self.http_client = new_http_session() if http_client is None else http_client
        self.send_cookies_on_listing = send_cookies_on_listing
        self._cookies: Mapping[str, str] = MappingProxyType(self._initialize_session())

    @property
    def cookies(self) -> Mapping[str, str]:
        """Session cookies captured at construction (read-only)."""
        return self._cookies

    def _initialize_session(self) -> dict[str, str]:
        try:
            uri = build_url(self.server_url, VIEWS_PATH)
        except URIConstructionError as e:
            logger.error(f"Cannot initialize session: {e}")
            return {}

        response = self.http_client.get(uri)
        if response.status_code != 200:
            raise InitializationError(uri, response.status_code)

        cookies = session_cookies(response)
        logger.debug(f"Session initialized with cookies: {sorted(cookies)}")
        return cookies

    def get_views(self) -> dict[int, str]:
        """Return available issues views, keyed by numeric id with the name
        as value. Returns an empty dict if the listing cannot be read."""
        return {view.id: view.name for view in self.get_view_descriptors()}

    def get_view_descriptors(self) -> list[ViewDescriptor]:
        """Return available issues views as ViewDescriptor objects."""
        try:
            uri = build_url(self.server_url, VIEWS_PATH)
        except URIConstructionError as e:
            logger.warning(f"Cannot list views: {e}")
            return []

        cookies = dict(self._cookies) if self.send_cookies_on_listing else None
        response = self.http_client.get(uri, cookies=cookies)
        if response.status_code != 200:
            logger.warning(
                f"GET {uri} returned a response status of {response.status_code}"
            )
            return []

        try:
            return list(parse_views(parse_json_object(response)))
        except ResponseParseError as e:
            logger.warning(f"Cannot list views: {e}")
            return []

    def get_view_contents(
        self, project_id: str, view_name: str, page_size: int, offset: int
    ) -> ViewContents:
        """Fetch one page of a view's contents for a project.

        Args:
            project_id: Project the view is scoped to
            view_name: Name of the view, as listed by get_views
            page_size: Maximum number of rows to return
            offset: Zero-based row offset of the page

        Returns:
            ViewContents wrapping the viewContentsV1 payload, or an empty
            degraded page if the request URI or the response cannot be handled

        Raises:
            RemoteCallError: If the server answers with a status other than 200
        """
        try:
            uri = build_url(
                self.server_url,
                VIEW_CONTENTS_PATH,
                quote(str(view_name), safe=PATH_SAFE_CHARS),
                params={"projectId": project_id, "rowCount": page_size, "offset": offset},
            )
        except URIConstructionError as e:
            logger.warning(f"Cannot retrieve view contents: {e}")
            return ViewContents(degraded=True)

        logger.info(f"Retrieving View contents from {uri}")
        response = self.http_client.get(uri, cookies=dict(self._cookies))
        if response.status_code != 200:
            raise RemoteCallError(uri, response.status_code, response.text)

        try:
            return ViewContents(unwrap_view_contents(parse_json_object(response)))
        except ResponseParseError as e:
            logger.warning(f"Cannot read view contents: {e}")
            return ViewContents(degraded=True)

    def close(self) -> None:
        """Close the HTTP session if this service created it."""
        if self._owns_client:
            self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def session_cookies(response: Response) -> dict[str, str]:
    """Return the cookies set by a response as a plain dict."""
    if response.cookies is None:
        return {}
    return response.cookies.get_dict()
