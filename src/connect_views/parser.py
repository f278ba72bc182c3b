"""Connect views API response parsing.

The views endpoint answers with an envelope like::

    {"views": [{"id": 10001, "name": "Outstanding Issues", "type": "issues"}, ...]}

and the view contents endpoint with::

    {"viewContentsV1": {"offset": 0, "totalRows": 2, "columns": [...], "rows": [...]}}

Only the outer envelope is interpreted here. Individual view contents rows are
passed through as the server sent them.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from logging import getLogger
from typing import Any

from requests import JSONDecodeError, Response

from .errors import ResponseParseError

logger = getLogger(__name__)

ISSUES_VIEW_TYPE = "issues"


@dataclass(frozen=True)
class ViewDescriptor:
    """An issues view saved on the server.

    Args:
        id: Numeric view identifier
        name: View name, used as the path key for view contents
    """

    id: int
    name: str


def parse_json_object(response: Response) -> dict[str, Any]:
    """Decode a response body that must be a JSON object.

    Raises:
        ResponseParseError: If the body is not JSON or not an object
    """
    try:
        payload = response.json()
    except JSONDecodeError as e:
        raise ResponseParseError(f"Response from {response.url} is not JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ResponseParseError(
            f"Response from {response.url} is not a JSON object: "
            f"{type(payload).__name__}"
        )
    return payload


def parse_views(payload: dict[str, Any]) -> Iterator[ViewDescriptor]:
    """Generate a descriptor for every issues view with an id and a name,
    skipping views of any other type."""
    views = payload.get("views")
    if not isinstance(views, list):
        raise ResponseParseError("Response has no 'views' array")

    for view in views:
        if not isinstance(view, dict) or view.get("type") != ISSUES_VIEW_TYPE:
            continue
        view_id = view.get("id")
        view_name = view.get("name")
        # bool is an int subclass but never a valid id
        if isinstance(view_id, int) and not isinstance(view_id, bool) and isinstance(
            view_name, str
        ):
            yield ViewDescriptor(view_id, view_name)
        else:
            logger.debug(f"Skipping incomplete view entry: {view}")


def unwrap_view_contents(payload: dict[str, Any]) -> dict[str, Any]:
    """Return the viewContentsV1 object of a view contents response."""
    contents = payload.get("viewContentsV1")
    if not isinstance(contents, dict):
        raise ResponseParseError("Response has no 'viewContentsV1' object")
    return contents
