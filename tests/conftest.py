"""Global test fixtures for Connect views."""

import json

import pytest
from pytest import fixture
from requests import Response
from requests.cookies import cookiejar_from_dict

SERVER_URL = "https://connect.example.com:8443"


def pytest_addoption(parser):
    """Add custom pytest command line options."""
    parser.addoption(
        "--e2e",
        action="store_true",
        default=False,
        help="run end-to-end tests",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "e2e: mark test as end-to-end test")


def pytest_collection_modifyitems(config, items):
    """Skip end-to-end tests unless --e2e option is used."""
    if config.getoption("--e2e"):
        # When --e2e is used, run all tests including end-to-end tests
        return

    skip_e2e = pytest.mark.skip(reason="need --e2e option to run")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


@fixture
def server_url() -> str:
    return SERVER_URL


@fixture
def make_response():
    """Return a factory for real requests.Response objects."""

    def _make_response(
        status_code: int = 200,
        body="",
        cookies: dict | None = None,
        url: str = f"{SERVER_URL}/api/views/v1",
    ) -> Response:
        response = Response()
        response.status_code = status_code
        text = body if isinstance(body, str) else json.dumps(body)
        response._content = text.encode("utf-8")
        response.encoding = "utf-8"
        response.url = url
        response.cookies = cookiejar_from_dict(cookies or {})
        return response

    return _make_response


@fixture
def views_payload() -> dict:
    """Views listing with one usable issues view and two that are filtered."""
    return {
        "views": [
            {"id": 1, "name": "X", "type": "issues"},
            {"id": 2, "name": "Y", "type": "project"},
            {"id": 3, "name": None, "type": "issues"},
        ]
    }
