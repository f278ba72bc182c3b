"""Tests for the command line entry points."""

import json
from unittest.mock import MagicMock, patch

from pytest import fixture, mark, raises
from requests import Session

from connect_views import cli


@fixture(autouse=True)
def no_config(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("CONNECT_URL", raising=False)


@fixture
def http_client(make_response):
    client = MagicMock(spec=Session)
    client.__enter__.return_value = client
    client.__exit__.return_value = False
    client.get.return_value = make_response(200, {"views": []}, cookies={"s": "1"})
    with patch("connect_views.cli.new_http_session", return_value=client):
        yield client


def run_cli(monkeypatch, entry_point, *argv):
    monkeypatch.setattr("sys.argv", [entry_point.__name__, *argv])
    entry_point()


def test_list_views(monkeypatch, capsys, http_client, make_response, server_url):
    http_client.get.side_effect = [
        make_response(200, {"views": []}),
        make_response(
            200,
            {
                "views": [
                    {"id": 20, "name": "High Impact", "type": "issues"},
                    {"id": 3, "name": "Outstanding", "type": "issues"},
                ]
            },
        ),
    ]

    run_cli(monkeypatch, cli.list_views_cli, "--url", server_url, "-q")

    assert capsys.readouterr().out == "3\tOutstanding\n20\tHigh Impact\n"


def test_list_views_with_cookies(monkeypatch, http_client, server_url):
    run_cli(monkeypatch, cli.list_views_cli, "--url", server_url, "--with-cookies", "-q")

    assert http_client.get.call_args.kwargs["cookies"] == {"s": "1"}


def test_dump_view(monkeypatch, capsys, http_client, make_response):
    monkeypatch.setenv("CONNECT_URL", "https://connect.example.com")
    http_client.get.side_effect = [
        make_response(200, {"views": []}),
        make_response(200, {"viewContentsV1": {"totalRows": 1, "rows": [{"cid": 7}]}}),
    ]

    run_cli(monkeypatch, cli.dump_view_cli, "p1", "Outstanding", "--page-size", "10", "-q")

    assert json.loads(capsys.readouterr().out) == {"totalRows": 1, "rows": [{"cid": 7}]}
    assert "rowCount=10&offset=0" in http_client.get.call_args.args[0]


def test_dump_view_remote_error_exits_1(monkeypatch, http_client, make_response, server_url):
    http_client.get.side_effect = [
        make_response(200, {"views": []}),
        make_response(403, "forbidden"),
    ]

    with raises(SystemExit) as excinfo:
        run_cli(monkeypatch, cli.dump_view_cli, "--url", server_url, "p1", "v", "-q")

    assert excinfo.value.code == 1


def test_bootstrap_failure_exits_1(monkeypatch, http_client, make_response, server_url):
    http_client.get.return_value = make_response(503, "unavailable")

    with raises(SystemExit) as excinfo:
        run_cli(monkeypatch, cli.list_views_cli, "--url", server_url, "-q")

    assert excinfo.value.code == 1


def test_missing_url_exits_2(monkeypatch, http_client):
    with raises(SystemExit) as excinfo:
        run_cli(monkeypatch, cli.list_views_cli, "-q")

    assert excinfo.value.code == 2
    http_client.get.assert_not_called()


def test_export_view(monkeypatch, capsys, http_client, make_response, server_url, tmp_path):
    http_client.get.side_effect = [
        make_response(200, {"views": []}),
        make_response(200, {"viewContentsV1": {"totalRows": 1, "rows": [{"cid": 7}]}}),
    ]
    run_cli(
        monkeypatch,
        cli.export_view_cli,
        "--url",
        server_url,
        "p1",
        "Outstanding",
        "--output-dir",
        str(tmp_path),
        "--format",
        "json",
        "-q",
    )

    export_file = tmp_path / "Outstanding.json"
    assert capsys.readouterr().out.strip() == str(export_file)
    assert json.loads(export_file.read_text())["rows"] == [{"cid": 7}]


@mark.parametrize(
    "version, analysis, code",
    [
        ("2019.03", None, 0),
        ("7.6.1", None, 1),
        ("8.7.0", "8.7.1", 0),
        ("8.5.0", "8.7.1", 1),
        ("unknown", None, 2),
        ("8.7.0", "unknown", 2),
    ],
)
def test_check_version(version, analysis, code):
    assert cli.check_version(version, analysis) == code


def test_export_view_unreadable_page_exits_1(
    monkeypatch, capsys, http_client, make_response, server_url, tmp_path
):
    http_client.get.side_effect = [
        make_response(200, {"views": []}),
        make_response(200, {"viewContentsV1": {"totalRows": 4, "rows": [{"cid": 7}]}}),
        make_response(200, "<html>maintenance</html>"),
    ]

    with raises(SystemExit) as excinfo:
        run_cli(
            monkeypatch,
            cli.export_view_cli,
            "--url",
            server_url,
            "p1",
            "Outstanding",
            "--output-dir",
            str(tmp_path),
            "--page-size",
            "1",
            "-q",
        )

    assert excinfo.value.code == 1
    assert capsys.readouterr().out == ""
    assert not (tmp_path / "Outstanding.yaml").exists()


@mark.parametrize("page_size", ["0", "-5", "ten"])
def test_invalid_page_size_rejected(monkeypatch, http_client, server_url, page_size):
    with raises(SystemExit) as excinfo:
        run_cli(
            monkeypatch,
            cli.dump_view_cli,
            "--url",
            server_url,
            "p1",
            "Outstanding",
            "--page-size",
            page_size,
        )

    assert excinfo.value.code == 2
    http_client.get.assert_not_called()


def test_negative_offset_rejected(monkeypatch, http_client, server_url):
    with raises(SystemExit) as excinfo:
        run_cli(
            monkeypatch, cli.dump_view_cli, "--url", server_url, "p1", "v", "--offset", "-1"
        )

    assert excinfo.value.code == 2
    http_client.get.assert_not_called()
