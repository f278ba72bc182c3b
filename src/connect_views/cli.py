"""Command line interface for Connect views."""

import json
import logging
from argparse import ArgumentParser, ArgumentTypeError, Namespace
from pathlib import Path
from sys import exit

from requests import Session

from .config import ConnectSettings, resolve_settings
from .errors import ConfigError, InitializationError, RemoteCallError, ResponseParseError
from .exporter import DEFAULT_PAGE_SIZE, EXPORT_FORMATS, ViewExporter
from .session import ViewsService
from .utils import err, new_http_session, print_cookies
from .version import ConnectVersion, is_supported

logger = logging.getLogger(__name__)


def list_views_cli():
    """Entry point for listing the issues views of a Connect server."""
    args = parse_list_views_arguments()
    config_logging(args)
    settings = load_settings(args)
    with new_http_session(settings.verify, settings.auth) as http_client:
        service = open_service(settings, http_client, args.with_cookies)
        if args.verbose:
            print_cookies(service.cookies)
        views = service.get_views()
    for view_id in sorted(views):
        print(f"{view_id}\t{views[view_id]}")


def parse_list_views_arguments() -> Namespace:
    """Parse command line arguments for list-views."""
    parser = make_parser("List the issues views available on a Connect server")
    parser.add_argument(
        "--with-cookies",
        action="store_true",
        help="Send the session cookies with the view listing request",
    )
    return parser.parse_args()


def dump_view_cli():
    """Entry point for printing one page of a view as JSON."""
    args = parse_dump_view_arguments()
    config_logging(args)
    settings = load_settings(args)
    with new_http_session(settings.verify, settings.auth) as http_client:
        service = open_service(settings, http_client)
        try:
            page = service.get_view_contents(
                args.project_id, args.view, args.page_size, args.offset
            )
        except RemoteCallError as e:
            logger.error(str(e))
            exit(1)
    if page.degraded:
        logger.warning("Server response could not be read, printing an empty page")
    print(json.dumps(page.data, indent=2))


def parse_dump_view_arguments() -> Namespace:
    """Parse command line arguments for dump-view."""
    parser = make_parser("Print one page of a Connect view as JSON")
    add_view_arguments(parser)
    parser.add_argument(
        "--offset", type=non_negative_int, default=0, help="Zero-based row offset"
    )
    return parser.parse_args()


def export_view_cli():
    """Entry point for exporting all rows of a view to a file."""
    args = parse_export_view_arguments()
    config_logging(args)
    output_dir = Path(args.output_dir).expanduser() if args.output_dir else Path.cwd()
    settings = load_settings(args)
    with new_http_session(settings.verify, settings.auth) as http_client:
        service = open_service(settings, http_client)
        exporter = ViewExporter(service, args.page_size)
        try:
            export_file = exporter.export_view(
                args.project_id, args.view, output_dir, args.format
            )
        except (RemoteCallError, ResponseParseError) as e:
            logger.error(str(e))
            exit(1)
    print(export_file)


def parse_export_view_arguments() -> Namespace:
    """Parse command line arguments for export-view."""
    parser = make_parser("Export every row of a Connect view to a file")
    add_view_arguments(parser)
    parser.add_argument(
        "--output-dir", metavar="DIR", help="Directory for the export file (default: .)"
    )
    parser.add_argument(
        "--format", choices=EXPORT_FORMATS, default="yaml", help="Export file format"
    )
    return parser.parse_args()


def check_version_cli():
    """Entry point for checking a Connect version against the supported minimum.

    Exits 0 when supported (and compatible with --analysis), 1 when not,
    2 when a version cannot be parsed.
    """
    args = parse_check_version_arguments()
    config_logging(args)
    exit(check_version(args.version, args.analysis))


def check_version(version_text: str, analysis_text: str | None = None) -> int:
    version = ConnectVersion.parse(version_text)
    if version is None:
        err(f"Cannot parse version: {version_text}")
        return 2
    if not is_supported(version):
        print(f"{version} is not supported")
        return 1
    if analysis_text is not None:
        analysis = ConnectVersion.parse(analysis_text)
        if analysis is None:
            err(f"Cannot parse analysis version: {analysis_text}")
            return 2
        if not version.compare_to_analysis(analysis):
            print(f"{version} is older than analysis version {analysis}")
            return 1
    print(f"{version} is supported")
    return 0


def parse_check_version_arguments() -> Namespace:
    """Parse command line arguments for check-version."""
    parser = ArgumentParser(description="Check a Connect version number")
    parser.add_argument("version", help="Connect server version, e.g. 2019.03")
    parser.add_argument("--analysis", help="Analysis version to check compatibility with")
    add_logging_arguments(parser)
    return parser.parse_args()


def load_settings(args) -> ConnectSettings:
    """Resolve settings, exiting with status 2 if there is no server URL."""
    try:
        return resolve_settings(args)
    except ConfigError as e:
        err(str(e))
        exit(2)


def open_service(
    settings: ConnectSettings, http_client: Session, send_cookies_on_listing=False
) -> ViewsService:
    """Create a ViewsService, exiting if the session cannot be initialized."""
    try:
        return ViewsService(
            settings.url, http_client, send_cookies_on_listing=send_cookies_on_listing
        )
    except InitializationError as e:
        logger.error(str(e))
        exit(1)


def add_view_arguments(parser: ArgumentParser) -> None:
    parser.add_argument("project_id", help="Project identifier")
    parser.add_argument("view", help="View name, as shown by list-views")
    parser.add_argument(
        "--page-size",
        type=positive_int,
        default=DEFAULT_PAGE_SIZE,
        help=f"Rows per request (default: {DEFAULT_PAGE_SIZE})",
    )


def positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise ArgumentTypeError(f"must not be negative, got {value}")
    return value


def make_parser(description: str) -> ArgumentParser:
    parser = ArgumentParser(description=description)
    parser.add_argument("--url", help="Connect server URL (default: $CONNECT_URL)")
    parser.add_argument(
        "--no-verify",
        dest="verify",
        action="store_const",
        const=False,
        default=None,
        help="Do not verify the server TLS certificate",
    )
    add_logging_arguments(parser)
    return parser


def add_logging_arguments(parser: ArgumentParser) -> None:
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress INFO and below messages"
    )


def config_logging(args) -> None:
    """Configure logging based on command line arguments."""
    if args.quiet:
        log_level = logging.WARNING
    elif args.verbose:
        log_level = logging.DEBUG
    else:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


if __name__ == "__main__":
    list_views_cli()
