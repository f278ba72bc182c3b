"""Connect view export automation."""

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from re import sub
from typing import Any

import openpyxl
import yaml

from .errors import ResponseParseError
from .session import ViewContents, ViewsService

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 500
EXPORT_FORMATS = ("yaml", "json", "xlsx")


class ViewExporter:
    """Drains every page of a view and writes the rows to a file."""

    def __init__(self, service: ViewsService, page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.service = service
        self.page_size = page_size

    def iter_pages(
        self, project_id: str, view_name: str, strict: bool = False
    ) -> Iterator[ViewContents]:
        """Generate view contents pages until the server runs out of rows.

        The offset advances by the number of rows received. Paging stops on an
        empty or degraded page, once totalRows is reached, or, when the server
        reports no total, after a short page. RemoteCallError propagates.

        Raises:
            ResponseParseError: If strict is set and a page is degraded
        """
        offset = 0
        while True:
            page = self.service.get_view_contents(
                project_id, view_name, self.page_size, offset
            )
            if page.degraded:
                message = f"Unreadable page of {view_name} at offset {offset}"
                if strict:
                    raise ResponseParseError(message)
                logger.warning(f"{message}, stopping")
                return
            yield page

            rows = page.rows
            offset += len(rows)
            total = page.total_rows
            if not rows:
                return
            if total is not None and offset >= total:
                return
            if total is None and len(rows) < self.page_size:
                return

    def iter_rows(self, project_id: str, view_name: str) -> Iterator[Any]:
        for page in self.iter_pages(project_id, view_name):
            yield from page.rows

    def export_view(
        self, project_id: str, view_name: str, target_dir: Path, fmt: str = "yaml"
    ) -> Path:
        """Export all rows of a view to target_dir/<view_name>.<fmt>.

        Args:
            project_id: Project the view is scoped to
            view_name: Name of the view to export
            target_dir: Directory where the export file is written
            fmt: One of "yaml", "json" or "xlsx"

        Returns:
            Path of the written file

        Raises:
            ResponseParseError: If a page cannot be read; no file is written
        """
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unknown export format {fmt!r}")

        target_dir = Path(target_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Exporting view {view_name} of project {project_id} to {target_dir}")

        rows: list[Any] = []
        columns: list[Any] = []
        total_rows = None
        for page in self.iter_pages(project_id, view_name, strict=True):
            rows.extend(page.rows)
            columns = page.data.get("columns") or columns
            total_rows = page.total_rows

        document = {
            "project": project_id,
            "view": view_name,
            "totalRows": total_rows if total_rows is not None else len(rows),
            "rows": rows,
        }
        export_file = target_dir / f"{safe_filename(view_name)}.{fmt}"
        if fmt == "yaml":
            with open(export_file, "w", encoding="utf-8") as f:
                yaml.dump(document, f, default_flow_style=False, allow_unicode=True)
        elif fmt == "json":
            with open(export_file, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
        else:
            write_xlsx(export_file, columns, rows)

        logger.info(f"Created {export_file} with {len(rows)} rows")
        return export_file


def write_xlsx(path: Path, columns: list[Any], rows: list[Any]) -> None:
    """Write dict rows to a single-sheet workbook, one column per key.

    Column order follows the server's ``columns`` list when it has one,
    otherwise the order in which keys first appear in the rows.
    """
    keys = [c["name"] for c in columns if isinstance(c, dict) and "name" in c]
    for row in rows:
        if not isinstance(row, dict):
            continue
        for key in row:
            if key not in keys:
                keys.append(key)

    wb = openpyxl.Workbook(write_only=True)
    worksheet = wb.create_sheet("rows")
    worksheet.append(keys)
    for row in rows:
        if isinstance(row, dict):
            worksheet.append([_normalize_cell(row.get(k)) for k in keys])
    wb.save(path)


def _normalize_cell(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return json.dumps(value)


def safe_filename(name: str) -> str:
    """Turn a view name into a file name stem."""
    return sub(r"[^\w.-]+", "_", name).strip("_") or "view"
