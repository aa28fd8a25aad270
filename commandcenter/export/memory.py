"""Exporter that keeps documents in memory."""

from __future__ import annotations

import logging
from typing import Any

from commandcenter.export.base import CsvKind, Exporter, file_stem

logger = logging.getLogger(__name__)


class MemoryExporter(Exporter):
    """Records every export request; used by tests and headless sessions."""

    def __init__(self) -> None:
        self.exports: list[dict[str, Any]] = []

    def export_pdf(self, bundle: dict[str, Any]) -> str:
        name = f"{file_stem(bundle['project'].get('name', ''))}_estimate.pdf"
        self.exports.append({"format": "pdf", "name": name, "bundle": bundle})
        logger.info("Exported %s", name)
        return name

    def export_csv(
        self, which: CsvKind, rows: list[dict[str, Any]], project_name: str,
    ) -> str:
        name = f"{file_stem(project_name)}_{which}.csv"
        self.exports.append({"format": "csv", "name": name, "which": which, "rows": rows})
        logger.info("Exported %s (%d rows)", name, len(rows))
        return name

    @property
    def last(self) -> dict[str, Any] | None:
        return self.exports[-1] if self.exports else None
