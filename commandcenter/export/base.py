"""Abstract Exporter interface for estimate documents."""

from __future__ import annotations

import abc
import re
from typing import Any, Literal

CsvKind = Literal["takeoff", "labor", "rfis", "assumptions", "checklist"]


def file_stem(project_name: str) -> str:
    """Filesystem-safe stem: ``"Smith Basement"`` -> ``"smith_basement"``."""
    stem = re.sub(r"[^a-z0-9]+", "_", project_name.lower()).strip("_")
    return stem or "project"


class Exporter(abc.ABC):
    """Receives assembled project data and produces a document.

    Layout and file formats belong to the implementation.
    """

    @abc.abstractmethod
    def export_pdf(self, bundle: dict[str, Any]) -> str:
        """Export the full estimate.

        Parameters
        ----------
        bundle:
            Keys ``project``, ``takeoff_items``, ``labor_estimates``
            (each with ``line_items``), ``rfis``, ``assumptions``,
            ``checklist_items`` and ``include_drafts``.

        Returns
        -------
        str
            Name of the produced document.
        """

    @abc.abstractmethod
    def export_csv(
        self, which: CsvKind, rows: list[dict[str, Any]], project_name: str,
    ) -> str:
        """Export one table as CSV and return the document name."""

    def is_available(self) -> bool:
        """Return True if this exporter's dependencies are satisfied."""
        return True
