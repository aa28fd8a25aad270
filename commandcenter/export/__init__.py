"""Export collaborator."""

from commandcenter.export.base import Exporter
from commandcenter.export.memory import MemoryExporter

__all__ = ["Exporter", "MemoryExporter"]
