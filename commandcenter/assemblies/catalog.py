"""AssemblyCatalog — register and query assembly definitions."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from commandcenter.assemblies.models import AssemblyDefinition
from commandcenter.assemblies.seed_data import SEED_ASSEMBLIES

logger = logging.getLogger(__name__)


class AssemblyCatalog:
    """In-memory registry of assembly definitions keyed by id.

    Parameters
    ----------
    assemblies:
        Definitions (models or plain dicts) to start from.  If *None*,
        the embedded seed library is loaded.
    """

    def __init__(
        self,
        assemblies: Iterable[AssemblyDefinition | dict[str, Any]] | None = None,
    ) -> None:
        self._assemblies: dict[str, AssemblyDefinition] = {}
        for assembly in SEED_ASSEMBLIES if assemblies is None else assemblies:
            self.register(assembly)

    def register(self, assembly: AssemblyDefinition | dict[str, Any]) -> AssemblyDefinition:
        """Add or replace a definition."""
        if not isinstance(assembly, AssemblyDefinition):
            assembly = AssemblyDefinition.model_validate(assembly)
        self._assemblies[assembly.id] = assembly
        logger.debug("Registered assembly: %s", assembly.id)
        return assembly

    def get(self, assembly_id: str) -> AssemblyDefinition | None:
        return self._assemblies.get(assembly_id)

    def list_all(self) -> list[AssemblyDefinition]:
        return list(self._assemblies.values())

    def for_project_type(self, project_type: str) -> list[AssemblyDefinition]:
        """Return every definition tagged with *project_type*."""
        return [a for a in self._assemblies.values() if project_type in a.project_types]

    def match(self, fragments: Iterable[str], project_type: str) -> list[AssemblyDefinition]:
        """Definitions for *project_type* matching any of *fragments*.

        Union semantics: ``["framing", "drywall"]`` returns both trades.
        """
        fragments = [f for f in fragments if f and f.strip()]
        return [
            a for a in self.for_project_type(project_type)
            if any(a.matches(f) for f in fragments)
        ]

    def __len__(self) -> int:
        return len(self._assemblies)
