"""Parametric trade assemblies and the resolver that expands them into drafts."""

from commandcenter.assemblies.catalog import AssemblyCatalog
from commandcenter.assemblies.models import AssemblyDefinition, AssemblyItem, AssemblyVariable
from commandcenter.assemblies.resolver import AssemblyResolver, DraftItem, Resolution, RFIRequest

__all__ = [
    "AssemblyCatalog",
    "AssemblyDefinition",
    "AssemblyItem",
    "AssemblyResolver",
    "AssemblyVariable",
    "DraftItem",
    "RFIRequest",
    "Resolution",
]
