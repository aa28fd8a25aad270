"""Command Center — plain-English commands for construction estimating."""

__version__ = "1.0.0"

from commandcenter.actionlog.log import ActionLog, ActionLogEntry, LogStatus
from commandcenter.api.facade import CommandCenter, CommandOutcome
from commandcenter.assemblies.catalog import AssemblyCatalog
from commandcenter.assemblies.resolver import AssemblyResolver, Resolution
from commandcenter.executor.context import ExecutionContext
from commandcenter.executor.engine import CommandExecutor
from commandcenter.executor.results import BatchResult, ExecutionResult
from commandcenter.export.memory import MemoryExporter
from commandcenter.formula.evaluator import FormulaResult, evaluate_formula, extract_variables
from commandcenter.formula.variables import extract_variables_from_text
from commandcenter.nlp.parser import CommandParser, parse_command
from commandcenter.nlp.schema import Action, ActionType, CommandContext, ParseResult
from commandcenter.pricing.http import HTTPPricingService
from commandcenter.pricing.local import LocalPricingService
from commandcenter.settings import Settings, load_config
from commandcenter.store.memory import InMemoryStore
from commandcenter.store.sqlite import SQLiteStore

__all__ = [
    "Action",
    "ActionLog",
    "ActionLogEntry",
    "ActionType",
    "AssemblyCatalog",
    "AssemblyResolver",
    "BatchResult",
    "CommandCenter",
    "CommandContext",
    "CommandExecutor",
    "CommandOutcome",
    "CommandParser",
    "ExecutionContext",
    "ExecutionResult",
    "FormulaResult",
    "HTTPPricingService",
    "InMemoryStore",
    "LocalPricingService",
    "LogStatus",
    "MemoryExporter",
    "ParseResult",
    "Resolution",
    "SQLiteStore",
    "Settings",
    "evaluate_formula",
    "extract_variables",
    "extract_variables_from_text",
    "load_config",
    "parse_command",
]
