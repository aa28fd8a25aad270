"""CommandCenter — the single entry point for the command pipeline.

Usage::

    from commandcenter import CommandCenter

    cc = CommandCenter()
    outcome = cc.run("create project Smith Basement. tax 7 markup 20")
    cc.run("add drywall 1050 sf at $12.99", {"project_id": outcome.project_id})
    cc.undo(outcome.log_id)
    cc.history()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

from commandcenter.actionlog.log import ActionLog, ActionLogEntry
from commandcenter.assemblies.catalog import AssemblyCatalog
from commandcenter.assemblies.resolver import AssemblyResolver
from commandcenter.executor.context import ExecutionContext
from commandcenter.executor.engine import CommandExecutor
from commandcenter.executor.results import BatchResult, ExecutionResult
from commandcenter.export.base import Exporter
from commandcenter.export.memory import MemoryExporter
from commandcenter.nlp.parser import CommandParser
from commandcenter.nlp.schema import CommandContext, ParseResult
from commandcenter.pricing.base import PricingService
from commandcenter.pricing.bulk import ProgressCallback
from commandcenter.pricing.http import HTTPPricingService
from commandcenter.pricing.local import LocalPricingService
from commandcenter.settings import Settings, apply_log_level, load_config
from commandcenter.store.base import RecordStore
from commandcenter.store.sqlite import SQLiteStore

logger = logging.getLogger(__name__)


class CommandOutcome(BaseModel):
    """What one ``run`` produced: the parse, and the batch if anything ran."""

    text: str
    parse: ParseResult
    batch: Optional[BatchResult] = None

    @property
    def success(self) -> bool:
        return self.batch is not None and self.batch.success

    @property
    def log_id(self) -> str | None:
        return self.batch.log_id if self.batch else None

    @property
    def results(self) -> list[ExecutionResult]:
        return self.batch.results if self.batch else []

    @property
    def project_id(self) -> str | None:
        """Id of a project created by this command, if any."""
        for result in self.results:
            if result.success and result.data and "project_id" in result.data:
                return result.data["project_id"]
        return None

    @property
    def message(self) -> str:
        if self.batch is None:
            return self.parse.missing_info or self.parse.error or ""
        return "\n".join(r.message for r in self.batch.results)


class CommandCenter:
    """The public interface for the command pipeline.

    Parameters
    ----------
    store:
        Record store.  Defaults to a :class:`SQLiteStore` at
        ``settings.store_db``.
    action_log:
        Batch log.  Defaults to an :class:`ActionLog` at
        ``settings.action_log_db``.
    catalog:
        Assembly catalog.  Defaults to the seed library.
    pricing:
        Pricing collaborator.  Defaults to :class:`HTTPPricingService`
        when ``settings.pricing_url`` is set, else the embedded price book.
    exporter:
        Export collaborator.  Defaults to :class:`MemoryExporter`.
    settings:
        Resolved configuration.  If *None*, loaded from *project_path*.
    project_path:
        Where ``.env`` and ``.commandcenter/config.json`` are looked up.
    on_progress:
        Called with ``(processed, total)`` between pricing batches.
    """

    def __init__(
        self,
        store: RecordStore | None = None,
        action_log: ActionLog | None = None,
        catalog: AssemblyCatalog | None = None,
        pricing: PricingService | None = None,
        exporter: Exporter | None = None,
        settings: Settings | None = None,
        project_path: str | Path = ".",
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.settings = settings or load_config(project_path)
        apply_log_level(self.settings)

        self.store = store or SQLiteStore(self.settings.store_db)
        self.action_log = action_log or ActionLog(self.settings.action_log_db)
        self.catalog = catalog if catalog is not None else AssemblyCatalog()
        self.pricing = pricing or self._default_pricing()
        self.exporter = exporter or MemoryExporter()

        self.parser = CommandParser()
        self.executor = CommandExecutor(
            self.store,
            action_log=self.action_log,
            resolver=AssemblyResolver(self.catalog),
            pricing=self.pricing,
            exporter=self.exporter,
            pricing_batch_size=self.settings.pricing_batch_size,
            on_progress=on_progress,
        )
        logger.debug("CommandCenter ready (env=%s)", self.settings.env)

    def _default_pricing(self) -> PricingService:
        if self.settings.pricing_url:
            return HTTPPricingService(self.settings.pricing_url, self.settings.pricing_api_key or None)
        return LocalPricingService()

    # -- Parsing -----------------------------------------------------------

    def parse(
        self, text: str, context: CommandContext | dict[str, Any] | None = None,
    ) -> ParseResult:
        """Parse *text* without executing anything."""
        return self.parser.parse(text, context)

    # -- Execution ---------------------------------------------------------

    def run(
        self,
        text: str,
        context: CommandContext | dict[str, Any] | None = None,
        source: str = "command_center",
        user_id: str | None = None,
    ) -> CommandOutcome:
        """Parse *text* and, if it parsed, execute and log the actions.

        Parameters
        ----------
        text:
            The user's command.
        context:
            Active ``project_id`` / ``project_type``.
        source:
            Recorded on the action-log entry.
        user_id:
            Recorded on created projects.
        """
        if context is None:
            ctx = CommandContext()
        elif isinstance(context, CommandContext):
            ctx = context
        else:
            ctx = CommandContext.model_validate(context)

        parsed = self.parser.parse(text, ctx)
        if not parsed.success:
            return CommandOutcome(text=text, parse=parsed)

        exec_ctx = ExecutionContext(
            project_id=ctx.project_id,
            project_type=ctx.project_type,
            user_id=user_id,
            source=source,
            command_text=text,
            region=self.settings.default_region,
        )
        batch = self.executor.execute_actions(parsed.actions, exec_ctx)
        return CommandOutcome(text=text, parse=parsed, batch=batch)

    def undo(self, log_id: str) -> ExecutionResult:
        """Undo a previously executed command by its log id."""
        return self.executor.undo_action(log_id)

    # -- History -----------------------------------------------------------

    def history(
        self, project_id: str | None = None, limit: int | None = None,
    ) -> list[ActionLogEntry]:
        """Logged batches, newest first."""
        return self.action_log.list(project_id=project_id, limit=limit)
