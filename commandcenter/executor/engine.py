"""CommandExecutor — dispatch actions, log batches, undo them."""

from __future__ import annotations

import logging
from typing import Iterable

from commandcenter import config
from commandcenter.actionlog.log import (
    ActionLog,
    ActionLogEntry,
    ActionsEnvelope,
    InvalidTransition,
    LogStatus,
    UndoRecord,
)
from commandcenter.assemblies.resolver import AssemblyResolver
from commandcenter.executor.context import ExecutionContext
from commandcenter.executor.handlers import HANDLERS, PreconditionFailed, Services
from commandcenter.executor.results import BatchResult, ExecutionResult
from commandcenter.executor.reversal import apply, inverse_operations
from commandcenter.export.base import Exporter
from commandcenter.nlp.schema import Action, ActionType
from commandcenter.pricing.base import PricingError, PricingService
from commandcenter.pricing.bulk import ProgressCallback
from commandcenter.store.base import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)

UNDO = "undo"
LOG_NOT_FOUND = "Action log not found"
CANNOT_UNDO = "This action cannot be undone"


class CommandExecutor:
    """Runs parsed actions against a record store.

    Parameters
    ----------
    store:
        The record store collaborator.
    action_log:
        Where each executed batch is recorded.  Defaults to an
        in-memory :class:`ActionLog`.
    resolver:
        Assembly resolver for draft generation.
    pricing:
        Optional pricing collaborator for ``takeoff.price_items``.
    exporter:
        Optional export collaborator for ``export.*``.
    pricing_batch_size:
        Items per pricing call.
    on_progress:
        Called with ``(processed, total)`` between pricing batches.
    """

    def __init__(
        self,
        store: RecordStore,
        action_log: ActionLog | None = None,
        resolver: AssemblyResolver | None = None,
        pricing: PricingService | None = None,
        exporter: Exporter | None = None,
        pricing_batch_size: int = config.PRICING_BATCH_SIZE,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.store = store
        self.action_log = action_log or ActionLog()
        self._services = Services(
            store=store,
            resolver=resolver or AssemblyResolver(),
            pricing=pricing,
            exporter=exporter,
            pricing_batch_size=pricing_batch_size,
            on_progress=on_progress,
        )

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute_action(
        self, action: Action, context: ExecutionContext | None = None,
    ) -> ExecutionResult:
        """Run one action.  Never raises; failures come back as results."""
        ctx = context or ExecutionContext()
        kind = action.type.value
        handler = HANDLERS.get(action.type)
        if handler is None:
            return ExecutionResult.failure(kind, f"Unknown action type: {kind}")

        try:
            result = handler(action.params, ctx, self._services)
        except PreconditionFailed as exc:
            result = ExecutionResult.failure(kind, str(exc))
        except (RecordStoreError, PricingError) as exc:
            result = ExecutionResult.failure(kind, str(exc))
        except Exception as exc:
            logger.warning("Action %s raised", kind, exc_info=True)
            result = ExecutionResult.failure(kind, str(exc) or type(exc).__name__)

        if not result.success:
            logger.warning("Action %s failed: %s", kind, result.message)
        return result

    def execute_actions(
        self,
        actions: Iterable[Action],
        context: ExecutionContext | None = None,
    ) -> BatchResult:
        """Run *actions* in order and record the batch in the action log.

        A successful ``project.create`` supplies the project for the
        remaining actions when the context has none.  A failed action
        does not stop the ones after it, and does not roll back the ones
        before it.
        """
        ctx = context or ExecutionContext()
        actions = list(actions)
        results: list[ExecutionResult] = []

        for action in actions:
            result = self.execute_action(action, ctx)
            results.append(result)
            if (
                result.success
                and action.type is ActionType.PROJECT_CREATE
                and not ctx.project_id
                and result.data
            ):
                ctx = ctx.model_copy(update={"project_id": result.data["project_id"]})

        if not actions:
            return BatchResult(results=results)

        return BatchResult(results=results, log_id=self._log_batch(actions, results, ctx))

    def _log_batch(
        self,
        actions: list[Action],
        results: list[ExecutionResult],
        ctx: ExecutionContext,
    ) -> str | None:
        failed = next((r for r in results if not r.success), None)
        undo_records = [
            UndoRecord(type=r.action_type, data=r.undo_data)
            for r in results
            if r.success and r.undoable and r.undo_data is not None
        ]
        entry = ActionLogEntry(
            project_id=ctx.project_id,
            source=ctx.source,
            command_text=ctx.command_text,
            actions_json=ActionsEnvelope(actions=[a.to_dict() for a in actions]),
            status=LogStatus.FAILED if failed else LogStatus.APPLIED,
            error=failed.message if failed else None,
            undoable=bool(undo_records),
            undo_data=undo_records or None,
        )
        try:
            return self.action_log.append(entry).id
        except Exception:
            logger.warning("Could not write action log entry", exc_info=True)
            return None

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------

    def undo_action(self, log_id: str) -> ExecutionResult:
        """Reverse a logged batch, replaying its payloads in original order.

        A store error stops the replay and leaves the entry ``applied``;
        the message says how many payloads were already reverted.  Inverse
        operations are idempotent, so calling undo again finishes the job.
        """
        entry = self.action_log.get(log_id)
        if entry is None:
            return ExecutionResult.failure(UNDO, LOG_NOT_FOUND)
        if entry.status is not LogStatus.APPLIED or not entry.undoable or not entry.undo_data:
            return ExecutionResult.failure(UNDO, CANNOT_UNDO)

        total = len(entry.undo_data)
        reverted = 0
        try:
            for record in entry.undo_data:
                for op in inverse_operations(record.type, record.data):
                    apply(self.store, op)
                reverted += 1
        except (KeyError, ValueError) as exc:
            logger.warning("Undo of %s has an unusable payload", log_id, exc_info=True)
            return ExecutionResult.failure(UNDO, f"Undo failed: {exc}")
        except RecordStoreError as exc:
            logger.warning("Undo of %s stopped after %d of %d action(s): %s", log_id, reverted, total, exc)
            return ExecutionResult.failure(
                UNDO, f"{exc} (reverted {reverted} of {total} action(s); undo again to finish)",
            )

        try:
            self.action_log.mark_undone(log_id)
        except InvalidTransition:
            return ExecutionResult.failure(UNDO, CANNOT_UNDO)

        logger.info("Undid batch %s (%d action(s))", log_id, len(entry.undo_data))
        return ExecutionResult(
            success=True,
            action_type=UNDO,
            message=f"Undid {len(entry.undo_data)} action(s)",
            data={"log_id": log_id, "reverted": [r.type for r in entry.undo_data]},
        )
