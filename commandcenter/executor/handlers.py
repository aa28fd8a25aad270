"""Action handlers and the dispatch table.

Each handler takes its kind's parameter model, the execution context and
the shared :class:`Services`, and returns an :class:`ExecutionResult`.
Mutating handlers put what is needed to reverse them in ``undo_data``;
:mod:`commandcenter.executor.reversal` knows how to read it back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable

from commandcenter import config
from commandcenter.assemblies.resolver import AssemblyResolver
from commandcenter.executor.context import ExecutionContext
from commandcenter.executor.results import ExecutionResult
from commandcenter.executor.sanitize import coerce_price
from commandcenter.export.base import Exporter
from commandcenter.models.records import (
    RFI,
    LaborEstimate,
    LaborLineItem,
    Project,
    TakeoffItem,
    compute_extended_cost,
)
from commandcenter.nlp.parser import capabilities
from commandcenter.nlp.schema import (
    ActionParams,
    ActionType,
    AddItemParams,
    AddMultipleParams,
    DeleteItemsParams,
    DraftScopeParams,
    ExportCsvParams,
    ExportPdfParams,
    GenerateDraftsParams,
    LaborTaskParams,
    OpenPlanParams,
    PriceItemsParams,
    ProjectCreateParams,
    SetDefaultsParams,
    UpdateItemParams,
)
from commandcenter.pricing.base import PriceCandidate, PricingService
from commandcenter.pricing.bulk import ProgressCallback, price_in_batches
from commandcenter.store.base import RecordStore

logger = logging.getLogger(__name__)

NO_PROJECT = "No project selected. Please open a project first."


class PreconditionFailed(Exception):
    """Raised when an action cannot run in the current context."""


@dataclass
class Services:
    """Collaborators available to every handler."""

    store: RecordStore
    resolver: AssemblyResolver
    pricing: PricingService | None = None
    exporter: Exporter | None = None
    pricing_batch_size: int = config.PRICING_BATCH_SIZE
    on_progress: ProgressCallback | None = None


Handler = Callable[[Any, ExecutionContext, Services], ExecutionResult]


def _require_project(ctx: ExecutionContext) -> str:
    if not ctx.project_id:
        raise PreconditionFailed(NO_PROJECT)
    return ctx.project_id


def _load_project(svc: Services, project_id: str) -> dict[str, Any]:
    project = svc.store.get(config.PROJECTS, project_id)
    if project is None:
        raise PreconditionFailed("Project not found")
    return project


def _load_item(svc: Services, project_id: str, item_id: str) -> dict[str, Any] | None:
    item = svc.store.get(config.TAKEOFF_ITEMS, item_id)
    if item is None or item.get("project_id") != project_id:
        return None
    return item


def _fmt_qty(value: float) -> str:
    return f"{value:g}"


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


def create_project(
    params: ProjectCreateParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project = Project(
        name=params.name,
        address=params.address,
        region=params.region or ctx.region or config.DEFAULT_REGION,
        user_id=ctx.user_id,
    )
    record = svc.store.insert(config.PROJECTS, project.to_record())
    logger.info("Created project %s (%s)", record["id"], record["name"])
    return ExecutionResult(
        success=True,
        action_type=ActionType.PROJECT_CREATE.value,
        message=f'Created project "{record["name"]}"',
        data={"project_id": record["id"]},
        undoable=True,
        undo_data={"project_id": record["id"]},
        navigate_to=f"/projects/{record['id']}",
    )


_DEFAULT_LABELS = dict(zip(
    config.PROJECT_DEFAULT_FIELDS,
    ("tax", "markup", "labor burden", "waste"),
))


def set_project_defaults(
    params: SetDefaultsParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)
    project = _load_project(svc, project_id)
    changes = params.changes()
    previous = {k: project.get(k) for k in changes}
    svc.store.update(config.PROJECTS, project_id, changes)

    summary = ", ".join(f"{_DEFAULT_LABELS[k]} {_fmt_qty(v)}%" for k, v in changes.items())
    return ExecutionResult(
        success=True,
        action_type=ActionType.PROJECT_SET_DEFAULTS.value,
        message=f"Updated project defaults: {summary}",
        data={"changes": changes},
        undoable=True,
        undo_data={"project_id": project_id, "previous": previous},
    )


# ---------------------------------------------------------------------------
# Takeoff items
# ---------------------------------------------------------------------------


def _new_item(project_id: str, params: AddItemParams) -> TakeoffItem:
    return TakeoffItem(
        project_id=project_id,
        category=params.category,
        description=params.description,
        unit=params.unit,
        quantity=params.quantity,
        unit_cost=coerce_price(params.unit_cost),
        draft=params.draft,
        notes=params.notes,
    )


def _describe_item(record: dict[str, Any]) -> str:
    text = f'"{record["description"]}" ({_fmt_qty(record["quantity"])} {record["unit"]}'
    if record.get("unit_cost") is not None:
        text += f" at ${record['unit_cost']:.2f}"
    return text + ")"


def add_item(
    params: AddItemParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)
    record = svc.store.insert(config.TAKEOFF_ITEMS, _new_item(project_id, params).to_record())
    kind = "draft item" if record["draft"] else "item"
    return ExecutionResult(
        success=True,
        action_type=ActionType.TAKEOFF_ADD_ITEM.value,
        message=f"Added {kind} {_describe_item(record)}",
        data={"item_id": record["id"]},
        undoable=True,
        undo_data={"item_id": record["id"]},
    )


def add_multiple_items(
    params: AddMultipleParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)
    created: list[str] = []
    try:
        for item in params.items:
            record = svc.store.insert(config.TAKEOFF_ITEMS, _new_item(project_id, item).to_record())
            created.append(record["id"])
    except Exception:
        # Leave no half-added group behind
        for item_id in created:
            svc.store.delete(config.TAKEOFF_ITEMS, item_id)
        raise

    return ExecutionResult(
        success=True,
        action_type=ActionType.TAKEOFF_ADD_MULTIPLE.value,
        message=f"Added {len(created)} items",
        data={"item_ids": created},
        undoable=True,
        undo_data={"item_ids": created},
    )


def update_item(
    params: UpdateItemParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)
    current = _load_item(svc, project_id, params.item_id)
    if current is None:
        raise PreconditionFailed(f"Item {params.item_id} not found in this project")

    changes = params.changes()
    if "unit_cost" in changes:
        changes["unit_cost"] = coerce_price(changes["unit_cost"])
    changes["extended_cost"] = compute_extended_cost(
        changes.get("quantity", current.get("quantity", 0.0)),
        changes.get("unit_cost", current.get("unit_cost")),
    )
    previous = {k: current.get(k) for k in changes}
    record = svc.store.update(config.TAKEOFF_ITEMS, params.item_id, changes)

    return ExecutionResult(
        success=True,
        action_type=ActionType.TAKEOFF_UPDATE_ITEM.value,
        message=f"Updated {_describe_item(record)}",
        data={"item_id": params.item_id, "changes": changes},
        undoable=True,
        undo_data={"item_id": params.item_id, "previous": previous},
    )


def delete_items(
    params: DeleteItemsParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)
    found = []
    missing = []
    for item_id in params.item_ids:
        item = _load_item(svc, project_id, item_id)
        if item is None:
            missing.append(item_id)
        else:
            found.append(item)
    if not found:
        raise PreconditionFailed(f"No matching items found: {', '.join(missing)}")

    for item in found:
        svc.store.delete(config.TAKEOFF_ITEMS, item["id"])

    message = f"Deleted {len(found)} item(s)"
    if missing:
        message += f"; not found: {', '.join(missing)}"
    return ExecutionResult(
        success=True,
        action_type=ActionType.TAKEOFF_DELETE_ITEMS.value,
        message=message,
        data={"deleted_count": len(found), "missing": missing},
        undoable=True,
        undo_data={"records": found},
    )


# ---------------------------------------------------------------------------
# Drafts
# ---------------------------------------------------------------------------


def generate_drafts(
    params: GenerateDraftsParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)
    resolution = svc.resolver.resolve(params.assemblies, params.variables, params.project_type)
    if not resolution.matched:
        return ExecutionResult.failure(
            ActionType.TAKEOFF_GENERATE_DRAFTS.value,
            f"No assemblies found matching: {', '.join(params.assemblies)}",
        )

    item_ids = []
    for draft in resolution.drafts:
        item = TakeoffItem(project_id=project_id, **draft.model_dump())
        item_ids.append(svc.store.insert(config.TAKEOFF_ITEMS, item.to_record())["id"])

    rfi_ids = []
    for request in resolution.rfis:
        rfi = RFI(project_id=project_id, question=request.question, trade=request.trade)
        rfi_ids.append(svc.store.insert(config.RFIS, rfi.to_record())["id"])

    logger.info(
        "Generated %d drafts and %d RFIs for project %s",
        len(item_ids), len(rfi_ids), project_id,
    )
    undoable = bool(item_ids or rfi_ids)
    return ExecutionResult(
        success=True,
        action_type=ActionType.TAKEOFF_GENERATE_DRAFTS.value,
        message=(
            f"Generated {len(item_ids)} draft items from {len(resolution.matched)} assemblies. "
            f"Created {len(rfi_ids)} RFIs for missing variables."
        ),
        data={
            "drafts_created": len(item_ids),
            "rfis_created": len(rfi_ids),
            "assemblies": resolution.matched,
            "item_ids": item_ids,
            "rfi_ids": rfi_ids,
        },
        undoable=undoable,
        undo_data={"item_ids": item_ids, "rfi_ids": rfi_ids} if undoable else None,
    )


def _scoped_drafts(
    params: DraftScopeParams, project_id: str, svc: Services,
) -> list[dict[str, Any]]:
    drafts = svc.store.list(config.TAKEOFF_ITEMS, project_id, draft=True)
    if params.scope == "all":
        return drafts
    if not params.selected_ids:
        raise PreconditionFailed(
            'No draft items selected. Select drafts first, or say "all drafts".'
        )
    selected = set(params.selected_ids)
    return [d for d in drafts if d["id"] in selected]


def promote_drafts(
    params: DraftScopeParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)
    drafts = _scoped_drafts(params, project_id, svc)
    for draft in drafts:
        svc.store.update(config.TAKEOFF_ITEMS, draft["id"], {"draft": False})

    ids = [d["id"] for d in drafts]
    return ExecutionResult(
        success=True,
        action_type=ActionType.TAKEOFF_PROMOTE_DRAFTS.value,
        message=f"Promoted {len(ids)} draft items to active",
        data={"promoted_count": len(ids)},
        undoable=bool(ids),
        undo_data={"item_ids": ids} if ids else None,
    )


def delete_drafts(
    params: DraftScopeParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)
    drafts = _scoped_drafts(params, project_id, svc)
    for draft in drafts:
        svc.store.delete(config.TAKEOFF_ITEMS, draft["id"])

    return ExecutionResult(
        success=True,
        action_type=ActionType.TAKEOFF_DELETE_DRAFTS.value,
        message=f"Deleted {len(drafts)} draft items",
        data={"deleted_count": len(drafts)},
        undoable=bool(drafts),
        undo_data={"records": drafts} if drafts else None,
    )


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


def price_items(
    params: PriceItemsParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)
    if svc.pricing is None:
        raise PreconditionFailed("Pricing service is not configured")
    project = _load_project(svc, project_id)

    items = svc.store.list(config.TAKEOFF_ITEMS, project_id)
    if params.item_ids:
        wanted = set(params.item_ids)
        items = [i for i in items if i["id"] in wanted]
    if params.scope == "unpriced":
        items = [i for i in items if i.get("unit_cost") is None]
    if not items:
        return ExecutionResult(
            success=True,
            action_type=ActionType.TAKEOFF_PRICE_ITEMS.value,
            message="No items need pricing",
            data={"priced": 0, "total": 0},
        )

    def apply(item: dict[str, Any], candidate: PriceCandidate) -> None:
        svc.store.update(config.TAKEOFF_ITEMS, item["id"], {
            "unit_cost": candidate.price,
            "extended_cost": compute_extended_cost(item.get("quantity", 0.0), candidate.price),
            "price_source": candidate.store or candidate.source,
        })

    report = price_in_batches(
        svc.pricing,
        items,
        lambda i: i["description"],
        apply,
        region=params.region or project.get("region") or ctx.region,
        batch_size=svc.pricing_batch_size,
        on_progress=svc.on_progress,
    )

    message = f"Priced {report.priced} of {report.total} items"
    if report.unmatched:
        message += f"; {report.unmatched} without a price"
    if report.failed:
        message += f"; {report.failed} failed ({report.errors[0]})"
    return ExecutionResult(
        success=not (report.failed and report.priced == 0),
        action_type=ActionType.TAKEOFF_PRICE_ITEMS.value,
        message=message,
        data={
            "total": report.total,
            "priced": report.priced,
            "unmatched": report.unmatched,
            "failed": report.failed,
            "batches": report.batches,
        },
        undoable=False,
    )


# ---------------------------------------------------------------------------
# Labor
# ---------------------------------------------------------------------------


def add_labor_task(
    params: LaborTaskParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)

    estimates = svc.store.list(config.LABOR_ESTIMATES, project_id)
    created_estimate_id = None
    if estimates:
        estimate_id = estimates[0]["id"]
    else:
        estimate = svc.store.insert(
            config.LABOR_ESTIMATES, LaborEstimate(project_id=project_id).to_record(),
        )
        estimate_id = created_estimate_id = estimate["id"]

    # An absent rate stays None, never 0
    base_rate = coerce_price(params.base_rate)
    line = LaborLineItem(
        labor_estimate_id=estimate_id,
        task_name=params.task_name,
        quantity=params.quantity,
        unit=params.unit,
        base_rate=base_rate,
        final_rate=base_rate,
        extended=round(base_rate * params.quantity, 2) if base_rate is not None else None,
        trade=params.trade,
    )
    record = svc.store.insert(config.LABOR_LINE_ITEMS, line.to_record())

    return ExecutionResult(
        success=True,
        action_type=ActionType.LABOR_ADD_TASK_LINE.value,
        message=f'Added labor task "{record["task_name"]}"',
        data={"line_item_id": record["id"], "labor_estimate_id": estimate_id},
        undoable=True,
        undo_data={"line_item_id": record["id"], "labor_estimate_id": created_estimate_id},
    )


# ---------------------------------------------------------------------------
# Exports, QA, plans, capabilities
# ---------------------------------------------------------------------------


def _require_exporter(svc: Services) -> Exporter:
    if svc.exporter is None:
        raise PreconditionFailed("Export is not configured")
    return svc.exporter


def _takeoff_rows(svc: Services, project_id: str, include_drafts: bool) -> list[dict[str, Any]]:
    items = svc.store.list(config.TAKEOFF_ITEMS, project_id)
    return items if include_drafts else [i for i in items if not i.get("draft")]


def _labor_estimates(svc: Services, project_id: str) -> list[dict[str, Any]]:
    estimates = svc.store.list(config.LABOR_ESTIMATES, project_id)
    for estimate in estimates:
        estimate["line_items"] = svc.store.list(
            config.LABOR_LINE_ITEMS, labor_estimate_id=estimate["id"],
        )
    return estimates


def export_pdf(
    params: ExportPdfParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)
    exporter = _require_exporter(svc)
    project = _load_project(svc, project_id)

    name = exporter.export_pdf({
        "project": project,
        "takeoff_items": _takeoff_rows(svc, project_id, params.include_drafts),
        "labor_estimates": _labor_estimates(svc, project_id),
        "rfis": svc.store.list(config.RFIS, project_id),
        "assumptions": svc.store.list(config.ASSUMPTIONS, project_id),
        "checklist_items": svc.store.list(config.CHECKLIST_ITEMS, project_id),
        "include_drafts": params.include_drafts,
    })
    return ExecutionResult(
        success=True,
        action_type=ActionType.EXPORT_PDF.value,
        message="PDF exported successfully",
        data={"file": name},
    )


def export_csv(
    params: ExportCsvParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)
    exporter = _require_exporter(svc)
    project = _load_project(svc, project_id)

    if params.which == "takeoff":
        rows = _takeoff_rows(svc, project_id, params.include_drafts)
    elif params.which == "labor":
        rows = [
            line for estimate in _labor_estimates(svc, project_id)
            for line in estimate["line_items"]
        ]
    elif params.which == "rfis":
        rows = svc.store.list(config.RFIS, project_id)
    elif params.which == "assumptions":
        rows = svc.store.list(config.ASSUMPTIONS, project_id)
    else:
        rows = svc.store.list(config.CHECKLIST_ITEMS, project_id)

    name = exporter.export_csv(params.which, rows, project["name"])
    return ExecutionResult(
        success=True,
        action_type=ActionType.EXPORT_CSV.value,
        message=f"{params.which} CSV exported successfully",
        data={"file": name, "rows": len(rows)},
    )


def show_issues(
    params: ActionParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)
    rfis = svc.store.list(config.RFIS, project_id, status="open")
    drafts = svc.store.list(config.TAKEOFF_ITEMS, project_id, draft=True)
    unpriced = [
        i for i in svc.store.list(config.TAKEOFF_ITEMS, project_id, draft=False)
        if i.get("unit_cost") is None
    ]
    pending = svc.store.list(config.CHECKLIST_ITEMS, project_id, status="pending")

    issues = []
    if rfis:
        issues.append(f"{len(rfis)} open RFIs need answers")
    if drafts:
        issues.append(f"{len(drafts)} draft items to review")
    if unpriced:
        issues.append(f"{len(unpriced)} items without a price")
    if pending:
        issues.append(f"{len(pending)} pending checklist items")

    message = "QA Issues:\n• " + "\n• ".join(issues) if issues else "No open QA issues found!"
    return ExecutionResult(
        success=True,
        action_type=ActionType.QA_SHOW_ISSUES.value,
        message=message,
        data={
            "open_rfis": len(rfis),
            "drafts": len(drafts),
            "unpriced": len(unpriced),
            "pending_checklist": len(pending),
            "top_issues": (
                [{"type": "rfi", "text": r["question"]} for r in rfis[:5]]
                + [{"type": "draft", "text": d["description"]} for d in drafts[:5]]
            ),
        },
    )


def open_plan(
    params: OpenPlanParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    project_id = _require_project(ctx)
    wanted = params.file_name.lower()
    plan = next(
        (p for p in svc.store.list(config.PLAN_FILES, project_id)
         if str(p.get("file_name", "")).lower() == wanted),
        None,
    )
    if plan is None:
        raise PreconditionFailed(f'Plan file "{params.file_name}" not found in this project')
    return ExecutionResult(
        success=True,
        action_type=ActionType.PLANS_OPEN.value,
        message=f'Opening plan "{plan["file_name"]}"',
        data={"plan_id": plan["id"]},
        navigate_to=f"/projects/{project_id}/plans/{plan['id']}",
    )


def list_capabilities(
    params: ActionParams, ctx: ExecutionContext, svc: Services,
) -> ExecutionResult:
    catalogue = capabilities()
    lines = ["Here's what I can do:"] + [
        f'• {c["title"]}: "{c["examples"][0]}"' for c in catalogue
    ]
    return ExecutionResult(
        success=True,
        action_type=ActionType.SYSTEM_CAPABILITIES.value,
        message="\n".join(lines),
        data={"capabilities": catalogue, "parser_version": config.PARSER_VERSION},
    )


HANDLERS: MappingProxyType[ActionType, Handler] = MappingProxyType({
    ActionType.PROJECT_CREATE: create_project,
    ActionType.PROJECT_SET_DEFAULTS: set_project_defaults,
    ActionType.TAKEOFF_ADD_ITEM: add_item,
    ActionType.TAKEOFF_ADD_MULTIPLE: add_multiple_items,
    ActionType.TAKEOFF_UPDATE_ITEM: update_item,
    ActionType.TAKEOFF_DELETE_ITEMS: delete_items,
    ActionType.TAKEOFF_GENERATE_DRAFTS: generate_drafts,
    ActionType.TAKEOFF_PROMOTE_DRAFTS: promote_drafts,
    ActionType.TAKEOFF_DELETE_DRAFTS: delete_drafts,
    ActionType.TAKEOFF_PRICE_ITEMS: price_items,
    ActionType.LABOR_ADD_TASK_LINE: add_labor_task,
    ActionType.EXPORT_PDF: export_pdf,
    ActionType.EXPORT_CSV: export_csv,
    ActionType.QA_SHOW_ISSUES: show_issues,
    ActionType.PLANS_OPEN: open_plan,
    ActionType.SYSTEM_CAPABILITIES: list_capabilities,
})
