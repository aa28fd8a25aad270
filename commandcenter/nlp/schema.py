"""Action vocabulary — the structured output of the command parser.

Every action kind has its own parameter model.  ``Action`` checks its
``params`` against the model registered for its ``type`` once, at
construction, so executors never cast loosely-typed fields.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, model_validator

from commandcenter.config import DEFAULT_UNIT, PARSER_VERSION, SCHEMA_VERSION


class ActionType(str, Enum):
    """Closed set of executable action kinds."""

    PROJECT_CREATE = "project.create"
    PROJECT_SET_DEFAULTS = "project.set_defaults"
    TAKEOFF_ADD_ITEM = "takeoff.add_item"
    TAKEOFF_ADD_MULTIPLE = "takeoff.add_multiple"
    TAKEOFF_UPDATE_ITEM = "takeoff.update_item"
    TAKEOFF_DELETE_ITEMS = "takeoff.delete_items"
    TAKEOFF_GENERATE_DRAFTS = "takeoff.generate_drafts_from_assemblies"
    TAKEOFF_PROMOTE_DRAFTS = "takeoff.promote_drafts"
    TAKEOFF_DELETE_DRAFTS = "takeoff.delete_drafts"
    TAKEOFF_PRICE_ITEMS = "takeoff.price_items"
    LABOR_ADD_TASK_LINE = "labor.add_task_line"
    EXPORT_PDF = "export.pdf"
    EXPORT_CSV = "export.csv"
    QA_SHOW_ISSUES = "qa.show_issues"
    PLANS_OPEN = "plans.open"
    SYSTEM_CAPABILITIES = "system.capabilities"


# ---------------------------------------------------------------------------
# Parameter models, one per action kind
# ---------------------------------------------------------------------------


class ActionParams(BaseModel):
    """Base class for per-kind action parameters."""

    model_config = ConfigDict(extra="forbid")


class ProjectCreateParams(ActionParams):
    name: str = Field(min_length=1)
    address: str | None = None
    region: str | None = None


class SetDefaultsParams(ActionParams):
    tax_percent: float | None = None
    markup_percent: float | None = None
    labor_burden_percent: float | None = None
    waste_percent: float | None = None

    @model_validator(mode="after")
    def _require_one_field(self) -> SetDefaultsParams:
        if not self.changes():
            raise ValueError("at least one default must be set")
        return self

    def changes(self) -> dict[str, float]:
        """Return only the fields this action sets."""
        return {k: v for k, v in self.model_dump().items() if v is not None}


class AddItemParams(ActionParams):
    description: str = Field(min_length=1)
    quantity: float
    unit: str = DEFAULT_UNIT
    unit_cost: float | None = None
    """``None`` means no price yet, which is not the same as a zero cost."""

    category: str = "General"
    draft: bool = False
    notes: str | None = None


class AddMultipleParams(ActionParams):
    items: list[AddItemParams] = Field(min_length=1)


class UpdateItemParams(ActionParams):
    item_id: str = Field(min_length=1)
    description: str | None = None
    quantity: float | None = None
    unit: str | None = None
    unit_cost: float | None = None
    category: str | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def _require_one_field(self) -> UpdateItemParams:
        if not self.changes():
            raise ValueError("at least one field must be updated")
        return self

    def changes(self) -> dict[str, Any]:
        """Return the fields this action overwrites."""
        return {
            k: v for k, v in self.model_dump().items()
            if k != "item_id" and v is not None
        }


class DeleteItemsParams(ActionParams):
    item_ids: list[str] = Field(min_length=1)


class GenerateDraftsParams(ActionParams):
    assemblies: list[str] = Field(min_length=1)
    variables: dict[str, float] = Field(default_factory=dict)
    project_type: str
    draft: Literal[True] = True


class DraftScopeParams(ActionParams):
    """Shared by promote and delete: every draft, or the caller's selection."""

    scope: Literal["all", "selected"] = "selected"
    selected_ids: list[str] = Field(default_factory=list)


class PriceItemsParams(ActionParams):
    scope: Literal["all", "unpriced"] = "unpriced"
    item_ids: list[str] = Field(default_factory=list)
    region: str | None = None


class LaborTaskParams(ActionParams):
    task_name: str = Field(min_length=1)
    quantity: float
    unit: str = DEFAULT_UNIT
    base_rate: float | None = None
    trade: str = "General"


class ExportPdfParams(ActionParams):
    include_drafts: bool = False


class ExportCsvParams(ActionParams):
    which: Literal["takeoff", "labor", "rfis", "assumptions", "checklist"] = "takeoff"
    include_drafts: bool = False


class ShowIssuesParams(ActionParams):
    pass


class OpenPlanParams(ActionParams):
    file_name: str = Field(min_length=1)


class CapabilitiesParams(ActionParams):
    version: str = PARSER_VERSION


ACTION_PARAMS: MappingProxyType[ActionType, type[ActionParams]] = MappingProxyType({
    ActionType.PROJECT_CREATE: ProjectCreateParams,
    ActionType.PROJECT_SET_DEFAULTS: SetDefaultsParams,
    ActionType.TAKEOFF_ADD_ITEM: AddItemParams,
    ActionType.TAKEOFF_ADD_MULTIPLE: AddMultipleParams,
    ActionType.TAKEOFF_UPDATE_ITEM: UpdateItemParams,
    ActionType.TAKEOFF_DELETE_ITEMS: DeleteItemsParams,
    ActionType.TAKEOFF_GENERATE_DRAFTS: GenerateDraftsParams,
    ActionType.TAKEOFF_PROMOTE_DRAFTS: DraftScopeParams,
    ActionType.TAKEOFF_DELETE_DRAFTS: DraftScopeParams,
    ActionType.TAKEOFF_PRICE_ITEMS: PriceItemsParams,
    ActionType.LABOR_ADD_TASK_LINE: LaborTaskParams,
    ActionType.EXPORT_PDF: ExportPdfParams,
    ActionType.EXPORT_CSV: ExportCsvParams,
    ActionType.QA_SHOW_ISSUES: ShowIssuesParams,
    ActionType.PLANS_OPEN: OpenPlanParams,
    ActionType.SYSTEM_CAPABILITIES: CapabilitiesParams,
})


# ---------------------------------------------------------------------------
# Actions and parse results
# ---------------------------------------------------------------------------


class Action(BaseModel):
    """A typed, parameterised instruction produced by the parser."""

    type: ActionType
    params: SerializeAsAny[ActionParams]
    confidence: float = Field(ge=0.0, le=1.0)
    """Pattern specificity, 0.0 to 1.0 — not a probability of correctness."""

    @model_validator(mode="before")
    @classmethod
    def _coerce_params(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        try:
            kind = ActionType(data.get("type"))
        except ValueError:
            return data  # field validation reports the bad type

        params_cls = ACTION_PARAMS[kind]
        params = data.get("params", {})
        if isinstance(params, params_cls):
            return data
        if isinstance(params, ActionParams):
            raise ValueError(
                f"{type(params).__name__} is not valid for {kind.value}"
            )
        return {**data, "type": kind, "params": params_cls.model_validate(params)}

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation used in the action log."""
        return {
            "type": self.type.value,
            "params": self.params.model_dump(mode="json"),
            "confidence": self.confidence,
        }


class CommandContext(BaseModel):
    """What the caller knows about the active project."""

    project_id: str | None = None
    project_type: str | None = None


class ParseResult(BaseModel):
    """Outcome of parsing one command.

    Exactly one of a non-empty ``actions``, ``missing_info`` or ``error``
    carries meaning.
    """

    success: bool
    actions: list[Action] = Field(default_factory=list)
    missing_info: str | None = None
    """Intent recognised but detail is missing — ask the user."""

    error: str | None = None
    """Nothing recognised — help text."""

    schema_version: int = SCHEMA_VERSION
    parser_version: str = PARSER_VERSION
