"""Reversal strategies: undo payload -> inverse store operations.

Each strategy is a pure function of the payload its handler stored.  The
executor applies the returned operations in order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Union

from commandcenter import config
from commandcenter.nlp.schema import ActionType
from commandcenter.store.base import RecordStore


@dataclass(frozen=True)
class Insert:
    collection: str
    record: dict[str, Any]


@dataclass(frozen=True)
class Update:
    collection: str
    record_id: str
    changes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Delete:
    collection: str
    record_id: str


InverseOp = Union[Insert, Update, Delete]
Reversal = Callable[[dict[str, Any]], list[InverseOp]]


def _delete_project(data: dict[str, Any]) -> list[InverseOp]:
    return [Delete(config.PROJECTS, data["project_id"])]


def _restore_project_defaults(data: dict[str, Any]) -> list[InverseOp]:
    return [Update(config.PROJECTS, data["project_id"], dict(data["previous"]))]


def _delete_item(data: dict[str, Any]) -> list[InverseOp]:
    return [Delete(config.TAKEOFF_ITEMS, data["item_id"])]


def _delete_items(data: dict[str, Any]) -> list[InverseOp]:
    return [Delete(config.TAKEOFF_ITEMS, i) for i in data.get("item_ids", [])]


def _restore_item(data: dict[str, Any]) -> list[InverseOp]:
    return [Update(config.TAKEOFF_ITEMS, data["item_id"], dict(data["previous"]))]


def _reinsert_items(data: dict[str, Any]) -> list[InverseOp]:
    return [Insert(config.TAKEOFF_ITEMS, dict(r)) for r in data.get("records", [])]


def _delete_drafts_and_rfis(data: dict[str, Any]) -> list[InverseOp]:
    return (
        [Delete(config.TAKEOFF_ITEMS, i) for i in data.get("item_ids", [])]
        + [Delete(config.RFIS, i) for i in data.get("rfi_ids", [])]
    )


def _demote_items(data: dict[str, Any]) -> list[InverseOp]:
    return [Update(config.TAKEOFF_ITEMS, i, {"draft": True}) for i in data.get("item_ids", [])]


def _delete_labor_line(data: dict[str, Any]) -> list[InverseOp]:
    ops: list[InverseOp] = [Delete(config.LABOR_LINE_ITEMS, data["line_item_id"])]
    if data.get("labor_estimate_id"):
        ops.append(Delete(config.LABOR_ESTIMATES, data["labor_estimate_id"]))
    return ops


REVERSALS: MappingProxyType[ActionType, Reversal] = MappingProxyType({
    ActionType.PROJECT_CREATE: _delete_project,
    ActionType.PROJECT_SET_DEFAULTS: _restore_project_defaults,
    ActionType.TAKEOFF_ADD_ITEM: _delete_item,
    ActionType.TAKEOFF_ADD_MULTIPLE: _delete_items,
    ActionType.TAKEOFF_UPDATE_ITEM: _restore_item,
    ActionType.TAKEOFF_DELETE_ITEMS: _reinsert_items,
    ActionType.TAKEOFF_GENERATE_DRAFTS: _delete_drafts_and_rfis,
    ActionType.TAKEOFF_PROMOTE_DRAFTS: _demote_items,
    ActionType.TAKEOFF_DELETE_DRAFTS: _reinsert_items,
    ActionType.LABOR_ADD_TASK_LINE: _delete_labor_line,
})


def inverse_operations(action_type: str, data: dict[str, Any]) -> list[InverseOp]:
    """Look up the strategy for *action_type* and apply it to *data*.

    Raises ``KeyError`` for kinds that have no reversal.
    """
    return REVERSALS[ActionType(action_type)](data)


def apply(store: RecordStore, op: InverseOp) -> bool:
    """Apply *op* to *store*.  Returns ``False`` if it was already in effect.

    An operation whose effect is already present is skipped, so a partly
    applied undo can be run again.
    """
    if isinstance(op, Insert):
        record_id = op.record.get("id")
        if record_id is not None and store.get(op.collection, record_id) is not None:
            return False
        store.insert(op.collection, op.record)
    elif isinstance(op, Update):
        if store.get(op.collection, op.record_id) is None:
            return False
        store.update(op.collection, op.record_id, op.changes)
    else:
        return store.delete(op.collection, op.record_id) is not None
    return True
