"""Intent detectors — one pure function per command family.

Every detector receives the lower-cased command and the caller's
context and returns a :class:`Detection`.  Detectors never see each
other's output, so a sentence carrying several intents
("tax 7 markup 20", "create project X. tax 7") fires several of them.
"""

from __future__ import annotations

import re
from typing import Callable, NamedTuple

from commandcenter.config import DEFAULT_UNIT
from commandcenter.formula.variables import extract_variables_from_text
from commandcenter.nlp.keywords import (
    extract_assembly_names,
    infer_category,
    infer_project_type,
    infer_trade,
)
from commandcenter.nlp.schema import (
    Action,
    ActionType,
    AddItemParams,
    AddMultipleParams,
    CommandContext,
    CapabilitiesParams,
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
    ShowIssuesParams,
    UpdateItemParams,
)
from commandcenter.nlp.units import (
    UNIT_PATTERN,
    capitalize_words,
    normalize_unit,
    parse_number,
    parse_price,
)


class Detection(NamedTuple):
    actions: tuple[Action, ...] = ()
    missing_info: str | None = None


Detector = Callable[[str, CommandContext], Detection]

_NOTHING = Detection()


def _found(*actions: Action) -> Detection:
    return Detection(actions=actions)


def _ask(question: str) -> Detection:
    return Detection(missing_info=question)


_QTY = r"(\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)"
_PRICE = r"(?:\s+(?:at|@)\s*(\$?\s*(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{1,2})?))?"


def _qty(raw: str) -> float:
    return float(raw.replace(",", ""))


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------

_CAPABILITIES_RE = re.compile(
    r"^\s*help\s*[?!.]*\s*$|what\s+can\s+you\s+do|show\s+(?:commands|capabilities|help)"
)


def detect_capabilities(text: str, context: CommandContext) -> Detection:
    if not _CAPABILITIES_RE.search(text):
        return _NOTHING
    return _found(Action(
        type=ActionType.SYSTEM_CAPABILITIES,
        params=CapabilitiesParams(),
        confidence=1.0,
    ))


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

_CREATE_PROJECT_RE = re.compile(r"\bcreate\s+(?:a\s+)?(?:new\s+)?project\b")
_PROJECT_NAME_RE = re.compile(
    r"\bcreate\s+(?:a\s+)?(?:new\s+)?project\s+(?:called\s+|named\s+)?(.+?)(?:\.\s|\.?$)"
)
_NAME_STOP_RE = re.compile(r"\s*,?\s*\b(?:tax|markup|burden|labor\s+burden|waste|address)\b")
_ADDRESS_RE = re.compile(
    r"\baddress\s*[:=]?\s*(.+?)\s*(?:,?\s*\b(?:tax|markup|burden|labor|waste)\b|\.\s|\.?$)"
)


def detect_create_project(text: str, context: CommandContext) -> Detection:
    if not _CREATE_PROJECT_RE.search(text):
        return _NOTHING

    m = _PROJECT_NAME_RE.search(text)
    name = _NAME_STOP_RE.split(m.group(1))[0].strip(" ,") if m else ""
    if not name:
        return _ask("What should the new project be called?")

    address_match = _ADDRESS_RE.search(text)
    address = capitalize_words(address_match.group(1).strip(" ,")) if address_match else None

    return _found(Action(
        type=ActionType.PROJECT_CREATE,
        params=ProjectCreateParams(name=capitalize_words(name), address=address or None),
        confidence=0.9,
    ))


_VALUE = r"\s*(?:rate|percent|%)?\s*(?:is|to)?\s*[:=]?\s*(\d+(?:\.\d+)?|[a-z]+(?:[\s-][a-z]+)?)"

_DEFAULT_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("tax_percent", re.compile(r"\btax" + _VALUE)),
    ("markup_percent", re.compile(r"\bmarkup" + _VALUE)),
    ("labor_burden_percent", re.compile(r"\b(?:labor\s*)?burden" + _VALUE)),
    ("waste_percent", re.compile(r"\b(?:default\s*)?waste" + _VALUE)),
)


def _parse_setting(raw: str) -> float | None:
    value = parse_number(raw)
    if value is None and " " in raw.strip():
        # "seven markup" — the value is the first word only
        value = parse_number(raw.split()[0])
    return value


def detect_set_defaults(text: str, context: CommandContext) -> Detection:
    values: dict[str, float] = {}
    for field_name, regex in _DEFAULT_PATTERNS:
        m = regex.search(text)
        if not m:
            continue
        value = _parse_setting(m.group(1))
        if value is not None:
            values[field_name] = value

    if not values:
        return _NOTHING
    return _found(Action(
        type=ActionType.PROJECT_SET_DEFAULTS,
        params=SetDefaultsParams(**values),
        confidence=0.95,
    ))


# ---------------------------------------------------------------------------
# Takeoff items
# ---------------------------------------------------------------------------

_ADD_RE = re.compile(r"\badd\s+(?!(?:labor|task)\b)(?:drafts?\s+)?(.+)$")
_SEGMENT_SPLIT_RE = re.compile(r"\s*(?:;|,(?!\d{3}))\s*(?:and\s+)?(?:add\s+)?")
_ITEM_WITH_UNIT_RE = re.compile(
    r"^(.+?)\s+" + _QTY + r"\s*(" + UNIT_PATTERN + r")\b" + _PRICE
)
_ITEM_RE = re.compile(r"^(.+?)\s+" + _QTY + r"\b" + _PRICE)


def _parse_item(segment: str, draft: bool) -> AddItemParams | None:
    segment = segment.strip()
    m = _ITEM_WITH_UNIT_RE.search(segment)
    if m:
        description, qty, unit, price = m.group(1), m.group(2), normalize_unit(m.group(3)), m.group(4)
    else:
        m = _ITEM_RE.search(segment)
        if not m:
            return None
        description, qty, unit, price = m.group(1), m.group(2), DEFAULT_UNIT, m.group(3)

    description = capitalize_words(description.strip())
    return AddItemParams(
        description=description,
        quantity=_qty(qty),
        unit=unit,
        unit_cost=parse_price(price) if price else None,
        category=infer_category(description),
        draft=draft,
    )


def detect_add_items(text: str, context: CommandContext) -> Detection:
    m = _ADD_RE.search(text)
    if not m:
        return _NOTHING

    clause = m.group(1)
    # A later "add task ..." belongs to the labor detector
    labor = _LABOR_TRIGGER_RE.search(clause)
    if labor:
        clause = clause[:labor.start()]

    draft = "draft" in text
    items = [
        item for item in (
            _parse_item(segment, draft)
            for segment in _SEGMENT_SPLIT_RE.split(clause)
            if segment.strip()
        )
        if item is not None
    ]

    if not items:
        return _NOTHING
    if len(items) == 1:
        return _found(Action(
            type=ActionType.TAKEOFF_ADD_ITEM, params=items[0], confidence=0.85,
        ))
    return _found(Action(
        type=ActionType.TAKEOFF_ADD_MULTIPLE,
        params=AddMultipleParams(items=items),
        confidence=0.85,
    ))


_UPDATE_TRIGGER_RE = re.compile(r"\b(?:update|change|edit)\s+(?:takeoff\s+)?item\b")
_UPDATE_RE = re.compile(
    r"\b(?:update|change|edit)\s+(?:takeoff\s+)?item\s+(?:id\s+)?#?([\w-]+)\s+(?:set\s+)?"
    r"(quantity|qty|unit\s*cost|price|cost|description|unit|category|notes?)"
    r"\s*(?:to|=|:)?\s*(.+?)\s*$"
)


def detect_update_item(text: str, context: CommandContext) -> Detection:
    if not _UPDATE_TRIGGER_RE.search(text):
        return _NOTHING
    m = _UPDATE_RE.search(text)
    if not m:
        return _ask(
            'Which item and field should change? '
            'E.g., "update item #3f9c2a quantity 1200"'
        )

    item_id, field_name, raw = m.group(1), m.group(2), m.group(3)
    changes: dict[str, object] = {}
    if field_name in ("quantity", "qty"):
        value = parse_number(raw.replace(",", ""))
        if value is not None:
            changes["quantity"] = value
    elif field_name in ("price", "cost") or (field_name.startswith("unit") and "cost" in field_name):
        value = parse_price(raw)
        if value is not None:
            changes["unit_cost"] = value
    elif field_name == "unit":
        changes["unit"] = normalize_unit(raw)
    elif field_name == "description":
        changes["description"] = capitalize_words(raw)
    elif field_name == "category":
        changes["category"] = capitalize_words(raw)
    else:
        changes["notes"] = raw

    if not changes:
        return _ask(f'What should the new {field_name} be for item {item_id}?')
    return _found(Action(
        type=ActionType.TAKEOFF_UPDATE_ITEM,
        params=UpdateItemParams(item_id=item_id, **changes),
        confidence=0.85,
    ))


_DELETE_ITEM_TRIGGER_RE = re.compile(r"\b(?:delete|remove)\s+(?:takeoff\s+)?items?\b")
_DELETE_ITEM_IDS_RE = re.compile(
    r"\b(?:delete|remove)\s+(?:takeoff\s+)?items?\s+(?:ids?\s+|#)"
    r"([\w-]+(?:\s*(?:,|and)\s*#?[\w-]+)*)"
)


def detect_delete_items(text: str, context: CommandContext) -> Detection:
    if not _DELETE_ITEM_TRIGGER_RE.search(text):
        return _NOTHING
    m = _DELETE_ITEM_IDS_RE.search(text)
    if not m:
        return _ask(
            "Which item would you like to delete? "
            'Please provide the item ID, e.g. "delete item #3f9c2a".'
        )

    ids = [part.strip(" #") for part in re.split(r"\s*(?:,|\band\b)\s*", m.group(1))]
    ids = [i for i in dict.fromkeys(ids) if i]
    return _found(Action(
        type=ActionType.TAKEOFF_DELETE_ITEMS,
        params=DeleteItemsParams(item_ids=ids),
        confidence=0.9,
    ))


# ---------------------------------------------------------------------------
# Drafts from assemblies
# ---------------------------------------------------------------------------

_GENERATE_TRIGGER_RE = re.compile(r"\bgenerate\s+(?:drafts?|takeoff|items?)\b")
_GENERATE_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bgenerate\s+(?:drafts?|takeoff|items?)\s+(?:using|from|for)\s+(.+)"),
    re.compile(r"(.+?):\s*generate\s+drafts?\s+(?:using|from)\s+(.+)"),
)
_SENTENCE_END_RE = re.compile(r"\.(?:\s|$)")
_ASSEMBLIES_QUESTION = "Which assemblies would you like to use? (e.g., framing, drywall, electrical)"


def _assembly_fragments(listing: str) -> list[str]:
    listing = _SENTENCE_END_RE.split(listing, maxsplit=1)[0]
    # Parts carrying numbers are measurements ("walls 150 lf"), not assemblies
    parts = [p for p in re.split(r"\s*,\s*", listing) if not re.search(r"\d", p)]
    return extract_assembly_names(", ".join(parts))


def detect_generate_drafts(text: str, context: CommandContext) -> Detection:
    if not _GENERATE_TRIGGER_RE.search(text):
        return _NOTHING

    match = None
    for regex in _GENERATE_RES:
        match = regex.search(text)
        if match:
            break
    if match is None:
        return _ask(_ASSEMBLIES_QUESTION)

    assemblies = _assembly_fragments(match.group(match.lastindex or 1))
    if not assemblies:
        return _ask(_ASSEMBLIES_QUESTION)

    return _found(Action(
        type=ActionType.TAKEOFF_GENERATE_DRAFTS,
        params=GenerateDraftsParams(
            assemblies=assemblies,
            variables=extract_variables_from_text(text),
            project_type=context.project_type or infer_project_type(text),
        ),
        confidence=0.8,
    ))


_PROMOTE_RE = re.compile(r"\bpromote\s+(?:all\s+)?(?:the\s+)?(?:selected\s+)?drafts?\b")
_DELETE_DRAFTS_RE = re.compile(r"\b(?:delete|remove)\s+(?:all\s+)?(?:the\s+)?(?:selected\s+)?drafts?\b")
_ALL_RE = re.compile(r"\ball\b")


def _scope(text: str) -> str:
    return "all" if _ALL_RE.search(text) else "selected"


def detect_promote_drafts(text: str, context: CommandContext) -> Detection:
    if not _PROMOTE_RE.search(text):
        return _NOTHING
    return _found(Action(
        type=ActionType.TAKEOFF_PROMOTE_DRAFTS,
        params=DraftScopeParams(scope=_scope(text)),
        confidence=0.95,
    ))


def detect_delete_drafts(text: str, context: CommandContext) -> Detection:
    if not _DELETE_DRAFTS_RE.search(text):
        return _NOTHING
    return _found(Action(
        type=ActionType.TAKEOFF_DELETE_DRAFTS,
        params=DraftScopeParams(scope=_scope(text)),
        confidence=0.95,
    ))


_PRICE_ITEMS_RE = re.compile(
    r"\b(?:re)?price\s+(?:all\s+)?(?:the\s+)?(?:unpriced\s+)?(?:items|takeoff|materials)\b"
    r"|\blook\s*up\s+(?:all\s+)?prices?\b|\bfetch\s+prices?\b"
)
_ZIP_RE = re.compile(r"\b(?:zip|zip\s*code|in)\s+(\d{5})\b")


def detect_price_items(text: str, context: CommandContext) -> Detection:
    if not _PRICE_ITEMS_RE.search(text):
        return _NOTHING
    scope = "unpriced" if re.search(r"\b(?:unpriced|missing)\b", text) or not _ALL_RE.search(text) else "all"
    zip_match = _ZIP_RE.search(text)
    return _found(Action(
        type=ActionType.TAKEOFF_PRICE_ITEMS,
        params=PriceItemsParams(scope=scope, region=zip_match.group(1) if zip_match else None),
        confidence=0.85,
    ))


# ---------------------------------------------------------------------------
# Labor
# ---------------------------------------------------------------------------

_LABOR_TRIGGER_RE = re.compile(r"\badd\s+(?:labor\s+)?task\b")
_LABOR_RE = re.compile(
    r"\badd\s+(?:labor\s+)?task\s+(.+?)\s+" + _QTY
    + r"\s*(ea|each|sf|lf|hrs?|hours?)\b" + _PRICE
)


def detect_labor_task(text: str, context: CommandContext) -> Detection:
    if not _LABOR_TRIGGER_RE.search(text):
        return _NOTHING
    m = _LABOR_RE.search(text)
    if not m:
        return _ask(
            "Please specify: task name, quantity, unit, and optionally rate. "
            'E.g., "Add task framing 100 hr at $45"'
        )

    task_name = capitalize_words(m.group(1).strip())
    return _found(Action(
        type=ActionType.LABOR_ADD_TASK_LINE,
        params=LaborTaskParams(
            task_name=task_name,
            quantity=_qty(m.group(2)),
            unit=normalize_unit(m.group(3)),
            base_rate=parse_price(m.group(4)) if m.group(4) else None,
            trade=infer_trade(task_name),
        ),
        confidence=0.85,
    ))


# ---------------------------------------------------------------------------
# Exports, QA, plans
# ---------------------------------------------------------------------------

_EXPORT_PDF_RE = re.compile(r"\bexport\s+(?:the\s+)?(?:project\s+)?(?:as\s+)?pdf\b")
_EXPORT_CSV_RE = re.compile(r"\bexport\s+(.*?)\s*csv\b")

_CSV_KINDS: tuple[tuple[str, str], ...] = (
    ("labor", "labor"),
    ("rfi", "rfis"),
    ("assumption", "assumptions"),
    ("checklist", "checklist"),
)


def detect_export_pdf(text: str, context: CommandContext) -> Detection:
    if not _EXPORT_PDF_RE.search(text):
        return _NOTHING
    return _found(Action(
        type=ActionType.EXPORT_PDF,
        params=ExportPdfParams(include_drafts="draft" in text),
        confidence=0.95,
    ))


def detect_export_csv(text: str, context: CommandContext) -> Detection:
    m = _EXPORT_CSV_RE.search(text)
    if not m:
        return _NOTHING
    which = next((kind for key, kind in _CSV_KINDS if key in m.group(1)), "takeoff")
    return _found(Action(
        type=ActionType.EXPORT_CSV,
        params=ExportCsvParams(which=which, include_drafts="draft" in text),
        confidence=0.9,
    ))


_ISSUES_RE = re.compile(r"\b(?:show|list|check)\s*(?:qa|quality|open\s+issues?|issues?|problems?)\b")


def detect_show_issues(text: str, context: CommandContext) -> Detection:
    if not _ISSUES_RE.search(text):
        return _NOTHING
    return _found(Action(
        type=ActionType.QA_SHOW_ISSUES, params=ShowIssuesParams(), confidence=0.95,
    ))


_OPEN_PLAN_RE = re.compile(r"\bopen\s+(?:the\s+)?(?:plan|blueprint|drawing)s?\b")
_PLAN_FILE_RE = re.compile(
    r"\b(?:plan|blueprint|drawing)s?\s+(?:file\s+)?[\"']?"
    r"([\w][\w\-. ]*?\.(?:pdf|png|jpe?g|tiff?|dwg))\b"
)


def detect_open_plan(text: str, context: CommandContext) -> Detection:
    if not _OPEN_PLAN_RE.search(text):
        return _NOTHING
    m = _PLAN_FILE_RE.search(text)
    if not m:
        return _ask("Which plan file would you like to open?")
    return _found(Action(
        type=ActionType.PLANS_OPEN,
        params=OpenPlanParams(file_name=m.group(1).strip()),
        confidence=0.9,
    ))


DEFAULT_DETECTORS: tuple[Detector, ...] = (
    detect_capabilities,
    detect_create_project,
    detect_set_defaults,
    detect_add_items,
    detect_update_item,
    detect_delete_items,
    detect_generate_drafts,
    detect_promote_drafts,
    detect_delete_drafts,
    detect_price_items,
    detect_labor_task,
    detect_export_pdf,
    detect_export_csv,
    detect_show_issues,
    detect_open_plan,
)
