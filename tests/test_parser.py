"""Tests for the command parser and its detectors."""

from __future__ import annotations

import pytest

from commandcenter.nlp import (
    HELP_TEXT,
    Action,
    ActionType,
    CommandContext,
    CommandParser,
    capabilities,
    parse_command,
)
from commandcenter.nlp.detectors import Detection, detect_add_items, detect_set_defaults
from commandcenter.nlp.keywords import extract_assembly_names, infer_category, infer_trade
from commandcenter.nlp.schema import AddItemParams, SetDefaultsParams
from commandcenter.nlp.units import normalize_unit, parse_number, parse_price


def _only(text: str, context: dict | None = None) -> Action:
    result = parse_command(text, context)
    assert result.success, result.error or result.missing_info
    assert len(result.actions) == 1
    return result.actions[0]


# ---------------------------------------------------------------------------
# Takeoff items
# ---------------------------------------------------------------------------

class TestAddItems:

    def test_single_item_with_price(self) -> None:
        action = _only("Add drywall 1050 sf at $12.99")
        assert action.type is ActionType.TAKEOFF_ADD_ITEM
        assert action.params.description == "Drywall"
        assert action.params.quantity == 1050
        assert action.params.unit == "SF"
        assert action.params.unit_cost == 12.99
        assert action.params.category == "Drywall"
        assert action.params.draft is False

    def test_item_without_unit_defaults_to_each(self) -> None:
        action = _only("add recessed light 12")
        assert action.params.unit == "EA"
        assert action.params.unit_cost is None

    def test_thousands_separator_is_not_a_segment_break(self) -> None:
        action = _only("add drywall 1,050 sf at $12.99")
        assert action.type is ActionType.TAKEOFF_ADD_ITEM
        assert action.params.quantity == 1050

    def test_several_items(self) -> None:
        action = _only("add studs 120 ea at $4.25; drywall 40 sheets at $14")
        assert action.type is ActionType.TAKEOFF_ADD_MULTIPLE
        first, second = action.params.items
        assert (first.description, first.quantity, first.unit, first.unit_cost) == ("Studs", 120, "EA", 4.25)
        assert first.category == "Framing"
        assert (second.description, second.quantity, second.unit, second.unit_cost) == ("Drywall", 40, "SHT", 14.0)

    def test_draft_keyword_marks_items_as_drafts(self) -> None:
        action = _only("add draft insulation 600 sf")
        assert action.params.description == "Insulation"
        assert action.params.draft is True

    def test_price_with_thousands_separator(self) -> None:
        action = _only("add cabinets 12 ea at $1,250.00")
        assert action.params.unit_cost == 1250.0

    def test_several_items_with_large_prices(self) -> None:
        action = _only("add cabinets 12 ea at $1,250.00; countertop 1 ea at $2,400")
        assert [i.unit_cost for i in action.params.items] == [1250.0, 2400.0]

    def test_labor_phrasing_is_not_a_material(self) -> None:
        assert detect_add_items("add task framing 100 hr", CommandContext()) == Detection()

    def test_item_and_labor_task_in_one_command(self) -> None:
        result = parse_command("add drywall 100 sf. add task framing 10 hr at $45")
        assert [a.type for a in result.actions] == [
            ActionType.TAKEOFF_ADD_ITEM, ActionType.LABOR_ADD_TASK_LINE,
        ]
        assert result.actions[0].params.description == "Drywall"
        assert result.actions[1].params.task_name == "Framing"

    def test_labor_task_first_then_item(self) -> None:
        detection = detect_add_items("add task framing 10 hr, add drywall 100 sf", CommandContext())
        assert [a.params.description for a in detection.actions] == ["Drywall"]


class TestUpdateAndDelete:

    def test_update_quantity(self) -> None:
        action = _only("update item #abc123 quantity 1200")
        assert action.type is ActionType.TAKEOFF_UPDATE_ITEM
        assert action.params.item_id == "abc123"
        assert action.params.changes() == {"quantity": 1200}

    def test_update_price(self) -> None:
        action = _only("change item abc123 price to $15.50")
        assert action.params.changes() == {"unit_cost": 15.5}

    def test_update_without_field_asks(self) -> None:
        result = parse_command("update item")
        assert result.success is False
        assert result.missing_info is not None

    def test_delete_by_id(self) -> None:
        action = _only("delete item #abc123")
        assert action.type is ActionType.TAKEOFF_DELETE_ITEMS
        assert action.params.item_ids == ["abc123"]

    def test_delete_several_ids(self) -> None:
        action = _only("delete items #a1, #b2")
        assert action.params.item_ids == ["a1", "b2"]

    def test_delete_without_target_asks_instead_of_guessing(self) -> None:
        result = parse_command("delete item")
        assert result.success is False
        assert result.actions == []
        assert "item ID" in result.missing_info


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

class TestProjects:

    def test_tax_and_markup(self) -> None:
        action = _only("tax 7 markup 20")
        assert action.type is ActionType.PROJECT_SET_DEFAULTS
        assert action.params.changes() == {"tax_percent": 7, "markup_percent": 20}

    def test_number_words(self) -> None:
        action = _only("set tax to seven and waste 10%")
        assert action.params.changes() == {"tax_percent": 7, "waste_percent": 10}

    def test_no_defaults_detected(self) -> None:
        assert detect_set_defaults("add drywall 10 sf", CommandContext()) == Detection()

    def test_create_then_defaults_in_one_sentence(self) -> None:
        result = parse_command("Create project Smith Basement. tax 7 markup 20")
        assert [a.type for a in result.actions] == [
            ActionType.PROJECT_CREATE,
            ActionType.PROJECT_SET_DEFAULTS,
        ]
        assert result.actions[0].params.name == "Smith Basement"

    def test_create_with_address(self) -> None:
        action = _only("create project Elm Street Reno address 12 elm st")
        assert action.params.name == "Elm Street Reno"
        assert action.params.address == "12 Elm St"

    def test_create_without_name_asks(self) -> None:
        result = parse_command("create project")
        assert result.missing_info == "What should the new project be called?"


# ---------------------------------------------------------------------------
# Drafts, pricing, labor
# ---------------------------------------------------------------------------

class TestDrafts:

    def test_generate_with_measurements(self) -> None:
        action = _only("generate drafts using framing, drywall. walls 150 lf, 8 ft ceilings")
        assert action.type is ActionType.TAKEOFF_GENERATE_DRAFTS
        assert action.params.assemblies == ["framing", "drywall"]
        assert action.params.variables == {"wall_lf": 150.0, "ceiling_height": 8.0}
        assert action.params.project_type == "basement_finish"
        assert action.params.draft is True

    def test_context_project_type_wins(self) -> None:
        action = _only(
            "generate drafts using framing, walls 150 lf",
            {"project_type": "addition"},
        )
        assert action.params.assemblies == ["framing"]
        assert action.params.project_type == "addition"

    def test_project_type_inferred_from_text(self) -> None:
        action = _only("generate drafts for deck framing, deck 300 sf")
        assert action.params.project_type == "deck"

    def test_generate_without_assemblies_asks(self) -> None:
        result = parse_command("generate drafts")
        assert result.missing_info is not None
        assert "assemblies" in result.missing_info

    @pytest.mark.parametrize("text, kind, scope", [
        ("promote all drafts", ActionType.TAKEOFF_PROMOTE_DRAFTS, "all"),
        ("promote selected drafts", ActionType.TAKEOFF_PROMOTE_DRAFTS, "selected"),
        ("delete all drafts", ActionType.TAKEOFF_DELETE_DRAFTS, "all"),
    ])
    def test_draft_scope(self, text: str, kind: ActionType, scope: str) -> None:
        action = _only(text)
        assert action.type is kind
        assert action.params.scope == scope


class TestPricingAndLabor:

    def test_price_unpriced(self) -> None:
        action = _only("price unpriced items")
        assert action.type is ActionType.TAKEOFF_PRICE_ITEMS
        assert action.params.scope == "unpriced"

    def test_price_all_in_zip(self) -> None:
        action = _only("price all items zip 02903")
        assert action.params.scope == "all"
        assert action.params.region == "02903"

    def test_labor_task(self) -> None:
        action = _only("Add task framing 100 hr at $45")
        assert action.type is ActionType.LABOR_ADD_TASK_LINE
        assert action.params.task_name == "Framing"
        assert action.params.quantity == 100
        assert action.params.unit == "HR"
        assert action.params.base_rate == 45.0
        assert action.params.trade == "Framing"

    def test_labor_without_details_asks(self) -> None:
        result = parse_command("add task")
        assert result.missing_info.startswith("Please specify")


# ---------------------------------------------------------------------------
# Exports, QA, plans, help
# ---------------------------------------------------------------------------

class TestOtherCommands:

    def test_export_pdf(self) -> None:
        assert _only("export pdf").type is ActionType.EXPORT_PDF

    def test_export_labor_csv(self) -> None:
        action = _only("export labor csv")
        assert action.type is ActionType.EXPORT_CSV
        assert action.params.which == "labor"

    def test_export_csv_defaults_to_takeoff(self) -> None:
        assert _only("export csv").params.which == "takeoff"

    def test_show_issues(self) -> None:
        assert _only("show issues").type is ActionType.QA_SHOW_ISSUES

    def test_open_plan(self) -> None:
        action = _only("open plan A-101.pdf")
        assert action.type is ActionType.PLANS_OPEN
        assert action.params.file_name == "a-101.pdf"

    def test_open_plan_without_file_asks(self) -> None:
        result = parse_command("open plan")
        assert result.missing_info == "Which plan file would you like to open?"

    def test_help(self) -> None:
        assert _only("help").type is ActionType.SYSTEM_CAPABILITIES

    def test_capabilities_cover_every_action_kind(self) -> None:
        listed = {c["action"] for c in capabilities()}
        assert listed == {kind.value for kind in ActionType}


# ---------------------------------------------------------------------------
# Parser contract
# ---------------------------------------------------------------------------

class TestCommandParser:

    @pytest.mark.parametrize("text", ["", "   "])
    def test_empty_input_returns_help(self, text: str) -> None:
        result = parse_command(text)
        assert result.success is False
        assert result.error == HELP_TEXT

    def test_unrecognised_input_returns_help(self) -> None:
        result = parse_command("make me a sandwich")
        assert result.success is False
        assert result.error == HELP_TEXT
        assert result.actions == []

    def test_deterministic(self) -> None:
        text = "Create project Smith Basement. tax 7 markup 20"
        ctx = {"project_id": "p1", "project_type": "basement_finish"}
        assert parse_command(text, ctx).model_dump() == parse_command(text, ctx).model_dump()

    def test_first_question_wins(self) -> None:
        result = parse_command("create project. delete item")
        assert result.missing_info == "What should the new project be called?"

    def test_custom_detectors(self) -> None:
        parser = CommandParser(detectors=(detect_set_defaults,))
        assert parser.parse("add drywall 10 sf").success is False
        assert parser.parse("markup 15").actions[0].params.markup_percent == 15

    def test_versions_stamped(self) -> None:
        result = parse_command("help")
        assert result.schema_version == 1
        assert result.parser_version == "1.0.0"


# ---------------------------------------------------------------------------
# Action schema
# ---------------------------------------------------------------------------

class TestActionSchema:

    def test_dict_params_coerced_to_kind_model(self) -> None:
        action = Action.model_validate({
            "type": "takeoff.add_item",
            "params": {"description": "Drywall", "quantity": 10},
            "confidence": 0.5,
        })
        assert isinstance(action.params, AddItemParams)
        assert action.params.unit == "EA"

    def test_params_of_wrong_kind_rejected(self) -> None:
        with pytest.raises(ValueError):
            Action(
                type=ActionType.TAKEOFF_ADD_ITEM,
                params=SetDefaultsParams(tax_percent=7),
                confidence=0.9,
            )

    def test_unknown_param_rejected(self) -> None:
        with pytest.raises(ValueError):
            Action.model_validate({
                "type": "export.pdf", "params": {"colour": True}, "confidence": 1.0,
            })

    def test_set_defaults_requires_a_value(self) -> None:
        with pytest.raises(ValueError):
            SetDefaultsParams()

    def test_to_dict_is_json_safe(self) -> None:
        action = _only("tax 7 markup 20")
        assert action.to_dict() == {
            "type": "project.set_defaults",
            "params": {
                "tax_percent": 7.0,
                "markup_percent": 20.0,
                "labor_burden_percent": None,
                "waste_percent": None,
            },
            "confidence": 0.95,
        }


# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------

class TestLookupTables:

    @pytest.mark.parametrize("raw, unit", [
        ("sf", "SF"), ("sq ft", "SF"), ("linear  feet", "LF"),
        ("sheets", "SHT"), ("hrs", "HR"), ("bundle", "BUNDLE"),
    ])
    def test_normalize_unit(self, raw: str, unit: str) -> None:
        assert normalize_unit(raw) == unit

    @pytest.mark.parametrize("raw, value", [
        ("7", 7.0), ("7.5 percent", 7.5), ("seven", 7.0),
        ("twenty five", 25.0), ("twenty-five", 25.0), ("lots", None),
    ])
    def test_parse_number(self, raw: str, value: float | None) -> None:
        assert parse_number(raw) == value

    def test_parse_price(self) -> None:
        assert parse_price("$12.99") == 12.99
        assert parse_price("$ 12") == 12.0
        assert parse_price("$1,250.00") == 1250.0
        assert parse_price("TBD") is None

    def test_category_and_trade(self) -> None:
        assert infer_category("2x4 studs") == "Framing"
        assert infer_category("Mystery widget") == "General"
        assert infer_trade("Hang and tape drywall") == "Drywall"

    def test_assembly_names(self) -> None:
        assert extract_assembly_names("framing + drywall & electric") == [
            "framing", "drywall", "electrical",
        ]
