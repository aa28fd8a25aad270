"""Tests for the assembly catalog and resolver."""

from __future__ import annotations

import pytest

from commandcenter.assemblies import (
    AssemblyCatalog,
    AssemblyDefinition,
    AssemblyResolver,
)
from commandcenter.assemblies.resolver import rfi_question


def _single_item_catalog() -> AssemblyCatalog:
    return AssemblyCatalog([{
        "id": "wall-studs",
        "name": "Wall Studs",
        "trade": "Framing",
        "project_types": ["basement_finish"],
        "variables": [{"name": "wall_lf", "label": "Wall Linear Feet", "unit": "LF"}],
        "items": [{
            "material_ref": "stud-2x4-8",
            "quantity_formula": "{wall_lf} * 0.75",
            "description": "Studs",
        }],
    }])


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class TestAssemblyCatalog:

    def test_seed_library_loaded_by_default(self) -> None:
        catalog = AssemblyCatalog()
        assert len(catalog) == 11
        assert catalog.get("basement-framing").trade == "Framing"

    def test_empty_catalog(self) -> None:
        catalog = AssemblyCatalog([])
        assert len(catalog) == 0
        assert catalog.match(["framing"], "basement_finish") == []

    def test_for_project_type(self) -> None:
        ids = {a.id for a in AssemblyCatalog().for_project_type("deck")}
        assert ids == {"deck-framing", "deck-railing"}

    def test_match_is_a_union_of_fragments(self) -> None:
        matched = AssemblyCatalog().match(["framing", "drywall"], "basement_finish")
        assert [a.id for a in matched] == ["basement-framing", "basement-drywall"]

    def test_match_respects_project_type(self) -> None:
        matched = AssemblyCatalog().match(["framing"], "deck")
        assert [a.id for a in matched] == ["deck-framing"]

    def test_match_ignores_blank_fragments(self) -> None:
        assert AssemblyCatalog().match(["", "  "], "basement_finish") == []

    def test_register_replaces_by_id(self) -> None:
        catalog = _single_item_catalog()
        catalog.register({"id": "wall-studs", "name": "Steel Studs", "trade": "Framing"})
        assert len(catalog) == 1
        assert catalog.get("wall-studs").name == "Steel Studs"

    def test_required_variables(self) -> None:
        drywall = AssemblyCatalog().get("basement-drywall")
        assert drywall.required_variables() == ["wall_sf", "ceiling_sf"]

    def test_matches_name_or_trade_case_insensitively(self) -> None:
        assembly = AssemblyDefinition(id="x", name="Basement LVP Flooring", trade="Flooring")
        assert assembly.matches("LVP")
        assert assembly.matches("flooring")
        assert not assembly.matches("tile")


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class TestAssemblyResolver:

    def test_all_variables_bound_yields_drafts(self) -> None:
        resolution = AssemblyResolver().resolve(["framing"], {"wall_lf": 150}, "basement_finish")
        assert resolution.matched == ["Basement Wall Framing"]
        assert resolution.rfis == []
        assert [(d.description, d.quantity) for d in resolution.drafts] == [
            ('Studs at 16" OC', 112.5),
            ("Top and bottom plates", 37.5),
        ]
        assert all(d.draft for d in resolution.drafts)
        assert all(d.category == "Framing" for d in resolution.drafts)

    def test_notes_record_assembly_and_formula(self) -> None:
        resolution = AssemblyResolver().resolve(["framing"], {"wall_lf": 16}, "basement_finish")
        assert resolution.drafts[0].notes == (
            "Generated from Basement Wall Framing | Formula: {wall_lf} * 0.75"
        )

    def test_missing_variable_yields_one_rfi_and_no_drafts(self) -> None:
        resolver = AssemblyResolver(_single_item_catalog())
        resolution = resolver.resolve(["studs"], {}, "basement_finish")
        assert resolution.drafts_count == 0
        assert resolution.rfis_count == 1
        rfi = resolution.rfis[0]
        assert "wall_lf" in rfi.question
        assert rfi.missing_vars == ["wall_lf"]
        assert rfi.trade == "Framing"

    def test_partial_bindings_mix_drafts_and_rfis(self) -> None:
        resolution = AssemblyResolver().resolve(["electrical"], {"floor_sf": 400}, "basement_finish")
        assert [(d.description, d.quantity) for d in resolution.drafts] == [
            ("Standard outlets", 5.0),
            ("GFCI outlets (bathroom, wet bar)", 2.0),
            ("Recessed lights", 8.0),
        ]
        assert [r.question for r in resolution.rfis] == [
            rfi_question("Light switches", ["room_count"]),
        ]

    def test_duplicate_questions_collapse(self) -> None:
        catalog = _single_item_catalog()
        catalog.register({
            "id": "more-studs",
            "name": "More Studs",
            "trade": "Framing",
            "project_types": ["basement_finish"],
            "items": [{
                "material_ref": "stud-2x4-8",
                "quantity_formula": "{wall_lf} / 2",
                "description": "Studs",
            }],
        })
        resolution = AssemblyResolver(catalog).resolve(["studs"], {}, "basement_finish")
        assert resolution.matched == ["Wall Studs", "More Studs"]
        assert resolution.rfis_count == 1

    @pytest.mark.parametrize("wall_lf", [0, -10])
    def test_non_positive_quantities_dropped(self, wall_lf: float) -> None:
        resolver = AssemblyResolver(_single_item_catalog())
        resolution = resolver.resolve(["studs"], {"wall_lf": wall_lf}, "basement_finish")
        assert resolution.drafts == []
        assert resolution.rfis == []

    def test_no_match(self) -> None:
        resolution = AssemblyResolver().resolve(["framing"], {"wall_lf": 10}, "roofing")
        assert resolution.matched == []
        assert resolution.drafts_count == 0

    def test_rfi_question_format(self) -> None:
        assert rfi_question("Studs", ["wall_lf", "ceiling_height"]) == (
            'Missing measurement for "Studs": need wall_lf, ceiling_height'
        )
