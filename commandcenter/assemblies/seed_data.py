"""Embedded assembly library — no external data files required.

Quantities follow common residential rules of thumb (16" OC studs,
4x8 sheets, 10% waste on sheet goods and flooring).  Variables use the
names produced by :func:`commandcenter.formula.extract_variables_from_text`.
"""

from __future__ import annotations

from typing import Any

_BASEMENT = ["basement", "basement_finish", "addition"]

SEED_ASSEMBLIES: tuple[dict[str, Any], ...] = (
    # Basement finish
    {
        "id": "basement-framing",
        "name": "Basement Wall Framing",
        "description": 'Wood framing for basement walls, 2x4 studs 16" OC',
        "trade": "Framing",
        "project_types": _BASEMENT,
        "variables": [
            {"name": "wall_lf", "label": "Wall Linear Feet", "unit": "LF"},
        ],
        "items": [
            {"material_ref": "stud-2x4-8", "quantity_formula": "{wall_lf} * 0.75",
             "description": 'Studs at 16" OC', "unit": "EA"},
            {"material_ref": "stud-2x4-8", "quantity_formula": "{wall_lf} / 8 * 2",
             "description": "Top and bottom plates", "unit": "EA"},
        ],
    },
    {
        "id": "basement-drywall",
        "name": "Basement Drywall",
        "description": "Drywall for basement walls and ceiling",
        "trade": "Drywall",
        "project_types": _BASEMENT,
        "variables": [
            {"name": "wall_sf", "label": "Wall Square Feet", "unit": "SF"},
            {"name": "ceiling_sf", "label": "Ceiling Square Feet", "unit": "SF"},
        ],
        "items": [
            {"material_ref": "drywall-4x8-1/2", "quantity_formula": "({wall_sf} + {ceiling_sf}) / 32 * 1.1",
             "description": "Drywall sheets with 10% waste", "unit": "SHT"},
            {"material_ref": "drywall-mud", "quantity_formula": "({wall_sf} + {ceiling_sf}) / 100",
             "description": "Joint compound", "unit": "EA"},
            {"material_ref": "drywall-tape", "quantity_formula": "({wall_sf} + {ceiling_sf}) / 500 + 1",
             "description": "Drywall tape", "unit": "EA"},
            {"material_ref": "drywall-screws", "quantity_formula": "({wall_sf} + {ceiling_sf}) / 500 + 1",
             "description": "Drywall screws", "unit": "EA"},
        ],
    },
    {
        "id": "basement-insulation",
        "name": "Basement Wall Insulation",
        "description": "R-13 insulation for basement walls",
        "trade": "Insulation",
        "project_types": ["basement", "basement_finish"],
        "variables": [
            {"name": "wall_sf", "label": "Wall Square Feet", "unit": "SF"},
        ],
        "items": [
            {"material_ref": "insulation-r13-batt", "quantity_formula": "{wall_sf} * 1.05",
             "description": "R-13 batt insulation with 5% waste", "unit": "SF"},
        ],
    },
    {
        "id": "basement-electrical",
        "name": "Basement Electrical Rough",
        "description": "Basic electrical for finished basement",
        "trade": "Electrical",
        "project_types": ["basement", "basement_finish"],
        "variables": [
            {"name": "floor_sf", "label": "Floor Square Feet", "unit": "SF"},
            {"name": "room_count", "label": "Number of Rooms", "unit": "EA"},
        ],
        "items": [
            {"material_ref": "outlet-standard", "quantity_formula": "{floor_sf} / 80",
             "description": "Standard outlets", "unit": "EA"},
            {"material_ref": "outlet-gfci", "quantity_formula": "2",
             "description": "GFCI outlets (bathroom, wet bar)", "unit": "EA"},
            {"material_ref": "light-recessed", "quantity_formula": "{floor_sf} / 50",
             "description": "Recessed lights", "unit": "EA"},
            {"material_ref": "switch-single", "quantity_formula": "{room_count} + 2",
             "description": "Light switches", "unit": "EA"},
        ],
    },
    {
        "id": "basement-flooring-lvp",
        "name": "Basement LVP Flooring",
        "description": "Luxury vinyl plank flooring for basement",
        "trade": "Flooring",
        "project_types": ["basement", "basement_finish"],
        "variables": [
            {"name": "floor_sf", "label": "Floor Square Feet", "unit": "SF"},
        ],
        "items": [
            {"material_ref": "lvp-flooring", "quantity_formula": "{floor_sf} * 1.10",
             "description": "LVP with 10% waste", "unit": "SF"},
        ],
    },
    {
        "id": "basement-trim",
        "name": "Basement Trim Package",
        "description": "Baseboard and doors for finished basement",
        "trade": "Trim",
        "project_types": ["basement", "basement_finish"],
        "variables": [
            {"name": "room_perimeter", "label": "Room Perimeter", "unit": "LF"},
            {"name": "door_count", "label": "Number of Doors", "unit": "EA"},
        ],
        "items": [
            {"material_ref": "baseboard", "quantity_formula": "{room_perimeter} * 1.10",
             "description": "Baseboard with waste", "unit": "LF"},
            {"material_ref": "door-interior", "quantity_formula": "{door_count}",
             "description": "Interior doors", "unit": "EA"},
        ],
    },
    # Bathrooms
    {
        "id": "bathroom-plumbing",
        "name": "Bathroom Plumbing Rough & Fixtures",
        "description": "Plumbing for a basic bathroom",
        "trade": "Plumbing",
        "project_types": ["basement", "basement_finish", "addition", "bathroom", "bathroom_remodel"],
        "variables": [
            {"name": "full_bath", "label": "Full Bath Count", "unit": "EA"},
            {"name": "half_bath", "label": "Half Bath Count", "unit": "EA"},
        ],
        "items": [
            {"material_ref": "toilet", "quantity_formula": "{full_bath} + {half_bath}",
             "description": "Toilets", "unit": "EA"},
            {"material_ref": "vanity-sink", "quantity_formula": "{full_bath} + {half_bath}",
             "description": "Vanities", "unit": "EA"},
        ],
    },
    # Exterior
    {
        "id": "deck-framing",
        "name": "Deck Framing and Decking",
        "description": "Pressure-treated deck with composite boards",
        "trade": "Decking",
        "project_types": ["deck"],
        "variables": [
            {"name": "deck_sf", "label": "Deck Square Feet", "unit": "SF"},
            {"name": "post_count", "label": "Number of Posts", "unit": "EA"},
        ],
        "items": [
            {"material_ref": "joist-2x8-12", "quantity_formula": "{deck_sf} / 12 * 1.1",
             "description": "Joists 16\" OC", "unit": "EA"},
            {"material_ref": "post-6x6-8", "quantity_formula": "{post_count}",
             "description": "6x6 posts", "unit": "EA"},
            {"material_ref": "deck-board-composite", "quantity_formula": "{deck_sf} * 1.1",
             "description": "Deck boards with 10% waste", "unit": "SF"},
        ],
    },
    {
        "id": "deck-railing",
        "name": "Deck Railing",
        "description": "Guard railing for deck perimeter",
        "trade": "Decking",
        "project_types": ["deck"],
        "variables": [
            {"name": "rail_lf", "label": "Railing Linear Feet", "unit": "LF"},
        ],
        "items": [
            {"material_ref": "rail-kit-6", "quantity_formula": "{rail_lf} / 6",
             "description": "Railing sections (6 ft)", "unit": "EA"},
        ],
    },
    {
        "id": "roof-shingles",
        "name": "Asphalt Shingle Roofing",
        "description": "Architectural shingles with underlayment",
        "trade": "Roofing",
        "project_types": ["roofing"],
        "variables": [
            {"name": "roof_squares", "label": "Roof Squares", "unit": "SQ"},
        ],
        "items": [
            {"material_ref": "shingle-bundle", "quantity_formula": "{roof_squares} * 3 * 1.1",
             "description": "Shingle bundles with 10% waste", "unit": "EA"},
            {"material_ref": "underlayment-roll", "quantity_formula": "{roof_squares} / 4",
             "description": "Synthetic underlayment rolls", "unit": "EA"},
        ],
    },
    {
        "id": "vinyl-siding",
        "name": "Vinyl Siding",
        "description": "Vinyl lap siding",
        "trade": "Siding",
        "project_types": ["siding"],
        "variables": [
            {"name": "siding_sf", "label": "Siding Square Feet", "unit": "SF"},
        ],
        "items": [
            {"material_ref": "siding-vinyl-square", "quantity_formula": "{siding_sf} / 100 * 1.1",
             "description": "Siding squares with 10% waste", "unit": "SQ"},
        ],
    },
)
