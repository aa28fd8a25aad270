"""End-to-end tests for the CommandCenter facade."""

from __future__ import annotations

import pytest

from commandcenter import (
    ActionLog,
    CommandCenter,
    HTTPPricingService,
    InMemoryStore,
    LocalPricingService,
    LogStatus,
    SQLiteStore,
    Settings,
)
from commandcenter.executor.handlers import NO_PROJECT
from commandcenter.nlp import HELP_TEXT


@pytest.fixture
def cc() -> CommandCenter:
    return CommandCenter(
        store=InMemoryStore(),
        action_log=ActionLog(":memory:"),
        settings=Settings(),
    )


@pytest.fixture
def project_id(cc: CommandCenter) -> str:
    outcome = cc.run("create project Smith Basement")
    assert outcome.success, outcome.message
    return outcome.project_id


class TestWiring:

    def test_defaults_from_settings(self) -> None:
        cc = CommandCenter(settings=Settings())
        assert isinstance(cc.store, SQLiteStore)
        assert isinstance(cc.pricing, LocalPricingService)
        assert len(cc.catalog) == 11

    def test_pricing_url_selects_http_client(self) -> None:
        cc = CommandCenter(
            store=InMemoryStore(),
            action_log=ActionLog(":memory:"),
            settings=Settings(pricing_url="https://prices.example/lookup"),
        )
        assert isinstance(cc.pricing, HTTPPricingService)

    def test_region_comes_from_settings(self) -> None:
        cc = CommandCenter(
            store=InMemoryStore(),
            action_log=ActionLog(":memory:"),
            settings=Settings(default_region="Massachusetts"),
        )
        outcome = cc.run("create project Jones Deck", user_id="u1")
        project = cc.store.get("projects", outcome.project_id)
        assert project["region"] == "Massachusetts"
        assert project["user_id"] == "u1"


class TestRun:

    def test_parse_without_executing(self, cc: CommandCenter) -> None:
        parsed = cc.parse("add drywall 10 sf")
        assert parsed.success
        assert cc.history() == []

    def test_clarifying_question_runs_nothing(self, cc: CommandCenter) -> None:
        outcome = cc.run("delete item")
        assert outcome.success is False
        assert outcome.batch is None
        assert outcome.log_id is None
        assert outcome.message.startswith("Which item would you like to delete?")
        assert cc.history() == []

    def test_empty_input_returns_help(self, cc: CommandCenter) -> None:
        outcome = cc.run("")
        assert outcome.message == HELP_TEXT

    def test_no_project_selected(self, cc: CommandCenter) -> None:
        outcome = cc.run("add drywall 1050 sf at $12.99")
        assert outcome.success is False
        assert outcome.message == NO_PROJECT
        assert cc.history()[0].status is LogStatus.FAILED

    def test_create_add_and_undo(self, cc: CommandCenter, project_id: str) -> None:
        outcome = cc.run("add drywall 1050 sf at $12.99", {"project_id": project_id}, source="voice")
        assert outcome.success
        item_id = outcome.results[0].data["item_id"]
        assert cc.store.get("takeoff_items", item_id)["unit_cost"] == 12.99

        history = cc.history(project_id=project_id)
        assert [e.command_text for e in history] == [
            "add drywall 1050 sf at $12.99",
            "create project Smith Basement",
        ]
        assert history[0].source == "voice"

        undo = cc.undo(outcome.log_id)
        assert undo.success
        assert cc.store.get("takeoff_items", item_id) is None
        assert cc.history(limit=1)[0].status is LogStatus.UNDONE


class TestEstimatingSession:

    def test_drafts_to_priced_items(self, cc: CommandCenter, project_id: str) -> None:
        ctx = {"project_id": project_id, "project_type": "basement_finish"}

        generated = cc.run("generate drafts using framing, walls 150 lf", ctx)
        assert generated.results[0].data["drafts_created"] == 2
        assert cc.run("show issues", ctx).message == "QA Issues:\n• 2 draft items to review"

        assert cc.run("promote all drafts", ctx).message == "Promoted 2 draft items to active"
        assert cc.run("show issues", ctx).message == "QA Issues:\n• 2 items without a price"

        priced = cc.run("price all items", ctx)
        assert priced.message == "Priced 2 of 2 items"
        assert cc.run("show issues", ctx).message == "No open QA issues found!"

    def test_sqlite_backed_session(self, tmp_path) -> None:
        cc = CommandCenter(settings=Settings(
            store_db=str(tmp_path / "records.db"),
            action_log_db=str(tmp_path / "log.db"),
        ))
        created = cc.run("Create project Smith Basement. tax 7 markup 20")
        assert created.success

        reopened = CommandCenter(settings=cc.settings)
        project = reopened.store.get("projects", created.project_id)
        assert project["tax_percent"] == 7
        assert reopened.undo(created.log_id).message == "Undid 2 action(s)"
        assert reopened.store.get("projects", created.project_id) is None
