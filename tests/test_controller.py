"""Tests for SessionController: action handling and gateway error conversion."""
from __future__ import annotations

import pytest

from conftest import FakeGateway
from core import postgres_gateway
from core.controller import SessionController
from core.dispatcher import Action, ActionKind, KeyEvent, dispatch
from core.gateway import ErrorResult, GatewayConnectionError, QueryError, TabularResult
from core.session import Pane, SessionState


def press(controller: SessionController, key: str, ctrl: bool = False) -> bool:
    action = dispatch(controller.state.focused_pane, KeyEvent(key, ctrl=ctrl))
    return controller.apply(action)


def type_text(controller: SessionController, text: str) -> None:
    for char in text:
        press(controller, char)


def test_start_loads_databases_and_first_tables(gateway):
    controller = SessionController.start(gateway)
    state = controller.state

    assert state.databases == ["app", "app_test"]
    assert state.current_database() == "app"
    assert state.tables == ["users", "orders"]
    assert state.selected_table == 0
    assert gateway.calls == [("list_databases",), ("list_tables", "app")]


def test_start_fails_when_database_listing_fails():
    gateway = FakeGateway(databases=GatewayConnectionError("connection refused"))

    with pytest.raises(GatewayConnectionError):
        SessionController.start(gateway)


def test_start_survives_failing_initial_table_fetch():
    gateway = FakeGateway(tables={"app": QueryError("permission denied")})

    controller = SessionController.start(gateway)

    assert controller.state.tables == []
    assert controller.state.selected_table is None
    assert controller.state.query_result == ErrorResult("Error: permission denied")


def test_start_with_no_databases_skips_table_fetch():
    gateway = FakeGateway(databases=[])

    controller = SessionController.start(gateway)

    assert controller.state.selected_database is None
    assert controller.state.tables == []
    assert gateway.calls == [("list_databases",)]


def test_switching_database_refetches_tables(gateway):
    controller = SessionController.start(gateway)

    press(controller, "j")

    state = controller.state
    assert state.current_database() == "app_test"
    assert gateway.calls[-1] == ("list_tables", "app_test")
    assert state.tables == []
    assert state.selected_table is None


def test_switching_back_restores_table_selection_to_first(gateway):
    controller = SessionController.start(gateway)
    press(controller, "t", ctrl=True)
    press(controller, "j")
    assert controller.state.current_table() == "orders"

    press(controller, "d", ctrl=True)
    press(controller, "j")
    press(controller, "k")

    assert controller.state.tables == ["users", "orders"]
    assert controller.state.selected_table == 0


def test_database_move_at_boundary_does_not_refetch(gateway):
    controller = SessionController.start(gateway)
    calls_before = list(gateway.calls)

    press(controller, "k")

    assert controller.state.selected_database == 0
    assert gateway.calls == calls_before


def test_table_refetch_failure_empties_tables_and_shows_error():
    gateway = FakeGateway(
        tables={"app": ["users"], "broken": GatewayConnectionError("server closed the connection")},
    )
    controller = SessionController.start(gateway)

    press(controller, "j")

    state = controller.state
    assert state.current_database() == "broken"
    assert state.tables == []
    assert state.selected_table is None
    assert state.query_result == ErrorResult("Error: server closed the connection")


def test_table_navigation_does_not_call_gateway(gateway):
    controller = SessionController.start(gateway)
    calls_before = list(gateway.calls)

    press(controller, "t", ctrl=True)
    press(controller, "j")
    press(controller, "j")
    press(controller, "k")

    assert controller.state.selected_table == 0
    assert gateway.calls == calls_before


def test_query_executes_against_selected_database(gateway):
    controller = SessionController.start(gateway)
    press(controller, "e", ctrl=True)
    type_text(controller, "SELECT 1")

    press(controller, "enter")

    state = controller.state
    assert gateway.calls[-1] == ("execute_query", "app", "SELECT 1")
    assert state.query_result == TabularResult(rows=[["1"]])
    assert state.query_text == "SELECT 1"
    assert state.focused_pane is Pane.QUERY_EDITOR


def test_query_connection_error_is_stored_as_text(gateway):
    controller = SessionController.start(gateway)
    press(controller, "e", ctrl=True)
    type_text(controller, "SELECT slow")

    assert press(controller, "enter") is True

    state = controller.state
    assert isinstance(state.query_result, ErrorResult)
    assert state.query_result.message == "Error: timeout"
    assert state.query_text == "SELECT slow"
    assert state.focused_pane is Pane.QUERY_EDITOR


def test_query_error_replaces_previous_result(gateway):
    gateway.results["SELEC"] = QueryError('syntax error at or near "SELEC"')
    controller = SessionController.start(gateway)
    press(controller, "e", ctrl=True)
    type_text(controller, "SELECT 1")
    press(controller, "enter")

    for _ in range(3):
        press(controller, "backspace")
    press(controller, "enter")

    assert controller.state.query_result == ErrorResult('Error: syntax error at or near "SELEC"')


def test_query_without_database_reports_error():
    gateway = FakeGateway(databases=[])
    controller = SessionController.start(gateway)
    press(controller, "e", ctrl=True)
    type_text(controller, "SELECT 1")

    press(controller, "enter")

    assert isinstance(controller.state.query_result, ErrorResult)
    assert controller.state.query_result.message.startswith("Error: ")
    assert not any(call[0] == "execute_query" for call in gateway.calls)


def test_editor_captures_quit_and_navigation_keys(gateway):
    controller = SessionController.start(gateway)
    press(controller, "e", ctrl=True)

    assert press(controller, "q") is True
    press(controller, "j")
    press(controller, "k")

    assert controller.state.query_text == "qjk"
    assert controller.state.focused_pane is Pane.QUERY_EDITOR
    assert controller.state.current_database() == "app"


def test_quit_ends_session(gateway):
    controller = SessionController.start(gateway)

    assert controller.apply(Action(ActionKind.QUIT)) is False
    assert press(controller, "q") is False
    assert press(controller, "c", ctrl=True) is False


def test_noop_changes_nothing(gateway):
    controller = SessionController.start(gateway)
    before = (controller.state.selected_database, list(controller.state.tables), controller.state.query_text)

    assert controller.apply(Action(ActionKind.NOOP)) is True
    assert (controller.state.selected_database, controller.state.tables, controller.state.query_text) == before


def test_later_successful_refetch_clears_refetch_error():
    gateway = FakeGateway(
        tables={"app": ["users"], "broken": GatewayConnectionError("server closed the connection")},
    )
    controller = SessionController.start(gateway)
    press(controller, "j")
    assert controller.state.query_result == ErrorResult("Error: server closed the connection")

    press(controller, "k")

    assert controller.state.tables == ["users"]
    assert controller.state.query_result is None


def test_successful_refetch_keeps_query_error(gateway):
    gateway.results["SELEC"] = QueryError("syntax error")
    controller = SessionController.start(gateway)
    press(controller, "e", ctrl=True)
    type_text(controller, "SELEC")
    press(controller, "enter")

    press(controller, "d", ctrl=True)
    press(controller, "j")

    assert controller.state.query_result == ErrorResult("Error: syntax error")


class UndecodableCursor:
    description = [("name",)]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query):
        pass

    def fetchall(self):
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")


class UndecodableConnection:
    autocommit = False

    def cursor(self):
        return UndecodableCursor()

    def close(self):
        pass


def test_undecodable_query_result_does_not_end_session(monkeypatch):
    monkeypatch.setattr(postgres_gateway.psycopg2, "connect", lambda **params: UndecodableConnection())
    gateway = postgres_gateway.PostgresGateway()
    controller = SessionController(SessionState.from_databases(["legacy"]), gateway)
    press(controller, "e", ctrl=True)
    type_text(controller, "SELECT name FROM people")

    assert press(controller, "enter") is True

    state = controller.state
    assert isinstance(state.query_result, ErrorResult)
    assert "invalid start byte" in state.query_result.message
    assert state.query_text == "SELECT name FROM people"
