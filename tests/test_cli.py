"""
CLI tests - drive main() against a stub transport.

Under pytest stdout is captured and not a TTY, so every command emits JSON.
"""

import io
import json

import pytest

from apiai_client.cli import create_parser, main

QUERY_RESPONSE = {
    "id": "q1",
    "sessionId": "cli-session",
    "result": {"action": "greet", "fulfillment": {"speech": "Hello!"}},
    "status": {"code": 200},
}


@pytest.fixture
def run(clean_env, transport, capsys):
    """Run the CLI with a token and return (exit_code, parsed stdout)."""

    def _run(*args: str):
        code = 0
        try:
            main(["--token", "token", "--session-id", "cli-session", *args])
        except SystemExit as e:
            code = e.code
        out = capsys.readouterr().out
        return code, json.loads(out) if out.strip() else None

    return _run


class TestHelpCommands:
    """Parser structure."""

    def test_main_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--help"])
        assert exc_info.value.code == 0
        assert "entities" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "usage" in capsys.readouterr().out

    def test_group_without_subcommand_prints_help(self, clean_env, transport, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["entities"])
        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert "usage" in out
        assert "add-entries" in out
        assert transport.requests == []


class TestQueryCommands:
    """query and event."""

    def test_query(self, run, transport):
        transport.respond(QUERY_RESPONSE)
        code, out = run("query", "hello")
        assert code == 0
        assert out == QUERY_RESPONSE
        assert transport.last_body() == {"query": "hello", "lang": "en", "sessionId": "cli-session"}

    def test_event_with_data(self, run, transport):
        transport.respond(QUERY_RESPONSE)
        code, _ = run("event", "WELCOME", "--data", '{"name": "Sam"}')
        assert code == 0
        assert transport.last_body()["event"] == {"name": "WELCOME", "data": {"name": "Sam"}}

    def test_event_invalid_json(self, run, transport):
        code, out = run("event", "WELCOME", "--data", "{invalid json}")
        assert code == 1
        assert "Invalid JSON" in out["error"]
        assert transport.requests == []

    def test_missing_token(self, clean_env, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["query", "hello"])
        assert exc_info.value.code == 1
        assert "Access token" in json.loads(capsys.readouterr().out)["error"]

    def test_server_error(self, run, transport):
        transport.respond({"status": {"code": 401, "errorDetails": "Authentication failed"}}, status=401)
        code, out = run("query", "hello")
        assert code == 1
        assert out == {"error": "Authentication failed", "status": 401}


class TestEntityCommands:
    """entities subcommands."""

    def test_list(self, run, transport):
        transport.respond([{"id": "e1", "name": "pizza_type", "count": 1}])
        code, out = run("entities", "list")
        assert code == 0
        assert out == {"data": [{"id": "e1", "name": "pizza_type", "count": 1}], "total_count": 1}

    def test_create_with_entries(self, run, transport):
        transport.respond({"id": "e1", "status": {"code": 200}})
        code, out = run(
            "entities",
            "create",
            "pizza_type",
            "--entries",
            '[{"value": "margherita", "synonyms": ["margherita"]}]',
        )
        assert code == 0
        assert out["id"] == "e1"
        assert transport.last_body()["entries"] == [{"value": "margherita", "synonyms": ["margherita"]}]

    def test_upsert_from_stdin(self, run, transport, monkeypatch):
        entities = [{"name": "size", "entries": [{"value": "large", "synonyms": ["big"]}]}]
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(entities)))
        transport.respond({"status": {"code": 200}})
        code, out = run("entities", "upsert", "-")
        assert code == 0
        assert out["success"] is True
        assert transport.last_body() == entities

    def test_upsert_non_utf8_stdin(self, run, transport, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"\xff\xfe[]"), encoding="utf-8"))
        code, out = run("entities", "upsert", "-")
        assert code == 1
        assert "Invalid JSON" in out["error"]
        assert transport.requests == []

    def test_add_entries_rejects_object(self, run, transport):
        code, out = run("entities", "add-entries", "e1", '{"value": "x"}')
        assert code == 1
        assert "JSON array" in out["error"]
        assert transport.requests == []

    def test_delete_entries(self, run, transport):
        transport.respond({"status": {"code": 200}})
        code, _ = run("entities", "delete-entries", "e1", "margherita", "hawaii")
        assert code == 0
        assert transport.last.get_method() == "DELETE"
        assert transport.last_body() == ["margherita", "hawaii"]
