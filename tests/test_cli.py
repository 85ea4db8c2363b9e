"""Tests for the command-line interface."""

import json
from unittest.mock import patch

import pytest

from a2a_planner import cli
from a2a_planner.models import AppConfig
from a2a_planner.orchestration import (
    AnswerReady,
    OperationFinished,
    OperationStarted,
    PlanDeclared,
)
from a2a_planner.protocol import A2AClient, HttpResponse


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        operations=[
            {"operation": "credits_balance", "description": "Show balance"},
            {"operation": "deploy_logs", "params": "deploymentId", "description": "Logs"},
        ]
    )


@pytest.fixture
def patched_client(fake_transport, monkeypatch):
    """Route build_client() to a client over a FakeTransport."""

    def install(*responses) -> A2AClient:
        client = A2AClient("http://agent.test", transport=fake_transport(*responses))
        monkeypatch.setattr(cli, "build_client", lambda config: client)
        return client

    return install


class TestCall:
    """Tests for the ``call`` subcommand."""

    def test_prints_status_and_data(self, config, patched_client, rpc_factory, task_factory, capsys):
        """call prints status and decoded data as JSON."""
        client = patched_client(rpc_factory(task_factory(text='{"balance": "9.00"}')))

        code = cli.cmd_call(config, "credits_balance", None)

        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out == {"status": "completed", "data": {"balance": "9.00"}}
        text = client.transport.payloads[0]["params"]["message"]["parts"][0]["text"]
        assert json.loads(text) == {"operation": "credits_balance", "params": {}}

    def test_params_are_sent(self, config, patched_client, echo_transport, capsys):
        """JSON params reach the server unchanged."""
        client = patched_client(echo_transport)
        assert cli.cmd_call(config, "deploy_logs", '{"deploymentId": "d1"}') == 0
        assert json.loads(capsys.readouterr().out)["data"] == {
            "operation": "deploy_logs",
            "params": {"deploymentId": "d1"},
        }
        assert len(client.transport.requests) == 1

    def test_warning_goes_to_stderr(self, config, patched_client, rpc_factory, task_factory, capsys):
        """Low balance warnings are printed to stderr."""
        patched_client(
            rpc_factory(task_factory(text="{}", warning={"balance": "1", "message": "Low"}))
        )
        cli.cmd_call(config, "credits_balance", None)
        assert "Low" in capsys.readouterr().err

    @pytest.mark.parametrize("params", ["{bad", "[1, 2]"])
    def test_invalid_params(self, config, params, capsys):
        """Params that are not a JSON object exit with code 2."""
        assert cli.cmd_call(config, "deploy_logs", params) == 2
        assert "Error" in capsys.readouterr().err

    def test_client_error(self, config, patched_client, capsys):
        """Client errors are reported and exit with code 1."""
        patched_client(HttpResponse(status=503, body="unavailable"))
        assert cli.cmd_call(config, "credits_balance", None) == 1
        assert "HTTP 503: unavailable" in capsys.readouterr().err


class TestOperations:
    """Tests for the ``operations`` subcommand."""

    def test_lists_catalog(self, config, capsys):
        """operations lists names, descriptions and params."""
        assert cli.cmd_operations(config) == 0
        out = capsys.readouterr().out
        assert "credits_balance" in out
        assert "Logs [deploymentId]" in out

    def test_empty_catalog(self, capsys):
        """An empty catalog prints a notice."""
        assert cli.cmd_operations(AppConfig()) == 0
        assert "No operations configured." in capsys.readouterr().out


class TestRun:
    """Tests for the ``run`` subcommand."""

    @patch.object(cli, "fetch_agent_card")
    @patch.object(cli, "build_loop")
    def test_runs_goals_in_order(self, mock_build_loop, mock_card, config, capsys):
        """Goals are run one after another on one loop."""
        mock_card.return_value.name = "Willy"
        loop = mock_build_loop.return_value

        assert cli.cmd_run(config, ["first goal", "second goal"]) == 0

        assert [c.args[0] for c in loop.run.call_args_list] == ["first goal", "second goal"]

    @patch.object(cli, "fetch_agent_card")
    @patch.object(cli, "build_loop")
    def test_stops_on_failure(self, mock_build_loop, mock_card, config, capsys):
        """The first failing goal stops the run with code 1."""
        loop = mock_build_loop.return_value
        loop.run.side_effect = RuntimeError("model down")

        assert cli.cmd_run(config, ["a", "b"]) == 1
        assert loop.run.call_count == 1
        assert "model down" in capsys.readouterr().err

    @patch("builtins.input", side_effect=["", "/clear", "check balance", "/quit"])
    @patch.object(cli, "fetch_agent_card")
    @patch.object(cli, "build_loop")
    def test_interactive(self, mock_build_loop, mock_card, mock_input, config, capsys):
        """The prompt handles blank lines, /clear, goals and /quit."""
        mock_card.return_value.name = "Willy"
        loop = mock_build_loop.return_value

        assert cli.cmd_run(config, []) == 0

        loop.reset.assert_called_once()
        loop.run.assert_called_once_with("check balance")
        assert "Willy" in capsys.readouterr().out

    @patch("builtins.input", side_effect=EOFError)
    @patch.object(cli, "fetch_agent_card")
    @patch.object(cli, "build_loop")
    def test_interactive_eof(self, mock_build_loop, mock_card, mock_input, config):
        """EOF at the prompt exits cleanly."""
        mock_card.return_value.name = "Willy"
        assert cli.cmd_run(config, []) == 0


class TestConsoleObserver:
    """Tests for event rendering."""

    def test_renders_events(self, capsys):
        """Every event type is rendered as text."""
        observer = cli.ConsoleObserver()
        observer.on_event(PlanDeclared(title="Deploy", steps=("check", "create")))
        observer.on_event(
            OperationStarted(
                call_id="c1",
                operation="deploy_create",
                params={"name": "web"},
                narration="Creating the deployment",
                reason="user asked",
            )
        )
        observer.on_event(
            OperationFinished(
                call_id="c1",
                operation="deploy_create",
                status="completed",
                data={"id": "d1"},
                warning="Balance low",
            )
        )
        observer.on_event(AnswerReady(text="Deployed web."))

        out = capsys.readouterr().out
        assert "[plan] Deploy" in out
        assert "  2. create" in out
        assert "> Creating the deployment" in out
        assert 'deploy_create {"name": "web"}' in out
        assert '"id": "d1"' in out
        assert "! Balance low" in out
        assert "Deployed web." in out

    def test_renders_failure(self, capsys):
        """Failed operations are marked as failed."""
        cli.ConsoleObserver().on_event(
            OperationFinished(call_id="c1", operation="x", error="HTTP 500: boom")
        )
        assert "failed" in capsys.readouterr().out


class TestMain:
    """Tests for argument parsing and dispatch."""

    def test_parser(self):
        """Global flags and call arguments are parsed."""
        args = cli.build_parser().parse_args(["-v", "call", "deploy_logs", "{}"])
        assert args.verbose is True
        assert args.command == "call"
        assert args.operation == "deploy_logs"
        assert args.params == "{}"

    def test_command_required(self):
        """A subcommand is mandatory."""
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    @patch.object(cli, "setup_logging")
    @patch.object(cli, "load_app_config")
    def test_main_operations(self, mock_load, mock_logging, config, capsys):
        """main loads config, sets up logging and dispatches."""
        mock_load.return_value = config
        assert cli.main(["--config", "x.yaml", "operations"]) == 0
        mock_load.assert_called_once_with("x.yaml")
        mock_logging.assert_called_once_with("INFO", False)
        assert "credits_balance" in capsys.readouterr().out
