"""
Task Manager Test Suite — CLI
===============================
Usage:
    python -m pytest tests/test_cli.py -v
"""
import sys
import os
import unittest
from unittest.mock import patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from taskmanager import cli
from taskmanager.client import TaskClientError
from taskmanager.store import TaskRecord


@patch("taskmanager.cli.configure_logging")
class TestServeCommand(unittest.TestCase):

    @patch.dict(os.environ, {}, clear=True)
    @patch("taskmanager.cli.run_server", return_value=0)
    def test_defaults(self, run_server, _logging):
        self.assertEqual(cli.main(["serve"]), 0)
        config = run_server.call_args.args[0]
        self.assertEqual(config.port, 4001)
        self.assertEqual(config.log_level, "info")

    @patch.dict(os.environ, {"TASKMANAGER_PORT": "5000"}, clear=True)
    @patch("taskmanager.cli.run_server", return_value=0)
    def test_flags_override_env(self, run_server, _logging):
        cli.main(["serve", "--port", "6000", "--debug"])
        config = run_server.call_args.args[0]
        self.assertEqual(config.port, 6000)
        self.assertEqual(config.log_level, "debug")

    @patch.dict(os.environ, {"TASKMANAGER_PORT": "5000"}, clear=True)
    @patch("taskmanager.cli.run_server", return_value=0)
    def test_env_used_without_flags(self, run_server, _logging):
        cli.main(["serve"])
        self.assertEqual(run_server.call_args.args[0].port, 5000)

    @patch.dict(os.environ, {"TASKMANAGER_PORT": "nope"}, clear=True)
    @patch("taskmanager.cli.run_server")
    def test_bad_config_exits_2(self, run_server, _logging):
        with patch("sys.stderr"):
            self.assertEqual(cli.main(["serve"]), 2)
        run_server.assert_not_called()

    @patch.dict(os.environ, {}, clear=True)
    @patch("taskmanager.cli.run_server", return_value=1)
    def test_bind_failure_status_propagates(self, run_server, _logging):
        self.assertEqual(cli.main(["serve"]), 1)


@patch("taskmanager.cli.TaskClient")
class TestClientCommands(unittest.TestCase):

    def test_add(self, client_cls):
        client_cls.return_value.add_task.return_value = "Task added successfully!"
        with patch("builtins.print") as printed:
            self.assertEqual(cli.main(["add", "Learn Go", "Complete tutorials."]), 0)
        client_cls.return_value.add_task.assert_called_once_with("Learn Go", "Complete tutorials.")
        printed.assert_called_with("Task added successfully!")

    def test_submit_uses_url(self, client_cls):
        cli.main(["submit", "Buy milk", "--url", "http://example:9000"])
        client_cls.assert_called_once_with("http://example:9000")
        client_cls.return_value.submit_form.assert_called_once_with("Buy milk", "")

    def test_list(self, client_cls):
        client_cls.return_value.list_tasks.return_value = [TaskRecord("a", "b")]
        with patch("builtins.print") as printed:
            self.assertEqual(cli.main(["list"]), 0)
        output = " ".join(str(c.args[0]) for c in printed.call_args_list)
        self.assertIn("1. a", output)

    def test_client_error_exits_1(self, client_cls):
        client_cls.return_value.list_tasks.side_effect = TaskClientError(None, "Cannot reach")
        with patch("sys.stderr"):
            self.assertEqual(cli.main(["list"]), 1)


class TestNoCommand(unittest.TestCase):

    def test_prints_help(self):
        with patch("sys.stdout"):
            self.assertEqual(cli.main([]), 0)


if __name__ == "__main__":
    unittest.main()
