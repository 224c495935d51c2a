"""Tests for ToolValidator."""

from apprentice.config import Goal
from apprentice.llm.types import ToolParam
from apprentice.tools.base import COMMAND_PARAM, command_param
from apprentice.tools.help import HelpTool
from apprentice.tools.validation import ToolValidator

from tests.mock_backends import RecordingBackend
from tests.mock_tools import CountTool

SPECS = (COMMAND_PARAM,)


class TestToolValidator:

    def test_valid_args(self):
        args, diag = ToolValidator.validate(SPECS, [ToolParam("command", "ls")])
        assert args == {"command": "ls"}
        assert diag is None

    def test_missing_required(self):
        _, diag = ToolValidator.validate(SPECS, [])
        assert diag.startswith("wrong number of input parameters")

    def test_extra_property_rejected(self):
        _, diag = ToolValidator.validate(
            SPECS, [ToolParam("command", "ls"), ToolParam("cwd", "/tmp")]
        )
        assert diag.startswith("wrong number of input parameters")

    def test_count_reported_before_type(self):
        _, diag = ToolValidator.validate(
            SPECS, [ToolParam("command", 5), ToolParam("cwd", "/tmp")]
        )
        assert diag.startswith("wrong number of input parameters")

    def test_wrong_name(self):
        _, diag = ToolValidator.validate(SPECS, [ToolParam("cmd", "ls")])
        assert diag == 'wrong parameter name, expect 1 parameter called "command" of type string.'

    def test_wrong_type(self):
        _, diag = ToolValidator.validate(SPECS, [ToolParam("command", 42)])
        assert diag.startswith("wrong parameter value type")

    def test_repeated_name(self):
        _, diag = ToolValidator.validate(
            SPECS, [ToolParam("command", "ls"), ToolParam("command", "pwd")]
        )
        assert diag.startswith("wrong number of input parameters")

    def test_declared_schema_is_used(self):
        specs = CountTool().params
        _, diag = ToolValidator.validate(specs, [ToolParam("limit", 3)])
        assert diag is None
        _, diag = ToolValidator.validate(specs, [ToolParam("limit", "three")])
        assert diag.startswith("wrong parameter value type")

    def test_command_param_uses_tool_specs(self):
        help_tool = HelpTool(Goal.GCP, RecordingBackend())
        assert command_param([ToolParam("command", "gcloud")], help_tool.params) == ("gcloud", None)
