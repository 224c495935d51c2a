"""Tests for role tables and tool-declaration schemas."""

import math

import pytest

from apprentice.errors import ResponseFormatError
from apprentice.llm.schema import (
    llm_to_role,
    role_to_llm,
    set_float_param,
    set_int_param,
    tool_params_to_schema,
)
from apprentice.llm.types import ModelProvider, ParamType, Role, ToolParamSpec


PARAMS = (
    ToolParamSpec("a", "first", ParamType.INTEGER, required=True),
    ToolParamSpec("b", "second", ParamType.STRING, required=False),
)


class TestToolParamsToSchema:

    def test_required_and_property_order(self):
        schema = tool_params_to_schema(PARAMS, ModelProvider.GCP)
        assert schema["type"] == "object"
        assert schema["required"] == ["a"]
        assert list(schema["properties"]) == ["a", "b"]
        assert schema["properties"]["a"] == {"type": "integer", "description": "first"}
        assert schema["properties"]["b"] == {"type": "string", "description": "second"}

    def test_required_keeps_declaration_order(self):
        params = (
            ToolParamSpec("z", "", ParamType.NUMBER, required=True),
            ToolParamSpec("y", "", ParamType.BOOLEAN, required=False),
            ToolParamSpec("x", "", ParamType.STRING, required=True),
        )
        schema = tool_params_to_schema(params, ModelProvider.OPENAI)
        assert schema["required"] == ["z", "x"]
        assert list(schema["properties"]) == ["z", "y", "x"]
        assert schema["properties"]["y"]["type"] == "boolean"
        assert schema["properties"]["z"]["type"] == "number"

    @pytest.mark.parametrize("provider", [ModelProvider.OPENAI, ModelProvider.ANTHROPIC])
    def test_strict_vendors_disallow_extra_fields(self, provider):
        schema = tool_params_to_schema(PARAMS, provider)
        assert schema["additionalProperties"] is False

    def test_gcp_omits_additional_properties(self):
        schema = tool_params_to_schema(PARAMS, ModelProvider.GCP)
        assert "additionalProperties" not in schema

    def test_no_params(self):
        schema = tool_params_to_schema((), ModelProvider.GCP)
        assert schema == {"type": "object", "properties": {}, "required": []}


class TestRoles:

    def test_role_tables(self):
        assert role_to_llm(ModelProvider.OPENAI, Role.MODEL) == "assistant"
        assert role_to_llm(ModelProvider.ANTHROPIC, Role.USER) == "user"
        assert role_to_llm(ModelProvider.GCP, Role.MODEL) == "model"
        assert role_to_llm(ModelProvider.GCP, Role.SYSTEM) == "system"

    @pytest.mark.parametrize(
        "vendor, role",
        [("assistant", Role.MODEL), ("model", Role.MODEL), ("user", Role.USER), ("system", Role.SYSTEM)],
    )
    def test_inverse_lookup(self, vendor, role):
        assert llm_to_role(vendor) is role

    @pytest.mark.parametrize("vendor", ["tool", "", None, 3])
    def test_unknown_vendor_role(self, vendor):
        with pytest.raises(ResponseFormatError, match="unknown role"):
            llm_to_role(vendor)

    def test_display_names(self):
        assert str(Role.MODEL) == "apprentice"
        assert str(Role.USER) == "user"


class TestParamHelpers:

    def test_absent_values_are_skipped(self):
        payload: dict = {}
        set_int_param(payload, "n", None)
        set_float_param(payload, "temperature", None)
        assert payload == {}

    def test_non_finite_float_is_skipped(self):
        payload: dict = {}
        set_float_param(payload, "top_p", math.nan)
        set_float_param(payload, "temperature", math.inf)
        assert payload == {}

    def test_zero_is_sent(self):
        payload: dict = {}
        set_float_param(payload, "temperature", 0.0)
        set_int_param(payload, "top_k", 0)
        assert payload == {"temperature": 0.0, "top_k": 0}
