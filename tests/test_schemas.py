"""
Tests for wire schemas and raw JSON handling.
"""

import json

import pytest
from pydantic import ValidationError

from extension_transformation.schemas import (
    DataVariable,
    Extension,
    FunctionParams,
    FunctionResponse,
    Point,
    Timeseries,
    Variable,
)
from extension_transformation.utils.raw_json import extract_raw_member, splice_raw_member

# =============================================================================
# Raw JSON helpers
# =============================================================================


class TestExtractRawMember:
    """Tests for extract_raw_member."""

    def test_returns_exact_text(self):
        text = '{"a": 1, "options": { "x" : 1.50,\n "y": [1e3] }, "b": 2}'
        assert extract_raw_member(text, "options") == '{ "x" : 1.50,\n "y": [1e3] }'

    def test_scalar_member(self):
        assert extract_raw_member('{"options": 1.00}', "options") == "1.00"

    def test_string_member_keeps_escapes(self):
        assert extract_raw_member('{"options": "a\\u00e9"}', "options") == '"a\\u00e9"'

    def test_missing_member_returns_default(self):
        assert extract_raw_member('{"a": 1}', "options") == "null"

    def test_empty_object(self):
        assert extract_raw_member("  { }  ", "options") == "null"

    def test_nested_key_is_not_matched(self):
        assert extract_raw_member('{"a": {"options": 1}}', "options") == "null"

    def test_last_duplicate_wins(self):
        assert extract_raw_member('{"options": 1, "options": 2}', "options") == "2"

    def test_rejects_non_object(self):
        with pytest.raises(ValueError):
            extract_raw_member("[1, 2]", "options")


class TestSpliceRawMember:
    """Tests for splice_raw_member."""

    def test_appends_member(self):
        assert splice_raw_member('{"a":1}', "options", "{ }") == '{"a":1,"options":{ }}'

    def test_empty_object(self):
        assert splice_raw_member("{}", "options", "null") == '{"options":null}'

    def test_rejects_non_object(self):
        with pytest.raises(ValueError):
            splice_raw_member("[]", "options", "1")


# =============================================================================
# Schemas
# =============================================================================


class TestExtension:
    """Tests for Extension decoding."""

    def test_from_json(self, sample_extension, sample_options_text):
        extension = Extension.from_json(sample_extension)

        assert extension.extension_id == "ext-001"
        assert extension.function == "AggregateAccumulative"
        assert extension.data.input_variables == ["rain_a", "rain_b"]
        assert extension.data.variables[1].timeseries.value_type == "Grid"
        assert extension.raw_options == sample_options_text

    def test_from_bytes(self, sample_extension):
        extension = Extension.from_json(sample_extension.encode())
        assert extension.extension == "Transformation"

    def test_missing_options_is_null(self):
        extension = Extension.from_json('{"extensionId": "e"}')
        assert extension.raw_options == "null"

    def test_missing_fields_default_empty(self):
        extension = Extension.from_json("{}")
        assert extension.function == ""
        assert extension.data.variables == []

    def test_invalid_json_raises(self):
        with pytest.raises(ValidationError):
            Extension.from_json("{not json")

    def test_wrong_types_raise(self):
        with pytest.raises(ValidationError):
            Extension.from_json('{"data": {"inputVariables": "a"}}')


class TestTimeseries:
    """Tests for Timeseries."""

    def test_is_immutable(self):
        series = Timeseries(timeseries_id="ts-1")
        with pytest.raises(ValidationError):
            series.value_type = "Grid"

    def test_wire_names(self):
        series = Timeseries(timeseries_id="ts-1", value_type="Scalar", time_step_id="each_hour")
        data = series.to_api_dict()
        assert data["timeseriesId"] == "ts-1"
        assert data["valueType"] == "Scalar"
        assert data["timeStepId"] == "each_hour"


class TestDataVariable:
    """Tests for DataVariable."""

    def test_bind_keeps_series_and_order(self):
        variable = Variable(variable_id="a", timeseries=Timeseries(timeseries_id="ts-a"))
        points = [Point(time="t2", value=2), Point(time="t1", value=1), Point(time="t1", value=1)]

        bound = DataVariable.bind(variable, points)

        assert bound.variable_id == "a"
        assert bound.timeseries == variable.timeseries
        assert [p.time for p in bound.data] == ["t2", "t1", "t1"]


class TestFunctionParams:
    """Tests for FunctionParams encoding."""

    def test_to_json_splices_options(self):
        params = FunctionParams(
            extension_id="ext-001",
            function="AggregateAccumulative",
            output_variables=[Variable(variable_id="total")],
            callback="http://callback",
            token="T00000042",
            options='{"threshold": 1.50}',
        )

        encoded = params.to_json()
        decoded = json.loads(encoded)

        assert encoded.endswith(',"options":{"threshold": 1.50}}')
        assert decoded["extensionId"] == "ext-001"
        assert decoded["outputVariables"][0]["variableId"] == "total"
        assert decoded["token"] == "T00000042"
        assert decoded["callback"] == "http://callback"

    def test_outputs_carry_no_data(self):
        params = FunctionParams(output_variables=[Variable(variable_id="total")])
        decoded = json.loads(params.to_json())
        assert "data" not in decoded["outputVariables"][0]


class TestFunctionResponse:
    """Tests for FunctionResponse decoding."""

    def test_output_variables_carry_data(self):
        body = json.dumps(
            {
                "extensionId": "ext-001",
                "outputVariables": [
                    {
                        "variableId": "total",
                        "timeseries": {"timeseriesId": "ts-total", "valueType": "Scalar"},
                        "data": [{"time": "t1", "value": 3.5}],
                    }
                ],
                "options": {"anything": [1, 2]},
            }
        )

        response = FunctionResponse.model_validate_json(body)

        assert response.output_variables[0].data[0].value == 3.5
        assert response.options == {"anything": [1, 2]}


class TestNullMembers:
    """Tests for null members taking their empty defaults."""

    def test_null_lists_and_strings(self):
        extension = Extension.from_json(
            '{"extensionId": null, "function": "F", '
            '"data": {"inputVariables": null, "outputVariables": ["o"], "variables": null}}'
        )

        assert extension.extension_id == ""
        assert extension.data.input_variables == []
        assert extension.data.variables == []
        assert extension.data.output_variables == ["o"]

    def test_null_nested_members(self):
        response = FunctionResponse.model_validate_json(
            '{"outputVariables": [{"variableId": "o", "timeseries": null, "data": null}], '
            '"inputVariables": null}'
        )

        output = response.output_variables[0]
        assert output.timeseries == Timeseries()
        assert output.data == []
        assert response.input_variables == []

    def test_null_point_value_is_zero(self):
        point = Point.model_validate_json('{"time": null, "value": null}')
        assert (point.time, point.value) == ("", 0.0)
