"""
Pydantic schemas for the extension transformation relay.

These schemas describe the wire formats exchanged with callers, storage
adapters and transformation services. Field names on the wire are camelCase;
Python attributes are snake_case.

The extension options are opaque: they are never validated or decoded here.
Extension.from_json() keeps their source text in `raw_options` and
FunctionParams.to_json() writes that text back unchanged.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from extension_transformation.utils.raw_json import extract_raw_member, splice_raw_member

# =============================================================================
# Base
# =============================================================================


class WireModel(BaseModel):
    """Base for camelCase wire models."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _null_as_absent(cls, data: Any) -> Any:
        """Treat `null` members as absent so they take their empty default."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    def to_api_dict(self) -> dict[str, Any]:
        """Convert to wire format."""
        return self.model_dump(by_alias=True, mode="json")


# =============================================================================
# Series and Variables
# =============================================================================


class Timeseries(WireModel):
    """Series reference: identifier plus classification attributes."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    timeseries_id: str = Field("", alias="timeseriesId")
    module_id: str = Field("", alias="moduleId")
    value_type: str = Field("", alias="valueType", description="Selects the storage adapter")
    parameter_id: str = Field("", alias="parameterId")
    location_id: str = Field("", alias="locationId")
    timeseries_type: str = Field("", alias="timeseriesType")
    time_step_id: str = Field("", alias="timeStepId")


class Variable(WireModel):
    """Catalog entry binding a variable id to one series."""

    variable_id: str = Field("", alias="variableId")
    timeseries: Timeseries = Field(default_factory=Timeseries)


class Point(WireModel):
    """Data point. The time is passed through without parsing."""

    time: str = ""
    value: float = 0.0


class DataVariable(Variable):
    """Variable together with its data points."""

    data: list[Point] = Field(default_factory=list)

    @classmethod
    def bind(cls, variable: Variable, points: list[Point]) -> DataVariable:
        """Attach points to a variable, keeping its series reference as-is."""
        return cls(
            variable_id=variable.variable_id,
            timeseries=variable.timeseries,
            data=list(points),
        )


# =============================================================================
# Extension (trigger request)
# =============================================================================


class ExtensionData(WireModel):
    """Variable catalog plus the ordered input/output references into it."""

    input_variables: list[str] = Field(default_factory=list, alias="inputVariables")
    output_variables: list[str] = Field(default_factory=list, alias="outputVariables")
    variables: list[Variable] = Field(default_factory=list)


class Extension(WireModel):
    """Extension definition received on the trigger route."""

    extension_id: str = Field("", alias="extensionId")
    extension: str = ""
    function: str = ""
    data: ExtensionData = Field(default_factory=ExtensionData)

    _raw_options: str = PrivateAttr(default="null")

    @property
    def raw_options(self) -> str:
        """Options exactly as sent by the caller (`null` when absent)."""
        return self._raw_options

    @classmethod
    def from_json(cls, body: str | bytes) -> Extension:
        """
        Decode a trigger body.

        Raises:
            pydantic.ValidationError: If the body is not a valid extension
            ValueError: If the body is not a JSON object
        """
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        extension = cls.model_validate_json(body)
        extension._raw_options = extract_raw_member(body, "options")
        return extension


# =============================================================================
# Function bundles
# =============================================================================


class FunctionParams(WireModel):
    """Parameter bundle sent to a transformation service."""

    extension_id: str = Field("", alias="extensionId")
    extension: str = ""
    function: str = ""
    input_variables: list[DataVariable] = Field(default_factory=list, alias="inputVariables")
    output_variables: list[Variable] = Field(default_factory=list, alias="outputVariables")
    callback: str = ""
    token: str = ""
    options: str = Field("null", exclude=True, description="Raw JSON text of the options")

    def to_json(self) -> str:
        """Encode the bundle with the options text spliced in verbatim."""
        encoded = self.model_dump_json(by_alias=True)
        return splice_raw_member(encoded, "options", self.options)


class FunctionResponse(WireModel):
    """Result bundle received on the callback route."""

    extension_id: str = Field("", alias="extensionId")
    extension: str = ""
    function: str = ""
    input_variables: list[DataVariable] = Field(default_factory=list, alias="inputVariables")
    output_variables: list[DataVariable] = Field(default_factory=list, alias="outputVariables")
    options: Any = None
    callback: str = ""
    token: str = ""
