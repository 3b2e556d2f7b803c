"""
Function bundle assembly.

Builds the bundle sent to a transformation service from an extension:
inputs are resolved and bound to their current data, outputs are resolved
and left unbound, and the options text is carried over untouched.
"""

from __future__ import annotations

import logging
from typing import Callable

from extension_transformation.correlation import generate_token
from extension_transformation.errors import DataFetchFailed, RelayError
from extension_transformation.integrations.adapter import AdapterClient
from extension_transformation.resolver import resolve_variables
from extension_transformation.schemas import DataVariable, Extension, FunctionParams

logger = logging.getLogger(__name__)


class PayloadAssembler:
    """
    Assembles FunctionParams for an extension.

    Input fetches run one at a time in resolution order. The first failed
    fetch abandons the assembly; partial bundles are never returned.
    """

    def __init__(
        self,
        adapter: AdapterClient,
        callback_url: str,
        token_factory: Callable[[], str] = generate_token,
    ):
        self.adapter = adapter
        self.callback_url = callback_url
        self.token_factory = token_factory

    async def assemble(self, extension: Extension, query: str = "") -> FunctionParams:
        """
        Build the function bundle for an extension.

        Args:
            extension: Trigger request
            query: Raw caller query string, forwarded to every fetch

        Returns:
            Bundle with a fresh correlation token

        Raises:
            DataFetchFailed: If any input's data cannot be fetched
        """
        data = extension.data

        input_variables: list[DataVariable] = []
        for variable in resolve_variables(data.variables, data.input_variables):
            try:
                points = await self.adapter.fetch(variable, query)
            except RelayError as e:
                logger.warning(f"[assembler] Fetch failed for {variable.variable_id}: {e}")
                raise DataFetchFailed(variable.timeseries.timeseries_id) from e
            input_variables.append(DataVariable.bind(variable, points))

        output_variables = resolve_variables(data.variables, data.output_variables)

        return FunctionParams(
            extension_id=extension.extension_id,
            extension=extension.extension,
            function=extension.function,
            input_variables=input_variables,
            output_variables=output_variables,
            options=extension.raw_options,
            callback=self.callback_url,
            token=self.token_factory(),
        )
