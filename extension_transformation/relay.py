"""
Trigger and callback workflows.

TransformationRelay is what the HTTP routes call into:

    trigger:  received -> resolving-and-fetching -> dispatching -> responded
    callback: received -> writing-outputs -> responded

A successful trigger means the bundle was accepted by the transformation
service, not that anything was computed. Results arrive later on the
callback, correlated only by the token the service echoes back.

Write-back is not atomic: outputs are written in order, the first failure
stops the remaining writes, and outputs already written stay written.
"""

from __future__ import annotations

import logging

from extension_transformation.assembler import PayloadAssembler
from extension_transformation.errors import RelayError, WriteFailed
from extension_transformation.integrations.adapter import AdapterClient
from extension_transformation.integrations.transformation import TransformationClient
from extension_transformation.schemas import Extension, FunctionResponse

logger = logging.getLogger(__name__)


class TransformationRelay:
    """Drives trigger and callback requests against downstream services."""

    def __init__(
        self,
        adapter: AdapterClient,
        transformation: TransformationClient,
        assembler: PayloadAssembler,
    ):
        self.adapter = adapter
        self.transformation = transformation
        self.assembler = assembler

    async def trigger(self, extension: Extension, query: str = "") -> str:
        """
        Assemble and dispatch a function bundle.

        Args:
            extension: Trigger request
            query: Raw caller query string

        Returns:
            The correlation token sent with the bundle

        Raises:
            UnknownFunction: Before any fetch, if the function has no route
            DataFetchFailed: If an input cannot be fetched
            DispatchRejected: If the transformation service refuses the bundle
            UpstreamUnavailable: If the transformation service is unreachable
        """
        self.transformation.route_for(extension.function)

        params = await self.assembler.assemble(extension, query)
        await self.transformation.dispatch(params, params.token, query)

        logger.info(
            f"[relay] Dispatched extension={extension.extension_id} "
            f"function={extension.function} token={params.token}"
        )
        return params.token

    async def callback(self, token: str, response: FunctionResponse) -> int:
        """
        Write computed outputs back to storage.

        Args:
            token: Correlation token from the callback route (not validated)
            response: Result bundle

        Returns:
            Number of output variables written

        Raises:
            WriteFailed: On the first output that cannot be written
        """
        written = 0
        for variable in response.output_variables:
            try:
                await self.adapter.write(variable)
            except RelayError as e:
                logger.warning(
                    f"[relay] Write-back stopped for token={token} after "
                    f"{written}/{len(response.output_variables)} outputs"
                )
                raise WriteFailed(variable.timeseries.timeseries_id, e) from e
            written += 1

        logger.info(f"[relay] Saved {written} outputs for token={token}")
        return written

    async def close(self) -> None:
        """Close downstream clients."""
        await self.adapter.close()
        await self.transformation.close()
