"""
Extension transformation routes.

- POST /extension/transformation/trigger/{extension_id}: fetch inputs and
  forward the bundle to the function's transformation service
- POST /extension/transformation/callback/{token}: write computed outputs
  back to storage

The raw query string of a trigger is forwarded to every fetch and to the
dispatch call. Failures answer {"response": <message>, "error": <code>}.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from extension_transformation.app.dependencies import get_relay
from extension_transformation.errors import MalformedRequestBody, RelayError
from extension_transformation.relay import TransformationRelay
from extension_transformation.schemas import Extension, FunctionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/extension/transformation", tags=["extension"])

OK: dict[str, str] = {"message": "OK"}


def _error_response(error: Exception) -> JSONResponse:
    """Map an exception to the error body."""
    if isinstance(error, RelayError):
        logger.warning(f"{type(error).__name__}: {error}")
        return JSONResponse(error.to_response(), status_code=error.status_code)

    logger.error(f"Unhandled error: {error}", exc_info=error)
    return JSONResponse({"response": "internal error", "error": "internal_error"}, status_code=500)


def _malformed(error: Exception) -> MalformedRequestBody:
    if isinstance(error, ValidationError):
        return MalformedRequestBody(f"Invalid request body: {error.error_count()} validation errors")
    return MalformedRequestBody(f"Invalid request body: {error}")


@router.post(
    "/trigger/{extension_id}",
    summary="Trigger an extension transformation",
    responses={
        200: {"description": "Bundle accepted by the transformation service"},
        400: {"description": "Malformed extension body"},
        422: {"description": "Function has no configured route"},
        502: {"description": "Input fetch failed or dispatch rejected"},
        503: {"description": "Downstream service unreachable"},
    },
)
async def trigger_extension(
    extension_id: str,
    request: Request,
    relay: TransformationRelay = Depends(get_relay),
) -> Any:
    """
    Trigger a transformation for an extension.

    1. Decode the extension, keeping its options text verbatim
    2. Fetch current data for the input variables
    3. Post the bundle to the function's transformation service
    4. Acknowledge; results arrive later on the callback route
    """
    logger.info(f"Trigger extensionId={extension_id}")
    try:
        body = await request.body()
        try:
            extension = Extension.from_json(body)
        except (ValidationError, ValueError) as e:
            raise _malformed(e) from e

        logger.info(
            f"Extension: extension={extension.extension} function={extension.function} "
            f"inputs={len(extension.data.input_variables)} "
            f"outputs={len(extension.data.output_variables)}"
        )
        await relay.trigger(extension, request.url.query)
        return OK

    except Exception as e:
        return _error_response(e)


@router.post(
    "/callback/{token}",
    summary="Receive transformation results",
    responses={
        200: {"description": "All outputs saved"},
        400: {"description": "Malformed result body"},
        502: {"description": "An output could not be saved"},
    },
)
async def receive_callback(
    token: str,
    request: Request,
    relay: TransformationRelay = Depends(get_relay),
) -> Any:
    """
    Save the computed outputs of a transformation.

    Outputs are written in order; the first failure stops the rest and
    earlier writes are kept.
    """
    logger.info(f"Trigger Callback Token={token}")
    try:
        body = await request.body()
        try:
            response = FunctionResponse.model_validate_json(body)
        except ValidationError as e:
            raise _malformed(e) from e

        await relay.callback(token, response)
        return OK

    except Exception as e:
        return _error_response(e)
