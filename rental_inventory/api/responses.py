"""Envelope helpers and error-kind to status-code mapping for the HTTP layer."""

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rental_inventory.errors import DuplicateImageId, InvalidIdentifier, NotFound, OperationFailed
from rental_inventory.models.envelope import ApiResponse, Pagination
from rental_inventory.utils.logger import get_logger

logger = get_logger("rental_inventory.api.responses")


def success(
    message: str,
    data: Any = None,
    status_code: int = status.HTTP_200_OK,
    pagination: Optional[Pagination] = None,
) -> JSONResponse:
    body = ApiResponse(
        success=True,
        message=message,
        data=data,
        pagination=pagination,
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content=body.to_json())


def failure(message: str, status_code: int, errors: Any = None) -> JSONResponse:
    body = ApiResponse(success=False, message=message, errors=errors, status_code=status_code)
    return JSONResponse(status_code=status_code, content=body.to_json())


async def _invalid_identifier(request: Request, exc: InvalidIdentifier) -> JSONResponse:
    logger.info("api.invalid_identifier", path=request.url.path, value=str(exc.value))
    return failure(str(exc), status.HTTP_400_BAD_REQUEST)


async def _duplicate_image_id(request: Request, exc: DuplicateImageId) -> JSONResponse:
    logger.info("api.duplicate_image_id", path=request.url.path, item_id=exc.item_id, image_ids=exc.image_ids)
    return failure(str(exc), status.HTTP_400_BAD_REQUEST)


async def _not_found(request: Request, exc: NotFound) -> JSONResponse:
    logger.info("api.not_found", path=request.url.path, entity=exc.entity, record_id=exc.record_id)
    return failure(str(exc), status.HTTP_404_NOT_FOUND)


async def _operation_failed(request: Request, exc: OperationFailed) -> JSONResponse:
    logger.error("api.operation_failed", path=request.url.path, operation=exc.operation, error=exc.message)
    return failure(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return failure(
        "Validation failed",
        422,
        errors=jsonable_encoder(exc.errors()),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvalidIdentifier, _invalid_identifier)
    app.add_exception_handler(DuplicateImageId, _duplicate_image_id)
    app.add_exception_handler(NotFound, _not_found)
    app.add_exception_handler(OperationFailed, _operation_failed)
    app.add_exception_handler(RequestValidationError, _validation_error)
