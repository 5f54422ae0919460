"""Translation of service results into HTTP responses."""

from typing import Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from expense_tracker.models.result import ErrorKind, ServiceResult
from expense_tracker.orchestrator import AppComponents


ERROR_STATUS = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_components(request: Request) -> AppComponents:
    return request.app.state.components


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def to_response(
    result: ServiceResult,
    success_status: int = status.HTTP_200_OK,
) -> JSONResponse:
    """
    Render a ServiceResult.

    Failures become ``{"error": message}`` with the status mapped from the
    error kind. Successes render the payload, or ``{"message": ...}`` when
    the operation has no payload.
    """
    if result.is_error:
        return error_response(
            result.error_message,
            ERROR_STATUS.get(result.error_kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        )

    content: Optional[object] = result.data
    if content is None:
        content = {"message": result.message}
    return JSONResponse(status_code=success_status, content=jsonable_encoder(content))
