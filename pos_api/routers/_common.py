"""
Shared router helpers: caller identity and ActionResult -> HTTP response.
"""

from fastapi import Header, status
from fastapi.responses import JSONResponse

from shared.utils.exceptions import ErrorCode
from shared.utils.schemas import ActionResult, CallerIdentity

_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.TABLE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BUSINESS_UNIT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CUSTOMER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.ORDER_NUMBER_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.ORDER_NUMBER_EXHAUSTED: status.HTTP_409_CONFLICT,
    ErrorCode.ORDER_NUMBER_MALFORMED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def current_caller(
    x_staff_id: str | None = Header(default=None),
    x_staff_name: str | None = Header(default=None),
) -> CallerIdentity | None:
    """
    Caller identity forwarded by the upstream gateway.
    A missing or blank X-Staff-Id means no caller.
    """
    if not x_staff_id or not x_staff_id.strip():
        return None
    return CallerIdentity(user_id=x_staff_id.strip(), name=x_staff_name)


def status_for(result: ActionResult) -> int:
    if result.success:
        return status.HTTP_200_OK
    return _STATUS_BY_CODE.get(result.error_code, status.HTTP_400_BAD_REQUEST)


def to_response(result: ActionResult, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    """Serialize an ActionResult with the status code matching its outcome."""
    code = success_status if result.success else status_for(result)
    return JSONResponse(
        status_code=code,
        content=result.model_dump(mode="json"),
    )
