# easybit/exception_handlers.py

from typing import Any, Type, TypeVar

import httpx
from pydantic import ValidationError

from easybit.core.exceptions import ApiError, DeserializeError, NetworkError
from easybit.schemas.responses import ApiErrorPayload, DataEnvelope
from easybit.utils.logger import log_exception, log_service_error

T = TypeVar("T")


def network_error(exc: httpx.HTTPError, func_name: str) -> NetworkError:
    log_exception(exc=exc, func_name=func_name, service="http")
    return NetworkError(f"{type(exc).__name__}: {exc}")


def _json_body(response: httpx.Response, func_name: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        log_exception(exc=exc, func_name=func_name, service="deserialize")
        raise DeserializeError(
            f"response body is not JSON (status={response.status_code})"
        ) from exc


def api_error(response: httpx.Response, func_name: str, body: Any = None) -> ApiError:
    """Build the ApiError for an error payload; DeserializeError if it is not one."""
    if body is None:
        body = _json_body(response, func_name)
    try:
        payload = ApiErrorPayload.model_validate(body)
    except ValidationError as exc:
        log_exception(exc=exc, func_name=func_name, service="deserialize")
        raise DeserializeError(
            f"unexpected error payload (status={response.status_code})"
        ) from exc

    log_service_error(
        message=f"EasyBit {payload.error_code}: {payload.error_message} | status={response.status_code}",
        func_name=func_name,
    )
    return ApiError(payload.error_code, payload.error_message, status_code=response.status_code)


def unwrap_data(
    response: httpx.Response,
    data_type: Type[T],
    func_name: str,
    envelope_optional: bool = False,
) -> T:
    """
    200 with a `data` member -> validated data.
    With `envelope_optional`, a 200 body that is neither enveloped nor an
    error payload is validated as the data itself.
    Anything else is an error payload.
    """
    if response.status_code != httpx.codes.OK:
        raise api_error(response, func_name)

    body = _json_body(response, func_name)
    if isinstance(body, dict) and "data" not in body and envelope_optional and "errorCode" not in body:
        body = {"data": body}
    if not isinstance(body, dict) or "data" not in body:
        raise api_error(response, func_name, body=body)

    try:
        return DataEnvelope[data_type].model_validate(body).data
    except ValidationError as exc:
        log_exception(exc=exc, func_name=func_name, service="deserialize")
        raise DeserializeError(f"unexpected {func_name} response: {exc.error_count()} error(s)") from exc


def expect_ok(response: httpx.Response, func_name: str) -> None:
    if response.status_code != httpx.codes.OK:
        raise api_error(response, func_name)
