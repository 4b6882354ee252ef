"""
Error types raised by the validation pipeline

Each class carries its own ``error_code`` and ``http_status``. Anything
collected for the error body goes in ``details``; the originating exception,
if any, is kept on ``cause``.
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException


class CVValidatorBaseException(Exception):
    error_code = "CV_VALIDATOR_ERROR"
    http_status = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, cause: Exception = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})
        self.cause = cause

    def _add(self, key: str, value: Any) -> None:
        if value is not None:
            self.details[key] = value

    def to_dict(self) -> Dict[str, Any]:
        body = {
            "error_type": type(self).__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }
        if self.cause is not None:
            body["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return body


class ValidationError(CVValidatorBaseException):
    """Input rejected before any service call (blank or oversized resume)"""
    error_code = "VALIDATION_ERROR"
    http_status = 400

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self._add("field", field)
        self._add("invalid_value", None if value is None else str(value))


class ConfigurationError(CVValidatorBaseException):
    """A threshold, tolerance or provider setting is unusable"""
    error_code = "CONFIGURATION_ERROR"
    http_status = 500

    def __init__(self, message: str, config_key: str = None, config_value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self._add("config_key", config_key)
        self._add("config_value", None if config_value is None else str(config_value))


class MissingServiceCredential(ConfigurationError):
    error_code = "MISSING_SERVICE_CREDENTIAL"

    def __init__(self, message: str = "Text-generation service credential is missing", **kwargs):
        super().__init__(message, **kwargs)


class ExternalServiceError(CVValidatorBaseException):
    """Base for failures of the text-generation service"""
    error_code = "EXTERNAL_SERVICE_ERROR"
    http_status = 502

    def __init__(self, message: str, service_name: str = None, status_code: int = None, **kwargs):
        super().__init__(message, **kwargs)
        self._add("service_name", service_name)
        self._add("status_code", status_code)


class ServiceCallFailure(ExternalServiceError):
    """The call itself failed: network, timeout, HTTP error, or the client raised"""
    error_code = "SERVICE_CALL_FAILURE"


class MalformedServiceResponse(ExternalServiceError):
    """The reply had no usable JSON object, or lacked a required key"""
    error_code = "MALFORMED_SERVICE_RESPONSE"

    def __init__(self, message: str, missing_key: str = None, **kwargs):
        super().__init__(message, **kwargs)
        self._add("missing_key", missing_key)


def map_to_http_exception(exc: CVValidatorBaseException) -> HTTPException:
    return HTTPException(
        status_code=exc.http_status,
        detail={"error": exc.to_dict(), "message": exc.message},
    )
