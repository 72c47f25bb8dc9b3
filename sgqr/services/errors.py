"""Shared service error definitions."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ServiceError(Exception):
    code: str
    message: str
    status_code: int = 400

    def __str__(self) -> str:  # noqa: D401 override
        return f"{self.code}: {self.message}"


def err_bad_payload(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_BAD_PAYLOAD", message=message or "Invalid request payload", status_code=400)


def err_no_payment_methods(message: str | None = None) -> ServiceError:
    return ServiceError(
        code="ERR_NO_PAYMENT_METHODS",
        message=message or "Scanned data contains no payment methods",
        status_code=422,
    )


def err_encode(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_ENCODE", message=message or "Payment methods cannot be encoded", status_code=422)


def err_paynow_destination(message: str | None = None) -> ServiceError:
    return ServiceError(
        code="ERR_PAYNOW_DESTINATION",
        message=message or "Destination is neither a mobile number nor a UEN",
        status_code=400,
    )


def err_index(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_INDEX", message=message or "Payment method index out of range", status_code=400)
