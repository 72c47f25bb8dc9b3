"""Build PayNow merchant account blocks from a phone number or UEN."""
from __future__ import annotations

import enum
import re

from .encoder import EncodeError, QRData
from .payment_methods import PaymentMethod
from .tlv import MAX_VALUE_LENGTH

PAYNOW_PROTOCOL = "SG.PAYNOW"

_LOCAL_MOBILE = re.compile(r"[0-9]{8}")
_INTL_MOBILE = re.compile(r"\+65[0-9]{8}")
_LETTER = re.compile(r"[a-zA-Z]")
_DIGIT = re.compile(r"[0-9]")


class PayNowError(ValueError):
    """Raised when a PayNow destination cannot be classified."""


class PayeeType(str, enum.Enum):
    MOBILE = "0"
    UEN = "2"


def detect_payee_type(destination: str) -> PayeeType | None:
    """Classify a destination as a Singapore mobile number or a UEN."""

    if _LOCAL_MOBILE.fullmatch(destination) or _INTL_MOBILE.fullmatch(destination):
        return PayeeType.MOBILE
    if _LETTER.search(destination) and _DIGIT.search(destination):
        return PayeeType.UEN
    return None


def standardize_phone(destination: str) -> str:
    if _LOCAL_MOBILE.fullmatch(destination):
        return f"+65{destination}"
    return destination


def build_paynow_method(destination: str, reference: str | None = None) -> PaymentMethod:
    """Create a PayNow payment method with an editable amount.

    ``reference`` is only carried for UEN payees.
    """

    destination = destination.strip()
    payee_type = detect_payee_type(destination)
    if payee_type is None:
        raise PayNowError(f"Cannot tell whether {destination!r} is a mobile number or a UEN")

    payee = standardize_phone(destination) if payee_type is PayeeType.MOBILE else destination
    try:
        raw_data = QRData(
            {
                "00": PAYNOW_PROTOCOL,
                "01": payee_type.value,
                "02": payee.upper(),
                "03": "1",
                "04": (reference or None) if payee_type is PayeeType.UEN else None,
            }
        ).to_string()
    except EncodeError as exc:
        raise PayNowError(str(exc)) from exc
    if len(raw_data) > MAX_VALUE_LENGTH:
        raise PayNowError(
            f"PayNow block for {destination!r} is {len(raw_data)} characters, more than {MAX_VALUE_LENGTH} fit in one field"
        )
    return PaymentMethod(
        raw_data=raw_data,
        description=f"PayNow ({destination.upper()})",
        protocol=PAYNOW_PROTOCOL,
    )
