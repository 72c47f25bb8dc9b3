"""Static interpretation contexts for EMVCo MPM and Singapore payment schemes."""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from .decoder import parse_data
from .elements import (
    UNKNOWN,
    InterpretationContext,
    Interpretation,
    KnownElement,
    ParsedElement,
    ParseResult,
)

MERCHANT_ACCOUNT_TAGS = tuple(f"{i:02d}" for i in range(26, 52))

PAYLOAD_FORMAT_INDICATOR = KnownElement(description="Payload format indicator")


def _lookup(table: Mapping[str, str]):
    def interpreter(value: str) -> Interpretation:
        return table.get(value, UNKNOWN)

    return interpreter


GENERIC_MERCHANT_ACCOUNT_CONTEXT = InterpretationContext(
    name="Generic merchant account information",
    known_elements={"00": PAYLOAD_FORMAT_INDICATOR},
)

PAYNOW_CONTEXT = InterpretationContext(
    name="PayNow Merchant Information",
    known_elements={
        "00": PAYLOAD_FORMAT_INDICATOR,
        "01": KnownElement(
            description="Payee type",
            interpreter=_lookup({"0": "Mobile number", "2": "UEN"}),
        ),
        "02": KnownElement(description="Payee"),
        "03": KnownElement(
            description="Is amount editable",
            interpreter=_lookup({"0": "Not editable", "1": "Editable"}),
        ),
        "04": KnownElement(description="Transaction reference"),
        "05": KnownElement(description="Expiry (YYYY/MM/DD)"),
    },
)

NETS_CONTEXT = InterpretationContext(
    name="NETS",
    known_elements={
        "00": PAYLOAD_FORMAT_INDICATOR,
        "01": KnownElement(description="QR metadata"),
        "02": KnownElement(description="Merchant ID"),
        "03": KnownElement(description="Terminal ID"),
        "09": KnownElement(description="Transaction amount modifier"),
        "99": KnownElement(description="Signature"),
    },
)

GRABPAY_CONTEXT = InterpretationContext(
    name="GrabPay",
    known_elements={
        "00": PAYLOAD_FORMAT_INDICATOR,
        "01": KnownElement(description="Merchant ID"),
    },
)

SGQR_CONTEXT = InterpretationContext(
    name="SG Merchant ID",
    known_elements={
        "00": PAYLOAD_FORMAT_INDICATOR,
        "01": KnownElement(description="SGQR ID Number"),
        "02": KnownElement(description="Version"),
        "03": KnownElement(description="Postcode"),
        "04": KnownElement(description="Level"),
        "05": KnownElement(description="Unit number"),
        "06": KnownElement(description="Misc"),
        "07": KnownElement(description="Revision date (YYYYMMDD)"),
    },
)

PROTOCOL_CONTEXTS: Mapping[str, InterpretationContext] = MappingProxyType(
    {
        "SG.PAYNOW": PAYNOW_CONTEXT,
        "SG.COM.NETS": NETS_CONTEXT,
        "COM.GRAB": GRABPAY_CONTEXT,
        "SG.SGQR": SGQR_CONTEXT,
    }
)


def context_for_protocol(identifier: str) -> InterpretationContext | None:
    """Return the protocol context for a format indicator, ignoring case."""

    return PROTOCOL_CONTEXTS.get(identifier.upper())


def interpret_merchant_account(value: str) -> ParseResult:
    """Decode a merchant account block, dispatching on its leading ``00``."""

    generic = parse_data(GENERIC_MERCHANT_ACCOUNT_CONTEXT, value)
    first = generic.elements[0] if generic.elements else None
    if not isinstance(first, ParsedElement) or first.element_id != "00":
        return generic

    protocol_context = context_for_protocol(first.raw_value)
    if protocol_context is None:
        return generic
    return parse_data(protocol_context, value)


MERCHANT_ACCOUNT_INFORMATION = KnownElement(
    description="Merchant account information",
    interpreter=interpret_merchant_account,
)

EMVCO_MPM_CONTEXT = InterpretationContext(
    name="EMVCo Merchant Presented QR Code",
    known_elements={
        "00": PAYLOAD_FORMAT_INDICATOR,
        "01": KnownElement(
            description="Point of initiation",
            interpreter=_lookup(
                {
                    "11": "Static -- can be used for multiple transactions",
                    "12": "Dynamic -- to be used for a single transaction",
                }
            ),
        ),
        **{tag: MERCHANT_ACCOUNT_INFORMATION for tag in MERCHANT_ACCOUNT_TAGS},
        "52": KnownElement(description="Merchant category code"),
        "53": KnownElement(description="Transaction currency"),
        "58": KnownElement(description="Country code"),
        "59": KnownElement(description="Merchant name"),
        "60": KnownElement(description="Merchant city"),
        "63": KnownElement(description="CRC"),
    },
)


def interpret_payload(data: str) -> ParseResult:
    """Decode a scanned QR string as an EMVCo merchant-presented payload."""

    return parse_data(EMVCO_MPM_CONTEXT, data)
