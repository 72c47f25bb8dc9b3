"""Scanned QR interpretation services."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

from ..contexts import EMVCO_MPM_CONTEXT
from ..decoder import parse_data
from ..elements import InterpretationContext, ParseResult
from ..encoder import verify_crc
from ..monitoring import record_decode
from ..payment_methods import PaymentMethod, extract_payment_methods

logger = logging.getLogger("sgqr.interpret")


@dataclass(slots=True)
class UrlInfo:
    scheme: str
    hostname: str


@dataclass(slots=True)
class InterpretResult:
    data: str
    result: ParseResult
    payment_methods: list[PaymentMethod]
    url: UrlInfo | None
    crc_valid: bool | None


def describe_url(data: str) -> UrlInfo | None:
    """Return scheme and host when the scanned text is an absolute URL."""

    try:
        parts = urlsplit(data.strip())
        hostname = parts.hostname
    except ValueError:
        return None
    if not parts.scheme or not hostname:
        return None
    return UrlInfo(scheme=parts.scheme, hostname=hostname)


class InterpretService:
    def __init__(self, context: InterpretationContext = EMVCO_MPM_CONTEXT):
        self.context = context

    def interpret(self, data: str) -> InterpretResult:
        result = parse_data(self.context, data)
        methods = extract_payment_methods(result.elements)

        if result.error is not None:
            outcome = "parse_error"
            logger.info(
                "payload decoded with error",
                extra={"parse_error": result.error.message, "element_count": len(result.elements) - 1},
            )
        elif not result.elements:
            outcome = "empty"
        else:
            outcome = "ok"
        record_decode(outcome)

        logger.debug(
            "payload interpreted",
            extra={"outcome": outcome, "payment_methods": [m.protocol for m in methods]},
        )
        return InterpretResult(
            data=data,
            result=result,
            payment_methods=methods,
            url=describe_url(data),
            crc_valid=verify_crc(data) if result.find("63") else None,
        )
