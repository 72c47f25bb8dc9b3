"""Combine payment methods from several QR codes into one payload."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from ..config import Settings, settings as default_settings
from ..contexts import interpret_payload
from ..encoder import EncodedPayload, EncodeError
from ..monitoring import record_composed
from ..payment_methods import (
    PaymentMethod,
    add_payment_method,
    compose_payload,
    extract_payment_methods,
    merge_payment_methods,
    move_payment_method,
    remove_payment_method,
)
from ..paynow import PayNowError, build_paynow_method
from ..renderer import render_qr_payload
from .errors import err_encode, err_index, err_no_payment_methods, err_paynow_destination

logger = logging.getLogger("sgqr.compose")


@dataclass(slots=True)
class ComposeResult:
    payment_methods: list[PaymentMethod]
    encoded: EncodedPayload
    qr_png_base64: str | None = None


class ComposeService:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or default_settings

    def scan(self, existing: Sequence[PaymentMethod], data: str) -> list[PaymentMethod]:
        result = interpret_payload(data)
        scanned = extract_payment_methods(result.elements)
        if not scanned:
            detail = result.error.message if result.error else None
            raise err_no_payment_methods(detail)

        merged = merge_payment_methods(existing, scanned)
        logger.info(
            "payment methods merged",
            extra={"scanned": len(scanned), "before": len(existing), "after": len(merged)},
        )
        return merged

    def add_paynow(
        self,
        existing: Sequence[PaymentMethod],
        destination: str,
        reference: str | None = None,
    ) -> list[PaymentMethod]:
        try:
            method = build_paynow_method(destination, reference)
        except PayNowError as exc:
            raise err_paynow_destination(str(exc)) from exc
        return add_payment_method(existing, method)

    def move(self, methods: Sequence[PaymentMethod], index: int, before: int) -> list[PaymentMethod]:
        try:
            return move_payment_method(methods, index, before)
        except IndexError as exc:
            raise err_index(str(exc)) from exc

    def remove(self, methods: Sequence[PaymentMethod], index: int) -> list[PaymentMethod]:
        try:
            return remove_payment_method(methods, index)
        except IndexError as exc:
            raise err_index(str(exc)) from exc

    def compose(self, methods: Sequence[PaymentMethod], *, render: bool = False) -> ComposeResult:
        try:
            encoded = compose_payload(methods, self.settings.merchant)
        except EncodeError as exc:
            raise err_encode(str(exc)) from exc

        record_composed(len(methods))
        logger.info("payload composed", extra={"payment_methods": len(methods), "crc": encoded.crc})

        png_b64 = None
        if render:
            png_b64 = render_qr_payload(encoded.payload)["png_base64"]
        return ComposeResult(payment_methods=list(methods), encoded=encoded, qr_png_base64=png_b64)
