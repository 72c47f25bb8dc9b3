"""Payment methods carried in the merchant account information range."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, Sequence, TypeVar

from .config import MerchantDefaults, settings
from .contexts import MERCHANT_ACCOUNT_TAGS
from .elements import ParsedElement, ParseError, ParseResult
from .encoder import EncodedPayload, EncodeError, QRData

SGQR_PROTOCOL = "SG.SGQR"
SGQR_TAG = "51"
FIRST_ACCOUNT_TAG = int(MERCHANT_ACCOUNT_TAGS[0])
UNKNOWN_PROTOCOL = "Unknown"

T = TypeVar("T")


@dataclass(frozen=True)
class PaymentMethod:
    raw_data: str
    description: str
    protocol: str
    icon_url: str = ""

    @property
    def is_sgqr(self) -> bool:
        return self.protocol.upper() == SGQR_PROTOCOL


def _is_account_element(element: ParsedElement | ParseError) -> bool:
    return (
        isinstance(element, ParsedElement)
        and MERCHANT_ACCOUNT_TAGS[0] <= element.element_id <= MERCHANT_ACCOUNT_TAGS[-1]
        and isinstance(element.interpretation, ParseResult)
    )


def extract_payment_methods(elements: Iterable[ParsedElement | ParseError]) -> list[PaymentMethod]:
    """Project sub-parsed elements 26 to 51 onto payment methods."""

    methods: list[PaymentMethod] = []
    for element in elements:
        if not _is_account_element(element):
            continue
        nested: ParseResult = element.interpretation  # type: ignore[union-attr,assignment]
        indicator = nested.find("00")
        methods.append(
            PaymentMethod(
                raw_data=element.raw_value,  # type: ignore[union-attr]
                description=nested.context.name,
                protocol=indicator.raw_value if indicator else UNKNOWN_PROTOCOL,
            )
        )
    return methods


def _unique_by(items: Iterable[T], key: Callable[[T], Hashable]) -> list[T]:
    seen: set[Hashable] = set()
    result: list[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        result.append(item)
    return result


def _unique_by_last(items: Sequence[T], key: Callable[[T], Hashable]) -> list[T]:
    return list(reversed(_unique_by(reversed(items), key)))


def merge_payment_methods(existing: Sequence[PaymentMethod], scanned: Sequence[PaymentMethod]) -> list[PaymentMethod]:
    """Combine a freshly scanned QR's methods into an existing list.

    Exact re-scans collapse onto the first copy; for any remaining protocol
    clash the most recently added method replaces the older one.
    """

    by_raw = _unique_by([*existing, *scanned], lambda m: m.raw_data)
    return _unique_by_last(by_raw, lambda m: m.protocol)


def add_payment_method(existing: Sequence[PaymentMethod], method: PaymentMethod) -> list[PaymentMethod]:
    return _unique_by_last([*existing, method], lambda m: m.protocol)


def move_payment_method(methods: Sequence[PaymentMethod], index: int, before: int) -> list[PaymentMethod]:
    """Move the method at ``index`` so it sits just before position ``before``."""

    if not 0 <= index < len(methods):
        raise IndexError(f"index {index} out of range for {len(methods)} payment methods")
    if not 0 <= before <= len(methods):
        raise IndexError(f"target {before} out of range for {len(methods)} payment methods")

    items = list(methods)
    if index == before:
        return items
    if index < before:
        return items[:index] + items[index + 1 : before] + [items[index]] + items[before:]
    return items[:before] + [items[index]] + items[before:index] + items[index + 1 :]


def remove_payment_method(methods: Sequence[PaymentMethod], index: int) -> list[PaymentMethod]:
    if not 0 <= index < len(methods):
        raise IndexError(f"index {index} out of range for {len(methods)} payment methods")
    return list(methods[:index]) + list(methods[index + 1 :])


def to_field_map(methods: Sequence[PaymentMethod]) -> dict[str, str]:
    """Assign merchant account tags to payment methods.

    Methods take tags 26 upwards in list order, except the SGQR block which is
    always placed at 51. Methods with empty raw data are left out.
    """

    regular = [m for m in methods if not m.is_sgqr]
    sgqr = next((m for m in methods if m.is_sgqr), None)

    last_free = int(SGQR_TAG) - 1 if sgqr else int(SGQR_TAG)
    if FIRST_ACCOUNT_TAG + len(regular) - 1 > last_free:
        raise EncodeError(
            f"Too many payment methods: {len(regular)} do not fit in tags "
            f"{FIRST_ACCOUNT_TAG}-{last_free}"
        )

    fields = {f"{FIRST_ACCOUNT_TAG + i:02d}": m.raw_data for i, m in enumerate(regular)}
    if sgqr is not None:
        fields[SGQR_TAG] = sgqr.raw_data
    return {tag: raw for tag, raw in fields.items() if raw}


def build_qr_data(methods: Sequence[PaymentMethod], merchant: MerchantDefaults | None = None) -> QRData:
    merchant = merchant or settings.merchant
    return QRData(
        {
            "00": merchant.payload_format_indicator,
            "01": merchant.point_of_initiation,
            **to_field_map(methods),
            "52": merchant.merchant_category_code,
            "53": merchant.transaction_currency,
            "58": merchant.country_code,
            "59": merchant.merchant_name,
            "60": merchant.merchant_city,
        }
    )


def compose_payload(methods: Sequence[PaymentMethod], merchant: MerchantDefaults | None = None) -> EncodedPayload:
    """Build the full EMVCo payload, CRC included, for a list of methods."""

    return build_qr_data(methods, merchant).encode()
