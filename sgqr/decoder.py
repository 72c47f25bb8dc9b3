"""Context-driven decoder turning TLV text into a parse tree."""
from __future__ import annotations

from .elements import (
    UNKNOWN,
    InterpretationContext,
    ParsedElement,
    ParseError,
    ParseResult,
)
from .tlv import TLVItem, iter_tlv


def _interpret(context: InterpretationContext, item: TLVItem) -> ParsedElement:
    known = context.lookup(item.tag)
    if known is None:
        return ParsedElement(
            element_id=item.tag,
            length=item.length,
            raw_value=item.value,
            description=UNKNOWN,
            interpretation=None,
        )

    interpretation = known.interpreter(item.value) if known.interpreter else None
    return ParsedElement(
        element_id=item.tag,
        length=item.length,
        raw_value=item.value,
        description=known.description,
        interpretation=interpretation or None,
    )


def parse_data(context: InterpretationContext, data: str) -> ParseResult:
    """Decode ``data`` against ``context``.

    Elements keep input order. Malformed input never raises: the result then
    ends with a ``ParseError`` and keeps every element decoded before it.
    """

    elements: list[ParsedElement | ParseError] = []
    for item in iter_tlv(data):
        if isinstance(item, ParseError):
            elements.append(item)
            break
        elements.append(_interpret(context, item))
    return ParseResult(context=context, elements=tuple(elements))
