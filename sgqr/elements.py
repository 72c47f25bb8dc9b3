"""Value and error types produced by the EMVCo TLV decoder."""
from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Union


class Marker(enum.Enum):
    """Sentinel for descriptions and interpretations that are not known."""

    UNKNOWN = "unknown"

    def __repr__(self) -> str:
        return f"{type(self).__name__}.{self.name}"


UNKNOWN = Marker.UNKNOWN


@dataclass(frozen=True)
class ParseError(abc.ABC):
    """Terminal decode condition. Always the last entry of a result."""

    @property
    @abc.abstractmethod
    def message(self) -> str:
        """Human-readable description of the failure."""

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class InvalidElementError(ParseError):
    element: str

    @property
    def message(self) -> str:
        return f"An invalid element+length indicator of {self.element} was encountered"


@dataclass(frozen=True)
class InvalidLengthError(ParseError):
    requested: int
    available: int

    @property
    def message(self) -> str:
        return (
            f"A length of {self.requested} was requested, "
            f"but only {self.available} chars are left in the payload"
        )


Interpretation = Union[str, "ParseResult", Marker]
Interpreter = Callable[[str], Optional[Interpretation]]


@dataclass(frozen=True)
class KnownElement:
    description: str
    interpreter: Interpreter | None = None


@dataclass(frozen=True)
class InterpretationContext:
    name: str
    known_elements: Mapping[str, KnownElement] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "known_elements", MappingProxyType(dict(self.known_elements)))

    def lookup(self, tag: str) -> KnownElement | None:
        return self.known_elements.get(tag)

    def __hash__(self) -> int:
        return hash(self.name)


@dataclass(frozen=True)
class ParsedElement:
    element_id: str
    length: int
    raw_value: str
    description: str | Marker
    interpretation: Interpretation | None = None

    @property
    def nested(self) -> ParseResult | None:
        """Return the nested parse result when this element was sub-parsed."""

        if isinstance(self.interpretation, ParseResult):
            return self.interpretation
        return None


@dataclass(frozen=True)
class ParseResult:
    context: InterpretationContext
    elements: tuple[ParsedElement | ParseError, ...] = ()

    def parsed_elements(self) -> list[ParsedElement]:
        return [e for e in self.elements if isinstance(e, ParsedElement)]

    @property
    def error(self) -> ParseError | None:
        if self.elements and isinstance(self.elements[-1], ParseError):
            return self.elements[-1]
        return None

    @property
    def ok(self) -> bool:
        return self.error is None

    def find(self, tag: str) -> ParsedElement | None:
        """Return the first parsed element carrying ``tag``."""

        for element in self.elements:
            if isinstance(element, ParsedElement) and element.element_id == tag:
                return element
        return None
