"""Pydantic schemas for API contracts."""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .elements import (
    InvalidElementError,
    InvalidLengthError,
    Marker,
    ParsedElement,
    ParseError,
    ParseResult,
)
from .payment_methods import PaymentMethod


class PaymentMethodSchema(BaseModel):
    raw_data: str = Field(min_length=1, max_length=99)
    description: str
    protocol: str
    icon_url: str = ""

    @classmethod
    def from_method(cls, method: PaymentMethod) -> "PaymentMethodSchema":
        return cls(
            raw_data=method.raw_data,
            description=method.description,
            protocol=method.protocol,
            icon_url=method.icon_url,
        )

    def to_method(self) -> PaymentMethod:
        return PaymentMethod(
            raw_data=self.raw_data,
            description=self.description,
            protocol=self.protocol,
            icon_url=self.icon_url,
        )


class TextInterpretation(BaseModel):
    kind: Literal["text"] = "text"
    text: str


class UnknownInterpretation(BaseModel):
    kind: Literal["unknown"] = "unknown"


class NestedInterpretation(BaseModel):
    kind: Literal["nested"] = "nested"
    result: ParseResultSchema


InterpretationSchema = Annotated[
    Union[TextInterpretation, UnknownInterpretation, NestedInterpretation],
    Field(discriminator="kind"),
]


class ParsedElementSchema(BaseModel):
    kind: Literal["element"] = "element"
    element_id: str
    length: int
    raw_value: str
    description: str | None = Field(description="None when the tag is not known in this context")
    interpretation: InterpretationSchema | None = None

    @classmethod
    def from_element(cls, element: ParsedElement) -> "ParsedElementSchema":
        interpretation = element.interpretation
        if interpretation is None:
            rendered = None
        elif isinstance(interpretation, Marker):
            rendered = UnknownInterpretation()
        elif isinstance(interpretation, ParseResult):
            rendered = NestedInterpretation(result=ParseResultSchema.from_result(interpretation))
        else:
            rendered = TextInterpretation(text=interpretation)

        return cls(
            element_id=element.element_id,
            length=element.length,
            raw_value=element.raw_value,
            description=None if isinstance(element.description, Marker) else element.description,
            interpretation=rendered,
        )


class ParseErrorSchema(BaseModel):
    kind: Literal["error"] = "error"
    error: Literal["invalid_element", "invalid_length"]
    message: str
    element: str | None = None
    requested: int | None = None
    available: int | None = None

    @classmethod
    def from_error(cls, error: ParseError) -> "ParseErrorSchema":
        if isinstance(error, InvalidLengthError):
            return cls(
                error="invalid_length",
                message=error.message,
                requested=error.requested,
                available=error.available,
            )
        if isinstance(error, InvalidElementError):
            return cls(error="invalid_element", message=error.message, element=error.element)
        raise TypeError(f"Unsupported parse error {type(error).__name__}")


ElementSchema = Annotated[Union[ParsedElementSchema, ParseErrorSchema], Field(discriminator="kind")]


class ParseResultSchema(BaseModel):
    context: str
    elements: list[ElementSchema]

    @classmethod
    def from_result(cls, result: ParseResult) -> "ParseResultSchema":
        elements: list[ParsedElementSchema | ParseErrorSchema] = []
        for element in result.elements:
            if isinstance(element, ParseError):
                elements.append(ParseErrorSchema.from_error(element))
            else:
                elements.append(ParsedElementSchema.from_element(element))
        return cls(context=result.context.name, elements=elements)


NestedInterpretation.model_rebuild()
ParsedElementSchema.model_rebuild()
ParseResultSchema.model_rebuild()


class InterpretRequest(BaseModel):
    data: str = Field(description="Text decoded from a QR image")


class UrlInfoSchema(BaseModel):
    scheme: str
    hostname: str


class InterpretResponse(BaseModel):
    data: str
    result: ParseResultSchema
    payment_methods: list[PaymentMethodSchema]
    url: UrlInfoSchema | None = None
    crc_valid: bool | None = None


class PaymentMethodsRequest(BaseModel):
    payment_methods: list[PaymentMethodSchema] = Field(default_factory=list)

    def methods(self) -> list[PaymentMethod]:
        return [pm.to_method() for pm in self.payment_methods]


class ScanRequest(PaymentMethodsRequest):
    data: str = Field(min_length=1)


class PayNowRequest(PaymentMethodsRequest):
    destination: str = Field(min_length=1, max_length=64)
    reference: str | None = Field(default=None, max_length=25)


class MoveRequest(PaymentMethodsRequest):
    index: int = Field(ge=0)
    before: int = Field(ge=0)


class RemoveRequest(PaymentMethodsRequest):
    index: int = Field(ge=0)


class ComposeRequest(PaymentMethodsRequest):
    render: bool = False


class PaymentMethodsResponse(BaseModel):
    payment_methods: list[PaymentMethodSchema]


class ComposeResponse(BaseModel):
    payload: str
    crc: str
    payment_methods: list[PaymentMethodSchema]
    qr_png_base64: str | None = None


class RenderRequest(BaseModel):
    payload: str = Field(min_length=1)
    title: str | None = Field(default=None, max_length=64)
