"""FastAPI application for the SGQR inspector."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import settings
from .logging_conf import configure_logging
from .middleware import RequestLoggingMiddleware, route_path
from .monitoring import metrics_payload, record_service_error
from .renderer import render_qr_payload
from .schemas import (
    ComposeRequest,
    ComposeResponse,
    InterpretRequest,
    InterpretResponse,
    MoveRequest,
    ParseResultSchema,
    PaymentMethodSchema,
    PaymentMethodsResponse,
    PayNowRequest,
    RemoveRequest,
    RenderRequest,
    ScanRequest,
    UrlInfoSchema,
)
from .services.composer import ComposeService
from .services.errors import ServiceError, err_bad_payload
from .services.interpreter import InterpretService

app = FastAPI(title="sgqr", version="0.1.0")
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

logger = logging.getLogger("sgqr.api")


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    logger.info("sgqr started", extra={"environment": settings.environment})


def _check_length(data: str) -> None:
    if len(data) > settings.max_payload_length:
        raise err_bad_payload(f"Payload longer than {settings.max_payload_length} characters")


def _methods_response(methods) -> PaymentMethodsResponse:
    return PaymentMethodsResponse(payment_methods=[PaymentMethodSchema.from_method(m) for m in methods])


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    path = route_path(request)
    logger.warning(
        "service error",
        extra={"code": exc.code, "path": path, "method": request.method},
    )
    record_service_error(exc.code, path)
    return JSONResponse(status_code=exc.status_code, content={"code": exc.code, "message": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled exception",
        extra={"path": route_path(request), "method": request.method},
    )
    return JSONResponse(status_code=500, content={"code": "ERR_INTERNAL", "message": "Internal server error"})


@app.get("/health", tags=["system"])
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics", tags=["system"])
async def metrics() -> Response:
    payload, content_type = metrics_payload()
    return Response(content=payload, media_type=content_type)


@app.post("/v1/interpret", response_model=InterpretResponse, tags=["interpret"])
async def interpret(payload: InterpretRequest) -> InterpretResponse:
    _check_length(payload.data)
    result = InterpretService().interpret(payload.data)
    return InterpretResponse(
        data=result.data,
        result=ParseResultSchema.from_result(result.result),
        payment_methods=[PaymentMethodSchema.from_method(m) for m in result.payment_methods],
        url=UrlInfoSchema(scheme=result.url.scheme, hostname=result.url.hostname) if result.url else None,
        crc_valid=result.crc_valid,
    )


@app.post("/v1/compose/scan", response_model=PaymentMethodsResponse, tags=["compose"])
async def compose_scan(payload: ScanRequest) -> PaymentMethodsResponse:
    _check_length(payload.data)
    return _methods_response(ComposeService().scan(payload.methods(), payload.data))


@app.post("/v1/compose/paynow", response_model=PaymentMethodsResponse, tags=["compose"])
async def compose_paynow(payload: PayNowRequest) -> PaymentMethodsResponse:
    methods = ComposeService().add_paynow(payload.methods(), payload.destination, payload.reference)
    return _methods_response(methods)


@app.post("/v1/compose/move", response_model=PaymentMethodsResponse, tags=["compose"])
async def compose_move(payload: MoveRequest) -> PaymentMethodsResponse:
    return _methods_response(ComposeService().move(payload.methods(), payload.index, payload.before))


@app.post("/v1/compose/remove", response_model=PaymentMethodsResponse, tags=["compose"])
async def compose_remove(payload: RemoveRequest) -> PaymentMethodsResponse:
    return _methods_response(ComposeService().remove(payload.methods(), payload.index))


@app.post("/v1/compose", response_model=ComposeResponse, tags=["compose"])
async def compose(payload: ComposeRequest) -> ComposeResponse:
    result = ComposeService().compose(payload.methods(), render=payload.render)
    return ComposeResponse(
        payload=result.encoded.payload,
        crc=result.encoded.crc,
        payment_methods=payload.payment_methods,
        qr_png_base64=result.qr_png_base64,
    )


@app.post("/v1/render", tags=["render"], response_class=Response)
async def render(payload: RenderRequest) -> Response:
    _check_length(payload.payload)
    rendered = render_qr_payload(payload.payload, title=payload.title)
    return Response(content=rendered["png_bytes"], media_type="image/png")
