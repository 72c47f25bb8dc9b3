import json
import logging

import pytest

from sgqr.config import LoggingConfig, MerchantDefaults, Settings
from sgqr.logging_conf import JsonFormatter
from sgqr.payment_methods import PaymentMethod
from sgqr.services.composer import ComposeService
from sgqr.services.errors import ServiceError
from sgqr.services.interpreter import InterpretService, describe_url


class TestDescribeUrl:
    @pytest.mark.parametrize(
        "data, expected",
        [
            ("https://pay.example.sg/qr", ("https", "pay.example.sg")),
            ("  http://EXAMPLE.com  ", ("http", "example.com")),
            ("000201010211", None),
            ("mailto:someone@example.com", None),
            ("http://[::1", None),
        ],
    )
    def test_describe(self, data, expected):
        info = describe_url(data)
        if expected is None:
            assert info is None
        else:
            assert (info.scheme, info.hostname) == expected


class TestInterpretService:
    def test_result_fields(self, nets_grab_payload):
        result = InterpretService().interpret(nets_grab_payload)
        assert result.data == nets_grab_payload
        assert result.result.error is None
        assert [m.description for m in result.payment_methods] == ["NETS", "GrabPay"]
        assert result.crc_valid is None

    def test_partial_result_on_error(self, nets_grab_payload):
        result = InterpretService().interpret(nets_grab_payload[:-3])
        assert result.result.error is not None
        assert len(result.payment_methods) == 2


class TestComposeService:
    def test_uses_configured_merchant(self):
        service = ComposeService(Settings(merchant=MerchantDefaults(merchant_city="Jurong")))
        result = service.compose([])
        assert "6006Jurong" in result.encoded.payload
        assert result.qr_png_base64 is None

    def test_errors_become_service_errors(self):
        service = ComposeService()
        with pytest.raises(ServiceError) as excinfo:
            service.move([], 0, 0)
        assert excinfo.value.code == "ERR_INDEX"
        with pytest.raises(ServiceError) as excinfo:
            service.add_paynow([], "nope")
        assert excinfo.value.status_code == 400

    def test_add_paynow_replaces_existing(self):
        old = PaymentMethod(raw_data="0009SG.PAYNOW01010", description="old", protocol="SG.PAYNOW")
        methods = ComposeService().add_paynow([old], "91234567")
        assert len(methods) == 1
        assert methods[0].description == "PayNow (91234567)"


class TestJsonFormatter:
    def test_extras_are_included(self):
        record = logging.LogRecord("sgqr.test", logging.INFO, __file__, 1, "decoded %s", ("ok",), None)
        record.outcome = "ok"
        payload = json.loads(JsonFormatter().format(record))
        assert payload == {"level": "INFO", "logger": "sgqr.test", "message": "decoded ok", "outcome": "ok"}

    def test_logging_config_defaults(self):
        assert LoggingConfig().level == "INFO"
