import pytest

from sgqr.config import MerchantDefaults
from sgqr.contexts import interpret_payload
from sgqr.encoder import EncodeError, verify_crc
from sgqr.payment_methods import (
    PaymentMethod,
    add_payment_method,
    compose_payload,
    extract_payment_methods,
    merge_payment_methods,
    move_payment_method,
    remove_payment_method,
    to_field_map,
)


def _method(raw: str, protocol: str, description: str = "") -> PaymentMethod:
    return PaymentMethod(raw_data=raw, description=description or protocol, protocol=protocol)


class TestExtract:
    def test_nets_grab_combo(self, nets_grab_payload, nets_block, grab_block):
        methods = extract_payment_methods(interpret_payload(nets_grab_payload).elements)
        assert methods == [
            PaymentMethod(raw_data=nets_block, description="NETS", protocol="SG.COM.NETS"),
            PaymentMethod(raw_data=grab_block, description="GrabPay", protocol="COM.GRAB"),
        ]

    def test_protocol_keeps_scanned_case(self, tlv):
        block = tlv("00", "sg.paynow") + tlv("01", "0")
        (method,) = extract_payment_methods(interpret_payload(tlv("26", block)).elements)
        assert method.protocol == "sg.paynow"
        assert method.description == "PayNow Merchant Information"

    def test_missing_indicator_is_unknown_protocol(self, tlv):
        (method,) = extract_payment_methods(interpret_payload(tlv("30", tlv("01", "X"))).elements)
        assert method.protocol == "Unknown"
        assert method.description == "Generic merchant account information"

    def test_ignores_elements_outside_range(self, tlv, grab_block):
        payload = tlv("25", grab_block) + tlv("52", grab_block) + tlv("51", grab_block)
        methods = extract_payment_methods(interpret_payload(payload).elements)
        assert [m.raw_data for m in methods] == [grab_block]

    def test_ignores_parse_errors(self, tlv, grab_block):
        payload = tlv("26", grab_block) + "2799"
        methods = extract_payment_methods(interpret_payload(payload).elements)
        assert len(methods) == 1


class TestMerge:
    def test_rescan_of_same_method_is_ignored(self):
        a = _method("A", "P1")
        b = _method("B", "P2")
        assert merge_payment_methods([a, b], [a]) == [a, b]

    def test_same_protocol_last_wins(self):
        a = _method("A", "P1")
        a_prime = _method("A'", "P1")
        assert merge_payment_methods([a], [a_prime]) == [a_prime]

    def test_replacement_takes_new_position(self):
        a, b, a_prime = _method("A", "P1"), _method("B", "P2"), _method("A'", "P1")
        assert merge_payment_methods([a, b], [a_prime]) == [b, a_prime]

    def test_order_preserved_for_new_protocols(self):
        a, b, c = _method("A", "P1"), _method("B", "P2"), _method("C", "P3")
        assert merge_payment_methods([a], [b, c]) == [a, b, c]

    def test_add_replaces_by_protocol(self):
        a, b, a_prime = _method("A", "P1"), _method("B", "P2"), _method("A'", "P1")
        assert add_payment_method([a, b], a_prime) == [b, a_prime]


class TestReorder:
    @pytest.fixture
    def methods(self):
        return [_method(raw, f"P{raw}") for raw in "ABCD"]

    @pytest.mark.parametrize(
        "index, before, expected",
        [
            (0, 0, "ABCD"),
            (0, 2, "BACD"),
            (0, 4, "BCDA"),
            (3, 0, "DABC"),
            (2, 1, "ACBD"),
            (1, 3, "ACBD"),
        ],
    )
    def test_move(self, methods, index, before, expected):
        assert "".join(m.raw_data for m in move_payment_method(methods, index, before)) == expected

    def test_move_out_of_range(self, methods):
        with pytest.raises(IndexError):
            move_payment_method(methods, 4, 0)
        with pytest.raises(IndexError):
            move_payment_method(methods, 0, 5)

    def test_remove(self, methods):
        assert "".join(m.raw_data for m in remove_payment_method(methods, 1)) == "ACD"
        with pytest.raises(IndexError):
            remove_payment_method(methods, 4)

    def test_inputs_are_not_mutated(self, methods):
        move_payment_method(methods, 0, 4)
        remove_payment_method(methods, 0)
        assert "".join(m.raw_data for m in methods) == "ABCD"


class TestFieldMap:
    def test_sequential_tags(self):
        methods = [_method("A", "P1"), _method("B", "P2")]
        assert to_field_map(methods) == {"26": "A", "27": "B"}

    def test_sgqr_pinned_to_51(self):
        methods = [_method("S", "sg.sgqr"), _method("A", "P1"), _method("B", "P2")]
        assert to_field_map(methods) == {"26": "A", "27": "B", "51": "S"}

    def test_empty_raw_data_dropped(self):
        assert to_field_map([_method("", "P1"), _method("B", "P2")]) == {"27": "B"}

    def test_too_many_methods(self):
        methods = [_method(str(i), f"P{i}") for i in range(25)]
        assert to_field_map(methods)["50"] == "24"
        assert to_field_map(methods + [_method("S", "SG.SGQR")])["51"] == "S"
        assert to_field_map(methods + [_method("X", "PX")])["51"] == "X"
        with pytest.raises(EncodeError):
            to_field_map(methods + [_method("X", "PX"), _method("S", "SG.SGQR")])
        with pytest.raises(EncodeError):
            to_field_map(methods + [_method("X", "PX")] * 2)


class TestComposePayload:
    def test_defaults_around_methods(self, paynow_block):
        encoded = compose_payload([_method(paynow_block, "SG.PAYNOW")])
        assert encoded.payload == (
            "000201010211"
            "2637" + paynow_block + "52040000"
            "5303702"
            "5802SG"
            "5902NA"
            "6009Singapore"
            "63045132"
        )
        assert encoded.crc == "5132"

    def test_custom_merchant_defaults(self):
        merchant = MerchantDefaults(merchant_name="HAWKER", point_of_initiation="12")
        encoded = compose_payload([], merchant)
        assert "5906HAWKER" in encoded.payload
        assert encoded.payload.startswith("000201010212")
        assert verify_crc(encoded.payload)

    def test_scan_compose_rescan(self, nets_grab_payload, sgqr_block, tlv):
        scanned = extract_payment_methods(interpret_payload(nets_grab_payload).elements)
        sgqr = extract_payment_methods(interpret_payload(tlv("51", sgqr_block)).elements)
        methods = merge_payment_methods(sgqr, scanned)

        payload = compose_payload(methods).payload
        result = interpret_payload(payload)
        assert [m.protocol for m in extract_payment_methods(result.elements)] == [
            "SG.COM.NETS",
            "COM.GRAB",
            "SG.SGQR",
        ]
        assert result.find("51").nested.context.name == "SG Merchant ID"
        assert result.find("63").raw_value == payload[-4:]
