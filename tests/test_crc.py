from sgqr.crc import crc16_ccitt, crc16_ccitt_hex

PIX_SAMPLE = (
    "00020101021226880014br.gov.bcb.pix2566qrcode.microcashif.com.br/pix/"
    "971f24d3-c3f9-48c3-96c0-65be7569fea35204000053039865802BR5924PAG INTERMEDIACOES DE VE"
    "6015SAO BERNARDO DO62070503***6304256A"
)


class TestCrc16Ccitt:
    def test_standard_check_value(self):
        assert crc16_ccitt(b"123456789") == 0x29B1

    def test_empty_input_is_initial_value(self):
        assert crc16_ccitt(b"") == 0xFFFF
        assert crc16_ccitt_hex("") == "FFFF"

    def test_hex_is_four_uppercase_digits(self):
        value = crc16_ccitt_hex("000201")
        assert len(value) == 4
        assert value == value.upper()
        int(value, 16)

    def test_real_payload_trailer(self):
        assert crc16_ccitt_hex(PIX_SAMPLE[:-4]) == "256A"

    def test_hashes_utf8_bytes(self):
        assert crc16_ccitt_hex("0002015904Café6304") == "6905"
        assert crc16_ccitt_hex("Café") == f"{crc16_ccitt('Café'.encode('utf-8')):04X}"
