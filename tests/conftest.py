import pytest


def _tlv(tag: str, value: str) -> str:
    return f"{tag}{len(value):02d}{value}"


@pytest.fixture
def tlv():
    return _tlv


@pytest.fixture
def nets_block():
    return (
        _tlv("00", "SG.COM.NETS")
        + _tlv("01", "231000000000000000")
        + _tlv("02", "11137104400")
        + _tlv("03", "37104400")
        + _tlv("99", "A1B2C3D4")
    )


@pytest.fixture
def grab_block():
    return _tlv("00", "COM.GRAB") + _tlv("01", "A93FO3230Q")


@pytest.fixture
def paynow_block():
    return "0009SG.PAYNOW010120210201403121W03011"


@pytest.fixture
def sgqr_block():
    return _tlv("00", "SG.SGQR") + _tlv("01", "20091902F9D4") + _tlv("02", "01.0001") + _tlv("03", "238859")


@pytest.fixture
def nets_grab_payload(nets_block, grab_block):
    """Dynamic NETS + GrabPay combination QR."""

    return (
        _tlv("00", "01")
        + _tlv("01", "12")
        + _tlv("26", nets_block)
        + _tlv("27", grab_block)
        + _tlv("52", "5812")
        + _tlv("53", "702")
        + _tlv("58", "SG")
        + _tlv("59", "HAWKER STALL")
        + _tlv("60", "Singapore")
    )
