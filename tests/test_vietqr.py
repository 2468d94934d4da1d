import re

import pytest

import vietqr


@pytest.mark.parametrize("length, expected", [(9, False), (10, True), (19, True), (20, False)])
def test_techcombank_account_length_boundaries(length, expected):
    assert vietqr.validate_bank_account("970407", "1" * length) is expected


@pytest.mark.parametrize("account", ["12345a7890", "1234 567890", "-1234567890", "１２３４５６７８９０"])
def test_non_digit_accounts_fail(account):
    assert vietqr.validate_bank_account("970407", account) is False


def test_unknown_bin_and_empty_account_fail():
    assert vietqr.validate_bank_account("999999", "1234567890") is False
    assert vietqr.validate_bank_account("970407", "") is False
    assert vietqr.validate_bank_account("970407", None) is False


def test_bank_specific_ranges():
    # ACB accepts 6 digits, Vietcombank stops at 16, Agribank starts at 8
    assert vietqr.validate_bank_account("970416", "123456") is True
    assert vietqr.validate_bank_account("970436", "1" * 17) is False
    assert vietqr.validate_bank_account("970405", "12345678") is True
    assert vietqr.validate_bank_account("970405", "1234567") is False


def test_bank_table_is_read_only():
    with pytest.raises(TypeError):
        vietqr.VIETNAMESE_BANKS["new"] = {}
    with pytest.raises(TypeError):
        vietqr.VIETNAMESE_BANKS["techcombank"]["bin"] = "000000"


def test_sanitize_vietnamese_text():
    result = vietqr.sanitize_vietnamese_text("Phòng khám Tống Gia Đường")
    assert result == "Phong kham Tong Gia Duong"
    assert result.isascii()
    assert vietqr.sanitize_vietnamese_text("đơn hàng #12 (đã trả)!") == "don hang 12 da tra"


def test_sanitize_trims_and_truncates():
    assert vietqr.sanitize_vietnamese_text("   abc   ") == "abc"
    long_text = "Thanh toán " * 10
    result = vietqr.sanitize_vietnamese_text(long_text)
    assert len(result) == 50
    assert vietqr.sanitize_vietnamese_text("") == ""
    assert vietqr.sanitize_vietnamese_text(None) == ""


def test_format_vnd_amount():
    assert vietqr.format_vnd_amount(1234.9) == "1235"
    assert vietqr.format_vnd_amount(0) == "0"
    assert vietqr.format_vnd_amount(1234.5) == "1235"
    assert vietqr.format_vnd_amount(1234.4) == "1234"
    assert vietqr.format_vnd_amount(1500000) == "1500000"


def test_generate_vietqr_image_url_shape():
    url = vietqr.generate_vietqr_image_url({
        "bank_bin": "970407",
        "account_number": "19070220842011",
        "amount": 500000,
        "description": "DH001 - Nguyen Van A",
    })
    assert url == "https://qrcode.io.vn/api/generate/techcombank/19070220842011/500000/DH001 - Nguyen Van A"


def test_generate_vietqr_image_url_fallbacks():
    # VietinBank (ICB) has no slug mapping: lower-cased short code
    url = vietqr.generate_vietqr_image_url({"bank_bin": "970415", "account_number": "123", "amount": 1.6})
    assert url == "https://qrcode.io.vn/api/generate/icb/123/2/Thanh toan don hang"
    # Unknown BIN is used as-is
    url = vietqr.generate_vietqr_image_url({"bank_bin": "123456", "account_number": "1", "amount": 10,
                                            "description": "Đặt lịch"})
    assert url.endswith("/123456/1/10/Dat lich")


def test_generate_vietqr_image_url_does_not_validate_or_raise():
    url = vietqr.generate_vietqr_image_url({"bank_bin": "970407", "account_number": "abc", "amount": "nhiều"})
    assert url.startswith("https://qrcode.io.vn/api/generate/techcombank/abc/")


def test_transaction_ref_format():
    ref = vietqr.generate_transaction_ref("DH001")
    assert re.fullmatch(r"ORDDH001_[0-9A-Z]+_[0-9A-Z]{5}", ref)
    assert re.fullmatch(r"TXN_[0-9A-Z]+_[0-9A-Z]{5}", vietqr.generate_transaction_ref())


def test_transaction_refs_differ_within_same_millisecond(monkeypatch):
    monkeypatch.setattr(vietqr.time, "time", lambda: 1700000000.123)
    refs = {vietqr.generate_transaction_ref("DH001") for _ in range(50)}
    assert len(refs) > 1


def test_find_bank_by_name():
    assert vietqr.find_bank_by_name("techcombank")["bin"] == "970407"
    assert vietqr.find_bank_by_name("VCB")["bin"] == "970436"
    assert vietqr.find_bank_by_name("Ngân hàng TMCP Á Châu")["bin"] == "970416"
    assert vietqr.find_bank_by_name("") is None
    assert vietqr.find_bank_by_name("Ngan hang ma") is None


def test_sanitize_keeps_only_plain_spaces():
    assert vietqr.sanitize_vietnamese_text("Đơn\thàng\n01 trả") == "Donhang01 tra"


@pytest.mark.parametrize("amount", [float("inf"), float("-inf"), float("nan"), "Infinity"])
def test_generate_vietqr_image_url_survives_non_finite_amounts(amount):
    url = vietqr.generate_vietqr_image_url({"bank_bin": "970407", "account_number": "19070220842011",
                                            "amount": amount, "description": "DH1"})
    assert url.startswith("https://qrcode.io.vn/api/generate/techcombank/19070220842011/")
    assert url.endswith("/DH1")


def test_generate_vietqr_image_url_missing_account_is_blank():
    url = vietqr.generate_vietqr_image_url({"bank_bin": "970407", "account_number": None, "amount": 10})
    assert "None" not in url
    assert url == "https://qrcode.io.vn/api/generate/techcombank//10/Thanh toan don hang"
