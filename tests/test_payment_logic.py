import pytest

import payment_logic
import records
from error_handler import NotFoundError, ValidationError
from tests.conftest import FakeSpreadsheet


def _staff(ma, quyen="", ngan_hang="", so_tk=""):
    return {"ma_nhan_vien": ma, "ho_va_ten": ma, "quyen_han": quyen, "ngan_hang": ngan_hang, "so_tk": so_tk}


def test_resolve_clinic_bank_prefers_admin():
    rows = [_staff("NV1", "Nhân viên", "Vietcombank", "0123456789"),
            _staff("NV2", "Admin", "ACB", "123456")]
    bank = payment_logic.resolve_clinic_bank(rows)
    assert bank["bank_bin"] == "970416"
    assert bank["account_number"] == "123456"


def test_resolve_clinic_bank_falls_back_to_any_staff_then_config():
    rows = [_staff("NV1", "Admin"), _staff("NV2", "Nhân viên", "Vietcombank", "0123456789")]
    assert payment_logic.resolve_clinic_bank(rows)["bank_bin"] == "970436"
    assert payment_logic.resolve_clinic_bank([]) == payment_logic.default_bank_config()


def test_unknown_bank_name_uses_techcombank():
    bank = payment_logic.resolve_clinic_bank([_staff("NV1", "Admin", "Ngân hàng lạ", "1234567890")])
    assert bank["bank_bin"] == "970407"


def test_load_clinic_bank_falls_back_when_sheet_missing(monkeypatch):
    monkeypatch.setattr(payment_logic.config, "BANK_FALLBACK_ON_SHEET_ERROR", True)
    assert payment_logic.load_clinic_bank(FakeSpreadsheet()) == payment_logic.default_bank_config()


def test_load_clinic_bank_can_propagate_sheet_errors(monkeypatch):
    monkeypatch.setattr(payment_logic.config, "BANK_FALLBACK_ON_SHEET_ERROR", False)
    with pytest.raises(Exception):
        payment_logic.load_clinic_bank(FakeSpreadsheet())


def test_create_payment_qr(spreadsheet):
    result = payment_logic.create_payment_qr("DH001", "Nguyễn Văn A", 500000, [{"name": "Kem"}], spreadsheet)
    assert result["qr_data_url"] == (
        "https://qrcode.io.vn/api/generate/techcombank/19070220842011/500000/DH001 - Nguyen Van A"
    )
    assert result["transaction_ref"].startswith("ORDDH001_")
    assert result["bank_info"] == {
        "name": payment_logic.config.CLINIC_DISPLAY_NAME,
        "account": "19070220842011 (Techcombank)",
    }


@pytest.mark.parametrize("args", [
    ("", "An", 1000, [{}]),
    ("DH1", "", 1000, [{}]),
    ("DH1", "An", 0, [{}]),
    ("DH1", "An", "abc", [{}]),
    ("DH1", "An", "NaN", [{}]),
    ("DH1", "An", "Infinity", [{}]),
    ("DH1", "An", float("inf"), [{}]),
    ("DH1", "An", 1000, []),
])
def test_create_payment_qr_rejects_bad_input(spreadsheet, args):
    with pytest.raises(ValidationError):
        payment_logic.create_payment_qr(*args, spreadsheet=spreadsheet)


def test_create_payment_qr_rejects_invalid_clinic_account(spreadsheet):
    records.create_record("nhan-vien", _staff("NV1", "Admin", "Techcombank", "12345"), spreadsheet)
    with pytest.raises(ValidationError):
        payment_logic.create_payment_qr("DH1", "An", 1000, [{}], spreadsheet)


def test_get_bank_settings(spreadsheet):
    [settings] = payment_logic.get_bank_settings(spreadsheet)
    assert settings["ten_ngan_hang"] == "Techcombank"
    assert settings["ma_bin"] == "970407"


def test_update_bank_settings_writes_admin_row(spreadsheet):
    records.create_record("nhan-vien", _staff("NV1", "Nhân viên"), spreadsheet)
    records.create_record("nhan-vien", _staff("NV2", "Admin"), spreadsheet)
    payment_logic.update_bank_settings("Vietcombank", "0123456789", spreadsheet)
    admin = records.get_record("nhan-vien", "NV2", spreadsheet)
    assert (admin["ngan_hang"], admin["so_tk"]) == ("Vietcombank", "0123456789")
    assert records.get_record("nhan-vien", "NV1", spreadsheet)["so_tk"] == ""
    assert payment_logic.load_clinic_bank(spreadsheet)["bank_bin"] == "970436"


def test_update_bank_settings_validation(spreadsheet):
    with pytest.raises(ValidationError):
        payment_logic.update_bank_settings("Vietcombank", "", spreadsheet)
    with pytest.raises(ValidationError):
        payment_logic.update_bank_settings("Vietcombank", "12345678901234567", spreadsheet)
    with pytest.raises(NotFoundError):
        payment_logic.update_bank_settings("Vietcombank", "0123456789", spreadsheet)
