# payment_logic.py
# Lấy tài khoản nhận tiền của phòng khám và tạo QR thanh toán cho đơn hàng.
import logging
import math

import config
import records
from error_handler import NotFoundError, ValidationError
from vietqr import (
    find_bank_by_bin, find_bank_by_name, generate_transaction_ref,
    generate_vietqr_image_url, validate_bank_account,
)

logger = logging.getLogger(__name__)

STAFF = "nhan-vien"
QUYEN_ADMIN = "Admin"
DEFAULT_BANK_BIN = "970407" # Techcombank
DEFAULT_BRANCH = "Chi nhánh HCM"

def default_bank_config() -> dict:
    return {
        "bank_bin": config.CLINIC_BANK_BIN,
        "account_number": config.CLINIC_ACCOUNT_NUMBER,
        "account_name": config.CLINIC_ACCOUNT_NAME,
        "display_name": config.CLINIC_DISPLAY_NAME,
    }

def _staff_with_bank(staff_rows):
    """Ưu tiên nhân viên Admin có thông tin ngân hàng, sau đó tới bất kỳ ai có."""
    with_bank = [s for s in staff_rows if s.get("ngan_hang") and s.get("so_tk")]
    for staff in with_bank:
        if staff.get("quyen_han") == QUYEN_ADMIN:
            return staff
    return with_bank[0] if with_bank else None

def resolve_clinic_bank(staff_rows) -> dict:
    staff = _staff_with_bank(staff_rows)
    if staff is None:
        return default_bank_config()

    bank = find_bank_by_name(staff["ngan_hang"])
    if bank is None:
        logger.warning(f"Không nhận diện được ngân hàng '{staff['ngan_hang']}', dùng Techcombank.")
    return {
        "bank_bin": bank["bin"] if bank else DEFAULT_BANK_BIN,
        "account_number": staff["so_tk"],
        "account_name": config.CLINIC_ACCOUNT_NAME,
        "display_name": config.CLINIC_DISPLAY_NAME,
    }

def load_clinic_bank(spreadsheet=None) -> dict:
    try:
        staff_rows = records.list_records(STAFF, spreadsheet)
    except Exception as e:
        if not config.BANK_FALLBACK_ON_SHEET_ERROR:
            raise
        logger.warning(f"Không đọc được cấu hình ngân hàng từ sheet, dùng mặc định: {e}")
        return default_bank_config()
    return resolve_clinic_bank(staff_rows)

def create_payment_qr(order_id, customer_name, total_amount, items, spreadsheet=None) -> dict:
    """
    Tạo QR thanh toán cho đơn: kiểm tra tài khoản phòng khám TRƯỚC rồi mới dựng URL.
    Trả về {qr_data_url, transaction_ref, bank_info}.
    """
    try:
        amount = float(total_amount)
    except (TypeError, ValueError):
        amount = 0
    if not order_id or not customer_name or not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Thiếu thông tin thanh toán hoặc số tiền không hợp lệ")
    if not items or not isinstance(items, list):
        raise ValidationError("Đơn hàng phải có ít nhất một sản phẩm")

    bank_config = load_clinic_bank(spreadsheet)
    if not validate_bank_account(bank_config["bank_bin"], bank_config["account_number"]):
        logger.error(f"Tài khoản phòng khám không hợp lệ: {bank_config['bank_bin']} / {bank_config['account_number']}")
        raise ValidationError("Cấu hình tài khoản ngân hàng của phòng khám không hợp lệ")

    payment_data = {
        "bank_bin": bank_config["bank_bin"],
        "account_number": bank_config["account_number"],
        "account_name": bank_config["account_name"],
        "amount": amount,
        "description": f"{order_id} - {customer_name}",
        "order_id": order_id,
        "patient_name": customer_name,
        "service_type": "Don hang",
    }
    qr_url = generate_vietqr_image_url(payment_data)
    transaction_ref = generate_transaction_ref(order_id)
    logger.info(f"🌐 Đã tạo QR cho đơn {order_id}: {qr_url}")

    bank = find_bank_by_bin(bank_config["bank_bin"])
    return {
        "qr_data_url": qr_url,
        "transaction_ref": transaction_ref,
        "bank_info": {
            "name": bank_config["display_name"],
            "account": f"{bank_config['account_number']} ({bank['name'] if bank else 'Techcombank'})",
        },
    }

def get_bank_settings(spreadsheet=None) -> list:
    bank_config = load_clinic_bank(spreadsheet)
    bank = find_bank_by_bin(bank_config["bank_bin"])
    return [{
        "ten_ngan_hang": bank["name"] if bank else "",
        "ma_bin": bank_config["bank_bin"],
        "so_tai_khoan": bank_config["account_number"],
        "ten_tai_khoan": bank_config["account_name"],
        "chi_nhanh": DEFAULT_BRANCH,
        "trang_thai": "Hoạt động",
    }]

def update_bank_settings(bank_name, account_number, spreadsheet=None) -> dict:
    """Ghi ngân hàng + số tài khoản vào dòng của nhân viên Admin."""
    if not bank_name or not account_number:
        raise ValidationError("Tên ngân hàng và số tài khoản là bắt buộc")

    bank = find_bank_by_name(bank_name)
    if bank is not None and not validate_bank_account(bank["bin"], account_number):
        raise ValidationError("Số tài khoản không hợp lệ với ngân hàng đã chọn")

    staff_rows = records.list_records(STAFF, spreadsheet)
    admin = next((s for s in staff_rows if s.get("quyen_han") == QUYEN_ADMIN), None)
    if admin is None:
        raise NotFoundError("Không tìm thấy nhân viên Admin để cập nhật thông tin ngân hàng")

    updates = {"ngan_hang": bank_name, "so_tk": account_number}
    if not records.update_record(STAFF, admin["ma_nhan_vien"], updates, spreadsheet):
        raise NotFoundError("Không thể cập nhật thông tin ngân hàng")
    logger.info(f"✅ Đã cập nhật thông tin ngân hàng cho nhân viên {admin['ma_nhan_vien']}")
    return {**admin, **updates}
