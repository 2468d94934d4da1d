import logging

import records
from column import STATUS
from error_handler import DuplicateError, ValidationError
from utils import normalize_phone, today_str

logger = logging.getLogger(__name__)

ENTITY = "khach-hang"

def find_customer_by_phone(phone, spreadsheet=None):
    """Tìm khách theo số điện thoại (đã chuẩn hóa). Không có thì trả về None."""
    target = normalize_phone(phone)
    if not target:
        return None
    for customer in records.list_records(ENTITY, spreadsheet):
        if customer["so_dien_thoai"] == target:
            return customer
    return None

def create_customer(data: dict, spreadsheet=None) -> dict:
    """
    Thêm khách hàng mới.
    Bắt buộc có họ tên và số điện thoại; số điện thoại không được trùng.
    Việc kiểm tra trùng nằm ở đây, lớp sheet_store không kiểm tra.
    """
    ho_va_ten = str(data.get("ho_va_ten") or "").strip()
    so_dien_thoai = normalize_phone(data.get("so_dien_thoai"))
    if not ho_va_ten or not so_dien_thoai:
        raise ValidationError("Họ tên và số điện thoại là bắt buộc")

    existing = find_customer_by_phone(so_dien_thoai, spreadsheet)
    if existing:
        logger.info(f"Số điện thoại {so_dien_thoai} đã thuộc về khách {existing['ma_khach_hang']}")
        raise DuplicateError("Số điện thoại đã tồn tại trong hệ thống")

    customer = {
        **data,
        "ho_va_ten": ho_va_ten,
        "so_dien_thoai": so_dien_thoai,
        "ngay_tao": today_str(),
        "trang_thai": data.get("trang_thai") or STATUS["KHACH_MOI"],
    }
    return records.create_record(ENTITY, customer, spreadsheet)
