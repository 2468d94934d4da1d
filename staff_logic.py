import logging

import records
from error_handler import DuplicateError, NotFoundError, ValidationError
from utils import today_str

logger = logging.getLogger(__name__)

ENTITY = "nhan-vien"

def _email_taken(email, staff_rows, exclude_id=None) -> bool:
    return any(s["email"] == email and s["ma_nhan_vien"] != exclude_id for s in staff_rows)

def create_staff(data: dict, spreadsheet=None) -> dict:
    """
    Thêm nhân viên. Bắt buộc họ tên, email, số điện thoại; email không được trùng.
    """
    if not data.get("ho_va_ten") or not data.get("email") or not data.get("so_dien_thoai"):
        raise ValidationError("Họ tên, email và số điện thoại là bắt buộc")

    if _email_taken(data["email"], records.list_records(ENTITY, spreadsheet)):
        raise DuplicateError("Email đã được sử dụng cho nhân viên khác")

    staff = {
        **data,
        "ngay_vao_lam": data.get("ngay_vao_lam") or today_str(),
        "quyen_han": data.get("quyen_han") or "Nhân viên",
        "trang_thai": data.get("trang_thai") or "Hoạt động",
        "hoa_hong": data.get("hoa_hong") or "10",
    }
    return records.create_record(ENTITY, staff, spreadsheet)

def update_staff(staff_id: str, updates: dict, spreadsheet=None) -> dict:
    staff_rows = records.list_records(ENTITY, spreadsheet)
    if updates.get("email") and _email_taken(updates["email"], staff_rows, exclude_id=staff_id):
        raise DuplicateError("Email đã được sử dụng cho nhân viên khác")

    if not records.update_record(ENTITY, staff_id, updates, spreadsheet):
        raise NotFoundError("Nhân viên không tồn tại")
    logger.info(f"✅ Đã cập nhật nhân viên {staff_id}")
    return records.get_record(ENTITY, staff_id, spreadsheet)
