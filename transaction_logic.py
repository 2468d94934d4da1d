import logging
from datetime import date as date_type
from dateutil import parser as date_parser

import records
from column import STATUS
from error_handler import ValidationError
from utils import format_number, today_str

logger = logging.getLogger(__name__)

ENTITY = "giao-dich"
LOAI_THU = "Thu"

def record_income(reference_id, customer_id, customer_name, amount, method, content,
                  staff_name="", date=None, spreadsheet=None) -> dict:
    """Ghi một giao dịch thu tiền đã hoàn thành vào sheet Giao dịch."""
    transaction = {
        "loai_giao_dich": LOAI_THU,
        "ma_tham_chieu": reference_id,
        "ma_khach_hang": customer_id,
        "ten_khach_hang": customer_name,
        "so_tien": format_number(amount) if isinstance(amount, (int, float)) else amount,
        "phuong_thuc": method,
        "ngay_giao_dich": date or today_str(),
        "noi_dung": content,
        "trang_thai": STATUS["HOAN_THANH"],
        "nhan_vien_xu_ly": staff_name,
    }
    saved = records.create_record(ENTITY, transaction, spreadsheet)
    logger.info(f"💰 Đã ghi giao dịch {saved['ma_giao_dich']} ({saved['so_tien']}) cho {reference_id}")
    return saved

def _parse_date(value):
    try:
        return date_parser.parse(value).date()
    except (ValueError, TypeError, OverflowError):
        return None

def list_transactions(start_date=None, end_date=None, customer_id=None, kind=None, spreadsheet=None) -> list:
    transactions = records.list_records(ENTITY, spreadsheet)

    if start_date:
        start = _parse_date(start_date)
        if start is None:
            raise ValidationError(f"Ngày bắt đầu không hợp lệ: {start_date}")
        transactions = [t for t in transactions
                        if _parse_date(t["ngay_giao_dich"]) and _parse_date(t["ngay_giao_dich"]) >= start]
    if end_date:
        end = _parse_date(end_date)
        if end is None:
            raise ValidationError(f"Ngày kết thúc không hợp lệ: {end_date}")
        transactions = [t for t in transactions
                        if _parse_date(t["ngay_giao_dich"]) and _parse_date(t["ngay_giao_dich"]) <= end]
    if customer_id:
        transactions = [t for t in transactions if t["ma_khach_hang"] == customer_id]
    if kind:
        transactions = [t for t in transactions if t["loai_giao_dich"] == kind]

    # Mới nhất trước; ngày không đọc được xếp cuối
    return sorted(transactions, key=lambda t: _parse_date(t["ngay_giao_dich"]) or date_type.min, reverse=True)

def create_transaction(data: dict, staff_name: str = "", spreadsheet=None) -> dict:
    """Ghi giao dịch nhập tay (thu hoặc chi)."""
    if not data.get("so_tien") or not data.get("loai_giao_dich"):
        raise ValidationError("Số tiền và loại giao dịch là bắt buộc")
    transaction = {
        **data,
        "ngay_giao_dich": data.get("ngay_giao_dich") or today_str(),
        "trang_thai": data.get("trang_thai") or STATUS["HOAN_THANH"],
        "nhan_vien_xu_ly": staff_name,
    }
    return records.create_record(ENTITY, transaction, spreadsheet)
