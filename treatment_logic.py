# treatment_logic.py
# Liệu trình (gói nhiều buổi) và lượt trị liệu (từng buổi / lịch hẹn).
import logging
from datetime import datetime

import records
import transaction_logic
from column import SESSION_STATUSES, STATUS
from error_handler import NotFoundError, ValidationError
from utils import format_number, to_int, to_number, today_str

logger = logging.getLogger(__name__)

PLAN = "lieu-trinh"
SESSION = "luot-tri-lieu"
PHUONG_THUC_MAC_DINH = "Tiền mặt"
CLOSED_PLAN_STATUSES = (STATUS["HOAN_THANH"], STATUS["HUY"])

# =============================
# Liệu trình
# =============================

def next_treatment_name(existing_names) -> str:
    """Tên liệu trình tự tăng: lấy số lớn nhất trong các tên toàn chữ số rồi +1, đệm 4 chữ số."""
    numbers = [int(name.strip()) for name in existing_names
               if name and name.strip().isdigit() and name.strip().isascii()]
    next_number = max(numbers) + 1 if numbers else 1
    return str(next_number).zfill(4)

def list_treatment_plans(spreadsheet=None) -> list:
    plans = records.list_records(PLAN, spreadsheet)
    result = []
    for plan in plans:
        if not plan.get("trang_thai_thanh_toan"):
            paid = "Đã Thanh Toán" in (plan.get("ghi_chu") or "")
            plan = {**plan, "trang_thai_thanh_toan": STATUS["DA_THANH_TOAN"] if paid else STATUS["CHUA_THANH_TOAN"]}
        result.append(plan)
    return result

def create_treatment_plan(data: dict, staff_name: str = "", spreadsheet=None) -> dict:
    if not data.get("ma_khach_hang") or not data.get("so_buoi"):
        raise ValidationError("Thông tin khách hàng và số buổi là bắt buộc")

    existing = records.list_records(PLAN, spreadsheet)
    auto_name = next_treatment_name(p["ten_lieu_trinh"] for p in existing)
    logger.debug(f"Tên liệu trình tự sinh: {auto_name}")

    plan = {
        **data,
        "ma_lieu_trinh": records.new_id(PLAN),
        "ten_lieu_trinh": data.get("ten_lieu_trinh") or auto_name,
        "ngay_bat_dau": data.get("ngay_bat_dau") or today_str(),
        "so_buoi_da_thuc_hien": data.get("so_buoi_da_thuc_hien") or "0",
        "da_thanh_toan": data.get("da_thanh_toan") or "0",
        "con_lai": data.get("con_lai") or data.get("tong_tien") or "0",
        "trang_thai": data.get("trang_thai") or STATUS["DANG_THUC_HIEN"],
        "nhan_vien_tu_van": data.get("nhan_vien_tu_van") or staff_name,
    }
    records.create_record(PLAN, plan, spreadsheet)

    if to_number(plan["da_thanh_toan"]) > 0:
        transaction_logic.record_income(
            plan["ma_lieu_trinh"], plan["ma_khach_hang"], plan.get("ten_khach_hang", ""),
            plan["da_thanh_toan"], PHUONG_THUC_MAC_DINH,
            f"Thanh toán liệu trình {plan['ten_lieu_trinh']}",
            staff_name=plan["nhan_vien_tu_van"], date=plan["ngay_bat_dau"], spreadsheet=spreadsheet,
        )
    return plan

def update_treatment_plan(plan_id: str, updates: dict, staff_name: str = "", spreadsheet=None) -> dict:
    current = records.get_record(PLAN, plan_id, spreadsheet)
    if current is None:
        raise NotFoundError("Liệu trình không tồn tại")

    changes = dict(updates)
    if "da_thanh_toan" in changes:
        tong_tien = to_number(current.get("tong_tien"))
        da_thanh_toan = to_number(changes.get("da_thanh_toan"))
        changes["con_lai"] = format_number(tong_tien - da_thanh_toan)

    if "so_buoi_da_thuc_hien" in changes:
        if to_int(changes.get("so_buoi_da_thuc_hien")) >= to_int(current.get("so_buoi")):
            changes["trang_thai"] = STATUS["HOAN_THANH"]
            changes["ngay_ket_thuc"] = today_str()

    if not records.update_record(PLAN, plan_id, changes, spreadsheet):
        raise NotFoundError("Không thể cập nhật liệu trình")

    paid_before = to_number(current.get("da_thanh_toan"))
    paid_now = to_number(changes.get("da_thanh_toan")) if changes.get("da_thanh_toan") else paid_before
    if paid_now > paid_before:
        transaction_logic.record_income(
            plan_id, current["ma_khach_hang"], current.get("ten_khach_hang", ""),
            paid_now - paid_before, PHUONG_THUC_MAC_DINH,
            f"Thanh toán thêm liệu trình {current['ten_lieu_trinh']}",
            staff_name=staff_name, spreadsheet=spreadsheet,
        )
    return {**current, **changes}

# =============================
# Lượt trị liệu
# =============================

def _session_sort_key(session):
    try:
        ngay = datetime.strptime(session.get("ngay_thuc_hien") or "", "%Y-%m-%d")
    except ValueError:
        ngay = datetime.min
    return ngay, session.get("gio_bat_dau") or ""

def list_sessions(treatment_id=None, date=None, spreadsheet=None) -> list:
    """Lọc theo liệu trình / ngày, sắp xếp ngày mới nhất trước, cùng ngày thì giờ muộn trước."""
    sessions = records.list_records(SESSION, spreadsheet)
    if treatment_id:
        sessions = [s for s in sessions if s["ma_lieu_trinh"] == treatment_id]
    if date:
        sessions = [s for s in sessions if s["ngay_thuc_hien"] == date]
    return sorted(sessions, key=_session_sort_key, reverse=True)

def create_session(data: dict, staff_name: str = "", spreadsheet=None):
    """
    Tạo lượt trị liệu. Nếu thuộc một liệu trình thì cập nhật tiến độ liệu trình.
    Trả về (lượt trị liệu, tiến độ hoặc None).
    """
    if not data.get("dich_vu_thuc_hien") or not data.get("ma_khach_hang") or not data.get("ten_khach_hang"):
        raise ValidationError("Khách hàng và dịch vụ thực hiện là bắt buộc")

    plan = None
    plan_id = data.get("ma_lieu_trinh") or ""
    if plan_id:
        plan = records.get_record(PLAN, plan_id, spreadsheet)
        if plan is None:
            raise NotFoundError("Liệu trình không tồn tại")
        if plan["trang_thai"] in CLOSED_PLAN_STATUSES:
            raise ValidationError("Liệu trình đã kết thúc, không thể thêm buổi mới")

    session = {
        **data,
        "ma_luot": records.new_id(SESSION),
        "ma_lieu_trinh": plan_id,
        "ngay_thuc_hien": data.get("ngay_thuc_hien") or today_str(),
        "trang_thai": data.get("trang_thai") or STATUS["DA_LEN_LICH"],
        "nhan_vien_thuc_hien": data.get("nhan_vien_thuc_hien") or staff_name,
    }
    records.create_record(SESSION, session, spreadsheet)

    if plan is None:
        return session, None

    completed = to_int(plan.get("so_buoi_da_thuc_hien")) + 1
    total = to_int(plan.get("so_buoi"))
    plan_updates = {"so_buoi_da_thuc_hien": str(completed)}
    if completed >= total:
        plan_updates["trang_thai"] = STATUS["HOAN_THANH"]
        plan_updates["ngay_ket_thuc"] = session["ngay_thuc_hien"]
    records.update_record(PLAN, plan_id, plan_updates, spreadsheet)
    logger.info(f"Liệu trình {plan_id}: {completed}/{total} buổi")

    progress = {"completed": completed, "total": total, "is_complete": completed >= total}
    return session, progress

def update_session(session_id: str, updates: dict, spreadsheet=None) -> dict:
    status = updates.get("trang_thai")
    if status and status not in SESSION_STATUSES:
        raise ValidationError(f"Trạng thái không hợp lệ: {status}")

    current = records.get_record(SESSION, session_id, spreadsheet)
    if current is None:
        raise NotFoundError("Lượt trị liệu không tồn tại")
    if not records.update_record(SESSION, session_id, updates, spreadsheet):
        raise NotFoundError("Không thể cập nhật lượt trị liệu")
    return {**current, **updates, "ma_luot": session_id}

def cancel_session(session_id: str, spreadsheet=None) -> bool:
    """Hủy lượt trị liệu bằng trạng thái, không xóa dòng để giữ lịch sử."""
    if not records.update_record(SESSION, session_id, {"trang_thai": STATUS["HUY"]}, spreadsheet):
        raise NotFoundError("Lượt trị liệu không tồn tại")
    logger.info(f"Đã hủy lượt trị liệu {session_id}")
    return True
