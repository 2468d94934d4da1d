import logging

import records
import transaction_logic
from column import STATUS
from error_handler import NotFoundError, ValidationError
from utils import today_str

logger = logging.getLogger(__name__)

ENTITY = "don-hang"

def _with_payment_status(order: dict) -> dict:
    if order.get("trang_thai_thanh_toan"):
        return order
    # Đơn cũ ghi trạng thái thanh toán trong ghi chú
    paid = "Đã Thanh Toán" in (order.get("ghi_chu") or "")
    return {**order, "trang_thai_thanh_toan": STATUS["DA_THANH_TOAN"] if paid else STATUS["CHUA_THANH_TOAN"]}

def list_orders(spreadsheet=None) -> list:
    return [_with_payment_status(o) for o in records.list_records(ENTITY, spreadsheet)]

def create_order(data: dict, staff_name: str = "", spreadsheet=None) -> dict:
    if not data.get("ma_khach_hang") or not data.get("danh_sach_san_pham"):
        raise ValidationError("Thông tin khách hàng và sản phẩm là bắt buộc")

    order = {
        **data,
        "ma_don_hang": data.get("ma_don_hang") or records.new_id(ENTITY),
        "ngay_tao": data.get("ngay_tao") or today_str(),
        "nhan_vien_tao": staff_name,
        "trang_thai_thanh_toan": data.get("trang_thai_thanh_toan") or STATUS["CHUA_THANH_TOAN"],
    }
    records.create_record(ENTITY, order, spreadsheet)

    if order["trang_thai_thanh_toan"] == STATUS["DA_THANH_TOAN"]:
        transaction_logic.record_income(
            order["ma_don_hang"], order["ma_khach_hang"], order.get("ten_khach_hang", ""),
            order.get("thanh_tien", ""), order.get("phuong_thuc_thanh_toan", ""),
            f"Thanh toán đơn hàng {order['ma_don_hang']}",
            staff_name=staff_name, date=order["ngay_tao"], spreadsheet=spreadsheet,
        )
    return order

def update_order(order_id: str, updates: dict, staff_name: str = "", spreadsheet=None) -> dict:
    """Cập nhật đơn; khi đơn chuyển sang 'Đã thanh toán' thì ghi thêm giao dịch thu."""
    current = records.get_record(ENTITY, order_id, spreadsheet)
    if current is None:
        raise NotFoundError("Đơn hàng không tồn tại")

    if not records.update_record(ENTITY, order_id, updates, spreadsheet):
        raise NotFoundError("Không thể cập nhật đơn hàng")

    newly_paid = (current.get("trang_thai_thanh_toan") != STATUS["DA_THANH_TOAN"]
                  and updates.get("trang_thai_thanh_toan") == STATUS["DA_THANH_TOAN"])
    if newly_paid:
        transaction_logic.record_income(
            order_id, current["ma_khach_hang"], current.get("ten_khach_hang", ""),
            updates.get("thanh_tien") or current.get("thanh_tien", ""),
            updates.get("phuong_thuc_thanh_toan") or current.get("phuong_thuc_thanh_toan", ""),
            f"Thanh toán đơn hàng {order_id}",
            staff_name=staff_name, spreadsheet=spreadsheet,
        )
    return {**current, **updates, "ma_don_hang": order_id}
