# sheet_store.py
# Lớp CRUD chung trên Google Sheet: dòng 1 là tiêu đề, dữ liệu bắt đầu từ cột A.
# Mỗi loại dữ liệu khai báo MAPPING {tiêu đề cột: tên trường} trong column.py.
import logging
import re
from gspread.utils import rowcol_to_a1

from utils import connect_to_sheet, normalize_phone
from column import PHONE_FIELD

logger = logging.getLogger(__name__)

VALUE_INPUT_OPTION = "USER_ENTERED"


# =============================
# Chuyển đổi dòng <-> bản ghi
# =============================

def map_row_to_record(row, mapping) -> dict:
    """Ô thứ k của dòng thuộc về trường thứ k của mapping; thiếu ô thì là ''."""
    record = {}
    for index, field in enumerate(mapping.values()):
        value = row[index] if index < len(row) else ""
        value = "" if value is None else str(value)
        if field == PHONE_FIELD and value:
            value = normalize_phone(value)
        record[field] = value
    return record

def map_record_to_row(record, mapping) -> list:
    row = []
    for field in mapping.values():
        value = record.get(field)
        row.append("" if value is None else value)
    return row


# =============================
# Tiện ích địa chỉ ô
# =============================

def _last_column(mapping) -> str:
    # rowcol_to_a1(1, 17) -> 'Q1'
    return re.sub(r"\d", "", rowcol_to_a1(1, max(len(mapping), 1)))

def _data_range(mapping) -> str:
    return f"A:{_last_column(mapping)}"

def _row_range(row_number, mapping) -> str:
    return f"A{row_number}:{rowcol_to_a1(row_number, max(len(mapping), 1))}"

def _worksheet(sheet_name, spreadsheet=None):
    sh = spreadsheet if spreadsheet is not None else connect_to_sheet()
    return sh.worksheet(sheet_name)

def _read_values(ws, mapping):
    return ws.get(_data_range(mapping)) or []

def _find_row_index(rows, mapping, id_field, id_value):
    """Vị trí (0-based, không tính tiêu đề) của dòng đầu tiên khớp chính xác mã, -1 nếu không có."""
    fields = list(mapping.values())
    if id_field not in fields:
        raise KeyError(f"Trường '{id_field}' không có trong mapping.")
    for i, row in enumerate(rows):
        if map_row_to_record(row, mapping)[id_field] == id_value:
            return i
    return -1


# =============================
# CRUD
# =============================

def get_all_rows(sheet_name: str, mapping: dict, spreadsheet=None) -> list:
    """Đọc toàn bộ sheet, trả về danh sách bản ghi theo thứ tự trên sheet."""
    try:
        ws = _worksheet(sheet_name, spreadsheet)
        values = _read_values(ws, mapping)
    except Exception as e:
        logger.error(f"❌ [{sheet_name}] Lỗi khi đọc dữ liệu: {e}")
        raise
    if not values:
        return []
    _, *rows = values
    return [map_row_to_record(row, mapping) for row in rows]

def get_row_by_id(sheet_name: str, mapping: dict, id_field: str, id_value: str, spreadsheet=None):
    for record in get_all_rows(sheet_name, mapping, spreadsheet):
        if record.get(id_field) == id_value:
            return record
    return None

def append_row(sheet_name: str, mapping: dict, data: dict, spreadsheet=None) -> bool:
    """Thêm một dòng vào cuối sheet. Sheet chưa có tiêu đề thì ghi tiêu đề từ mapping trước."""
    try:
        ws = _worksheet(sheet_name, spreadsheet)
        header_values = ws.get(_row_range(1, mapping)) or []
        headers = header_values[0] if header_values else []
        if not any(str(h).strip() for h in headers):
            logger.info(f"[{sheet_name}] Sheet chưa có tiêu đề, đang tạo dòng tiêu đề...")
            ws.update(
                values=[list(mapping.keys())],
                range_name="A1",
                value_input_option=VALUE_INPUT_OPTION,
            )
        ws.append_row(
            map_record_to_row(data, mapping),
            value_input_option=VALUE_INPUT_OPTION,
            insert_data_option="INSERT_ROWS",
            table_range=_data_range(mapping),
        )
    except Exception as e:
        logger.error(f"❌ [{sheet_name}] Lỗi khi thêm dòng: {e}")
        raise
    logger.info("✅ Đã ghi thành công vào sheet '%s'", sheet_name)
    return True

def update_row(sheet_name: str, mapping: dict, id_field: str, id_value: str, updates: dict, spreadsheet=None) -> bool:
    """
    Đọc - gộp - ghi lại đúng một dòng theo mã.
    Không khóa: hai lần cập nhật đồng thời cùng dòng thì lần ghi sau thắng.
    """
    try:
        ws = _worksheet(sheet_name, spreadsheet)
        values = _read_values(ws, mapping)
        if not values:
            return False
        _, *rows = values
        row_index = _find_row_index(rows, mapping, id_field, id_value)
        if row_index == -1:
            logger.warning(f"[{sheet_name}] Không tìm thấy {id_field} = {id_value} để cập nhật.")
            return False

        current = map_row_to_record(rows[row_index], mapping)
        merged = {**current, **updates}
        row_number = row_index + 2 # +1 tiêu đề, +1 vì sheet đánh số từ 1
        ws.update(
            values=[map_record_to_row(merged, mapping)],
            range_name=_row_range(row_number, mapping),
            value_input_option=VALUE_INPUT_OPTION,
        )
    except Exception as e:
        logger.error(f"❌ [{sheet_name}] Lỗi khi cập nhật {id_value}: {e}")
        raise
    logger.info(f"✅ [{sheet_name}] Đã cập nhật {id_value} (dòng {row_number}).")
    return True

def delete_row(sheet_name: str, mapping: dict, id_field: str, id_value: str, spreadsheet=None) -> bool:
    """Xóa hẳn dòng khớp mã; các dòng phía dưới được đẩy lên."""
    try:
        ws = _worksheet(sheet_name, spreadsheet)
        values = _read_values(ws, mapping)
        if not values:
            return False
        _, *rows = values
        row_index = _find_row_index(rows, mapping, id_field, id_value)
        if row_index == -1:
            logger.warning(f"[{sheet_name}] Không tìm thấy {id_field} = {id_value} để xóa.")
            return False
        row_number = row_index + 2
        ws.delete_rows(row_number)
    except Exception as e:
        logger.error(f"❌ [{sheet_name}] Lỗi khi xóa {id_value}: {e}")
        raise
    logger.info(f"🗑️ [{sheet_name}] Đã xóa {id_value} (dòng {row_number}).")
    return True
