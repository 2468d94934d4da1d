# records.py
# CRUD theo loại dữ liệu (khach-hang, don-hang, ...) dựa trên chính sách khai báo trong column.ENTITIES.
import logging

import sheet_store
from column import ENTITIES
from error_handler import NotDeletableError, UnknownEntityError
from utils import generate_id, generate_short_id

logger = logging.getLogger(__name__)


def get_entity(entity: str) -> dict:
    try:
        return ENTITIES[entity]
    except KeyError:
        raise UnknownEntityError(f"Loại dữ liệu '{entity}' không tồn tại") from None

def new_id(entity: str) -> str:
    spec = get_entity(entity)
    if spec["short_id"]:
        return generate_short_id(spec["id_prefix"])
    return generate_id(spec["id_prefix"])

def list_records(entity: str, spreadsheet=None) -> list:
    spec = get_entity(entity)
    return sheet_store.get_all_rows(spec["sheet"], spec["mapping"], spreadsheet)

def get_record(entity: str, record_id: str, spreadsheet=None):
    spec = get_entity(entity)
    return sheet_store.get_row_by_id(spec["sheet"], spec["mapping"], spec["id_field"], record_id, spreadsheet)

def create_record(entity: str, data: dict, spreadsheet=None) -> dict:
    """Thêm bản ghi mới; tự sinh mã nếu chưa có. Không kiểm tra trùng mã."""
    spec = get_entity(entity)
    record = dict(data)
    if not str(record.get(spec["id_field"]) or "").strip():
        record[spec["id_field"]] = new_id(entity)
    sheet_store.append_row(spec["sheet"], spec["mapping"], record, spreadsheet)
    logger.info(f"[{entity}] Đã tạo {record[spec['id_field']]}")
    return record

def update_record(entity: str, record_id: str, updates: dict, spreadsheet=None) -> bool:
    spec = get_entity(entity)
    # Không cho đổi mã qua cập nhật
    changes = {k: v for k, v in updates.items() if k != spec["id_field"]}
    return sheet_store.update_row(spec["sheet"], spec["mapping"], spec["id_field"], record_id, changes, spreadsheet)

def delete_record(entity: str, record_id: str, spreadsheet=None) -> bool:
    spec = get_entity(entity)
    if not spec["deletable"]:
        raise NotDeletableError(f"Không được xóa dữ liệu loại '{entity}'")
    return sheet_store.delete_row(spec["sheet"], spec["mapping"], spec["id_field"], record_id, spreadsheet)
