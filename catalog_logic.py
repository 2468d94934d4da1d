# catalog_logic.py
# Danh mục sản phẩm và dịch vụ của phòng khám.
import logging

import records
from error_handler import ValidationError

logger = logging.getLogger(__name__)

PRODUCT = "san-pham"
SERVICE = "dich-vu"

def create_product(data: dict, spreadsheet=None) -> dict:
    if not data.get("ten_san_pham") or not data.get("gia_ban"):
        raise ValidationError("Tên sản phẩm và giá bán là bắt buộc")
    product = {
        **data,
        "ma_san_pham": records.new_id(PRODUCT),
        "so_luong_ton": data.get("so_luong_ton") or "0",
        "trang_thai": data.get("trang_thai") or "Còn hàng",
    }
    return records.create_record(PRODUCT, product, spreadsheet)

def create_service(data: dict, spreadsheet=None) -> dict:
    if not data.get("ten_dich_vu") or not data.get("gia_dich_vu"):
        raise ValidationError("Tên dịch vụ và giá là bắt buộc")
    service = {
        **data,
        "ma_dich_vu": records.new_id(SERVICE),
        "trang_thai": data.get("trang_thai") or "Hoạt động",
    }
    return records.create_record(SERVICE, service, spreadsheet)
