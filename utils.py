import logging
import gspread
from google.oauth2.service_account import Credentials
from datetime import datetime, timedelta, timezone
import random
import re
import string
import time

import config

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

VN_TZ = timezone(timedelta(hours=7))

BASE36_ALPHABET = string.digits + string.ascii_lowercase
SHORT_ID_ALPHABET = string.ascii_uppercase + string.digits

def _creds_path():
    return config.GOOGLE_CREDENTIALS_FILE

def _client():
    creds = Credentials.from_service_account_file(_creds_path(), scopes=SCOPES)
    return gspread.authorize(creds)

def _spreadsheet_id():
    return config.SPREADSHEET_ID

def connect_to_sheet():
    """
    Mở spreadsheet theo SPREADSHEET_ID (hoặc "NAME:<tên>").
    Không thử lại: mọi lỗi kết nối/API được ném thẳng cho nơi gọi.
    """
    sid = _spreadsheet_id()
    if not sid:
        logger.error("Lỗi cấu hình: SPREADSHEET_ID chưa được thiết lập.")
        raise RuntimeError("Lỗi cấu hình: SPREADSHEET_ID chưa được thiết lập.")
    logger.debug(f"Đang kết nối Google Sheet (ID: {sid})...")
    try:
        client = _client()
        if sid.startswith("NAME:"):
            spreadsheet = client.open(sid.split("NAME:", 1)[1])
        else:
            spreadsheet = client.open_by_key(sid)
    except Exception as e:
        logger.error(f"Kết nối Google Sheet thất bại: {e}")
        raise
    logger.debug(f"Kết nối Google Sheet thành công (ID: {sid}).")
    return spreadsheet

# =============================
# Ngày giờ (giờ Việt Nam)
# =============================

def now_vn():
    return datetime.now(VN_TZ)

def today_str():
    """Ngày hôm nay dạng 'YYYY-MM-DD' theo giờ Việt Nam."""
    return now_vn().strftime("%Y-%m-%d")

# =============================
# Sinh mã
# =============================

def to_base36(number: int) -> str:
    if number < 0:
        return "-" + to_base36(-number)
    if number == 0:
        return "0"
    digits = ""
    while number:
        number, remainder = divmod(number, 36)
        digits = BASE36_ALPHABET[remainder] + digits
    return digits

def random_base36(length: int = 5) -> str:
    return ''.join(random.choices(BASE36_ALPHABET, k=length))

def generate_id(prefix: str) -> str:
    """Mã dài: tiền tố + timestamp (base36) + 5 ký tự ngẫu nhiên, viết hoa."""
    timestamp = to_base36(int(time.time() * 1000))
    return f"{prefix}{timestamp}{random_base36()}".upper()

def generate_short_id(prefix: str, length: int = 4) -> str:
    """Mã ngắn cho khách hàng, ví dụ KH7Q2M. Không kiểm tra trùng."""
    return f"{prefix}{''.join(random.choices(SHORT_ID_ALPHABET, k=length))}"

# =============================
# Chuẩn hóa dữ liệu
# =============================

def normalize_phone(value) -> str:
    """
    Chuẩn hóa số điện thoại Việt Nam:
    - bỏ khoảng trắng
    - 84xxxxxxxxx (11 ký tự) -> 0xxxxxxxxx
    - 9 chữ số thiếu số 0 đầu -> thêm 0
    """
    if value is None:
        return ""
    s = re.sub(r"\s", "", str(value))
    if s.startswith("84") and len(s) == 11:
        return "0" + s[2:]
    if len(s) == 9 and not s.startswith("0"):
        return "0" + s
    return s

def to_int(v, default=0):
    if v is None:
        return default
    s = str(v)
    digits = re.sub(r"[^\d]", "", s)
    return int(digits) if digits else default

def to_number(v, default=0.0):
    """'1500000' -> 1500000.0 ; '1.500.000 đ' -> 1500000.0 ; '' -> default"""
    if v is None:
        return default
    s = str(v).strip()
    if not s:
        return default
    try:
        return float(s)
    except ValueError:
        return float(to_int(s, default))

def format_number(value) -> str:
    """1500000.0 -> '1500000' ; 12.5 -> '12.5'"""
    number = float(value)
    return str(int(number)) if number.is_integer() else str(number)
