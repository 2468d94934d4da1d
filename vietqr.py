# vietqr.py
# Tạo link ảnh QR chuyển khoản (VietQR) và kiểm tra số tài khoản theo ngân hàng.
# Không gọi mạng: chỉ dựng URL để hiển thị ảnh.
import logging
import re
import time
import unicodedata
from decimal import Decimal, InvalidOperation, ROUND_FLOOR
from types import MappingProxyType

from utils import random_base36, to_base36

logger = logging.getLogger(__name__)

QR_SERVICE_BASE = "https://qrcode.io.vn/api/generate"
DEFAULT_DESCRIPTION = "Thanh toan don hang"
MAX_DESCRIPTION_LEN = 50

# =========================
# Danh sách ngân hàng theo mã BIN của NAPAS
# =========================
VIETNAMESE_BANKS = MappingProxyType({
    "vietinbank": MappingProxyType({"name": "VietinBank", "bin": "970415", "short_name": "ICB",
                                    "display_name": "Ngân hàng TMCP Công thương Việt Nam"}),
    "vietcombank": MappingProxyType({"name": "Vietcombank", "bin": "970436", "short_name": "VCB",
                                     "display_name": "Ngân hàng TMCP Ngoại Thương Việt Nam"}),
    "bidv": MappingProxyType({"name": "BIDV", "bin": "970418", "short_name": "BIDV",
                              "display_name": "Ngân hàng TMCP Đầu tư và Phát triển Việt Nam"}),
    "agribank": MappingProxyType({"name": "Agribank", "bin": "970405", "short_name": "VBA",
                                  "display_name": "Ngân hàng Nông nghiệp và Phát triển Nông thôn Việt Nam"}),
    "ocb": MappingProxyType({"name": "OCB", "bin": "970448", "short_name": "OCB",
                             "display_name": "Ngân hàng TMCP Phương Đông"}),
    "mbbank": MappingProxyType({"name": "MBBank", "bin": "970422", "short_name": "MB",
                                "display_name": "Ngân hàng TMCP Quân đội"}),
    "techcombank": MappingProxyType({"name": "Techcombank", "bin": "970407", "short_name": "TCB",
                                     "display_name": "Ngân hàng TMCP Kỹ thương Việt Nam"}),
    "acb": MappingProxyType({"name": "ACB", "bin": "970416", "short_name": "ACB",
                             "display_name": "Ngân hàng TMCP Á Châu"}),
    "vpbank": MappingProxyType({"name": "VPBank", "bin": "970432", "short_name": "VPB",
                                "display_name": "Ngân hàng TMCP Việt Nam Thịnh Vượng"}),
    "tpbank": MappingProxyType({"name": "TPBank", "bin": "970423", "short_name": "TPB",
                                "display_name": "Ngân hàng TMCP Tiên Phong"}),
    "sacombank": MappingProxyType({"name": "Sacombank", "bin": "970403", "short_name": "STB",
                                   "display_name": "Ngân hàng TMCP Sài Gòn Thương Tín"}),
    "hdbank": MappingProxyType({"name": "HDBank", "bin": "970437", "short_name": "HDB",
                                "display_name": "Ngân hàng TMCP Phát triển Thành phố Hồ Chí Minh"}),
    "vietcapitalbank": MappingProxyType({"name": "VietCapitalBank", "bin": "970454", "short_name": "VCCB",
                                         "display_name": "Ngân hàng TMCP Bản Việt"}),
    "scb": MappingProxyType({"name": "SCB", "bin": "970429", "short_name": "SCB",
                             "display_name": "Ngân hàng TMCP Sài Gòn"}),
    "vib": MappingProxyType({"name": "VIB", "bin": "970441", "short_name": "VIB",
                             "display_name": "Ngân hàng TMCP Quốc tế Việt Nam"}),
})

# Độ dài số tài khoản (tối thiểu, tối đa) theo BIN
BANK_ACCOUNT_LENGTHS = MappingProxyType({
    "970415": (10, 19),  # VietinBank
    "970436": (10, 16),  # Vietcombank
    "970418": (10, 19),  # BIDV
    "970405": (8, 19),   # Agribank
    "970448": (10, 19),  # OCB
    "970422": (10, 19),  # MBBank
    "970407": (10, 19),  # Techcombank
    "970416": (6, 19),   # ACB
    "970432": (10, 19),  # VPBank
    "970423": (10, 19),  # TPBank
    "970403": (8, 19),   # Sacombank
    "970437": (10, 19),  # HDBank
    "970454": (10, 19),  # VietCapitalBank
    "970429": (8, 19),   # SCB
    "970441": (10, 19),  # VIB
})
DEFAULT_ACCOUNT_LENGTH = (8, 19)

# Mã ngắn ngân hàng -> mã ngân hàng của dịch vụ qrcode.io.vn
QR_BANK_SLUGS = MappingProxyType({
    "tcb": "techcombank",
    "vcb": "vietcombank",
    "bidv": "bidv",
    "vba": "agribank",
    "mb": "mbbank",
    "acb": "acb",
    "vpb": "vpbank",
    "tpb": "tpbank",
    "stb": "sacombank",
    "hdb": "hdbank",
    "scb": "scb",
    "vib": "vib",
    "ocb": "ocb",
})


def find_bank_by_bin(bank_bin):
    for bank in VIETNAMESE_BANKS.values():
        if bank["bin"] == bank_bin:
            return bank
    return None

def find_bank_by_name(name):
    """Tìm theo tên, tên đầy đủ hoặc mã ngắn (không phân biệt hoa thường)."""
    key = (name or "").strip().lower()
    if not key:
        return None
    for bank in VIETNAMESE_BANKS.values():
        if key in (bank["name"].lower(), bank["display_name"].lower(), bank["short_name"].lower()):
            return bank
    return None

def validate_bank_account(bank_bin, account_number) -> bool:
    if find_bank_by_bin(bank_bin) is None:
        return False
    if not account_number or not re.fullmatch(r"[0-9]+", str(account_number)):
        return False
    min_len, max_len = BANK_ACCOUNT_LENGTHS.get(bank_bin, DEFAULT_ACCOUNT_LENGTH)
    return min_len <= len(str(account_number)) <= max_len

def sanitize_vietnamese_text(text) -> str:
    """'Phòng khám Tống Gia Đường' -> 'Phong kham Tong Gia Duong' (tối đa 50 ký tự)."""
    if not text:
        return ""
    s = unicodedata.normalize("NFD", str(text))
    s = ''.join(c for c in s if not unicodedata.combining(c))
    s = s.replace("đ", "d").replace("Đ", "D")
    s = re.sub(r"[^a-zA-Z0-9 \-_.]", "", s, flags=re.ASCII)
    return s.strip()[:MAX_DESCRIPTION_LEN]

def format_vnd_amount(amount) -> str:
    # Làm tròn như Math.round (.5 làm tròn lên), VND không có đơn vị lẻ
    rounded = (Decimal(str(amount)) + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR)
    return str(int(rounded))

def get_qr_bank_slug(bank_bin) -> str:
    bank = find_bank_by_bin(bank_bin)
    if bank is None:
        return str(bank_bin or "")
    short_name = bank["short_name"].lower()
    return QR_BANK_SLUGS.get(short_name, short_name)

def generate_vietqr_image_url(payment_data: dict) -> str:
    """
    Dựng URL ảnh QR: {base}/{ngân hàng}/{số TK}/{số tiền}/{nội dung}.
    Không kiểm tra số tài khoản, nơi gọi phải gọi validate_bank_account trước.
    """
    bank_slug = get_qr_bank_slug(payment_data.get("bank_bin"))
    account_number = payment_data.get("account_number") or ""
    raw_amount = payment_data.get("amount") or 0
    try:
        amount = format_vnd_amount(raw_amount)
    except (InvalidOperation, ValueError, TypeError, OverflowError):
        logger.warning(f"Số tiền không hợp lệ khi tạo QR: {raw_amount!r}")
        amount = str(raw_amount)
    description = sanitize_vietnamese_text(payment_data.get("description") or DEFAULT_DESCRIPTION)
    return f"{QR_SERVICE_BASE}/{bank_slug}/{account_number}/{amount}/{description}"

def generate_transaction_ref(order_id=None) -> str:
    timestamp = to_base36(int(time.time() * 1000))
    rand = random_base36(5)
    prefix = f"ORD{order_id}" if order_id else "TXN"
    return f"{prefix}_{timestamp}_{rand}".upper()
