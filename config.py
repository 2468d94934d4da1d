import logging
import os
from dotenv import load_dotenv
current_file_path = os.path.abspath(__file__)
app_dir = os.path.dirname(current_file_path)
dotenv_path = os.path.join(app_dir, '.env')
load_dotenv(dotenv_path=dotenv_path)
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
logger = logging.getLogger(__name__)

# Hàm helper để đọc giá trị boolean ("true", "false") từ .env
def get_env_bool(var_name, default=False):
    value = os.getenv(var_name, str(default)).lower()
    return value in ['true', '1', 't', 'y', 'yes']

# --- Cấu hình Google Sheet ---
SPREADSHEET_ID = os.getenv("SPREADSHEET_ID")
if not SPREADSHEET_ID:
    logger.warning("Không tìm thấy SPREADSHEET_ID trong .env, cần thiết lập trước khi truy cập Sheet.")
GOOGLE_CREDENTIALS_FILE = os.getenv("GOOGLE_CREDENTIALS_FILE") or os.path.join(app_dir, "creds.json")

# --- Cấu hình API ---
API_TOKEN = os.getenv("API_TOKEN")
if not API_TOKEN:
    logger.warning("LỖI BẢO MẬT: Chưa thiết lập API_TOKEN, API sẽ không kiểm tra quyền truy cập!")
try:
    PORT = int(os.getenv("PORT", "8080"))
except (ValueError, TypeError):
    logger.warning("PORT không hợp lệ, dùng giá trị mặc định là 8080")
    PORT = 8080 # Giá trị dự phòng
# Trả kèm traceback trong phản hồi lỗi 500
DEBUG = get_env_bool("DEBUG", False)

# Dùng tài khoản mặc định khi không đọc được sheet Nhân viên lúc tạo QR
BANK_FALLBACK_ON_SHEET_ERROR = get_env_bool("BANK_FALLBACK_ON_SHEET_ERROR", True)

# --- Tài khoản nhận tiền của phòng khám (dùng khi sheet Nhân viên chưa có) ---
CLINIC_DISPLAY_NAME = os.getenv("CLINIC_DISPLAY_NAME", "Phòng Khám Tống Gia Đường")
CLINIC_BANK_BIN = os.getenv("CLINIC_BANK_BIN", "970407") # Techcombank
CLINIC_ACCOUNT_NUMBER = os.getenv("CLINIC_ACCOUNT_NUMBER", "19070220842011")
CLINIC_ACCOUNT_NAME = os.getenv("CLINIC_ACCOUNT_NAME", "PHONG KHAM TONG GIA DUONG")


# Log kiểm tra khi khởi động
logger.info("Cấu hình đã được tải thành công.")
logger.info(f"Đang tìm .env tại: {dotenv_path}")
