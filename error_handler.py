# error_handler.py
# Các lỗi nghiệp vụ và middleware bắt lỗi cho API.

import logging
import traceback
from aiohttp import web

logger = logging.getLogger(__name__)


class ClinicError(Exception):
    """Lỗi nghiệp vụ, luôn có thông báo hiển thị được cho người dùng."""
    status = 500


class ValidationError(ClinicError):
    status = 400


class DuplicateError(ClinicError):
    status = 400


class NotFoundError(ClinicError):
    status = 404


class UnknownEntityError(NotFoundError):
    pass


class NotDeletableError(ClinicError):
    status = 405


# Giới hạn độ dài traceback trả về khi bật chế độ debug
MAX_TRACEBACK_LEN = 4000


@web.middleware
async def error_middleware(request: web.Request, handler):
    """Bắt, ghi log và trả lỗi dạng JSON cho mọi route."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except ClinicError as e:
        logger.warning(f"[{request.method} {request.path}] {type(e).__name__}: {e}")
        return web.json_response({"error": str(e)}, status=e.status)
    except Exception as e:
        # Lỗi Google Sheet / cấu hình: ghi log đầy đủ rồi trả 500
        logger.error(f"Lỗi xảy ra khi xử lý {request.method} {request.path}:", exc_info=e)
        body = {"error": "Lỗi xử lý dữ liệu", "details": str(e) or type(e).__name__}
        if request.app.get("debug"):
            tb_string = "".join(traceback.format_exception(None, e, e.__traceback__))
            if len(tb_string) > MAX_TRACEBACK_LEN:
                tb_string = tb_string[:MAX_TRACEBACK_LEN] + "\n... (NỘI DUNG ĐÃ RÚT GỌN)"
            body["traceback"] = tb_string
        return web.json_response(body, status=500)
