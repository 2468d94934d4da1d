# api.py
# API JSON cho các trang quản lý: mỗi loại dữ liệu có list / get / create / update / delete.
import asyncio
import functools
import logging
from aiohttp import web

import catalog_logic
import config
import customer_logic
import order_logic
import payment_logic
import records
import staff_logic
import transaction_logic
import treatment_logic
from error_handler import NotFoundError, ValidationError, error_middleware

logger = logging.getLogger(__name__)

routes = web.RouteTableDef()


def token_required(func):
    """Chỉ cho phép request có 'Authorization: Bearer <API_TOKEN>' (bỏ qua nếu chưa cấu hình token)."""
    @functools.wraps(func)
    async def wrapper(request: web.Request):
        token = request.app.get("api_token")
        if token:
            auth = request.headers.get("Authorization", "")
            if auth != f"Bearer {token}":
                logger.warning(f"⛔ Từ chối truy cập {request.method} {request.path}")
                return web.json_response({"error": "Unauthorized"}, status=401)
        return await func(request)
    return wrapper


def _staff_name(request: web.Request) -> str:
    return request.headers.get("X-Staff-Name", "")

async def _json_body(request: web.Request) -> dict:
    try:
        data = await request.json()
    except ValueError:
        raise ValidationError("Dữ liệu gửi lên không phải JSON hợp lệ") from None
    if not isinstance(data, dict):
        raise ValidationError("Dữ liệu gửi lên phải là một object JSON")
    return data

async def _run(request: web.Request, func, *args, **kwargs):
    # gspread là thư viện đồng bộ: chạy trong thread để không chặn event loop
    return await asyncio.to_thread(func, *args, spreadsheet=request.app.get("spreadsheet"), **kwargs)


# =============================
# Route riêng (đăng ký trước route chung /api/{entity})
# =============================

async def healthcheck(request):
    return web.Response(text="Clinic API is alive!")

@routes.post("/api/generate-payment-qr")
@token_required
async def generate_payment_qr(request: web.Request):
    data = await _json_body(request)
    result = await _run(
        request, payment_logic.create_payment_qr,
        data.get("order_id"), data.get("customer_name"), data.get("total_amount"), data.get("items"),
    )
    return web.json_response({"success": True, **result})

@routes.get("/api/ngan-hang")
@token_required
async def get_bank_settings(request: web.Request):
    return web.json_response(await _run(request, payment_logic.get_bank_settings))

@routes.put("/api/ngan-hang")
@token_required
async def update_bank_settings(request: web.Request):
    data = await _json_body(request)
    await _run(request, payment_logic.update_bank_settings, data.get("ten_ngan_hang"), data.get("so_tai_khoan"))
    return web.json_response({"message": "Cập nhật thông tin ngân hàng thành công"})


# =============================
# Route chung theo loại dữ liệu
# =============================

@routes.get("/api/{entity}")
@token_required
async def list_entity(request: web.Request):
    entity = request.match_info["entity"]
    records.get_entity(entity)
    query = request.query
    if entity == "don-hang":
        rows = await _run(request, order_logic.list_orders)
    elif entity == "lieu-trinh":
        rows = await _run(request, treatment_logic.list_treatment_plans)
    elif entity == "luot-tri-lieu":
        rows = await _run(request, treatment_logic.list_sessions,
                          treatment_id=query.get("treatment_id"), date=query.get("date"))
    elif entity == "giao-dich":
        rows = await _run(request, transaction_logic.list_transactions,
                          start_date=query.get("start_date"), end_date=query.get("end_date"),
                          customer_id=query.get("customer_id"), kind=query.get("type"))
    else:
        rows = await _run(request, records.list_records, entity)
    return web.json_response(rows)

@routes.post("/api/{entity}")
@token_required
async def create_entity(request: web.Request):
    entity = request.match_info["entity"]
    records.get_entity(entity)
    data = await _json_body(request)
    staff = _staff_name(request)
    body = {"message": "Tạo mới thành công"}
    if entity == "khach-hang":
        body["data"] = await _run(request, customer_logic.create_customer, data)
    elif entity == "nhan-vien":
        body["data"] = await _run(request, staff_logic.create_staff, data)
    elif entity == "san-pham":
        body["data"] = await _run(request, catalog_logic.create_product, data)
    elif entity == "dich-vu":
        body["data"] = await _run(request, catalog_logic.create_service, data)
    elif entity == "giao-dich":
        body["data"] = await _run(request, transaction_logic.create_transaction, data, staff)
    elif entity == "don-hang":
        body["data"] = await _run(request, order_logic.create_order, data, staff)
    elif entity == "lieu-trinh":
        body["data"] = await _run(request, treatment_logic.create_treatment_plan, data, staff)
    elif entity == "luot-tri-lieu":
        session, progress = await _run(request, treatment_logic.create_session, data, staff)
        body.update(data=session, treatment_progress=progress)
    else:
        body["data"] = await _run(request, records.create_record, entity, data)
    return web.json_response(body, status=201)

@routes.get("/api/{entity}/{id}")
@token_required
async def get_entity(request: web.Request):
    entity, record_id = request.match_info["entity"], request.match_info["id"]
    records.get_entity(entity)
    record = await _run(request, records.get_record, entity, record_id)
    if record is None:
        raise NotFoundError(f"Không tìm thấy {record_id}")
    return web.json_response(record)

@routes.put("/api/{entity}/{id}")
@token_required
async def update_entity(request: web.Request):
    entity, record_id = request.match_info["entity"], request.match_info["id"]
    records.get_entity(entity)
    updates = await _json_body(request)
    staff = _staff_name(request)
    if entity == "don-hang":
        data = await _run(request, order_logic.update_order, record_id, updates, staff)
    elif entity == "lieu-trinh":
        data = await _run(request, treatment_logic.update_treatment_plan, record_id, updates, staff)
    elif entity == "luot-tri-lieu":
        data = await _run(request, treatment_logic.update_session, record_id, updates)
    elif entity == "nhan-vien":
        data = await _run(request, staff_logic.update_staff, record_id, updates)
    else:
        if not await _run(request, records.update_record, entity, record_id, updates):
            raise NotFoundError(f"Không tìm thấy {record_id}")
        # Đọc lại để trả đúng dữ liệu đã ghi (mã và trường ngoài mapping bị bỏ qua)
        data = await _run(request, records.get_record, entity, record_id)
    return web.json_response({"message": "Cập nhật thành công", "data": data})

@routes.delete("/api/{entity}/{id}")
@token_required
async def delete_entity(request: web.Request):
    entity, record_id = request.match_info["entity"], request.match_info["id"]
    records.get_entity(entity)
    if entity == "luot-tri-lieu":
        await _run(request, treatment_logic.cancel_session, record_id)
        return web.json_response({"message": "Đã hủy lượt trị liệu"})
    if not await _run(request, records.delete_record, entity, record_id):
        raise NotFoundError(f"Không tìm thấy {record_id}")
    return web.json_response({"message": "Xóa thành công"})


def create_app(spreadsheet=None, api_token=None, debug=None) -> web.Application:
    app = web.Application(middlewares=[error_middleware])
    app["spreadsheet"] = spreadsheet
    app["api_token"] = config.API_TOKEN if api_token is None else api_token
    app["debug"] = config.DEBUG if debug is None else debug
    app.router.add_get("/", healthcheck)
    app.add_routes(routes)
    return app
