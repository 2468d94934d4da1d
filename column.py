# column.py
# Tên sheet, ánh xạ tiêu đề cột <-> tên trường và chính sách cho từng loại dữ liệu.
# Thứ tự khóa trong mỗi MAPPING chính là thứ tự cột trên sheet (bắt đầu từ cột A).

# =========================
# Danh sách tên Sheet
# =========================
SHEETS = {
    "KHACH_HANG": "Khách hàng",
    "SAN_PHAM": "Sản phẩm",
    "DICH_VU": "Dịch vụ",
    "DON_HANG": "Đơn hàng",
    "LIEU_TRINH": "Liệu trình",
    "LUOT_TRI_LIEU": "Lượt trị liệu",
    "NHAN_VIEN": "Nhân viên",
    "GIAO_DICH": "Giao dịch",
}

# Trường số điện thoại được chuẩn hóa khi đọc từ sheet
PHONE_FIELD = "so_dien_thoai"

# =========================
# Khách hàng
# =========================
# Hai tiêu đề "Họ và tên " và "Trạng thái " có dấu cách ở cuối như trên sheet gốc
MAPPING_KHACH_HANG = {
    "Mã KH": "ma_khach_hang",             # A
    "Họ và tên ": "ho_va_ten",            # B
    "Tên thường gọi": "ten_thuong_goi",   # C
    "Số điện thoại": "so_dien_thoai",     # D
    "Email": "email",                     # E
    "Ngày sinh": "ngay_sinh",             # F
    "Giới tính": "gioi_tinh",             # G
    "Địa chỉ": "dia_chi",                 # H
    "Tiền sử bệnh": "tien_su_benh",       # I
    "Ghi chú": "ghi_chu",                 # J
    "Ngày tạo": "ngay_tao",               # K
    "Trạng thái ": "trang_thai",          # L
    "Người giới thiệu": "nguoi_gioi_thieu",  # M
}

# =========================
# Sản phẩm
# =========================
MAPPING_SAN_PHAM = {
    "Mã SP": "ma_san_pham",           # A
    "Tên sản phẩm": "ten_san_pham",   # B
    "Loại sản phẩm": "loai_san_pham", # C
    "Đơn vị": "don_vi",               # D
    "Giá nhập": "gia_nhap",           # E
    "Giá bán": "gia_ban",             # F
    "Số lượng tồn": "so_luong_ton",   # G
    "Mô tả": "mo_ta",                 # H
    "Trạng thái": "trang_thai",       # I
}

# =========================
# Dịch vụ
# =========================
MAPPING_DICH_VU = {
    "Mã DV": "ma_dich_vu",            # A
    "Tên dịch vụ": "ten_dich_vu",     # B
    "Loại dịch vụ": "loai_dich_vu",   # C
    "Thời gian": "thoi_gian",         # D
    "Giá dịch vụ": "gia_dich_vu",     # E
    "Mô tả": "mo_ta",                 # F
    "Lợi ích": "loi_ich",             # G
    "Trạng thái": "trang_thai",       # H
}

# =========================
# Đơn hàng
# =========================
MAPPING_DON_HANG = {
    "Mã đơn": "ma_don_hang",                              # A
    "Mã KH": "ma_khach_hang",                             # B
    "Tên khách hàng": "ten_khach_hang",                   # C
    "Ngày tạo": "ngay_tao",                               # D
    "Danh sách sản phẩm": "danh_sach_san_pham",           # E
    "Tổng tiền": "tong_tien",                             # F
    "Giảm giá": "giam_gia",                               # G
    "Thành tiền": "thanh_tien",                           # H
    "Phương thức thanh toán": "phuong_thuc_thanh_toan",   # I
    "Trạng thái thanh toán": "trang_thai_thanh_toan",     # J
    "Ghi chú": "ghi_chu",                                 # K
    "Nhân viên tạo": "nhan_vien_tao",                     # L
}

# =========================
# Liệu trình
# =========================
MAPPING_LIEU_TRINH = {
    "Mã liệu trình": "ma_lieu_trinh",                     # A
    "Mã KH": "ma_khach_hang",                             # B
    "Tên khách hàng": "ten_khach_hang",                   # C
    "Tên liệu trình": "ten_lieu_trinh",                   # D
    "Ngày bắt đầu": "ngay_bat_dau",                       # E
    "Ngày kết thúc": "ngay_ket_thuc",                     # F
    "Danh sách dịch vụ": "danh_sach_dich_vu",             # G
    "Danh sách sản phẩm": "danh_sach_san_pham",           # H
    "Số buổi": "so_buoi",                                 # I
    "Số buổi đã thực hiện": "so_buoi_da_thuc_hien",       # J
    "Tổng tiền": "tong_tien",                             # K
    "Đã thanh toán": "da_thanh_toan",                     # L
    "Còn lại": "con_lai",                                 # M
    "Trạng thái thanh toán": "trang_thai_thanh_toan",     # N
    "Trạng thái": "trang_thai",                           # O
    "Ghi chú": "ghi_chu",                                 # P
    "Nhân viên tư vấn": "nhan_vien_tu_van",               # Q
}

# =========================
# Lượt trị liệu
# =========================
MAPPING_LUOT_TRI_LIEU = {
    "Mã lượt": "ma_luot",                         # A
    "Mã liệu trình": "ma_lieu_trinh",             # B
    "Mã KH": "ma_khach_hang",                     # C
    "Tên khách hàng": "ten_khach_hang",           # D
    "Ngày thực hiện": "ngay_thuc_hien",           # E
    "Giờ bắt đầu": "gio_bat_dau",                 # F
    "Giờ kết thúc": "gio_ket_thuc",               # G
    "Dịch vụ thực hiện": "dich_vu_thuc_hien",     # H
    "Nhân viên thực hiện": "nhan_vien_thuc_hien", # I
    "Đánh giá": "danh_gia",                       # J
    "Ghi chú": "ghi_chu",                         # K
    "Trạng thái": "trang_thai",                   # L
}

# =========================
# Nhân viên (kiêm cấu hình tài khoản ngân hàng của phòng khám)
# =========================
MAPPING_NHAN_VIEN = {
    "Mã NV": "ma_nhan_vien",          # A
    "Họ và tên": "ho_va_ten",         # B
    "Số điện thoại": "so_dien_thoai", # C
    "Email": "email",                 # D
    "Chức vụ": "chuc_vu",             # E
    "Chuyên môn": "chuyen_mon",       # F
    "Ngày vào làm": "ngay_vao_lam",   # G
    "Quyền hạn": "quyen_han",         # H
    "Trạng thái": "trang_thai",       # I
    "Hoa hồng %": "hoa_hong",         # J
    "Ngân hàng": "ngan_hang",         # K
    "Số TK": "so_tk",                 # L
}

# =========================
# Giao dịch
# =========================
MAPPING_GIAO_DICH = {
    "Mã GD": "ma_giao_dich",              # A
    "Loại GD": "loai_giao_dich",          # B
    "Mã tham chiếu": "ma_tham_chieu",     # C
    "Mã KH": "ma_khach_hang",             # D
    "Tên khách hàng": "ten_khach_hang",   # E
    "Số tiền": "so_tien",                 # F
    "Phương thức": "phuong_thuc",         # G
    "Ngày GD": "ngay_giao_dich",          # H
    "Nội dung": "noi_dung",               # I
    "Trạng thái": "trang_thai",           # J
    "Nhân viên xử lý": "nhan_vien_xu_ly", # K
}

# =========================
# Chính sách từng loại dữ liệu
# - id_field: trường khóa chính dùng để tìm/sửa/xóa
# - id_prefix: tiền tố khi tự sinh mã
# - short_id: True = mã ngắn 4 ký tự (KHXXXX), False = timestamp + ngẫu nhiên
# - deletable: False = không bao giờ xóa dòng vật lý (lượt trị liệu hủy bằng trạng thái)
# =========================
ENTITIES = {
    "khach-hang": {
        "sheet": SHEETS["KHACH_HANG"], "mapping": MAPPING_KHACH_HANG,
        "id_field": "ma_khach_hang", "id_prefix": "KH", "short_id": True, "deletable": True,
    },
    "san-pham": {
        "sheet": SHEETS["SAN_PHAM"], "mapping": MAPPING_SAN_PHAM,
        "id_field": "ma_san_pham", "id_prefix": "SP", "short_id": False, "deletable": True,
    },
    "dich-vu": {
        "sheet": SHEETS["DICH_VU"], "mapping": MAPPING_DICH_VU,
        "id_field": "ma_dich_vu", "id_prefix": "DV", "short_id": False, "deletable": True,
    },
    "don-hang": {
        "sheet": SHEETS["DON_HANG"], "mapping": MAPPING_DON_HANG,
        "id_field": "ma_don_hang", "id_prefix": "DH", "short_id": False, "deletable": False,
    },
    "lieu-trinh": {
        "sheet": SHEETS["LIEU_TRINH"], "mapping": MAPPING_LIEU_TRINH,
        "id_field": "ma_lieu_trinh", "id_prefix": "LT", "short_id": False, "deletable": False,
    },
    "luot-tri-lieu": {
        "sheet": SHEETS["LUOT_TRI_LIEU"], "mapping": MAPPING_LUOT_TRI_LIEU,
        "id_field": "ma_luot", "id_prefix": "BT", "short_id": False, "deletable": False,
    },
    "nhan-vien": {
        "sheet": SHEETS["NHAN_VIEN"], "mapping": MAPPING_NHAN_VIEN,
        "id_field": "ma_nhan_vien", "id_prefix": "NV", "short_id": False, "deletable": True,
    },
    "giao-dich": {
        "sheet": SHEETS["GIAO_DICH"], "mapping": MAPPING_GIAO_DICH,
        "id_field": "ma_giao_dich", "id_prefix": "GD", "short_id": False, "deletable": False,
    },
}

# =========================
# Giá trị trạng thái dùng chung
# =========================
STATUS = {
    "DA_THANH_TOAN": "Đã thanh toán",
    "CHUA_THANH_TOAN": "Chưa thanh toán",
    "HOAN_THANH": "Hoàn thành",
    "HUY": "Hủy",
    "DANG_THUC_HIEN": "Đang thực hiện",
    "DA_LEN_LICH": "Đã lên lịch",
    "DA_XAC_NHAN": "Đã xác nhận",
    "KHACH_MOI": "Mới",
}

SESSION_STATUSES = (
    STATUS["DA_LEN_LICH"],
    STATUS["DA_XAC_NHAN"],
    STATUS["HOAN_THANH"],
    STATUS["HUY"],
)
