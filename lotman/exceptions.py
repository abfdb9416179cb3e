"""
Exceptions for Lotman.

All errors are LedgerError with a structured code for programmatic handling.
"""

from typing import Any


class BaseError(Exception):
    """
    Error with a machine-readable code, a message and context data.

    Subclasses provide `_default_messages` keyed by code.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, data={self.data!r})"


class LedgerError(BaseError):
    """
    Structured exception for allocation and ledger operations.

    Usage:
        try:
            ledger.reserve(lines, shipment='SHIP-0412', actor='kho01')
        except LedgerError as e:
            if e.code == 'STALE_ALLOCATION':
                print(f"Lô {e.data['line']} không còn đủ tồn")
            if e.committed:
                print(f"{len(e.committed)} dòng đã được xuất trước lỗi")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data (item/batch/lot/shipment identity)
    """

    _default_messages = {
        'INSUFFICIENT_STOCK': 'Tồn kho không đủ cho nhu cầu xuất',
        'STALE_ALLOCATION': 'Tồn kho của lô đã thay đổi kể từ khi lập phân bổ',
        'MISSING_LEDGER_ENTRY': 'Không tìm thấy bản ghi xuất kho tương ứng',
        'WRITE_FAILURE': 'Ghi dữ liệu thất bại',
        'INVALID_QUANTITY': 'Số lượng không hợp lệ (phải dương)',
        'INVALID_STATUS': 'Trạng thái không hợp lệ cho thao tác này',
        'LOT_NOT_FOUND': 'Không tìm thấy lô',
        'RECORD_NOT_FOUND': 'Không tìm thấy phiếu xuất',
        'MISSING_FIELD': 'Thiếu trường bắt buộc',
        'INVALID_FIELD': 'Giá trị trường không hợp lệ',
        'EMPTY_SELECTION': 'Không có dòng phân bổ nào được chọn',
        'FACTORY_MISMATCH': 'Các dòng phân bổ không cùng nhà máy',
    }

    @property
    def committed(self) -> list[int]:
        """Shortcut for data['committed'] (OutboundRecord pks already applied)."""
        return self.data.get('committed', [])

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: v if isinstance(v, (int, str, list, dict, type(None))) else str(v)
                for k, v in self.data.items()
            }
        }
