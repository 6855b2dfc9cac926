"""Pydantic models: signed request envelope, response envelope, order/refund bodies."""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PlatformModel(BaseModel):
    """camelCase on the wire, snake_case in Python; unknown fields kept."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_biz_body(self) -> str:
        """JSON text for the bizBody field (None fields omitted)."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class HaozPayRequest(PlatformModel):
    """Signed envelope POSTed to every endpoint."""
    merchant_no: str
    timestamp: int  # Unix milliseconds
    biz_body: str  # JSON text of the business request
    sign: str = ""  # base64(raw RSA signature)


class Response(PlatformModel):
    """Envelope of every platform response."""
    code: int = 0
    message: str = ""
    request_id: str = ""
    data: Optional[Any] = None


class CreatePaymentOrderRequest(PlatformModel):
    """Create a payment order."""
    req_seq_id: str  # merchant-side order number
    order_amount: float
    subject: Optional[str] = None
    pay_type: Optional[str] = None
    notify_url: Optional[str] = None
    return_url: Optional[str] = None
    expire_minutes: Optional[int] = None
    remark: Optional[str] = None


class PaymentOrderResponse(PlatformModel):
    """Payment order as returned by the platform."""
    order_no: Optional[str] = None
    req_seq_id: Optional[str] = None
    order_amount: Optional[float] = None
    status: Optional[str] = None
    pay_url: Optional[str] = None
    qr_code: Optional[str] = None


class CancelPaymentOrderRequest(PlatformModel):
    """Cancel an unpaid order, identified by either number."""
    order_no: Optional[str] = None
    req_seq_id: Optional[str] = None


class CreateRefundRequest(PlatformModel):
    """Refund a paid order. order_no or req_seq_id must be set."""
    refund_req_seq_id: str  # merchant-side refund number
    refund_amount: float
    order_no: Optional[str] = None
    req_seq_id: Optional[str] = None
    reason: Optional[str] = None
    notify_url: Optional[str] = None


class RefundResponse(PlatformModel):
    """Refund as returned by the platform."""
    refund_no: Optional[str] = None
    refund_req_seq_id: Optional[str] = None
    refund_amount: Optional[float] = None
    status: Optional[str] = None


class QueryRefundRequest(PlatformModel):
    """Look up a refund by either number."""
    refund_no: Optional[str] = None
    refund_req_seq_id: Optional[str] = None


class QueryRefundResponse(RefundResponse):
    """Refund status, with completion time once settled."""
    order_no: Optional[str] = None
    refund_time: Optional[str] = None
