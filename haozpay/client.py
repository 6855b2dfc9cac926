"""HTTP adapter: signs outbound requests, maps errors, verifies callbacks."""
import json
import logging
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

import httpx
from pydantic import ValidationError

from haozpay.common.errors import (
    INVALID_REQUEST,
    INVALID_RESPONSE,
    NETWORK_ERROR,
    SIGN_ERROR,
    InvalidSignatureError,
    KeyFormatError,
    SDKError,
    SignatureFormatError,
)
from haozpay.common.protocol import (
    CancelPaymentOrderRequest,
    CreatePaymentOrderRequest,
    CreateRefundRequest,
    HaozPayRequest,
    PaymentOrderResponse,
    PlatformModel,
    QueryRefundRequest,
    QueryRefundResponse,
    RefundResponse,
    Response,
)
from haozpay.common.utils import now_ms
from haozpay.config import HaozPayConfig, load_config
from haozpay.crypto.canonical import SIGN_FIELD
from haozpay.crypto.sign import generate_sign, verify_sign

logger = logging.getLogger(__name__)

ORDER_PATH = "/pay-core/payment/order"
CANCEL_PATH = "/pay-core/payment/cancel"
REFUND_PATH = "/pay-core/payment/refund"
REFUND_QUERY_PATH = "/pay-core/payment/refund/query"

T = TypeVar("T", bound=PlatformModel)


class HaozPayClient:
    """Payment platform client: order create/cancel, refund create/query, callbacks."""

    def __init__(self, config: HaozPayConfig, transport: Optional[httpx.BaseTransport] = None):
        self.config = config
        self._http_client = httpx.Client(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_env(cls) -> "HaozPayClient":
        """Client configured from HAOZPAY_* environment variables."""
        return cls(load_config())

    def __enter__(self) -> "HaozPayClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http_client.close()

    # ==================== SIGNING ====================

    def sign_request(self, request: HaozPayRequest) -> HaozPayRequest:
        """
        Fill in request.sign.

        The signed parameter set is the bizBody JSON object flattened,
        plus merchantNo (text) and timestamp (integer).

        Raises:
            SDKError: If no private key is configured or bizBody is not a flat JSON object
            KeyFormatError: If the configured private key cannot be loaded
            PayloadTooLargeError: If the private key is too small
        """
        if not self.config.private_key:
            raise SDKError(SIGN_ERROR, "merchant private key is not configured")

        params: Dict[str, Any] = {}
        if request.biz_body:
            try:
                biz = json.loads(request.biz_body)
            except json.JSONDecodeError as e:
                raise SDKError(INVALID_REQUEST, f"failed to unmarshal bizBody: {e}") from e
            if not isinstance(biz, dict):
                raise SDKError(INVALID_REQUEST, "bizBody must be a JSON object")
            params.update(biz)

        params["merchantNo"] = request.merchant_no
        params["timestamp"] = request.timestamp

        try:
            request.sign = generate_sign(params, self.config.private_key)
        except TypeError as e:
            raise SDKError(INVALID_REQUEST, f"failed to generate signature: {e}") from e
        return request

    def verify_callback(
        self,
        params: Mapping[str, str],
        signature: Optional[str] = None,
        unpad: bool = False
    ) -> None:
        """
        Verify a callback notification from the platform.

        Args:
            params: Callback parameters as received
            signature: Base64 signature; taken from params["sign"] when omitted
            unpad: See haozpay.crypto.sign.verify_digest()

        Raises:
            KeyFormatError: If the platform public key is missing or invalid
            InvalidSignatureError: If the callback must be rejected
        """
        if not self.config.platform_public_key:
            raise KeyFormatError("platform public key is not configured")

        if signature is None:
            signature = params.get(SIGN_FIELD)
        if not signature:
            raise SignatureFormatError("callback carries no signature")

        try:
            verify_sign(params, signature, self.config.platform_public_key, unpad=unpad)
        except InvalidSignatureError as e:
            logger.warning("Callback signature rejected: %s", e)
            raise

    # ==================== TRANSPORT ====================

    def _post(self, path: str, body: PlatformModel, result_model: Optional[Type[T]] = None) -> Optional[T]:
        request = HaozPayRequest(
            merchant_no=self.config.merchant_no,
            timestamp=now_ms(),
            biz_body=body.to_biz_body(),
        )
        self.sign_request(request)
        payload = request.model_dump(by_alias=True)

        if self.config.debug:
            logger.info("[SDK Request] POST %s%s", self.config.base_url, path)
            logger.info("[SDK Request Body] %s", json.dumps(payload, indent=2, ensure_ascii=False))

        try:
            resp = self._http_client.post(path, json=payload)
        except httpx.HTTPError as e:
            raise SDKError(NETWORK_ERROR, f"request to {path} failed: {e}") from e

        if self.config.debug:
            logger.info(
                "[SDK Response] Status: %d, Time: %.3fs",
                resp.status_code, resp.elapsed.total_seconds()
            )
            logger.info("[SDK Response Body] %s", resp.text)

        if resp.status_code >= 400:
            try:
                error = Response.model_validate(resp.json())
            except (ValueError, ValidationError):
                raise SDKError(0, "failed to parse error response", resp.status_code)
            raise SDKError(error.code, error.message, resp.status_code, error.request_id)

        try:
            result = Response.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise SDKError(INVALID_RESPONSE, f"failed to parse response: {e}", resp.status_code) from e

        if result.code != 0:
            raise SDKError(result.code, result.message, 0, result.request_id)

        if result_model is None or result.data is None:
            return None
        try:
            return result_model.model_validate(result.data)
        except ValidationError as e:
            raise SDKError(INVALID_RESPONSE, f"unexpected response data: {e}", resp.status_code) from e

    # ==================== ENDPOINTS ====================

    def create_order(self, req: CreatePaymentOrderRequest) -> Optional[PaymentOrderResponse]:
        """Create a payment order."""
        return self._post(ORDER_PATH, req, PaymentOrderResponse)

    def cancel_order(self, req: CancelPaymentOrderRequest) -> None:
        """Cancel an unpaid payment order."""
        self._post(CANCEL_PATH, req)

    def create_refund(self, req: CreateRefundRequest) -> Optional[RefundResponse]:
        """
        Refund a paid order.

        Raises:
            SDKError: INVALID_REQUEST if neither order_no nor req_seq_id is set
        """
        if not req.order_no and not req.req_seq_id:
            raise SDKError(
                INVALID_REQUEST,
                "order_no and req_seq_id cannot both be empty, at least one must be provided",
            )
        return self._post(REFUND_PATH, req, RefundResponse)

    def query_refund(self, req: QueryRefundRequest) -> Optional[QueryRefundResponse]:
        """Query refund status."""
        return self._post(REFUND_QUERY_PATH, req, QueryRefundResponse)
