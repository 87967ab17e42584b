# backend/modules/payments/gateways/midtrans_gateway.py

import base64
import hashlib
import hmac
import logging
from typing import Any, Dict, Optional

import httpx

from core.config import Settings
from core.exceptions import GatewayError
from .base import (
    PaymentGatewayInterface,
    PaymentRequest,
    PaymentResponse,
    TransactionStatusResponse,
)

logger = logging.getLogger(__name__)


def notification_signature(
    order_id: str, status_code: str, gross_amount: str, server_key: str
) -> str:
    """SHA-512 over ``order_id + status_code + gross_amount + server_key``, lowercase hex."""
    raw = f"{order_id}{status_code}{gross_amount}{server_key}"
    return hashlib.sha512(raw.encode("utf-8")).hexdigest()


class MidtransGateway(PaymentGatewayInterface):
    """Midtrans Snap hosted checkout"""

    def __init__(
        self,
        server_key: str,
        snap_endpoint: str,
        api_endpoint: Optional[str] = None,
        client_key: str = "",
        merchant_id: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not server_key:
            logger.warning("Midtrans server key is empty; gateway calls will be rejected")

        self.server_key = server_key
        self.client_key = client_key
        self.merchant_id = merchant_id
        self.snap_endpoint = snap_endpoint.rstrip("/")
        self.api_endpoint = (api_endpoint or snap_endpoint).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "MidtransGateway":
        return cls(
            server_key=settings.MIDTRANS_SERVER_KEY,
            snap_endpoint=settings.MIDTRANS_ENDPOINT,
            api_endpoint=settings.midtrans_api_endpoint,
            client_key=settings.MIDTRANS_CLIENT_KEY,
            merchant_id=settings.MIDTRANS_MERCHANT_ID,
            timeout=settings.GATEWAY_TIMEOUT_SECONDS,
        )

    def _headers(self) -> Dict[str, str]:
        # Basic auth: server key as username, empty password
        auth_encoded = base64.b64encode(f"{self.server_key}:".encode()).decode()
        return {
            "Authorization": f"Basic {auth_encoded}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _request(
        self, method: str, url: str, json: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                return await client.request(method, url, headers=self._headers(), json=json)
        except httpx.TimeoutException as e:
            logger.error(f"Midtrans {method} {url} timed out after {self.timeout}s: {e}")
            raise GatewayError("Payment gateway timed out", error_code="GATEWAY_TIMEOUT")
        except httpx.HTTPError as e:
            logger.error(f"Midtrans {method} {url} failed: {e}")
            raise GatewayError("Payment gateway unreachable")

    def _build_payload(self, request: PaymentRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "transaction_details": {
                "order_id": request.order_id,
                "gross_amount": request.gross_amount,
            }
        }

        # Snap rejects item_details whose sum differs from gross_amount
        items_total = sum(item.price * item.quantity for item in request.items)
        if request.items and items_total == request.gross_amount:
            payload["item_details"] = [
                {
                    "id": item.id,
                    "name": item.name[:50],
                    "price": item.price,
                    "quantity": item.quantity,
                }
                for item in request.items
            ]

        customer: Dict[str, Any] = {}
        if request.customer_name:
            customer["first_name"] = request.customer_name
        if request.customer_email:
            customer["email"] = request.customer_email
        if request.customer_phone:
            customer["phone"] = request.customer_phone
        if request.billing_address:
            customer["billing_address"] = {"address": request.billing_address}
        if customer:
            payload["customer_details"] = customer

        return payload

    async def create_payment(self, request: PaymentRequest) -> PaymentResponse:
        url = f"{self.snap_endpoint}/snap/v1/transactions"
        response = await self._request("POST", url, json=self._build_payload(request))

        if response.status_code != 201:
            logger.error(
                f"Midtrans rejected transaction for order {request.order_id}: "
                f"status={response.status_code} body={response.text}"
            )
            raise GatewayError(
                f"Payment gateway returned status {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
            return PaymentResponse(
                token=data["token"], redirect_url=data["redirect_url"], raw_response=data
            )
        except (ValueError, KeyError) as e:
            logger.error(f"Malformed Midtrans response for order {request.order_id}: {e}")
            raise GatewayError("Payment gateway returned a malformed response")

    async def get_transaction_status(self, order_id: str) -> TransactionStatusResponse:
        url = f"{self.api_endpoint}/v2/{order_id}/status"
        response = await self._request("GET", url)

        if response.status_code != 200:
            logger.error(
                f"Midtrans status lookup for {order_id} failed: "
                f"status={response.status_code} body={response.text}"
            )
            raise GatewayError(
                f"Payment gateway returned status {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            raise GatewayError("Payment gateway returned a malformed response")

        return TransactionStatusResponse(
            order_id=str(data.get("order_id", order_id)),
            status_code=str(data.get("status_code", "")),
            transaction_status=data.get("transaction_status"),
            fraud_status=data.get("fraud_status"),
            gross_amount=data.get("gross_amount"),
            transaction_id=data.get("transaction_id"),
            payment_type=data.get("payment_type"),
            raw_response=data,
        )

    def verify_notification(
        self, order_id: str, status_code: str, gross_amount: str, signature_key: str
    ) -> bool:
        if not self.server_key or not signature_key:
            return False
        expected = notification_signature(order_id, status_code, gross_amount, self.server_key)
        return hmac.compare_digest(expected.encode(), signature_key.encode())

    def get_public_config(self) -> Dict[str, Any]:
        return {"client_key": self.client_key, "merchant_id": self.merchant_id}
