# backend/modules/payments/gateways/base.py

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PaymentItem:
    """Line item shown on the hosted checkout page"""
    id: str
    name: str
    price: int
    quantity: int


@dataclass
class PaymentRequest:
    """Standard payment request structure"""
    order_id: str
    gross_amount: int
    items: List[PaymentItem] = field(default_factory=list)
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    billing_address: Optional[str] = None


@dataclass
class PaymentResponse:
    """Hosted checkout session returned by the gateway"""
    token: str
    redirect_url: str
    raw_response: Optional[Dict[str, Any]] = None


@dataclass
class TransactionStatusResponse:
    """Gateway view of a transaction, as reported by the status API"""
    order_id: str
    status_code: str
    transaction_status: Optional[str] = None
    fraud_status: Optional[str] = None
    gross_amount: Optional[str] = None
    transaction_id: Optional[str] = None
    payment_type: Optional[str] = None
    raw_response: Optional[Dict[str, Any]] = None


class PaymentGatewayInterface(ABC):
    """Abstract interface for hosted checkout gateways"""

    @abstractmethod
    async def create_payment(self, request: PaymentRequest) -> PaymentResponse:
        """
        Open a hosted checkout session for an order

        Raises:
            GatewayError: on any non-success response, transport error or timeout
        """
        pass

    @abstractmethod
    async def get_transaction_status(self, order_id: str) -> TransactionStatusResponse:
        """
        Fetch the current status of a transaction from the gateway

        Raises:
            GatewayError: on any non-success response, transport error or timeout
        """
        pass

    @abstractmethod
    def verify_notification(
        self, order_id: str, status_code: str, gross_amount: str, signature_key: str
    ) -> bool:
        """
        Verify the signature carried by an asynchronous notification

        Returns:
            True when the signature was produced with our server key
        """
        pass

    @abstractmethod
    def get_public_config(self) -> Dict[str, Any]:
        """Public configuration for the frontend checkout widget"""
        pass
