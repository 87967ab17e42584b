"""
Pytest configuration file for backend testing.
"""
import json
import sys
from datetime import datetime
from pathlib import Path

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import httpx
import pytest
from fastapi.testclient import TestClient

import app.models as registered_models  # noqa: F401
from app.main import create_app
from core.auth import AuthUser, Role, create_access_token
from core.clock import FixedClock, get_clock
from core.config import Settings, get_settings
from core.database import Base, get_db
from modules.payments.gateways.midtrans_gateway import MidtransGateway
from modules.payments.routes.payment_routes import get_payment_gateway
from tests.factories import (
    AdminFactory,
    CustomerFactory,
    StaffFactory,
    bind_session,
)

TEST_SERVER_KEY = "SB-Mid-server-test-key"
SNAP_ENDPOINT = "https://app.sandbox.midtrans.test"
API_ENDPOINT = "https://api.sandbox.midtrans.test"
FROZEN_NOW = datetime(2030, 1, 1, 9, 0, 0)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-jwt-secret",
        MIDTRANS_ENDPOINT=SNAP_ENDPOINT,
        MIDTRANS_API_ENDPOINT=API_ENDPOINT,
        MIDTRANS_SERVER_KEY=TEST_SERVER_KEY,
        MIDTRANS_CLIENT_KEY="SB-Mid-client-test-key",
        RATE_LIMIT_ENABLED=False,
    )


@pytest.fixture
def clock():
    """Frozen in the future so issued tokens are not expired by real time."""
    return FixedClock(FROZEN_NOW)


@pytest.fixture
def app(settings):
    application = create_app(settings, run_checks=False)
    Base.metadata.create_all(bind=application.state.engine)
    yield application
    Base.metadata.drop_all(bind=application.state.engine)
    application.state.engine.dispose()


@pytest.fixture
def db_session(app):
    """Create a fresh database session for each test."""
    db = app.state.session_factory()
    bind_session(db)
    try:
        yield db
    finally:
        bind_session(None)
        db.close()


class GatewayStub:
    """Records outbound Midtrans calls and answers them from canned responses."""

    def __init__(self):
        self.requests = []
        self.create_status = 201
        self.create_body = {
            "token": "snap-token-abc",
            "redirect_url": "https://app.sandbox.midtrans.test/snap/v3/redirection/snap-token-abc",
        }
        self.transaction_status = "settlement"
        self.fraud_status = "accept"
        self.raise_timeout = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_timeout:
            raise httpx.ReadTimeout("timed out", request=request)
        if request.method == "POST" and request.url.path == "/snap/v1/transactions":
            return httpx.Response(self.create_status, json=self.create_body)
        if request.method == "GET" and request.url.path.endswith("/status"):
            order_id = request.url.path.split("/")[2]
            return httpx.Response(
                200,
                json={
                    "status_code": "200",
                    "order_id": order_id,
                    "transaction_status": self.transaction_status,
                    "fraud_status": self.fraud_status,
                    "transaction_id": "txn-sync-1",
                    "payment_type": "bank_transfer",
                    "gross_amount": "50000.00",
                },
            )
        return httpx.Response(404, json={"status_message": "not found"})

    def payloads(self):
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]


@pytest.fixture
def gateway_stub():
    return GatewayStub()


@pytest.fixture
def gateway(settings, gateway_stub):
    return MidtransGateway(
        server_key=settings.MIDTRANS_SERVER_KEY,
        snap_endpoint=settings.MIDTRANS_ENDPOINT,
        api_endpoint=settings.midtrans_api_endpoint,
        client_key=settings.MIDTRANS_CLIENT_KEY,
        timeout=settings.GATEWAY_TIMEOUT_SECONDS,
        transport=httpx.MockTransport(gateway_stub.handler),
    )


@pytest.fixture
def client(app, db_session, settings, clock, gateway):
    """Create a test client with database, clock and gateway overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def token_for(customer, settings, clock) -> str:
    user = AuthUser(
        customer_id=customer.id,
        email=customer.email,
        name=customer.name,
        role=Role(customer.role),
    )
    return create_access_token(user, settings, clock)


@pytest.fixture
def auth_headers(settings, clock):
    """Build bearer headers for any customer row."""
    def build(customer):
        return {"Authorization": f"Bearer {token_for(customer, settings, clock)}"}

    return build


@pytest.fixture
def customer(db_session):
    return CustomerFactory()


@pytest.fixture
def staff(db_session):
    return StaffFactory()


@pytest.fixture
def admin(db_session):
    return AdminFactory()


@pytest.fixture
def customer_headers(customer, auth_headers):
    return auth_headers(customer)


@pytest.fixture
def staff_headers(staff, auth_headers):
    return auth_headers(staff)


@pytest.fixture
def admin_headers(admin, auth_headers):
    return auth_headers(admin)
