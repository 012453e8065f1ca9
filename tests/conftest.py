import pytest
from fastapi.testclient import TestClient

from luxeplan.auth import get_token_verifier
from luxeplan.database import Database
from luxeplan.domain.payments.dodo_service import CheckoutSession, SessionStatus, get_payment_gateway
from luxeplan.errors import UnauthorizedError
from luxeplan.main import create_app
from luxeplan.models import Decorator, Service, User
from luxeplan.services.notification_service import get_sms_sender


class FakeVerifier:
    """Accepts tokens shaped ``token-<email>``"""

    async def verify(self, token: str) -> str:
        if not token.startswith("token-"):
            raise UnauthorizedError()
        return token[len("token-"):].lower()


class FakeGateway:
    def __init__(self):
        self.created = []
        self.sessions: dict[str, SessionStatus] = {}

    async def create_session(self, line_item, customer_email, metadata, success_url, cancel_url):
        number = len(self.created) + 1
        session_id = f"cs_test_{number}"
        self.created.append(
            {
                "session_id": session_id,
                "line_item": line_item,
                "customer_email": customer_email,
                "metadata": metadata,
                "success_url": success_url,
                "cancel_url": cancel_url,
            }
        )
        self.sessions[session_id] = SessionStatus(
            session_id=session_id,
            transaction_id=None,
            payment_status=None,
            amount_total=line_item["amount"],
            currency="USD",
            customer_email=customer_email,
            metadata={k: str(v) for k, v in metadata.items() if v is not None},
        )
        return CheckoutSession(session_id=session_id, url=f"https://checkout.test/{session_id}")

    def mark_paid(self, session_id: str, transaction_id: str = None):
        status = self.sessions[session_id]
        status.transaction_id = transaction_id or f"pay_{session_id}"
        status.payment_status = "succeeded"

    def mark_failed(self, session_id: str):
        status = self.sessions[session_id]
        status.transaction_id = f"pay_{session_id}"
        status.payment_status = "failed"

    async def retrieve_session(self, session_id: str) -> SessionStatus:
        return self.sessions[session_id]


class FakeSender:
    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, recipient: str, message: str) -> bool:
        if self.fail:
            raise RuntimeError("SMS provider down")
        self.sent.append((recipient, message))
        return True


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.init()
    yield db
    db.dispose()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def app(database, gateway, sender):
    app = create_app(database)
    app.dependency_overrides[get_token_verifier] = lambda: FakeVerifier()
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_sms_sender] = lambda: sender
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def auth(email: str) -> dict:
    return {"Authorization": f"Bearer token-{email}"}


@pytest.fixture
def make_user(database):
    def _make_user(email: str, role: str = "client", name: str = None) -> int:
        with database.session() as s:
            user = User(email=email, role=role, name=name or email.split("@")[0])
            s.add(user)
            s.commit()
            return user.id

    return _make_user


@pytest.fixture
def make_service(database):
    def _make_service(name: str = "Wedding Stage", cost: float = 500.0, category: str = "wedding", **extra) -> int:
        with database.session() as s:
            service = Service(service_name=name, cost=cost, service_category=category, **extra)
            s.add(service)
            s.commit()
            return service.id

    return _make_service


@pytest.fixture
def make_decorator(database, make_user):
    def _make_decorator(email: str, name: str = None, status: str = "accepted", work_status: str = "available") -> int:
        make_user(email, role="decorator" if status == "accepted" else "client", name=name)
        with database.session() as s:
            decorator = Decorator(email=email, name=name or email.split("@")[0], status=status, work_status=work_status)
            s.add(decorator)
            s.commit()
            return decorator.id

    return _make_decorator


@pytest.fixture
def admin(make_user):
    make_user("admin@luxeplan.test", role="admin")
    return auth("admin@luxeplan.test")
