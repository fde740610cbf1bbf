# tests/conftest.py
from uuid import uuid4
import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from config import Settings, get_settings
from dependencies.services import get_notifier, get_supabase
from main import app
from services.invite import InviteService
from services.notifier import CRMNotifier
from tests.fakes import FakeSupabase

FRANCHISE_ID = uuid4()
OTHER_FRANCHISE_ID = uuid4()
OWNER_ID = uuid4()
WEBHOOK_SECRET = "s3cret-shared"


class CRMRecorder:
    """GHL endpoint double: records posts, answers with `status_code` or raises `error`"""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.error = None
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json={"received": True})


@pytest.fixture
def settings():
    return Settings(
        supabase_url="https://project.supabase.co",
        supabase_key="service-role-key",
        jwt_secret="jwt-secret",
        webhook_secret=WEBHOOK_SECRET,
        notify_url="https://services.leadconnectorhq.com/hooks/test",
        notify_timeout_secs=2.0,
        app_url="https://dojo.example",
    )


@pytest.fixture
def db():
    fake = FakeSupabase()
    fake.seed("franchises", id=str(FRANCHISE_ID), name="Shirley Dojo")
    fake.seed("franchises", id=str(OTHER_FRANCHISE_ID), name="Croydon Dojo")
    fake.seed(
        "profiles",
        id=str(OWNER_ID),
        role="franchise_owner",
        franchise_id=str(FRANCHISE_ID),
        email="owner@dojo.example",
        full_name="Olive Owner",
    )
    return fake


@pytest.fixture
def crm():
    return CRMRecorder()


@pytest.fixture
def notifier(settings, crm):
    return CRMNotifier(settings, transport=crm.transport)


@pytest.fixture
def service(db, settings, notifier):
    return InviteService(db, settings, notifier)


@pytest.fixture
def client(db, settings, notifier):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def bearer(settings):
    def make(user_id=OWNER_ID):
        token = jwt.encode({"sub": str(user_id), "aud": "authenticated"}, settings.jwt_secret, algorithm="HS256")
        return {"Authorization": f"Bearer {token}"}
    return make
