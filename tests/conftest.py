import os
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from httpx import Client


RUN_INTEGRATION = os.getenv("RUN_INTEGRATION") == "1"
BASE_URL = os.getenv("BASE_URL", "http://localhost:9000")


def _generate_key_pair() -> tuple[str, str]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


PRIVATE_KEY, PUBLIC_KEY = _generate_key_pair()
OTHER_PRIVATE_KEY, _ = _generate_key_pair()

# Must be in place before any app module reads settings.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_PUBLIC_KEY"] = PUBLIC_KEY
os.environ["OSS_REGION"] = "oss-cn-hangzhou"
os.environ["OSS_BUCKET_NAME"] = "pet-journal-test"
os.environ["OSS_ACCESS_KEY_ID"] = "service-key-id"
os.environ["OSS_ACCESS_KEY_SECRET"] = "service-key-secret"
os.environ["OSS_ROLE_ARN"] = "acs:ram::1234567890:role/pet-uploader"
os.environ["UPLOAD_POLICY_TTL_SECONDS"] = "3000"
os.environ["LOG_LEVEL"] = "WARNING"


def make_token(
    caller_id="42",
    *,
    private_key: str = PRIVATE_KEY,
    expires_in: int = 3600,
    claims: dict | None = None,
) -> str:
    payload = {"exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in)}
    if caller_id is not None:
        payload["userId"] = caller_id
    if claims:
        payload.update(claims)
    return jwt.encode(payload, private_key, algorithm="RS256")


def auth_headers(caller_id="42") -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(caller_id)}"}


@pytest.fixture
def fake_credential():
    from app.services.oss import TemporaryCredential

    return TemporaryCredential(
        access_key_id="STS.tmp-key-id",
        access_key_secret="tmp-key-secret",
        security_token="tmp-security-token",
        expires_at="2026-10-19T12:50:00Z",
    )


@pytest.fixture
def broker(fake_credential):
    spy = MagicMock()
    spy.assume_role.return_value = fake_credential
    return spy


@pytest.fixture
def db_engine():
    from sqlalchemy import create_engine
    from sqlalchemy.pool import StaticPool

    from app.db.base import Base
    import app.models  # noqa: F401

    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def oss_spy():
    spy = MagicMock()
    spy.delete_object.return_value = True
    return spy


@pytest.fixture
def api(db_engine, broker, oss_spy):
    from fastapi.testclient import TestClient
    from sqlalchemy.orm import sessionmaker

    from app.api.deps import get_oss_service
    from app.db.session import get_db
    from app.main import app
    from app.services.upload_grant import UploadGrantService, get_upload_grant_service

    TestingSession = sessionmaker(bind=db_engine, autoflush=False, autocommit=False, expire_on_commit=False)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_upload_grant_service] = lambda: UploadGrantService(broker)
    app.dependency_overrides[get_oss_service] = lambda: oss_spy
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def base_url() -> str:
    return BASE_URL


@pytest.fixture(scope="session")
def client(base_url: str):
    with Client(base_url=base_url, timeout=20.0) as c:
        yield c


@pytest.fixture(scope="session")
def integration_enabled() -> bool:
    return RUN_INTEGRATION
