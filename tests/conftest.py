import pytest
from fastapi.testclient import TestClient
from address6d.core.config import Settings
from address6d.core.security import IdentityClaims
from address6d.database import Base
from address6d.dependencies import get_current_identity
from main import create_app

VERIFIED_PHONE = "+252612345678"
MOGADISHU = (2.04695, 45.31825)


@pytest.fixture(scope="function")
def settings():
    """Settings for an isolated in-memory database with no live providers."""
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        FIREBASE_PROJECT_ID="test-project",
        GOOGLE_MAPS_API_KEY=None,
        FIREBASE_WEB_API_KEY=None,
    )


@pytest.fixture(scope="function")
def app(settings):
    return create_app(settings)


@pytest.fixture(scope="function")
def client(app):
    """Unauthenticated client; identity tokens go through the real verifier."""
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def identity():
    return IdentityClaims(uid="firebase-uid-1", phone_number=VERIFIED_PHONE)


@pytest.fixture(scope="function")
def authenticated_client(app, identity):
    """Client whose requests carry an already verified identity."""
    app.dependency_overrides[get_current_identity] = lambda: identity

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db_session(app):
    Base.metadata.create_all(bind=app.state.engine)
    db = app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def registration_payload():
    lat, lon = MOGADISHU
    return {
        "name": "Amina Hassan",
        "mobile": "0612345678",
        "code6D": "41-68-92",
        "latitude": lat,
        "longitude": lon,
        "context": {"sublocality": "Hodan", "locality": "Muqdisho"},
    }
