import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from movie_catalog.database import Base, get_db
from movie_catalog.main import app
from movie_catalog.models.user import User
from movie_catalog.models.movie import Movie
from movie_catalog.schemas.movie import MovieCreate
from movie_catalog.services.movie_service import MovieService
from movie_catalog.utils.security import create_access_token

SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Placeholder hash; fixture users authenticate with minted tokens, not passwords
PASSWORD_HASH = "$2b$12$LQv3c1yqBWVHxkd0LHAkCOYz6TtxMQJqhN8/X4.V2RqFi0W7e8y7e"


@pytest.fixture
def db_session():
    """Provide a clean database session for each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    """FastAPI test client with the database dependency overridden."""

    def override_get_db():
        test_db = TestingSessionLocal()
        try:
            yield test_db
        finally:
            test_db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_db, None)


def create_user(session, user_name, role="user", is_active=True):
    user = User(
        email=f"{user_name}@example.com",
        user_name=user_name,
        password_hash=PASSWORD_HASH,
        role=role,
        is_active=is_active
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_headers_for(user):
    token = create_access_token(data={"sub": user.email, "user_id": user.id})
    return {"Authorization": f"Bearer {token}"}


def movie_data(title="Inception", **overrides):
    """Valid create payload keyed by Python field names"""
    data = {
        "title": title,
        "description": f"Description of {title}",
        "duration": 120,
        "artists": "Leonardo DiCaprio, Elliot Page",
        "genres": "Action, Scifi",
        "watch_url": f"https://watch.example.com/movies/{title.lower()}",
    }
    data.update(overrides)
    return data


def create_movie(session, title="Inception", **overrides) -> Movie:
    return MovieService.create_movie(session, MovieCreate(**movie_data(title, **overrides)))


@pytest.fixture
def admin_user(db_session):
    return create_user(db_session, "admin", role="admin")


@pytest.fixture
def alice(db_session):
    return create_user(db_session, "alice")


@pytest.fixture
def bob(db_session):
    return create_user(db_session, "bob")


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers_for(admin_user)


@pytest.fixture
def alice_headers(alice):
    return auth_headers_for(alice)


@pytest.fixture
def bob_headers(bob):
    return auth_headers_for(bob)


@pytest.fixture
def movie(db_session):
    return create_movie(db_session)
