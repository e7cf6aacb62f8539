import pytest

from movie_catalog.models.user import User
from movie_catalog.schemas.auth import UserRegister
from movie_catalog.services.auth_service import AuthService
from movie_catalog.utils.roles import ROLE_RIGHTS, has_right, ADMIN, USER, MANAGE_MOVIES, VOTE_MOVIES, GET_MOVIES
from movie_catalog.utils.security import create_access_token, decode_token, hash_password, verify_password

from conftest import auth_headers_for, create_movie, create_user


REGISTRATION = {
    "email": "carol@example.com",
    "password": "Password123",
    "user_name": "carol",
}


class TestRoles:

    @pytest.mark.parametrize("role,right,expected", [
        (USER, VOTE_MOVIES, True),
        (USER, GET_MOVIES, True),
        (USER, MANAGE_MOVIES, False),
        (ADMIN, MANAGE_MOVIES, True),
        (ADMIN, GET_MOVIES, True),
        (ADMIN, VOTE_MOVIES, False),
        ("guest", GET_MOVIES, False),
    ])
    def test_has_right(self, role, right, expected):
        assert has_right(role, right) is expected

    def test_role_table_is_read_only(self):
        with pytest.raises(TypeError):
            ROLE_RIGHTS[USER] = frozenset({MANAGE_MOVIES})


class TestSecurity:

    def test_password_round_trip(self):
        hashed = hash_password("Password123")

        assert hashed != "Password123"
        assert verify_password("Password123", hashed)
        assert not verify_password("Password124", hashed)

    def test_token_carries_claims(self):
        claims = decode_token(create_access_token({"sub": "a@example.com", "user_id": 7}))

        assert claims["user_id"] == 7
        assert claims["type"] == "access"

    def test_tampered_token_is_rejected(self):
        token = create_access_token({"sub": "a@example.com", "user_id": 7})

        assert decode_token(token[:-2] + "xx") is None


class TestAuthEndpoints:

    def test_register_login_and_me(self, client):
        registered = client.post("/v1/auth/register", json=REGISTRATION)

        assert registered.status_code == 201
        assert registered.json()["role"] == "user"
        assert "password_hash" not in registered.json()

        login = client.post("/v1/auth/login", json={
            "email": REGISTRATION["email"],
            "password": REGISTRATION["password"],
        })

        assert login.status_code == 200
        token = login.json()["access_token"]
        assert login.json()["token_type"] == "bearer"

        me = client.get("/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert me.status_code == 200
        assert me.json()["user_name"] == "carol"

    def test_registered_user_can_vote(self, client, db_session):
        client.post("/v1/auth/register", json=REGISTRATION)
        token = client.post("/v1/auth/login", json={
            "email": REGISTRATION["email"],
            "password": REGISTRATION["password"],
        }).json()["access_token"]

        movie = create_movie(db_session)

        response = client.patch(
            f"/v1/movies/vote/{movie.id}", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json()["usersVote"] == ["carol"]

    def test_duplicate_email_returns_409(self, client):
        client.post("/v1/auth/register", json=REGISTRATION)

        response = client.post("/v1/auth/register", json=dict(REGISTRATION, user_name="carol2"))

        assert response.status_code == 409

    def test_duplicate_user_name_returns_409(self, client):
        client.post("/v1/auth/register", json=REGISTRATION)

        response = client.post("/v1/auth/register", json=dict(REGISTRATION, email="other@example.com"))

        assert response.status_code == 409
        assert response.json()["detail"] == "User name already taken"

    @pytest.mark.parametrize("overrides", [
        {"password": "short1"},
        {"password": "onlyletters"},
        {"password": "12345678"},
        {"user_name": "ca"},
        {"user_name": "carol smith"},
        {"email": "not-an-email"},
    ])
    def test_invalid_registration_is_rejected(self, client, overrides):
        response = client.post("/v1/auth/register", json=dict(REGISTRATION, **overrides))

        assert response.status_code == 422

    def test_wrong_password_returns_401(self, client):
        client.post("/v1/auth/register", json=REGISTRATION)

        response = client.post("/v1/auth/login", json={
            "email": REGISTRATION["email"],
            "password": "WrongPass123",
        })

        assert response.status_code == 401

    def test_inactive_user_token_is_rejected(self, client, db_session):
        user = create_user(db_session, "dave", is_active=False)

        response = client.get("/v1/auth/me", headers=auth_headers_for(user))

        assert response.status_code == 401


def test_register_admin_through_service(db_session):
    admin = AuthService.register_user(db_session, UserRegister(**REGISTRATION), role=ADMIN)

    assert admin.role == ADMIN
    assert db_session.query(User).filter(User.role == ADMIN).count() == 1


def test_register_unknown_role_fails(db_session):
    with pytest.raises(ValueError):
        AuthService.register_user(db_session, UserRegister(**REGISTRATION), role="root")
