"""
Login, token validation and the bearer guard.
"""

from datetime import timedelta

import pytest
from jose import jwt

from app.core.auth import create_access_token, decode_token
from app.core.config import get_settings
from app.core.exceptions import InvalidCredentials, InvalidToken, NotFound, TokenExpired
from app.models.domain import UserRole
from app.services.auth_service import AuthService


@pytest.fixture
def service(repos):
    return AuthService(repos.users)


class TestAuthenticate:
    def test_valid_credentials_issue_token_for_user(self, service, owner, password):
        user, token = service.authenticate("budi", password)

        claims = decode_token(token)
        assert user.id == owner.id
        assert claims.user_id == owner.id
        assert claims.username == "budi"
        assert claims.role == UserRole.user

    def test_login_by_email(self, service, owner, password):
        user, _ = service.authenticate("budi@example.com", password)
        assert user.id == owner.id

    def test_login_is_case_sensitive(self, service, owner, password):
        with pytest.raises(InvalidCredentials):
            service.authenticate("BUDI", password)

    def test_wrong_password_and_unknown_user_fail_identically(self, service, owner, password):
        with pytest.raises(InvalidCredentials) as wrong_password:
            service.authenticate("budi", "not-the-password")
        with pytest.raises(InvalidCredentials) as unknown_user:
            service.authenticate("nobody", password)

        assert wrong_password.value.message == unknown_user.value.message == "Invalid username or password"
        assert wrong_password.value.to_error() == unknown_user.value.to_error()

    def test_profile(self, service, admin):
        assert service.get_profile(admin.id).username == "admin"
        with pytest.raises(NotFound):
            service.get_profile(9999)


class TestTokens:
    def test_claims_carry_role(self, admin):
        claims = decode_token(create_access_token(admin))
        assert claims.role == UserRole.admin
        assert claims.expires_at > claims.issued_at

    def test_expired_token(self, owner):
        token = create_access_token(owner, expires_delta=timedelta(seconds=-10))
        with pytest.raises(TokenExpired):
            decode_token(token)

    def test_wrong_signature(self, owner):
        settings = get_settings()
        token = jwt.encode({"user_id": owner.id, "username": "budi", "role": "user", "iat": 0, "exp": 9999999999},
                           "some-other-secret", algorithm=settings.jwt_algorithm)
        with pytest.raises(InvalidToken):
            decode_token(token)

    def test_missing_claims(self):
        settings = get_settings()
        token = jwt.encode({"sub": "1", "exp": 9999999999}, settings.jwt_secret_key,
                           algorithm=settings.jwt_algorithm)
        with pytest.raises(InvalidToken):
            decode_token(token)

    def test_garbage(self):
        with pytest.raises(InvalidToken):
            decode_token("not.a.jwt")


class TestLoginRoute:
    def test_login_returns_user_and_token(self, client, owner, password):
        response = client.post("/api/auth/login", json={"username": "budi", "password": password})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["user"]["id"] == owner.id
        assert "password_hash" not in body["data"]["user"]
        assert decode_token(body["data"]["token"]).user_id == owner.id

    def test_bad_login_is_401_with_same_body(self, client, owner):
        wrong = client.post("/api/auth/login", json={"username": "budi", "password": "nope"})
        unknown = client.post("/api/auth/login", json={"username": "ghost", "password": "nope"})

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()
        assert wrong.json()["error"]["code"] == "invalid_credentials"

    def test_profile_requires_token(self, client):
        response = client.get("/api/auth/profile")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "unauthenticated"

    def test_profile_rejects_non_bearer_scheme(self, client, owner):
        token = create_access_token(owner)
        response = client.get("/api/auth/profile", headers={"Authorization": f"Basic {token}"})
        assert response.status_code == 401

    def test_profile_rejects_expired_token(self, client, owner):
        token = create_access_token(owner, expires_delta=timedelta(seconds=-10))
        response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"]["details"] == "token_expired"

    def test_profile(self, client, owner, owner_headers):
        response = client.get("/api/auth/profile", headers=owner_headers)

        assert response.status_code == 200
        assert response.json()["data"]["username"] == "budi"
        assert response.json()["data"]["role"] == "user"
