"""
Integration tests for security-critical paths.

Tests:
- Admin RBAC enforcement
- JWT handling
- Password hashing
- Health checks
"""

from datetime import timedelta

import pytest
from jose import JWTError

from app.core.security import (
    create_access_token,
    decode_token,
    generate_reset_token,
    get_password_hash,
    verify_password,
)

ADMIN_ROUTES = [
    ("get", "/api/admin/ai-provider"),
    ("post", "/api/admin/candidates/1/disqualify"),
    ("delete", "/api/admin/candidates/1"),
]


class TestAdminRBAC:
    """Admin routes require an admin JWT"""

    @pytest.mark.parametrize("method,path", ADMIN_ROUTES)
    def test_admin_endpoints_require_authentication(self, client, method, path):
        response = getattr(client, method)(path)

        assert response.status_code in (401, 403)

    @pytest.mark.parametrize("method,path", ADMIN_ROUTES)
    def test_admin_endpoints_reject_non_admin_users(self, client, make_user, headers_for, method, path):
        candidate_user = make_user("jane@corp.io")

        response = getattr(client, method)(path, headers=headers_for(candidate_user))

        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"

    def test_invalid_token(self, client):
        response = client.get("/api/admin/ai-provider", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_token_for_deleted_user(self, client, db_session, make_user, headers_for):
        user = make_user("gone@corp.io")
        headers = headers_for(user)
        db_session.delete(user)
        db_session.commit()

        response = client.get("/api/admin/ai-provider", headers=headers)

        assert response.status_code == 401

    def test_public_routes_need_no_token(self, client):
        assert client.get("/health").status_code == 200
        assert client.get("/api/invitations/unknown-token").status_code == 404


class TestTokens:

    def test_round_trip(self):
        token = create_access_token(data={"sub": "7", "role": "admin"})

        payload = decode_token(token)

        assert payload["sub"] == "7"
        assert payload["role"] == "admin"
        assert "exp" in payload

    def test_expired_token(self):
        token = create_access_token(data={"sub": "7"}, expires_delta=timedelta(seconds=-1))

        with pytest.raises(JWTError):
            decode_token(token)

    def test_reset_tokens_are_unique(self):
        assert len({generate_reset_token() for _ in range(20)}) == 20


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = get_password_hash("SecurePass123!")

        assert hashed != "SecurePass123!"
        assert verify_password("SecurePass123!", hashed)
        assert not verify_password("securepass123!", hashed)

    def test_long_passwords_truncate_to_72_bytes(self):
        hashed = get_password_hash("x" * 100)

        assert verify_password("x" * 72, hashed)


class TestHealth:

    def test_basic_health_check(self, client):
        response = client.get("/health")

        assert response.json()["status"] == "healthy"

    def test_detailed_health_check(self, client):
        response = client.get("/health/detailed")

        assert response.status_code == 200
        checks = response.json()["checks"]
        assert checks["database"]["status"] == "healthy"
        assert checks["broker"]["status"] in ("healthy", "degraded")
        assert set(checks["ai_providers"]) == {"openai", "gemini", "nlp"}

    def test_root(self, client):
        assert client.get("/").json()["status"] == "healthy"
