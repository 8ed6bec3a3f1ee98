"""
Testes unitários para funções de segurança.
"""

from datetime import timedelta

from jose import jwt

from library_api.core.config import get_settings
from library_api.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    """Testes para hash de senha."""

    def test_hash_password_returns_hash(self):
        """Hash deve ser diferente da senha original."""
        password = "MinhaSenh@123"
        hashed = hash_password(password)

        assert hashed != password
        assert hashed.startswith("$2")

    def test_hash_password_different_hashes(self):
        """Mesma senha gera hashes diferentes (salt)."""
        assert hash_password("MinhaSenh@123") != hash_password("MinhaSenh@123")

    def test_verify_password_correct(self):
        hashed = hash_password("MinhaSenh@123")

        assert verify_password("MinhaSenh@123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("MinhaSenh@123")

        assert verify_password("SenhaErrada123", hashed) is False
        assert verify_password("", hashed) is False

    def test_verify_password_malformed_hash(self):
        """Hash em outro formato conta como senha incorreta."""
        assert verify_password("MinhaSenh@123", "not-a-bcrypt-hash") is False


class TestJWT:
    """Testes para JWT."""

    def test_decode_token_valid(self):
        token = create_access_token(subject="user-123")
        payload = decode_token(token)

        assert payload is not None
        assert payload["sub"] == "user-123"
        assert "exp" in payload
        assert "iat" in payload

    def test_extra_claims(self):
        token = create_access_token(subject="user-123", extra_data={"role": "ADMIN"})

        assert decode_token(token)["role"] == "ADMIN"

    def test_expired_token(self):
        token = create_access_token(subject="user-123", expires_delta=timedelta(seconds=-10))

        assert decode_token(token) is None

    def test_token_signed_with_other_secret(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": "user-123"},
            "outro-segredo",
            algorithm=settings.JWT_ALGORITHM,
        )

        assert decode_token(token) is None

    def test_garbage_token(self):
        assert decode_token("isso.nao.eh.jwt") is None
