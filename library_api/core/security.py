"""
Utilitários de segurança: hash de senha e JWT.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from library_api.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def hash_password(password: str) -> str:
    """Gera hash bcrypt da senha."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica se a senha corresponde ao hash.

    Hash corrompido ou em outro formato conta como senha incorreta.
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError as e:
        logger.debug(f"Hash de senha inválido: {e}")
        return False


def create_access_token(
    subject: str,
    extra_data: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Cria token JWT.

    Args:
        subject: ID do funcionário
        extra_data: Claims adicionais (ex.: role)
        expires_delta: Expiração customizada (default: JWT_EXPIRES_MINUTES)

    Returns:
        Token JWT assinado
    """
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(minutes=settings.JWT_EXPIRES_MINUTES))

    payload = {"sub": subject, "exp": expire, "iat": issued_at}
    if extra_data:
        payload.update(extra_data)

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decodifica e valida token JWT.

    Returns:
        Payload do token ou None se inválido/expirado
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError as e:
        logger.debug(f"Token rejeitado: {e}")
        return None
