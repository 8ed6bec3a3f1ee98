"""
Service de autenticação dos funcionários.
"""

import logging

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.config import get_settings
from library_api.core.exceptions import PreconditionFailedError
from library_api.core.security import create_access_token, hash_password, verify_password
from library_api.models.user import User
from library_api.repositories.user import UserRepository
from library_api.schemas.user import UserCreate, UserRead, TokenResponse, UserWithToken
from library_api.services.base import BaseService

settings = get_settings()
logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """Service para operações de autenticação."""

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.user_repo = UserRepository(db)

    async def register(self, data: UserCreate) -> User:
        """
        Cadastra novo funcionário.

        Args:
            data: Dados do novo funcionário (role incluso)

        Returns:
            Usuário criado

        Raises:
            PreconditionFailedError: Email já cadastrado
        """
        async with self.unit_of_work(conflict_message="Email já cadastrado"):
            if await self.user_repo.email_exists(data.email):
                raise PreconditionFailedError("Email já cadastrado")

            user = await self.user_repo.create_user(
                name=data.name,
                email=data.email,
                password_hash=hash_password(data.password),
                role=data.role,
            )
        logger.info(f"Funcionário {user.email} cadastrado com role {user.role.value}")
        return user

    async def login(self, email: str, password: str) -> UserWithToken:
        """
        Autentica funcionário e retorna token JWT.

        Raises:
            HTTPException 401: Credenciais inválidas
        """
        user = await self.user_repo.get_by_email(email)

        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"Tentativa de login inválida para {email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Email ou senha incorretos",
                headers={"WWW-Authenticate": "Bearer"},
            )

        access_token = create_access_token(
            subject=str(user.id),
            extra_data={"role": user.role.value},
        )

        return UserWithToken(
            user=UserRead.model_validate(user),
            token=TokenResponse(
                access_token=access_token,
                token_type="bearer",
                expires_in=settings.JWT_EXPIRES_MINUTES * 60,
            ),
        )
