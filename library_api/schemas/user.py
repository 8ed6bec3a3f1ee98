"""
Schemas Pydantic para os funcionários (User) e autenticação.

Funcionários são cadastrados por um ADMIN; não existe auto-cadastro.
"""

from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from library_api.models.enums import UserRole
from library_api.schemas.base import BaseSchema, TimestampSchema

# bcrypt considera só os primeiros 72 bytes da senha
MAX_PASSWORD_BYTES = 72


class UserCreate(BaseSchema):
    """
    Schema para cadastro de funcionário.

    Validações:
        - name: até 100 caracteres
        - email: formato válido, até 100 caracteres
        - password: 6 a 72 bytes
        - role: USER por padrão
    """
    name: str = Field(..., min_length=1, max_length=100, examples=["Ana Lima"])
    email: EmailStr = Field(..., max_length=100, examples=["ana@biblioteca.com.br"])
    password: str = Field(..., min_length=6, examples=["segredo1"])
    role: UserRole = UserRole.USER

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Senha deve ter no máximo {MAX_PASSWORD_BYTES} bytes")
        return v


class UserRead(TimestampSchema):
    """Funcionário sem o hash da senha."""
    id: UUID
    name: str
    email: EmailStr
    role: UserRole


class UserLogin(BaseSchema):
    email: EmailStr
    password: str = Field(..., min_length=6)


class TokenResponse(BaseSchema):
    """Token JWT e validade em segundos."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class UserWithToken(BaseSchema):
    """Retorno do login."""
    user: UserRead
    token: TokenResponse
