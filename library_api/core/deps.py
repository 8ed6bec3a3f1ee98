"""
Dependencies FastAPI: sessão, autenticação, autorização e parâmetros de
listagem.
"""

from dataclasses import dataclass, field
from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.config import get_settings
from library_api.core.filters import FilterParam, parse_filter_string
from library_api.core.security import decode_token
from library_api.db.session import get_db
from library_api.models.enums import UserRole
from library_api.models.user import User
from library_api.repositories.user import UserRepository

settings = get_settings()

# Scheme Bearer para extrair token do header Authorization
security = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Dependency que retorna o funcionário autenticado.

    Raises:
        HTTPException 401: Token inválido, expirado ou usuário não encontrado
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Token inválido ou expirado",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("sub") is None:
        raise credentials_exception

    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        raise credentials_exception

    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        raise credentials_exception

    return user


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """
    Dependency que exige que o usuário seja ADMIN.

    Raises:
        HTTPException 403: Usuário não é admin
    """
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acesso restrito a administradores",
        )
    return current_user


@dataclass
class ListParams:
    """Paginação, busca e filtro comuns a todas as listagens."""
    page: int = 1
    per_page: int = 10
    search: Optional[str] = None
    filters: list[FilterParam] = field(default_factory=list)


async def get_list_params(
    page: int = Query(1, ge=1, description="Número da página"),
    per_page: int = Query(
        settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Itens por página",
    ),
    search: Optional[str] = Query(None, description="Busca textual"),
    filter: Optional[str] = Query(
        None,
        description="campo:valor:operador|campo:valor:operador",
        examples=["status:Borrowed:equals"],
    ),
) -> ListParams:
    """Lê os parâmetros de listagem e faz o parse do filtro."""
    return ListParams(
        page=page,
        per_page=per_page,
        search=search,
        filters=parse_filter_string(filter),
    )


# Type aliases para uso nos endpoints
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_admin)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
ListQuery = Annotated[ListParams, Depends(get_list_params)]
