"""
Endpoints de autenticação dos funcionários.

Rate Limiting aplicado:
    - POST /login: 10 req/min (rate_limit_auth)
"""

from fastapi import APIRouter, Depends, status

from library_api.core.deps import AdminUser, CurrentUser, DbSession
from library_api.core.rate_limit import rate_limit_auth
from library_api.schemas.base import DataResponse
from library_api.schemas.user import UserCreate, UserLogin, UserRead, UserWithToken
from library_api.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=DataResponse[UserRead],
    status_code=status.HTTP_201_CREATED,
    summary="Cadastrar funcionário",
    description="Cria conta de funcionário. Email deve ser único. **Requer ADMIN.**",
)
async def register(
    data: UserCreate,
    db: DbSession,
    admin: AdminUser,
) -> DataResponse[UserRead]:
    """
    Cadastro de funcionário.

    - **name**: Nome completo (2-100 caracteres)
    - **email**: Email único (será usado como login)
    - **password**: Mínimo 8 caracteres, 1 maiúscula, 1 minúscula, 1 número
    - **role**: ADMIN ou USER (default USER)
    """
    user = await AuthService(db).register(data)
    return DataResponse(
        status=status.HTTP_201_CREATED,
        message="Funcionário cadastrado",
        data=UserRead.model_validate(user),
    )


@router.post(
    "/login",
    response_model=DataResponse[UserWithToken],
    summary="Autenticar funcionário",
    description="Retorna token JWT para autenticação nos endpoints protegidos.",
    dependencies=[Depends(rate_limit_auth)],
)
async def login(data: UserLogin, db: DbSession) -> DataResponse[UserWithToken]:
    """
    Login.

    Uso do token: `Authorization: Bearer <access_token>`
    """
    result = await AuthService(db).login(data.email, data.password)
    return DataResponse(message="Login realizado", data=result)


@router.get(
    "/me",
    response_model=DataResponse[UserRead],
    summary="Dados do funcionário autenticado",
)
async def get_me(current_user: CurrentUser) -> DataResponse[UserRead]:
    return DataResponse(message="Success", data=UserRead.model_validate(current_user))
