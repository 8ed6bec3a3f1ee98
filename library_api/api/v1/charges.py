"""
Endpoints de cobranças (multas por atraso).

Contratos:
    - GET /charges: Lista cobranças (search em funcionário e empréstimo)
    - GET /charges/{id}: Busca cobrança
    - GET /charges/transaction/{transaction_id}: Cobranças de um empréstimo
    - GET /charges/user/{user_id}: Cobranças registradas por um funcionário
    - POST /charges: Registra cobrança (total calculado)
    - PUT /charges/{id}: Atualiza dias/multa diária (total recalculado)
    - DELETE /charges/{id}: Remove cobrança (somente ADMIN)
"""

from uuid import UUID

from fastapi import APIRouter, status

from library_api.core.deps import AdminUser, CurrentUser, DbSession, ListQuery
from library_api.schemas.base import DataResponse, MessageResponse, PaginatedResponse
from library_api.schemas.charge import ChargeCreate, ChargeRead, ChargeUpdate
from library_api.services.charge import ChargeService

router = APIRouter(prefix="/charges", tags=["Charges"])


@router.get(
    "",
    response_model=PaginatedResponse[ChargeRead],
    summary="Listar cobranças",
)
async def list_charges(
    db: DbSession,
    current_user: CurrentUser,
    params: ListQuery,
) -> PaginatedResponse[ChargeRead]:
    charges, total = await ChargeService(db).list_charges(
        page=params.page,
        per_page=params.per_page,
        search=params.search,
        filters=params.filters,
    )
    return PaginatedResponse.create(
        items=[ChargeRead.model_validate(charge) for charge in charges],
        total=total,
        page=params.page,
        per_page=params.per_page,
    )


@router.get(
    "/transaction/{transaction_id}",
    response_model=DataResponse[list[ChargeRead]],
    summary="Cobranças de um empréstimo",
)
async def list_charges_by_transaction(
    transaction_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[list[ChargeRead]]:
    charges = await ChargeService(db).get_by_transaction_id(transaction_id)
    return DataResponse(
        message="Success",
        data=[ChargeRead.model_validate(charge) for charge in charges],
    )


@router.get(
    "/user/{user_id}",
    response_model=DataResponse[list[ChargeRead]],
    summary="Cobranças registradas por um funcionário",
)
async def list_charges_by_user(
    user_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[list[ChargeRead]]:
    charges = await ChargeService(db).get_by_user_id(user_id)
    return DataResponse(
        message="Success",
        data=[ChargeRead.model_validate(charge) for charge in charges],
    )


@router.get(
    "/{charge_id}",
    response_model=DataResponse[ChargeRead],
    summary="Buscar cobrança",
)
async def get_charge(
    charge_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[ChargeRead]:
    charge = await ChargeService(db).get(charge_id)
    return DataResponse(message="Success", data=ChargeRead.model_validate(charge))


@router.post(
    "",
    response_model=DataResponse[ChargeRead],
    status_code=status.HTTP_201_CREATED,
    summary="Registrar cobrança",
    description="total = days_late x daily_late_fee. Sem days_late, usa o atraso do empréstimo.",
)
async def create_charge(
    data: ChargeCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[ChargeRead]:
    charge = await ChargeService(db).create(current_user, data)
    return DataResponse(
        status=status.HTTP_201_CREATED,
        message="Cobrança registrada",
        data=ChargeRead.model_validate(charge),
    )


@router.put(
    "/{charge_id}",
    response_model=DataResponse[ChargeRead],
    summary="Atualizar cobrança",
)
async def update_charge(
    charge_id: UUID,
    data: ChargeUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[ChargeRead]:
    charge = await ChargeService(db).update(charge_id, data)
    return DataResponse(message="Cobrança atualizada", data=ChargeRead.model_validate(charge))


@router.delete(
    "/{charge_id}",
    response_model=MessageResponse,
    summary="Remover cobrança",
    description="**Requer ADMIN.**",
)
async def delete_charge(
    charge_id: UUID,
    db: DbSession,
    admin: AdminUser,
) -> MessageResponse:
    await ChargeService(db).delete(charge_id)
    return MessageResponse(message="Cobrança removida")
