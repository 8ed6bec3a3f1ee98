"""
Repository base com operações CRUD genéricas.

Repositories só fazem flush: o commit (ou rollback) é responsabilidade do
service, que agrupa todas as escritas de uma operação em uma única
transação do banco.
"""

from typing import Any, Generic, Iterable, Optional, Sequence, Type, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.filters import FilterParam
from library_api.core.query_builder import apply_query_options, paginate
from library_api.db.session import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Repository base com operações CRUD.

    Fornece métodos genéricos para:
    - get_by_id: Buscar por ID
    - find_all: Listar com paginação, busca e filtro
    - create: Criar registro
    - update: Atualizar registro
    - delete: Remover registro
    - count: Contar registros

    Subclasses definem `search_columns` (colunas da busca textual, podendo
    incluir tabelas do JOIN) e sobrescrevem `_list_query` quando a
    listagem precisa de JOIN.
    """

    search_columns: Sequence[Any] = ()

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """Busca registro por ID."""
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    def _list_query(self) -> Select:
        return select(self.model)

    def _ordering(self) -> tuple:
        return (self.model.created_at.desc(),)

    async def find_all(
        self,
        page: int = 1,
        per_page: int = 10,
        search: Optional[str] = None,
        filters: Iterable[FilterParam] = (),
    ) -> tuple[list[ModelType], int]:
        """
        Lista registros aplicando filtro (AND), busca (OR) e paginação.

        Returns:
            Tupla (registros da página, total com filtros)

        Raises:
            InvalidFilterError: Valor de filtro incompatível com a coluna
        """
        query = apply_query_options(
            self._list_query(),
            self.model,
            search_columns=self.search_columns,
            search=search,
            filters=filters,
        )

        # Total com filtros
        count_result = await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )
        total = count_result.scalar_one()

        offset, limit = paginate(page, per_page)
        result = await self.db.execute(
            query.order_by(*self._ordering()).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total

    async def create(self, **kwargs: Any) -> ModelType:
        """Cria novo registro (flush, sem commit)."""
        instance = self.model(**kwargs)
        self.db.add(instance)
        await self.db.flush()
        await self.db.refresh(instance)
        return instance

    async def update(
        self,
        instance: ModelType,
        **kwargs: Any,
    ) -> ModelType:
        """Atualiza registro existente; valores None são ignorados."""
        for key, value in kwargs.items():
            if value is not None:
                setattr(instance, key, value)
        await self.db.flush()
        await self.db.refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> None:
        """Remove registro."""
        await self.db.delete(instance)
        await self.db.flush()

    async def count(self) -> int:
        """Conta total de registros."""
        result = await self.db.execute(
            select(func.count()).select_from(self.model)
        )
        return result.scalar_one()
