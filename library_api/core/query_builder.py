"""
Tradução de FilterParam e do texto de busca em cláusulas SQLAlchemy.

Os nomes de campo vindos do cliente nunca são interpolados no SQL: cada
campo é resolvido contra as colunas mapeadas da entidade (allow-list) e os
valores viajam sempre como bind parameters, convertidos para o tipo Python
da coluna. Como as colunas vêm do próprio model, toda cláusula já sai
qualificada com o nome da tabela e não fica ambígua em queries com JOIN.
"""

import logging
import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy import Select, String, and_, cast, or_
from sqlalchemy.sql import sqltypes
from sqlalchemy.sql.elements import ColumnElement

from library_api.core.exceptions import InvalidFilterError
from library_api.core.filters import FilterOperator, FilterParam

logger = logging.getLogger(__name__)

TRUE_VALUES = {"true", "1", "yes", "sim"}
FALSE_VALUES = {"false", "0", "no", "nao", "não"}


def filterable_columns(model) -> dict[str, Any]:
    """Allow-list de campos filtráveis: as colunas da tabela do model."""
    return {column.key: column for column in model.__table__.columns}


def _is_text_column(column) -> bool:
    # Enum herda de String no SQLAlchemy, mas no PostgreSQL precisa de CAST
    return isinstance(column.type, sqltypes.String) and not isinstance(
        column.type, sqltypes.Enum
    )


def _as_text(column):
    """Coluna pronta para comparação textual (ILIKE)."""
    return column if _is_text_column(column) else cast(column, String)


def _coerce_value(column, value: Any) -> Any:
    """
    Converte o valor textual do filtro para o tipo Python da coluna.

    Raises:
        ValueError: Valor incompatível com o tipo da coluna
    """
    column_type = column.type

    if isinstance(column_type, sqltypes.Enum) and column_type.enum_class is not None:
        enum_class = column_type.enum_class
        if isinstance(value, enum_class):
            return value
        try:
            return enum_class(value)
        except ValueError:
            return enum_class[str(value)]

    try:
        python_type = column_type.python_type
    except NotImplementedError:
        return value

    if isinstance(value, python_type):
        return value

    text = str(value).strip()
    if python_type is uuid.UUID:
        return uuid.UUID(text)
    if python_type is datetime:
        return datetime.fromisoformat(text)
    if python_type is date:
        return date.fromisoformat(text)
    if python_type is bool:
        lowered = text.lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ValueError(f"Valor booleano inválido: {text}")
    if python_type is Decimal:
        try:
            return Decimal(text)
        except InvalidOperation:
            raise ValueError(f"Valor decimal inválido: {text}")
    if python_type in (int, float):
        return python_type(text)
    return text


def _split_in_values(value: Any) -> list[Any]:
    """Aceita lista/tupla pronta ou string separada por vírgula."""
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [item.strip() for item in str(value).split(",") if item.strip()]


def _build_clause(column, param: FilterParam) -> ColumnElement[bool]:
    """Uma cláusula por operador."""
    operator = param.operator

    if operator == FilterOperator.CONTAINS:
        return _as_text(column).icontains(str(param.value), autoescape=True)
    if operator == FilterOperator.STARTS_WITH:
        return _as_text(column).istartswith(str(param.value), autoescape=True)
    if operator == FilterOperator.ENDS_WITH:
        return _as_text(column).iendswith(str(param.value), autoescape=True)
    if operator == FilterOperator.IN:
        values = [_coerce_value(column, item) for item in _split_in_values(param.value)]
        return column.in_(values)

    value = _coerce_value(column, param.value)
    if operator == FilterOperator.NOT_EQUALS:
        return column != value
    if operator == FilterOperator.GREATER_THAN:
        return column > value
    if operator == FilterOperator.GREATER_EQUAL:
        return column >= value
    if operator == FilterOperator.LESS_THAN:
        return column < value
    if operator == FilterOperator.LESS_EQUAL:
        return column <= value
    return column == value


def build_filter_clauses(
    model,
    params: Iterable[FilterParam],
) -> list[ColumnElement[bool]]:
    """
    Converte os FilterParam em cláusulas da tabela do model.

    Campos que não existem na entidade são descartados com warning.

    Raises:
        InvalidFilterError: Valor não pode ser convertido para o tipo da coluna
    """
    columns = filterable_columns(model)
    clauses: list[ColumnElement[bool]] = []

    for param in params:
        column = columns.get(param.field)
        if column is None:
            logger.warning(
                f"Campo de filtro desconhecido ignorado em {model.__tablename__}: {param.field}"
            )
            continue
        try:
            clauses.append(_build_clause(column, param))
        except (ValueError, KeyError, TypeError) as e:
            raise InvalidFilterError(
                "Valor de filtro inválido",
                errors={param.field: str(e) or "Valor inválido"},
            )

    return clauses


def build_search_clause(
    columns: Sequence[Any],
    search: Optional[str],
) -> Optional[ColumnElement[bool]]:
    """
    Busca textual: OR de substring case-insensitive sobre colunas fixas.

    Returns:
        Cláusula OR ou None se não houver texto de busca
    """
    if not search or not search.strip() or not columns:
        return None
    term = search.strip()
    return or_(*[_as_text(column).icontains(term, autoescape=True) for column in columns])


def apply_query_options(
    query: Select,
    model,
    search_columns: Sequence[Any] = (),
    search: Optional[str] = None,
    filters: Iterable[FilterParam] = (),
) -> Select:
    """Aplica filtros (AND) e busca (OR agrupado) sobre a query."""
    clauses = build_filter_clauses(model, filters)

    search_clause = build_search_clause(search_columns, search)
    if search_clause is not None:
        clauses.append(search_clause)

    if clauses:
        query = query.where(and_(*clauses))
    return query


def paginate(page: int, per_page: int) -> tuple[int, int]:
    """
    Calcula offset e limit.

    Returns:
        Tupla (offset, limit); page menor que 1 é tratado como 1
    """
    page = max(page, 1)
    per_page = max(per_page, 1)
    return (page - 1) * per_page, per_page


def total_pages(total: int, per_page: int) -> int:
    """Número de páginas para o total informado."""
    if per_page <= 0:
        return 0
    return (total + per_page - 1) // per_page
