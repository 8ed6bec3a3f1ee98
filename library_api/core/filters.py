"""
Parser do parâmetro `filter` usado por todos os endpoints de listagem.

Gramática:
    campo:valor:operador|campo:valor:operador

Exemplos:
    status:Borrowed:equals
    status:Available,Damaged:in|code:BK-:startswith

Política permissiva: fragmentos que não têm exatamente três partes são
ignorados e operadores desconhecidos viram `equals`. Nada aqui levanta
exceção; validar se o campo existe na entidade é um passo separado
(`validate_filter_fields`).
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from library_api.core.config import get_settings

logger = logging.getLogger(__name__)


class FilterOperator(str, enum.Enum):
    """Vocabulário fechado de operadores aceitos no filtro."""
    EQUALS = "equals"
    NOT_EQUALS = "notequals"
    GREATER_THAN = "greaterthan"
    GREATER_EQUAL = "greaterthanorequal"
    LESS_THAN = "lessthan"
    LESS_EQUAL = "lessthanorequal"
    CONTAINS = "contains"
    STARTS_WITH = "startswith"
    ENDS_WITH = "endswith"
    IN = "in"

    @classmethod
    def from_token(cls, token: str) -> "FilterOperator":
        """Converte o token textual; tokens desconhecidos viram EQUALS."""
        try:
            return cls(token.strip().lower())
        except ValueError:
            return cls.EQUALS


@dataclass(frozen=True)
class FilterParam:
    """Uma condição do filtro: campo, valor e operador."""
    field: str
    value: Any
    operator: FilterOperator = FilterOperator.EQUALS


def parse_filter_string(
    filter_str: Optional[str],
    separator: Optional[str] = None,
    field_separator: Optional[str] = None,
) -> list[FilterParam]:
    """
    Converte a string de filtro em uma lista de FilterParam.

    Args:
        filter_str: Texto recebido na query string (pode ser vazio)
        separator: Separador entre condições (default: FILTER_SEPARATOR)
        field_separator: Separador interno campo/valor/operador
            (default: FILTER_FIELD_SEPARATOR)

    Returns:
        Lista na mesma ordem da string original
    """
    if not filter_str:
        return []

    settings = get_settings()
    separator = separator or settings.FILTER_SEPARATOR
    field_separator = field_separator or settings.FILTER_FIELD_SEPARATOR
    if separator == field_separator:
        raise ValueError("Separadores do filtro devem ser diferentes")

    params: list[FilterParam] = []
    for fragment in filter_str.split(separator):
        parts = fragment.split(field_separator)
        if len(parts) != 3:
            logger.debug(f"Fragmento de filtro ignorado: {fragment!r}")
            continue

        field, value, operator = (part.strip() for part in parts)
        if not field:
            logger.debug(f"Fragmento de filtro sem campo ignorado: {fragment!r}")
            continue

        params.append(
            FilterParam(
                field=field,
                value=value,
                operator=FilterOperator.from_token(operator),
            )
        )

    return params


def validate_filter_fields(
    params: Iterable[FilterParam],
    allowed_fields: Iterable[str],
) -> dict[str, str]:
    """
    Verifica se cada campo do filtro existe na entidade.

    Pré-checagem opcional usada por alguns endpoints. Um dict vazio
    significa filtro válido.

    Returns:
        Dict {campo: motivo} para cada campo desconhecido
    """
    allowed = set(allowed_fields)
    errors: dict[str, str] = {}
    for param in params:
        if param.field not in allowed:
            errors[param.field] = "Campo não encontrado na entidade"
    return errors
