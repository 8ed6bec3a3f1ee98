"""
Testes da configuração dos relacionamentos dos models.
"""

import pytest
from sqlalchemy import inspect

from library_api.db.session import Base
from library_api.models import Book, BookStock, Charge, Customer, User


def test_no_relationship_uses_noload():
    noload = [
        f"{mapper.class_.__name__}.{rel.key}"
        for mapper in Base.registry.mappers
        for rel in mapper.relationships
        if rel.lazy == "noload"
    ]

    assert noload == []


@pytest.mark.parametrize(
    "model, attr",
    [
        (Book, "stocks"),
        (BookStock, "transactions"),
        (Customer, "transactions"),
        (User, "charges"),
        (Charge, "transaction"),
    ],
)
def test_unloaded_relationships_raise(model, attr):
    """Relacionamentos sem carga implícita: só com selectinload explícito."""
    assert inspect(model).relationships[attr].lazy == "raise"
