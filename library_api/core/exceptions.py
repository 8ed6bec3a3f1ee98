"""
Exceções de domínio levantadas pelos services.

Os services não conhecem HTTP: cada falha de regra de negócio vira uma
exceção tipada com uma mensagem legível. A tradução para status code
acontece em `library_api.api.errors`.
"""


class LibraryError(Exception):
    """Base de todas as exceções de domínio."""

    def __init__(self, message: str, errors: dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    def __str__(self) -> str:
        return self.message


class NotFoundError(LibraryError):
    """Entidade não encontrada (livro, cópia, empréstimo, cliente, cobrança)."""


class PreconditionFailedError(LibraryError):
    """Regra de negócio impede a operação no estado atual."""


class ConflictError(LibraryError):
    """Outra requisição alterou o mesmo registro primeiro."""


class PersistenceError(LibraryError):
    """Falha do banco de dados ao gravar ou ler."""


class InvalidFilterError(LibraryError):
    """Parâmetro filter referencia campo inexistente ou valor inválido."""
