"""
Script de seed: cria as tabelas e o usuário admin.

Uso:
    python -m library_api.db.seed

As tabelas são criadas a partir dos models (create_all); tabelas já
existentes não são alteradas.
"""

import asyncio
import logging

from library_api.core.config import get_settings
from library_api.core.logging import setup_logging
from library_api.core.security import hash_password
from library_api.db.session import Base, async_session_factory, engine
from library_api.models import User  # noqa: F401  registra todos os models
from library_api.models.enums import UserRole
from library_api.repositories.user import UserRepository

logger = logging.getLogger(__name__)
settings = get_settings()


async def create_tables() -> None:
    """Cria tabelas, tipos ENUM e índices que ainda não existem."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Tabelas verificadas: {', '.join(sorted(Base.metadata.tables))}")


async def create_admin() -> None:
    """
    Cria usuário admin se não existir.

    Lê email e senha do .env (ADMIN_EMAIL, ADMIN_PASSWORD).
    """
    async with async_session_factory() as db:
        repo = UserRepository(db)
        if await repo.email_exists(settings.ADMIN_EMAIL):
            logger.info(f"Admin já existe: {settings.ADMIN_EMAIL}")
            return

        admin = await repo.create_user(
            name="Administrador",
            email=settings.ADMIN_EMAIL,
            password_hash=hash_password(settings.ADMIN_PASSWORD),
            role=UserRole.ADMIN,
        )
        await db.commit()
        logger.info(f"Admin criado: {settings.ADMIN_EMAIL} (ID: {admin.id})")


async def main() -> None:
    """Executa todos os seeds."""
    setup_logging()
    logger.info("Executando seeds...")
    await create_tables()
    await create_admin()
    await engine.dispose()
    logger.info("Seeds concluídos!")


if __name__ == "__main__":
    asyncio.run(main())
