"""PostgreSQL async connection pool and driver error translation."""

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager

from psycopg import errors
from psycopg_pool import AsyncConnectionPool

from adminrbac.domain.exceptions import Conflict, DuplicateName


def create_pool(conninfo: str, min_size: int = 2, max_size: int = 10) -> AsyncConnectionPool:
    """Create async connection pool.

    Pool is created with open=False. Caller must call await pool.open()
    before use (e.g. via PoolLifespanMiddleware in ASGI lifespan).
    """
    return AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        open=False,
    )


@asynccontextmanager
async def get_connection(pool: AsyncConnectionPool) -> AsyncIterator:
    """Get connection from pool (context manager)."""
    async with pool.connection() as conn:
        yield conn


@contextmanager
def translate_db_errors(entity: str) -> Iterator[None]:
    """Map driver errors to domain errors."""
    try:
        yield
    except errors.UniqueViolation as e:
        raise DuplicateName(f"{entity} violates a uniqueness constraint: {e.diag.constraint_name}") from e
    except (errors.SerializationFailure, errors.DeadlockDetected, errors.LockNotAvailable) as e:
        raise Conflict(f"Concurrent update on {entity}") from e
