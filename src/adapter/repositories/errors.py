from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.app.repositories.exceptions import DuplicateRecordError, StorageError


@asynccontextmanager
async def storage_errors(operation: str):
    """Translate SQLAlchemy failures into application-layer storage errors."""
    try:
        yield
    except IntegrityError as exc:
        raise DuplicateRecordError(f"{operation} violated a unique constraint") from exc
    except SQLAlchemyError as exc:
        raise StorageError(f"{operation} failed: {exc.__class__.__name__}") from exc
