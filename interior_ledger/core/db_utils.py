"""
Database utilities for connection management and error handling
"""
import asyncio
import functools
import logging
from typing import Callable, Any, Optional, TypeVar, cast, Awaitable

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

T = TypeVar('T')

CONNECTION_ERROR_NAMES = (
    "ConnectionError",
    "OperationalError",
    "ConnectionDoesNotExistError",
    "ConnectionRefusedError",
)

def is_connection_error(exc: BaseException) -> bool:
    error_name = type(exc).__name__
    return any(err in error_name for err in CONNECTION_ERROR_NAMES)

def _find_session(args: tuple, kwargs: dict) -> Optional[AsyncSession]:
    for value in (*args, *kwargs.values()):
        if isinstance(value, AsyncSession):
            return value
    return None

def with_db_retry(
    max_retries: int = 3,
    retry_delay: float = 0.5
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator that retries read-only store queries on connection errors.

    Only apply it to idempotent reads. Ledger writes fail fast and are never
    retried here.
    
    Args:
        max_retries: Maximum number of retries before giving up
        retry_delay: Base delay between retries in seconds (doubled each attempt)
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            retries = 0
            last_error = None
            
            while retries <= max_retries:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not is_connection_error(e):
                        raise
                    retries += 1
                    last_error = e
                    session = _find_session(args, kwargs)
                    if session is not None:
                        # A failed connection leaves the session unusable until rolled back
                        await session.rollback()
                    if retries <= max_retries:
                        delay = retry_delay * (2 ** (retries - 1))  # Exponential backoff
                        logger.warning(
                            f"Database connection error in {func.__name__}: {str(e)}. "
                            f"Retrying in {delay:.2f}s... (Attempt {retries}/{max_retries})"
                        )
                        await asyncio.sleep(delay)
            
            logger.error(f"Database operation {func.__name__} failed after {max_retries} retries: {last_error}")
            raise cast(Exception, last_error)
            
        return cast(Callable[..., Awaitable[T]], wrapper)
    
    return decorator
