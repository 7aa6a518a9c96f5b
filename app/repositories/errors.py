import functools
from typing import Any, Callable, TypeVar

from pymongo.errors import PyMongoError

from app.core.exceptions import PersistenceError

F = TypeVar("F", bound=Callable[..., Any])


def translate_mongo_errors(func: F) -> F:
    """
    Decorator that re-raises driver failures as PersistenceError.

    Services only ever see the engine's own taxonomy, whichever store backs
    the repository.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except PyMongoError as exc:
            raise PersistenceError(f"{func.__qualname__} failed: {exc}") from exc

    return wrapper  # type: ignore
