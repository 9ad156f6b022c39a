import inspect
import logging
from functools import wraps
from typing import Callable, Optional, ParamSpec, Tuple, Type, TypeVar

from .exceptions.base import AppError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def _log_failure(func: Callable, error: Exception, args: tuple, kwargs: dict, expected: Tuple[Type[Exception], ...]):
    log_data = {
        "function_name": func.__name__,
        "function_module": func.__module__,
        "arguments": str(args),
        "keyword_arguments": str(kwargs),
        "exception_type": type(error).__name__,
    }

    if isinstance(error, AppError):
        log_data.update(
            {
                "error_code": error.error_code,
                "details": error.details,
            }
        )

    if isinstance(error, expected):
        logger.warning(str(error), extra=log_data)
    else:
        logger.error("Unexpected failure in %s: %s", func.__name__, error, exc_info=error, extra=log_data)


def handle_service_errors(
    default_return_value: Optional[T] = None,
    expected: Tuple[Type[Exception], ...] = (AppError,),
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Error handler for operations that must never raise to their caller

    Works on both plain and coroutine functions.

    Args:
        default_return_value: Value to return on error
        expected: Exception types logged as warnings. Anything else is logged
            as an error together with its traceback.

    Usage:
        @handle_service_errors(default_return_value=())
        def load_cards():
            ...
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    _log_failure(func, e, args, kwargs, expected)
                    return default_return_value

            return async_wrapper

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _log_failure(func, e, args, kwargs, expected)
                return default_return_value

        return wrapper

    return decorator
