from functools import wraps
import inspect
from typing import Any, Callable, TypeVar, cast

from ._operation import Operation

T = TypeVar("T", bound=Callable[..., Any])


def operation(**config: Any) -> Callable[[T], T]:
    """Route a component method to its bound provider.

    When the provider does not implement the operation the component's
    own body runs instead.
    """

    def decorator(func: T) -> T:
        setattr(func, "__operation__", True)
        setattr(func, "__config__", config)

        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            self = args[0]
            context = kwargs.pop("__context__", None)
            provider = getattr(self, "__provider__", None)
            if provider is not None and provider.__supports__(func.__name__):
                sig = inspect.signature(func)
                bound_args = sig.bind(*args, **kwargs)
                bound_args.apply_defaults()
                locals = dict(bound_args.arguments)
                locals.pop("self", None)
                operation = Operation.normalize(
                    name=func.__name__,
                    args=locals,
                )
                return self.__run__(operation, context)
            return func(*args, **kwargs)

        return cast(T, wrapper)

    return decorator
