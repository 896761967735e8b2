from __future__ import annotations

from typing import Any, Callable


class NCall:
    """Native client call with exception mapping.

    ``error_map`` maps a native exception type to ``None`` (swallow and
    return ``None``), an exception class (raised with the native message)
    or an exception instance. The native exception is always chained.
    """

    function: Callable
    args: dict[str, Any] | list[Any] | None
    nargs: dict[str, Any] | None
    error_map: dict[Any, Any] | None

    def __init__(
        self,
        function: Callable,
        args: dict[str, Any] | list | None = None,
        nargs: dict[str, Any] | None = None,
        error_map: dict[Any, Any] | None = None,
    ):
        self.function = function
        self.args = args
        self.nargs = nargs
        self.error_map = error_map

    def __repr__(self) -> str:
        return str(self.function)

    def invoke(self) -> Any:
        args = self.args if self.args is not None else dict()
        nargs = self.nargs if self.nargs is not None else dict()
        try:
            if isinstance(args, dict):
                return self.function(**(args | nargs))
            return self.function(*args, **nargs)
        except Exception as e:
            if self.error_map is None:
                raise
            for key, mapped in self.error_map.items():
                if key is not None and isinstance(e, key):
                    if mapped is None:
                        return None
                    if isinstance(mapped, type):
                        raise mapped(f"{self._name()}: {e}") from e
                    raise mapped from e
            raise

    def _name(self) -> str:
        return getattr(self.function, "__name__", repr(self.function))
