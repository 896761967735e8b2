from __future__ import annotations

from typing import Any

from ._context import Context
from ._operation import Operation
from ._provider import Provider
from .exceptions import NotSupportedError


class Component:
    __provider__: Provider

    def __init__(
        self,
        **kwargs,
    ):
        if "__provider__" in kwargs:
            self.__bind__(kwargs.pop("__provider__"))

    def __bind__(
        self,
        provider: Provider | dict | str | None,
    ) -> None:
        if provider is None:
            return
        if isinstance(provider, Provider):
            provider.__component__ = self
            self.__provider__ = provider
        else:
            if isinstance(provider, dict):
                provider = dict(provider)
                type = provider.pop("type")
                parameters = dict(provider.pop("parameters", dict()))
            else:
                type = provider
                parameters = dict()
            from ._loader import Loader

            module_name = self.__class__.__module__.rsplit(".", 1)[0]
            provider_path = f"{module_name}.providers.{type}"
            provider_instance = Loader.load_provider_instance(
                path=provider_path,
                parameters=parameters,
            )
            self.__bind__(provider=provider_instance)

    def __run__(
        self,
        operation: dict | str | Operation | None = None,
        context: Context | None = None,
        **kwargs,
    ) -> Any:
        operation = self._convert_operation(operation)
        if hasattr(self, "__provider__"):
            return self.__provider__.__run__(
                operation=operation,
                context=context,
                **kwargs,
            )
        raise NotSupportedError(
            operation.to_json() if operation is not None else None
        )

    def __supports__(self, feature: str) -> bool:
        return self.__provider__.__supports__(feature)

    @property
    def provider(self) -> Provider:
        return self.__provider__

    def _convert_operation(
        self,
        operation: dict | str | Operation | None,
    ) -> Operation | None:
        if isinstance(operation, dict):
            return Operation.from_dict(operation)
        elif isinstance(operation, str):
            return Operation(name=operation)
        return operation
