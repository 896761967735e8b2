from ._component import Component
from ._context import Context
from ._decorators import operation
from ._loader import Loader
from ._log_helper import configure_logging, get_logger
from ._ncall import NCall
from ._operation import Operation
from ._provider import Provider
from ._response import Response
from ._type_converter import TypeConverter
from ._yaml_loader import YamlLoader
from .data_model import DataModel
from .time import Time

__all__ = [
    "Component",
    "Context",
    "DataModel",
    "Loader",
    "NCall",
    "Operation",
    "Provider",
    "Response",
    "Time",
    "TypeConverter",
    "YamlLoader",
    "configure_logging",
    "get_logger",
    "operation",
]
