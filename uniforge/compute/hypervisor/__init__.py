from ._registry import HYPERVISORS, HypervisorEntry, select_hypervisor
from .component import Hypervisor

__all__ = [
    "HYPERVISORS",
    "Hypervisor",
    "HypervisorEntry",
    "select_hypervisor",
]
