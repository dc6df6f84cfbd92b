"""Vendor adapters mapping raw catalog records to canonical records."""

from adapters.base import BaseAdapter
from adapters.dell import DellAdapter
from adapters.hp import HpAdapter
from adapters.lenovo import LenovoAdapter
from adapters.microsoft import MicrosoftAdapter
from adapters.windows import WindowsEsdAdapter

__all__ = [
    "BaseAdapter",
    "DellAdapter",
    "HpAdapter",
    "LenovoAdapter",
    "MicrosoftAdapter",
    "WindowsEsdAdapter",
]
