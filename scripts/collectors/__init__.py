"""Catalog collectors for each vendor source."""

from collectors.base import BaseCollector
from collectors.dell import DellCollector
from collectors.hp import HpCollector
from collectors.lenovo import LenovoCollector
from collectors.microsoft import MicrosoftCollector
from collectors.windows import WindowsEsdCollector

__all__ = [
    "BaseCollector",
    "DellCollector",
    "HpCollector",
    "LenovoCollector",
    "MicrosoftCollector",
    "WindowsEsdCollector",
]
