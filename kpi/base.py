"""
kpi/base.py

Abstract base class for report formulas.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar


class BaseReportFormula(ABC):
    """
    Contract for report formulas.

    A formula receives a plain dictionary of parsed, typed inputs and
    returns a plain dictionary keyed by the names in ``output_keys``.
    Formulas do no I/O and keep no state between calls.
    """

    input_keys: ClassVar[tuple[str, ...]] = ()
    output_keys: ClassVar[tuple[str, ...]] = ()

    def __call__(self, inputs: dict[str, Any]) -> dict[str, Any]:
        missing = [key for key in self.input_keys if key not in inputs]
        if missing:
            raise KeyError(f"{type(self).__name__} is missing inputs: {', '.join(missing)}")
        return self.calculate(inputs)

    @abstractmethod
    def calculate(self, inputs: dict[str, Any]) -> dict[str, Any]:
        """
        Compute the formula's outputs from *inputs*.
        """
