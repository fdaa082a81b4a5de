"""
Core protocols for PyEconometrics.

Structural interfaces that backends satisfy. Protocol (structural typing)
rather than ABC, so a backend only needs the right shape.
"""

from typing import Protocol, TypeVar, runtime_checkable

from pyeconometrics.core.result import Result

D = TypeVar('D', contravariant=True)  # Design type
P = TypeVar('P', covariant=True)      # Parameter payload type


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.

    A backend takes a frozen design (RegressionDesign, EvaluationDesign,
    ...) and produces a Result envelope. Configuration is passed at
    construction time or through the design; backends hold no state
    between calls.
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{algorithm}'
        Examples: 'cpu_qr', 'sklearn_forest', 'cpu_resampling'
        """
        ...

    def solve(self, design: D) -> Result[P]:
        """
        Execute the computation.

        Raises:
            NumericalError: If numerical issues prevent a solution
        """
        ...
