# tapegrad/core/config.py
"""
Tape configuration.

A Tape carries one immutable TapeConfig; helpers that need a tunable
(bump size for finite differences, gradient policy of the reverse sweep)
read it from the tape they operate on instead of from module globals.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TapeConfig:
    """
    Attributes
    ----------
    accumulate_grad : bool
        Reverse sweep policy for a node that is an operand of more than one
        downstream node. True adds the contributions (correct on diamond
        graphs); False overwrites, so the last push (lowest consumer id) wins.
    bump_size : float
        Default step for the central finite-difference helpers.
    constant_format : str
        Format spec used to label float constants promoted to leaves.
    """
    accumulate_grad: bool = True
    bump_size: float = 1e-5
    constant_format: str = "{:g}"

    def __post_init__(self):
        if not self.bump_size > 0.0:
            raise ValueError(f"bump_size must be positive, got {self.bump_size!r}")


DEFAULT_CONFIG = TapeConfig()
