"""
hhsim - single Hodgkin-Huxley neuron simulated with forward Euler.
"""

from .simple_hh import (
    Simulator,
    ConfigurationError,
    NumericDegeneracyError,
    SERIES,
    alpha_m,
    alpha_h,
    alpha_n,
    beta_m,
    beta_h,
    beta_n,
)
from .config import SimulationConfig

__version__ = "0.1.0"

__all__ = [
    'Simulator',
    'ConfigurationError',
    'NumericDegeneracyError',
    'SERIES',
    'SimulationConfig',
    'alpha_m',
    'alpha_h',
    'alpha_n',
    'beta_m',
    'beta_h',
    'beta_n',
]
