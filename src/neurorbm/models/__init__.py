"""
Paquete de modelos de dominio (independientes de frameworks).
Exporta la capa RBM, su configuración y las primitivas de activación.
"""

from .unit_types import UnitType, is_relu
from .config import RBMConfig
from .errors import (
    RBMError,
    RBMConfigError,
    ShapeMismatchError,
    NumericFaultError,
    UnsupportedUnitError,
)
from .activation import activate_hidden, activate_visible
from .gradient_bank import GradientBank, GradientContext
from .rbm_manual import RestrictedBoltzmannMachine

# utilidades (opcionales, pero útiles para tests/depuración)
from .utils_boltzmann import sigmoid, bernoulli_sample, check_finite

__all__ = [
    "UnitType",
    "is_relu",
    "RBMConfig",
    "RBMError",
    "RBMConfigError",
    "ShapeMismatchError",
    "NumericFaultError",
    "UnsupportedUnitError",
    "activate_hidden",
    "activate_visible",
    "GradientBank",
    "GradientContext",
    "RestrictedBoltzmannMachine",
    "sigmoid",
    "bernoulli_sample",
    "check_finite",
]
