# src/neurorbm/models/config.py
"""
Configuración de una capa RBM.

Las dimensiones y los tipos de unidad se fijan al construir la capa y se
validan aquí, de modo que una combinación no soportada falla antes de tocar
cualquier buffer.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import RBMConfigError
from .unit_types import HIDDEN_UNITS, VISIBLE_UNITS, UnitType, is_relu


class RBMConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    n_visible: int = Field(ge=1, description="Número de unidades visibles.")
    n_hidden: int = Field(ge=1, description="Número de unidades ocultas.")
    visible_unit: UnitType = Field(
        default=UnitType.BINARY,
        description="Tipo de unidad visible (binary|gaussian|relu).",
    )
    hidden_unit: UnitType = Field(
        default=UnitType.BINARY,
        description="Tipo de unidad oculta (todos salvo gaussian).",
    )
    dbn: bool = Field(
        default=False,
        description="Si True, la capa reserva el banco de gradientes para fine-tuning.",
    )
    seed: Optional[int] = Field(
        default=None,
        description="Semilla del generador propio de la capa (None = entropía del SO).",
    )

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise RBMConfigError(f"Configuración RBM inválida: {exc}") from exc

    @model_validator(mode="after")
    def _check_units(self) -> "RBMConfig":
        if self.visible_unit not in VISIBLE_UNITS:
            raise ValueError(
                f"unidades visibles '{self.visible_unit.value}' no soportadas "
                "(softmax y exp solo pueden ser ocultas)"
            )
        if self.hidden_unit not in HIDDEN_UNITS:
            raise ValueError(
                f"unidades ocultas '{self.hidden_unit.value}' no soportadas"
            )
        return self

    def default_learning_rate(self) -> float:
        """
        Learning rate inicial según la combinación de unidades:
        Gaussian+ReLU necesitan tasas mucho menores que las binarias.
        """
        gaussian = self.visible_unit == UnitType.GAUSSIAN
        relu = is_relu(self.hidden_unit)
        if gaussian and relu:
            return 1e-5
        if gaussian or relu:
            return 1e-3
        return 1e-1
