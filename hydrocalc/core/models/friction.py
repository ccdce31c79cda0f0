from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal, Optional, Tuple

from hydrocalc.core.build.validate import ValidationIssue
from hydrocalc.core.numeric.decimal_context import Number

FrictionStopReason = Literal["closed_form", "converged", "max_iter", "log_domain"]


@dataclass(frozen=True, slots=True)
class FrictionFactorInput:
    """
    Entrada del cálculo de f.

    eps_over_D directo, o bien roughness + diameter en las mismas unidades.
    """
    equation: str
    Re: Optional[Number] = None
    eps_over_D: Optional[Number] = None
    roughness: Optional[Number] = None
    diameter: Optional[Number] = None


@dataclass(frozen=True, slots=True)
class FrictionFactorResult:
    """
    Factor de fricción de Darcy (ExactDecimal) + estado de la iteración.

    Para las fórmulas explícitas: converged=True, iterations=0, stop_reason="closed_form".
    Colebrook-White: "converged", "max_iter" (agotó iteraciones) o "log_domain"
    (argumento del log <= 0, se devuelve el último f).
    """
    f: Decimal
    equation: str
    converged: bool = True
    iterations: int = 0
    stop_reason: FrictionStopReason = "closed_form"
    warnings: Tuple[ValidationIssue, ...] = ()

    @property
    def value(self) -> float:
        return float(self.f)
