from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

Regimen = Literal["Laminar", "Turbulento"]
DesignStopReason = Literal["converged_hf", "converged_q", "max_iter"]


@dataclass(frozen=True, slots=True)
class PipeDesignInput:
    """
    Conducto simple entre dos estanques (modelo central).

    Notas:
    - todas las magnitudes en un sistema de unidades consistente (SI)
    - la carga disponible es |z1 - z2|, el sentido no importa
    - g explícito tiene precedencia sobre la gravedad de la configuración
    """
    L: float        # longitud [m]
    D: float        # diámetro interno [m]
    ks: float       # rugosidad absoluta [m]
    nu: float       # viscosidad cinemática [m2/s]
    Km: float       # coeficiente de pérdidas menores agregado [-]
    z1: float       # cota estanque aguas arriba [m]
    z2: float       # cota estanque aguas abajo [m]
    g: Optional[float] = None   # None -> PipeDesignConfig.g_m_s2

    @property
    def head(self) -> float:
        return abs(self.z1 - self.z2)

    @property
    def area(self) -> float:
        return math.pi * (self.D * self.D) / 4.0


@dataclass(frozen=True, slots=True)
class IterationRow:
    iter: int           # desde 1
    lambda_: float      # factor de relajación usado en este paso
    hf: float           # hf antes de la actualización [m]
    V: float            # [m/s]
    Q: float            # [m3/s]
    Re: float           # |V|·D/nu
    regimen: Regimen

    def as_dict(self) -> dict:
        return {
            "iter": self.iter,
            "lambda": self.lambda_,
            "hf": self.hf,
            "V": self.V,
            "Q": self.Q,
            "Re": self.Re,
            "regimen": self.regimen,
        }


@dataclass(frozen=True, slots=True)
class PipeDesignResult:
    Q: float
    table: Tuple[IterationRow, ...]
    converged: bool
    stop_reason: DesignStopReason

    @property
    def iterations(self) -> int:
        return len(self.table)

    @property
    def last_row(self) -> Optional[IterationRow]:
        return self.table[-1] if self.table else None
