# hydrocalc/core/build/config.py
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Literal

from hydrocalc.core.numeric.decimal_context import DecimalConfig


# ============================================================
# FrictionConfig (factor de fricción)
# ============================================================

EquationName = Literal[
    "colebrook-white",
    "haaland",
    "swamee-jain",
    "churchill",
    "serghides",
    "blasius",
    "von-karman",
]

EQUATIONS = (
    "colebrook-white",
    "haaland",
    "swamee-jain",
    "churchill",
    "serghides",
    "blasius",
    "von-karman",
)

# alias tolerados en from_dict / normalize_equation
_EQUATION_ALIASES = {
    "colebrook": "colebrook-white",
    "colebrook_white": "colebrook-white",
    "swamee_jain": "swamee-jain",
    "swamee": "swamee-jain",
    "von_karman": "von-karman",
    "vonkarman": "von-karman",
    "karman": "von-karman",
}


def normalize_equation(name: str) -> str:
    key = str(name).strip().lower().replace(" ", "-")
    key = _EQUATION_ALIASES.get(key, key)
    if key not in EQUATIONS:
        raise ValueError(f"Ecuación de fricción desconocida: {name!r}. Opciones: {list(EQUATIONS)}")
    return key


@dataclass(frozen=True)
class FrictionConfig:
    """
    Configuración del cálculo del factor de fricción de Darcy.
    """
    equation: EquationName = "colebrook-white"
    max_iter: int = 200          # Colebrook-White
    tol: str = "1e-20"           # |f_next - f| <= tol
    seed_f: str = "0.02"         # semilla si Haaland falla
    decimal: DecimalConfig = field(default_factory=DecimalConfig)

    @staticmethod
    def from_dict(cfg: Dict[str, Any]) -> "FrictionConfig":
        equation = normalize_equation(
            cfg.get("equation", cfg.get("friction_equation", cfg.get("ecuacion", "colebrook-white")))
        )
        max_iter = cfg.get("cw_max_iter", cfg.get("friction_max_iter", 200))
        tol = cfg.get("cw_tol", cfg.get("friction_tol", "1e-20"))
        seed = cfg.get("cw_seed_f", cfg.get("seed_f", "0.02"))

        out = FrictionConfig(
            equation=equation,
            max_iter=int(max_iter),
            tol=str(tol).strip(),
            seed_f=str(seed).strip(),
            decimal=DecimalConfig.from_dict(cfg),
        )
        out.validate()
        return out

    def validate(self) -> None:
        normalize_equation(self.equation)
        if self.max_iter <= 0:
            raise ValueError(f"FrictionConfig.max_iter debe ser > 0 (recibido {self.max_iter})")
        for name in ("tol", "seed_f"):
            raw = getattr(self, name)
            try:
                val = Decimal(raw)
            except InvalidOperation as e:
                raise ValueError(f"FrictionConfig.{name} no es numérico: {raw!r}") from e
            if not val.is_finite() or val <= 0:
                raise ValueError(f"FrictionConfig.{name} debe ser finito y > 0 (recibido {raw!r})")
        self.decimal.validate()


# ============================================================
# RelaxationConfig (control adaptativo de lambda)
# ============================================================

@dataclass(frozen=True)
class RelaxationConfig:
    """
    Factor de relajación adaptativo del solver de diseño.
    """
    lambda_init: float = 1.0
    lambda_min: float = 0.3
    lambda_max: float = 1.0
    shrink: float = 0.5
    grow: float = 1.1
    patience: int = 2            # mejoras consecutivas antes de subir lambda

    @staticmethod
    def from_dict(cfg: Dict[str, Any]) -> "RelaxationConfig":
        out = RelaxationConfig(
            lambda_init=float(cfg.get("lambda_init", cfg.get("lambda0", 1.0))),
            lambda_min=float(cfg.get("lambda_min", 0.3)),
            lambda_max=float(cfg.get("lambda_max", 1.0)),
            shrink=float(cfg.get("lambda_shrink", cfg.get("shrink", 0.5))),
            grow=float(cfg.get("lambda_grow", cfg.get("grow", 1.1))),
            patience=int(cfg.get("lambda_patience", cfg.get("patience", 2))),
        )
        out.validate()
        return out

    def validate(self) -> None:
        if not (0.0 < self.lambda_min <= self.lambda_max):
            raise ValueError(
                f"RelaxationConfig: se requiere 0 < lambda_min <= lambda_max "
                f"(recibido {self.lambda_min}, {self.lambda_max})"
            )
        if not (self.lambda_min <= self.lambda_init <= self.lambda_max):
            raise ValueError(f"RelaxationConfig.lambda_init fuera de [min, max]: {self.lambda_init}")
        if not (0.0 < self.shrink < 1.0):
            raise ValueError(f"RelaxationConfig.shrink debe estar en (0, 1) (recibido {self.shrink})")
        if self.grow <= 1.0:
            raise ValueError(f"RelaxationConfig.grow debe ser > 1 (recibido {self.grow})")
        if self.patience <= 0:
            raise ValueError(f"RelaxationConfig.patience debe ser > 0 (recibido {self.patience})")


# ============================================================
# PipeDesignConfig
# ============================================================

@dataclass(frozen=True)
class PipeDesignConfig:
    """
    Tolerancias e iteraciones del solver de diseño de conducto.
    """
    tol_hf: float = 1e-6
    tol_rel_q: float = 1e-4
    max_iter: int = 300
    g_m_s2: float = 9.81
    relaxation: RelaxationConfig = field(default_factory=RelaxationConfig)

    @staticmethod
    def from_dict(cfg: Dict[str, Any]) -> "PipeDesignConfig":
        g = cfg.get("g_m_s2", cfg.get("g", cfg.get("gravity", 9.81)))
        out = PipeDesignConfig(
            tol_hf=float(cfg.get("tol_hf", 1e-6)),
            tol_rel_q=float(cfg.get("tol_rel_q", cfg.get("tol_q", 1e-4))),
            max_iter=int(cfg.get("max_iter", cfg.get("design_max_iter", 300))),
            g_m_s2=float(g),
            relaxation=RelaxationConfig.from_dict(cfg),
        )
        out.validate()
        return out

    def validate(self) -> None:
        if self.tol_hf <= 0 or self.tol_rel_q <= 0:
            raise ValueError(
                f"PipeDesignConfig: tolerancias deben ser > 0 (tol_hf={self.tol_hf}, tol_rel_q={self.tol_rel_q})"
            )
        if self.max_iter <= 0:
            raise ValueError(f"PipeDesignConfig.max_iter debe ser > 0 (recibido {self.max_iter})")
        if not (0.0 < self.g_m_s2 < 20.0):
            raise ValueError(f"PipeDesignConfig.g_m_s2 fuera de rango: {self.g_m_s2}")
        self.relaxation.validate()


# ============================================================
# CalculatorConfig (agregador)
# ============================================================

@dataclass(frozen=True)
class CalculatorConfig:
    friction: FrictionConfig
    design: PipeDesignConfig
    version: int = 1

    @staticmethod
    def from_dict(cfg: Dict[str, Any]) -> "CalculatorConfig":
        out = CalculatorConfig(
            friction=FrictionConfig.from_dict(cfg),
            design=PipeDesignConfig.from_dict(cfg),
            version=int(cfg.get("config_version", cfg.get("version", 1))),
        )
        out.validate()
        return out

    def validate(self) -> None:
        if self.version <= 0:
            raise ValueError(f"CalculatorConfig.version debe ser > 0 (recibido {self.version})")

        self.friction.validate()
        self.design.validate()
