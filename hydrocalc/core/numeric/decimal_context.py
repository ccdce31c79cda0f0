# hydrocalc/core/numeric/decimal_context.py
from __future__ import annotations

import decimal
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Union

Number = Union[Decimal, float, int, str]

ROUNDING_MODES = (
    decimal.ROUND_HALF_EVEN,
    decimal.ROUND_HALF_UP,
    decimal.ROUND_HALF_DOWN,
    decimal.ROUND_UP,
    decimal.ROUND_DOWN,
    decimal.ROUND_CEILING,
    decimal.ROUND_FLOOR,
    decimal.ROUND_05UP,
)


@dataclass(frozen=True)
class DecimalConfig:
    """
    Precisión y redondeo de la aritmética decimal exacta (ExactDecimal).

    Se traduce a un ``decimal.Context`` nuevo en cada llamada; nunca se toca
    el contexto global del proceso.
    """
    precision: int = 50
    rounding: str = decimal.ROUND_HALF_EVEN

    @staticmethod
    def from_dict(cfg: Dict[str, Any]) -> "DecimalConfig":
        prec = cfg.get("decimal_precision", cfg.get("precision", 50))
        rounding = str(cfg.get("decimal_rounding", cfg.get("rounding", decimal.ROUND_HALF_EVEN))).strip().upper()
        if not rounding.startswith("ROUND_"):
            rounding = "ROUND_" + rounding

        out = DecimalConfig(precision=int(prec), rounding=rounding)
        out.validate()
        return out

    def validate(self) -> None:
        if self.precision <= 0:
            raise ValueError(f"DecimalConfig.precision debe ser > 0 (recibido {self.precision})")
        if self.rounding not in ROUNDING_MODES:
            raise ValueError(f"DecimalConfig.rounding inválido: {self.rounding!r}")

    def make_context(self) -> decimal.Context:
        # traps por defecto: InvalidOperation, DivisionByZero, Overflow
        return decimal.Context(
            prec=self.precision,
            rounding=self.rounding,
            traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
        )


DEFAULT_DECIMAL = DecimalConfig()


def to_decimal(x: Number) -> Decimal:
    """
    Floats go through their shortest repr, so 0.1 becomes Decimal('0.1')
    instead of the exact binary expansion. Non-numeric strings raise ValueError.
    """
    if isinstance(x, Decimal):
        return x
    if isinstance(x, bool):
        raise TypeError("bool is not a numeric input")
    if isinstance(x, int):
        return Decimal(x)
    if isinstance(x, float):
        return Decimal(repr(x))
    try:
        return Decimal(str(x).strip().replace(",", "."))
    except decimal.InvalidOperation as e:
        raise ValueError(f"{x!r} is not a number") from e
