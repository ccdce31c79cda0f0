from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Optional

from hydrocalc.core.numeric.decimal_context import DEFAULT_DECIMAL, DecimalConfig, Number, to_decimal

_TRAILING_ZEROS = re.compile(r"\.?0+$")


def format_friction_factor(f: Number, *, decimal_cfg: Optional[DecimalConfig] = None) -> str:
    """
    15 decimales fijos y sin ceros finales: 0.018000000000000 -> "0.018".
    No finito -> "".
    """
    cfg = decimal_cfg or DEFAULT_DECIMAL
    d = to_decimal(f)
    if not d.is_finite():
        return ""
    ctx = cfg.make_context()
    fixed = format(d.quantize(Decimal("1e-15"), context=ctx), "f")
    return _TRAILING_ZEROS.sub("", fixed) if "." in fixed else fixed


def format_significant(value: float, digits: int = 8, *, decimal_cfg: Optional[DecimalConfig] = None) -> str:
    """
    value redondeado a `digits` cifras significativas (resultados de diseño).
    Notación fija salvo exponentes extremos (>= 21 o <= -7). No finito -> "0".
    """
    if value is None or not math.isfinite(value):
        return "0"
    if digits <= 0:
        raise ValueError(f"digits must be > 0, got {digits}")

    cfg = decimal_cfg or DEFAULT_DECIMAL
    ctx = DecimalConfig(precision=digits, rounding=cfg.rounding).make_context()
    d = ctx.create_decimal(repr(float(value)))
    if d.is_zero():
        return "0"

    d = d.normalize(ctx)
    exp = d.adjusted()
    if exp >= 21 or exp <= -7:
        mantissa, _, power = f"{d:E}".partition("E")
        sign = "+" if int(power) >= 0 else "-"
        return f"{mantissa}e{sign}{abs(int(power))}"
    return format(d, "f")
