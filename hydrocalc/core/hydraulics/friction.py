# hydrocalc/core/hydraulics/friction.py
"""
Factor de fricción de Darcy-Weisbach (ExactDecimal).

Siete correlaciones seleccionables. Toda la aritmética intermedia se hace en
``decimal`` con el contexto que entrega ``DecimalConfig`` (50 dígitos
significativos, ROUND_HALF_EVEN por defecto), activado con ``localcontext``
para no depender del contexto global del proceso.

Colebrook-White es la única iterativa (punto fijo sembrado con Haaland); el
resto son evaluaciones directas.
"""
from __future__ import annotations

import decimal
import logging
from decimal import Decimal, localcontext
from typing import Callable, Optional, Tuple

from hydrocalc.core.build.config import FrictionConfig, normalize_equation
from hydrocalc.core.build.validate import advisory_range_issues
from hydrocalc.core.models.friction import FrictionFactorInput, FrictionFactorResult, FrictionStopReason
from hydrocalc.core.numeric.decimal_context import DEFAULT_DECIMAL, DecimalConfig, Number, to_decimal

logger = logging.getLogger(__name__)

_ZERO = Decimal(0)
_ONE = Decimal(1)
_TWO = Decimal(2)
_K37 = Decimal("3.7")


class FrictionDomainError(ValueError):
    """Argumento fuera de dominio en una correlación (log de no positivo, división por cero...)."""


def _log10_positive(x: Decimal, what: str) -> Decimal:
    if x <= 0:
        raise FrictionDomainError(f"Invalid {what} argument: log10({x})")
    return x.log10()


def _guarded(fn: Callable[..., Decimal], *args: Decimal) -> Decimal:
    # trampas del contexto decimal -> FrictionDomainError
    try:
        return fn(*args)
    except decimal.DecimalException as e:
        raise FrictionDomainError(f"{fn.__name__.lstrip('_')}: {type(e).__name__}") from e


# ============================================================
# Correlaciones (Decimal en el contexto activo)
# ============================================================

def _haaland(Re: Decimal, eod: Decimal) -> Decimal:
    # 1/sqrt(f) = -1.8 * log10( ((ε/D)/3.7)^1.11 + 6.9/Re )
    term1 = (eod / _K37) ** Decimal("1.11")
    term2 = Decimal("6.9") / Re
    inv_sqrt_f = Decimal("-1.8") * _log10_positive(term1 + term2, "Haaland")
    if inv_sqrt_f.is_zero():
        raise FrictionDomainError("Division by zero in Haaland")
    return _ONE / (inv_sqrt_f ** 2)


def _colebrook_white(
    Re: Decimal,
    eod: Decimal,
    max_iter: int,
    tol: Decimal,
    seed_f: Decimal,
) -> Tuple[Decimal, int, FrictionStopReason]:
    # 1/sqrt(f) = -2 * log10( (ε/D)/3.7 + 2.51/(Re*sqrt(f)) )
    # semilla fija solo si Haaland sale de dominio (log <= 0, 1/sqrt(f) == 0, Re == 0);
    # ε/D < 0 (potencia fraccionaria de base negativa) es falla de dominio
    try:
        f = _haaland(Re, eod)
    except (FrictionDomainError, decimal.DivisionByZero):
        f = seed_f

    term1 = eod / _K37
    for it in range(1, max_iter + 1):
        term2 = Decimal("2.51") / (Re * f.sqrt())
        inner = term1 + term2
        if inner <= 0:
            # truncamiento silencioso: se devuelve el f actual
            return f, it - 1, "log_domain"
        inv_sqrt_f = Decimal(-2) * inner.log10()
        f_new = _ONE / (inv_sqrt_f ** 2)
        if abs(f_new - f) <= tol:
            return f_new, it, "converged"
        f = f_new

    return f, max_iter, "max_iter"


def _swamee_jain(Re: Decimal, eod: Decimal) -> Decimal:
    # f = 0.25 / [log10(ε/D/3.7 + 5.74/Re^0.9)]^2
    inner = eod / _K37 + Decimal("5.74") / (Re ** Decimal("0.9"))
    return Decimal("0.25") / (_log10_positive(inner, "Swamee-Jain") ** 2)


def _churchill(Re: Decimal, eod: Decimal) -> Decimal:
    inner_a = (Decimal(7) / Re) ** Decimal("0.9") + Decimal("0.27") * eod
    if inner_a <= 0:
        raise FrictionDomainError("Invalid Churchill argument (A)")
    A = (Decimal("-2.457") * inner_a.ln()) ** 16
    B = (Decimal(37530) / Re) ** 16

    term1 = (Decimal(8) / Re) ** 12
    term2 = _ONE / ((A + B) ** Decimal("1.5"))
    return Decimal(8) * (term1 + term2) ** (_ONE / Decimal(12))


def _serghides(Re: Decimal, eod: Decimal) -> Decimal:
    base = eod / _K37
    A = Decimal(-2) * _log10_positive(base + Decimal(12) / Re, "Serghides (A)")
    B = Decimal(-2) * _log10_positive(base + Decimal("2.51") * A / Re, "Serghides (B)")
    C = Decimal(-2) * _log10_positive(base + Decimal("2.51") * B / Re, "Serghides (C)")

    denom = C - _TWO * B + A
    if denom.is_zero():
        raise FrictionDomainError("Division by zero in Serghides")
    f_inv = A - (B - A) ** 2 / denom
    return f_inv ** -2


def _blasius(Re: Decimal) -> Decimal:
    # tubería lisa, 4000 <= Re <= 1e5
    return Decimal("0.316") / (Re ** Decimal("0.25"))


def _von_karman(eod: Decimal) -> Decimal:
    # régimen completamente rugoso, no depende de Re
    inv_sqrt_f = Decimal(-2) * _log10_positive(eod / _K37, "von Karman")
    return _ONE / (inv_sqrt_f ** 2)


# ============================================================
# API pública por correlación
# ============================================================

def _ctx(decimal_cfg: Optional[DecimalConfig]) -> decimal.Context:
    return (decimal_cfg or DEFAULT_DECIMAL).make_context()


def relative_roughness(roughness: Number, diameter: Number, *, decimal_cfg: Optional[DecimalConfig] = None) -> Decimal:
    """ε/D con ε y D en las mismas unidades. D <= 0 es falla de dominio."""
    with localcontext(_ctx(decimal_cfg)):
        eps = to_decimal(roughness)
        D = to_decimal(diameter)
        if D.is_nan() or D <= 0:
            raise FrictionDomainError(f"Diameter must be > 0 to compute eps/D, got {D}")
        try:
            return eps / D
        except decimal.DecimalException as e:
            raise FrictionDomainError(f"eps/D: {type(e).__name__}") from e


def haaland_f(Re: Number, eps_over_D: Number, *, decimal_cfg: Optional[DecimalConfig] = None) -> Decimal:
    with localcontext(_ctx(decimal_cfg)):
        return _guarded(_haaland, to_decimal(Re), to_decimal(eps_over_D))


def colebrook_white_f(
    Re: Number,
    eps_over_D: Number,
    *,
    config: Optional[FrictionConfig] = None,
) -> Tuple[Decimal, int, FrictionStopReason]:
    """
    Punto fijo de Colebrook-White.

    Devuelve (f, iteraciones, motivo de parada). El valor numérico es el mismo
    haya convergido o no; el motivo solo informa.
    """
    cfg = config or FrictionConfig()
    with localcontext(cfg.decimal.make_context()):
        return _guarded(
            _colebrook_white,
            to_decimal(Re),
            to_decimal(eps_over_D),
            cfg.max_iter,
            Decimal(cfg.tol),
            Decimal(cfg.seed_f),
        )


def swamee_jain_f(Re: Number, eps_over_D: Number, *, decimal_cfg: Optional[DecimalConfig] = None) -> Decimal:
    with localcontext(_ctx(decimal_cfg)):
        return _guarded(_swamee_jain, to_decimal(Re), to_decimal(eps_over_D))


def churchill_f(Re: Number, eps_over_D: Number, *, decimal_cfg: Optional[DecimalConfig] = None) -> Decimal:
    with localcontext(_ctx(decimal_cfg)):
        return _guarded(_churchill, to_decimal(Re), to_decimal(eps_over_D))


def serghides_f(Re: Number, eps_over_D: Number, *, decimal_cfg: Optional[DecimalConfig] = None) -> Decimal:
    with localcontext(_ctx(decimal_cfg)):
        return _guarded(_serghides, to_decimal(Re), to_decimal(eps_over_D))


def blasius_f(Re: Number, *, decimal_cfg: Optional[DecimalConfig] = None) -> Decimal:
    with localcontext(_ctx(decimal_cfg)):
        return _guarded(_blasius, to_decimal(Re))


def von_karman_f(eps_over_D: Number, *, decimal_cfg: Optional[DecimalConfig] = None) -> Decimal:
    with localcontext(_ctx(decimal_cfg)):
        return _guarded(_von_karman, to_decimal(eps_over_D))


# ============================================================
# Despacho
# ============================================================

def compute_friction_factor(
    equation: Optional[str] = None,
    Re: Optional[Number] = None,
    eps_over_D: Optional[Number] = None,
    *,
    roughness: Optional[Number] = None,
    diameter: Optional[Number] = None,
    config: Optional[FrictionConfig] = None,
) -> FrictionFactorResult:
    """
    Factor de fricción de Darcy con la correlación elegida.

    Inputs:
      - equation: colebrook-white | haaland | swamee-jain | churchill |
        serghides | blasius | von-karman (si None, config.equation)
      - Re: requerido salvo von-karman
      - eps_over_D: requerido salvo blasius; alternativamente roughness + diameter

    Raises:
      - FrictionDomainError si la correlación sale de su dominio
      - ValueError si falta un dato requerido

    Las advertencias de rango (Swamee-Jain, Blasius) no bloquean: van en
    result.warnings.
    """
    cfg = config or FrictionConfig()
    eq = normalize_equation(equation if equation is not None else cfg.equation)
    dcfg = cfg.decimal

    Re_d: Optional[Decimal] = None
    if eq != "von-karman":
        if Re is None:
            raise ValueError(f"{eq} requires Re")
        Re_d = to_decimal(Re)

    eod_d: Optional[Decimal] = None
    if eq != "blasius":
        if eps_over_D is not None:
            eod_d = to_decimal(eps_over_D)
        elif roughness is not None and diameter is not None:
            eod_d = relative_roughness(roughness, diameter, decimal_cfg=dcfg)
        else:
            raise ValueError(f"{eq} requires eps_over_D, or roughness and diameter")

    warnings = tuple(advisory_range_issues(
        eq,
        float(Re_d) if Re_d is not None else None,
        float(eod_d) if eod_d is not None else None,
    ))
    for w in warnings:
        logger.warning("%s | %s", w.message, w.hint)

    iterations = 0
    stop_reason: FrictionStopReason = "closed_form"

    if eq == "colebrook-white":
        f, iterations, stop_reason = colebrook_white_f(Re_d, eod_d, config=cfg)
        if stop_reason != "converged":
            logger.warning(
                "Colebrook-White stopped without converging (%s) after %d iterations, Re=%s eps/D=%s",
                stop_reason, iterations, Re_d, eod_d,
            )
        else:
            logger.debug("Colebrook-White converged in %d iterations", iterations)
    elif eq == "haaland":
        f = haaland_f(Re_d, eod_d, decimal_cfg=dcfg)
    elif eq == "swamee-jain":
        f = swamee_jain_f(Re_d, eod_d, decimal_cfg=dcfg)
    elif eq == "churchill":
        f = churchill_f(Re_d, eod_d, decimal_cfg=dcfg)
    elif eq == "serghides":
        f = serghides_f(Re_d, eod_d, decimal_cfg=dcfg)
    elif eq == "blasius":
        f = blasius_f(Re_d, decimal_cfg=dcfg)
    else:
        f = von_karman_f(eod_d, decimal_cfg=dcfg)

    if not f.is_finite():
        raise FrictionDomainError(f"{eq}: result is not finite ({f})")

    return FrictionFactorResult(
        f=f,
        equation=eq,
        converged=stop_reason in ("closed_form", "converged"),
        iterations=iterations,
        stop_reason=stop_reason,
        warnings=warnings,
    )


def compute(inp: FrictionFactorInput, config: Optional[FrictionConfig] = None) -> FrictionFactorResult:
    """Wrapper sobre compute_friction_factor con la entrada agrupada."""
    return compute_friction_factor(
        inp.equation,
        inp.Re,
        inp.eps_over_D,
        roughness=inp.roughness,
        diameter=inp.diameter,
        config=config,
    )
