from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

import numpy as np
import pandas as pd


# curvas fijas de ε/D del diagrama
FIXED_ED_VALUES: Tuple[float, ...] = (0.0, 1e-5, 1e-4, 1e-3, 1e-2, 5e-2)

RE_LOG_MIN = 3.0   # 1e3
RE_LOG_MAX = 8.0   # 1e8
F_MIN = 0.008
F_MAX = 0.1


@dataclass(frozen=True)
class MoodyChart:
    Re: np.ndarray                      # [n] log-espaciado
    f_by_eps: Dict[float, np.ndarray]   # eps/D -> f [n]
    meta: Dict[str, object]


def colebrook_vec(
    Re: np.ndarray,
    eps_over_D: float,
    *,
    max_iter: int = 60,
    tol: float = 1e-12,
) -> np.ndarray:
    """
    Colebrook-White en float, vectorizado sobre Re.

    Semilla Swamee-Jain (ε/D acotado a 1e-12 solo para la semilla, 0.02 si no
    es finita). Un punto deja de iterar si el argumento del log o 1/sqrt(f)
    no son positivos, o si f deja de ser finito; conserva el último f válido.
    Re <= 0 o no finito -> nan.
    """
    Re = np.asarray(Re, dtype=float)
    out = np.full(Re.shape, np.nan, dtype=float)
    ok = np.isfinite(Re) & (Re > 0)
    if not np.any(ok):
        return out

    Re_ok = Re[ok]
    e_guard = max(float(eps_over_D), 1e-12)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        f = 0.25 / np.log10(e_guard / 3.7 + 5.74 / Re_ok ** 0.9) ** 2
        f = np.where(np.isfinite(f) & (f > 0), f, 0.02)

        active = np.ones(Re_ok.shape, dtype=bool)
        for _ in range(max_iter):
            if not np.any(active):
                break
            inner = eps_over_D / 3.7 + 2.51 / (Re_ok * np.sqrt(f))
            inv_sqrt_f = -2.0 * np.log10(inner)
            f_new = 1.0 / (inv_sqrt_f * inv_sqrt_f)

            stop = (inner <= 0) | (inv_sqrt_f <= 0) | ~np.isfinite(f_new) | (f_new <= 0)
            active &= ~stop
            done = active & (np.abs(f_new - f) < tol)
            f = np.where(active, f_new, f)
            active &= ~done

    out[ok] = f
    return out


def friction_factor_moody(
    Re: np.ndarray,
    eps_over_D: float,
    *,
    max_iter: int = 60,
) -> np.ndarray:
    """
    f(Re) para el diagrama:
      - Re < 2000: 64/Re
      - Re > 4000: Colebrook-White
      - 2000..4000: mezcla lineal laminar/turbulento
    """
    Re = np.asarray(Re, dtype=float)
    out = np.full(Re.shape, np.nan, dtype=float)

    with np.errstate(divide="ignore", invalid="ignore"):
        f_lam = 64.0 / Re
    f_turb = colebrook_vec(Re, eps_over_D, max_iter=max_iter)

    lam = Re < 2000.0
    turb = Re > 4000.0
    trans = (Re >= 2000.0) & (Re <= 4000.0)

    t = (Re - 2000.0) / 2000.0
    out[lam] = f_lam[lam]
    out[turb] = f_turb[turb]
    out[trans] = f_lam[trans] * (1.0 - t[trans]) + f_turb[trans] * t[trans]
    out[~(Re > 0)] = np.nan
    return out


def build_moody_chart(
    eps_values: Iterable[float] = FIXED_ED_VALUES,
    *,
    n_points: int = 120,
    re_log_min: float = RE_LOG_MIN,
    re_log_max: float = RE_LOG_MAX,
    max_iter: int = 60,
) -> MoodyChart:
    if n_points < 2:
        raise ValueError(f"n_points must be >= 2, got {n_points}")
    if re_log_max <= re_log_min:
        raise ValueError(f"re_log_max must be > re_log_min ({re_log_min}, {re_log_max})")

    Re = np.logspace(re_log_min, re_log_max, n_points)
    f_by_eps = {
        float(e): friction_factor_moody(Re, float(e), max_iter=max_iter)
        for e in eps_values
    }
    return MoodyChart(
        Re=Re,
        f_by_eps=f_by_eps,
        meta={
            "n_points": n_points,
            "re_log_min": re_log_min,
            "re_log_max": re_log_max,
            "max_iter": max_iter,
        },
    )


def operating_point(Re: float, eps_over_D: float, *, max_iter: int = 60) -> Optional[float]:
    """f en un punto (Re, ε/D) del diagrama; None si no está definido."""
    f = float(friction_factor_moody(np.array([Re], dtype=float), eps_over_D, max_iter=max_iter)[0])
    return f if np.isfinite(f) else None


def moody_frame(chart: MoodyChart) -> pd.DataFrame:
    """Formato largo: Re, eps_over_D, f."""
    parts = [
        pd.DataFrame({"Re": chart.Re, "eps_over_D": e, "f": f})
        for e, f in chart.f_by_eps.items()
    ]
    return pd.concat(parts, ignore_index=True)
