# hydrocalc/core/hydraulics/flow.py
from __future__ import annotations

import math
from typing import Literal

FlowRegime = Literal["laminar", "transicional", "turbulento"]

RE_LAMINAR_MAX = 2000.0
RE_TURBULENT_MIN = 4000.0


def pipe_area(*, D_m: float) -> float:
    """Área de la sección circular [m2]."""
    return math.pi * (D_m ** 2) / 4.0


def velocity_from_q(*, q_m3s: float, area_m2: float) -> float:
    return (q_m3s / area_m2) if area_m2 > 0 else float("nan")


def reynolds(*, V_m_s: float, D_m: float, nu_m2s: float) -> float:
    """Re = |V|·D/nu. nu <= 0 -> inf."""
    if D_m <= 0:
        return float("nan")
    if nu_m2s <= 0:
        return float("inf")
    return abs(V_m_s) * D_m / nu_m2s


def reynolds_dynamic(*, rho: float, V_m_s: float, D_m: float, mu: float) -> float:
    """Re = rho·V·D/mu (viscosidad dinámica)."""
    if rho <= 0 or mu <= 0 or D_m <= 0:
        return float("nan")
    return rho * abs(V_m_s) * D_m / mu


def kinematic_viscosity(*, mu: float, rho: float) -> float:
    """nu = mu/rho [m2/s]."""
    return (mu / rho) if rho > 0 else float("nan")


def dynamic_viscosity(*, nu_m2s: float, rho: float) -> float:
    """mu = rho·nu [Pa·s]."""
    return rho * nu_m2s


def density_from_viscosities(*, mu: float, nu_m2s: float) -> float:
    return (mu / nu_m2s) if nu_m2s > 0 else float("nan")


def classify_regime(Re: float) -> FlowRegime:
    """
    Clasificación del régimen según Re:
      Re < 2000 laminar, 2000..4000 transicional, > 4000 turbulento.
    """
    if Re < RE_LAMINAR_MAX:
        return "laminar"
    if Re <= RE_TURBULENT_MIN:
        return "transicional"
    return "turbulento"
