# hydrocalc/core/hydraulics/headloss.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np


@dataclass(frozen=True)
class MinorLoss:
    """Pérdida localizada: hm = K·V²/(2g), L_eq = K·D/f (si hay f y D)."""
    hm_m: float
    leq_m: float = 0.0


def darcy_headloss(*, f: float, L_m: float, D_m: float, V_m_s: float, g_m_s2: float = 9.81) -> float:
    """hf = f·(L/D)·V²/(2g) [m]."""
    if D_m <= 0:
        raise ValueError(f"Geometría inválida: D={D_m}")
    if g_m_s2 <= 0:
        raise ValueError(f"g debe ser > 0, recibido {g_m_s2}")
    return float(f) * (L_m / D_m) * (V_m_s ** 2) / (2.0 * g_m_s2)


def minor_headloss(*, K: float, V_m_s: float, g_m_s2: float = 9.81) -> float:
    """hm = K·V²/(2g). g == 0 -> 0."""
    if g_m_s2 == 0:
        return 0.0
    return float(K) * (V_m_s ** 2) / (2.0 * g_m_s2)


def equivalent_length(*, K: float, D_m: float, f: float) -> float:
    """L_eq = K·D/f. f == 0 o D == 0 -> 0."""
    if f == 0 or D_m == 0:
        return 0.0
    return float(K) * D_m / float(f)


def minor_loss(
    *,
    K: float,
    V_m_s: float,
    g_m_s2: float = 9.81,
    D_m: Optional[float] = None,
    f: Optional[float] = None,
) -> MinorLoss:
    """
    Pérdida localizada de un accesorio.

    Con f y D (modo longitud equivalente) hm se calcula como f·(L_eq/D)·V²/(2g),
    que es idéntico a K·V²/(2g).
    """
    if f is None or D_m is None:
        return MinorLoss(hm_m=minor_headloss(K=K, V_m_s=V_m_s, g_m_s2=g_m_s2))

    if f == 0 or D_m == 0 or g_m_s2 == 0:
        return MinorLoss(hm_m=0.0, leq_m=0.0)

    leq = equivalent_length(K=K, D_m=D_m, f=f)
    hm = darcy_headloss(f=f, L_m=leq, D_m=D_m, V_m_s=V_m_s, g_m_s2=g_m_s2)
    return MinorLoss(hm_m=hm, leq_m=leq)


def total_minor_headloss(K_values: Iterable[float], *, V_m_s: float, g_m_s2: float = 9.81) -> float:
    """Suma de hm para varios accesorios con la misma velocidad."""
    return minor_headloss(K=float(sum(K_values)), V_m_s=V_m_s, g_m_s2=g_m_s2)


def minor_headloss_vec(K: np.ndarray, V_m_s: np.ndarray, g_m_s2: float = 9.81) -> np.ndarray:
    """Vectorizado: arrays (n,) -> hm (n,)."""
    K = np.asarray(K, dtype=float)
    V_m_s = np.asarray(V_m_s, dtype=float)
    if g_m_s2 == 0:
        return np.zeros(np.broadcast(K, V_m_s).shape, dtype=float)
    return K * V_m_s ** 2 / (2.0 * g_m_s2)
