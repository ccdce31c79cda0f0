# hydrocalc/core/solver/pipe_design.py
from __future__ import annotations

import logging
import math
from typing import List, Optional

from hydrocalc.core.build.config import PipeDesignConfig, RelaxationConfig
from hydrocalc.core.models.design import (
    DesignStopReason,
    IterationRow,
    PipeDesignInput,
    PipeDesignResult,
    Regimen,
)

logger = logging.getLogger(__name__)

RE_LAMINAR_LIMIT = 2000.0
HF_FLOOR = 1e-30


# ============================================================
# Velocidad desde hf
# ============================================================

def velocity_turbulent(hf: float, L: float, D: float, ks: float, nu: float, g: float) -> float:
    """
    Velocidad turbulenta explícita a partir de hf (Colebrook despejado en V):

      A = ks/(3.7 D)
      B = 2.51 nu sqrt(L) / (D sqrt(2 g hf D))
      V = -2 log10(A + B) * sqrt(2 g hf D) / sqrt(L)

    hf se acota inferiormente a 1e-30. Devuelve 0 si el denominador es 0 o si
    A + B no es positivo/finito; V se acota a >= 0.
    """
    hf_pos = max(hf, HF_FLOOR)
    A = ks / (3.7 * D)
    root = math.sqrt(hf_pos * D * 2.0 * g)
    denom = D * root
    if denom == 0:
        return 0.0
    B = (2.51 * nu * math.sqrt(L)) / denom
    arg = A + B
    if arg <= 0 or not math.isfinite(arg):
        return 0.0
    V = -2.0 * math.log10(arg) * (root / math.sqrt(L))
    return max(V, 0.0)


def velocity_laminar(hf: float, L: float, D: float, nu: float, g: float) -> float:
    """Hagen-Poiseuille: V = g D² hf / (32 nu L), acotada a >= 0."""
    return max((g * D * D * hf) / (32.0 * nu * L), 0.0)


def _reynolds(V: float, D: float, nu: float) -> float:
    return abs(V) * D / nu if nu > 0 else math.inf


# ============================================================
# Solver principal
# ============================================================

def solve_pipe_design(
    L: float,
    D: float,
    ks: float,
    nu: float,
    Km: float,
    z1: float,
    z2: float,
    g: float = 9.81,
    tol_hf: float = 1e-6,
    tol_rel_q: float = 1e-4,
    max_iter: int = 300,
    *,
    relaxation: Optional[RelaxationConfig] = None,
) -> PipeDesignResult:
    """
    Caudal entre dos estanques resolviendo H = hf + hm por punto fijo con
    relajación adaptativa.

    Por iteración:
      - V_turb desde hf; Re de tanteo = |V_turb| D / nu
      - Re de tanteo < 2000 -> V laminar ("Laminar"), si no V_turb ("Turbulento")
      - Q = A V, hm = Km V²/(2g), R = (H - hm) - hf, hf_next = hf + lambda R
      - se registra la fila con el hf previo a la actualización
      - converge si |hf_next - hf| < tol_hf o (desde la 2ª) |ΔQ|/|Q| < tol_rel_q
      - lambda se ajusta desde la 2ª iteración según el residuo

    No valida la entrada (ver validate_pipe_design_input) y no lanza por no
    convergencia: devuelve el estado alcanzado con converged=False.
    El Q del resultado es el de la última fila (0 si no hay filas).
    """
    relax = relaxation or RelaxationConfig()

    H = abs(z1 - z2)
    area = math.pi * (D * D) / 4.0
    rows: List[IterationRow] = []

    lam = relax.lambda_init
    r_prev: Optional[float] = None
    q_prev: Optional[float] = None
    improvements = 0
    hf = H

    stop_reason: DesignStopReason = "max_iter"

    for it in range(1, max_iter + 1):
        v_turb = velocity_turbulent(hf, L, D, ks, nu, g)
        re_trial = _reynolds(v_turb, D, nu)

        regimen: Regimen
        if re_trial < RE_LAMINAR_LIMIT:
            V = velocity_laminar(hf, L, D, nu, g)
            regimen = "Laminar"
        else:
            V = v_turb
            regimen = "Turbulento"

        Q = area * V
        hm = Km * V * V / (2.0 * g)
        R = (H - hm) - hf
        hf_next = hf + lam * R

        Re = _reynolds(V, D, nu)

        rows.append(IterationRow(
            iter=it,
            lambda_=lam,
            hf=hf,
            V=V,
            Q=Q,
            Re=Re,
            regimen=regimen,
        ))
        logger.debug(
            "it=%d lambda=%.3f hf=%.9g V=%.9g Q=%.9g Re=%.6g %s",
            it, lam, hf, V, Q, Re, regimen,
        )

        # convergencia (antes de actualizar hf)
        if abs(hf_next - hf) < tol_hf:
            stop_reason = "converged_hf"
            break
        if q_prev is not None and abs(Q - q_prev) / max(abs(Q), 1e-30) < tol_rel_q:
            stop_reason = "converged_q"
            break

        # lambda adaptativo
        if r_prev is not None:
            if R * r_prev < 0 or abs(R) > 0.9 * abs(r_prev):
                lam = max(relax.lambda_min, lam * relax.shrink)
                improvements = 0
            elif abs(R) < 0.5 * abs(r_prev):
                improvements += 1
                if improvements >= relax.patience and lam < relax.lambda_max:
                    lam = min(relax.lambda_max, lam * relax.grow)
                    improvements = 0
            else:
                improvements = 0

        r_prev = R
        q_prev = Q
        hf = max(hf_next, 0.0)

    converged = stop_reason != "max_iter"
    if not converged:
        logger.warning(
            "Pipe design did not converge in %d iterations (last hf=%.9g, Q=%.9g)",
            max_iter, hf, rows[-1].Q if rows else 0.0,
        )

    return PipeDesignResult(
        Q=rows[-1].Q if rows else 0.0,
        table=tuple(rows),
        converged=converged,
        stop_reason=stop_reason,
    )


def resolve_gravity(inp: PipeDesignInput, cfg: Optional[PipeDesignConfig] = None) -> float:
    """inp.g si viene dado; si no, cfg.g_m_s2."""
    if inp.g is not None:
        return inp.g
    return (cfg or PipeDesignConfig()).g_m_s2


def solve(inp: PipeDesignInput, cfg: Optional[PipeDesignConfig] = None) -> PipeDesignResult:
    """Wrapper sobre solve_pipe_design con entrada y configuración agrupadas."""
    cfg = cfg or PipeDesignConfig()
    return solve_pipe_design(
        inp.L, inp.D, inp.ks, inp.nu, inp.Km, inp.z1, inp.z2,
        g=resolve_gravity(inp, cfg),
        tol_hf=cfg.tol_hf,
        tol_rel_q=cfg.tol_rel_q,
        max_iter=cfg.max_iter,
        relaxation=cfg.relaxation,
    )
