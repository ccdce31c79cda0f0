from __future__ import annotations

from typing import Iterable, Optional

import numpy as np
import pandas as pd

from hydrocalc.core.build.config import EQUATIONS, FrictionConfig
from hydrocalc.core.hydraulics.flow import classify_regime
from hydrocalc.core.hydraulics.friction import FrictionDomainError, compute_friction_factor
from hydrocalc.core.models.design import PipeDesignResult
from hydrocalc.core.numeric.decimal_context import Number


def compare_friction_equations(
    Re: Number,
    eps_over_D: Number,
    *,
    equations: Iterable[str] = EQUATIONS,
    config: Optional[FrictionConfig] = None,
) -> pd.DataFrame:
    """
    Evalúa varias correlaciones para el mismo (Re, ε/D).

    Columns:
      equation, f, converged, iterations, stop_reason, warning, error
    Una falla de dominio queda en 'error' con f = NaN; no corta la tabla.
    """
    rows = []
    for eq in equations:
        try:
            res = compute_friction_factor(eq, Re, eps_over_D, config=config)
        except FrictionDomainError as e:
            rows.append({
                "equation": eq,
                "f": np.nan,
                "converged": False,
                "iterations": 0,
                "stop_reason": None,
                "warning": None,
                "error": str(e),
            })
            continue

        rows.append({
            "equation": res.equation,
            "f": res.value,
            "converged": res.converged,
            "iterations": res.iterations,
            "stop_reason": res.stop_reason,
            "warning": "; ".join(w.hint or w.message for w in res.warnings) or None,
            "error": None,
        })

    return pd.DataFrame(rows)


def summarize_design(result: PipeDesignResult) -> dict:
    """Resumen plano de una corrida de diseño (para guardar como JSON)."""
    last = result.last_row
    regimes = [r.regimen for r in result.table]
    flips = sum(1 for a, b in zip(regimes, regimes[1:]) if a != b)
    return {
        "Q_m3s": result.Q,
        "iterations": result.iterations,
        "converged": result.converged,
        "stop_reason": result.stop_reason,
        "V_m_s": last.V if last else 0.0,
        "Re": last.Re if last else 0.0,
        "hf_m": last.hf if last else 0.0,
        "lambda_final": last.lambda_ if last else 0.0,
        "regimen": last.regimen if last else None,
        "flow_regime": classify_regime(last.Re) if last else None,
        "regime_changes": flips,
    }
