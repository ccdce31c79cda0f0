from __future__ import annotations

import pandas as pd

from hydrocalc.core.models.design import PipeDesignResult
from hydrocalc.core.postprocess.moody import MoodyChart, moody_frame


ITERATION_COLUMNS = ["iter", "lambda", "hf_m", "V_m_s", "Q_m3s", "Re", "regimen"]


def iteration_table_frame(result: PipeDesignResult) -> pd.DataFrame:
    """
    Iteration trace of a design run as a DataFrame.
    Columns:
      iter, lambda, hf_m, V_m_s, Q_m3s, Re, regimen
    """
    rows = [
        {
            "iter": r.iter,
            "lambda": r.lambda_,
            "hf_m": r.hf,
            "V_m_s": r.V,
            "Q_m3s": r.Q,
            "Re": r.Re,
            "regimen": r.regimen,
        }
        for r in result.table
    ]
    return pd.DataFrame(rows, columns=ITERATION_COLUMNS)


def export_iteration_table_csv(
    result: PipeDesignResult,
    path_csv: str,
) -> None:
    df = iteration_table_frame(result)
    df.to_csv(path_csv, index=False)


def export_moody_csv(
    chart: MoodyChart,
    path_csv: str,
) -> None:
    """
    Export Moody curves in long format.
    Columns:
      Re, eps_over_D, f
    """
    moody_frame(chart).to_csv(path_csv, index=False)
