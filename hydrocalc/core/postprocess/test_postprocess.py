# test_postprocess.py
from __future__ import annotations

import math
from decimal import Decimal

import numpy as np
import pandas as pd
import pytest

# ============================================================
# SOLVER / FRICCIÓN
# ============================================================

from hydrocalc.core.hydraulics.friction import compute_friction_factor
from hydrocalc.core.solver.pipe_design import solve_pipe_design

# ============================================================
# POSTPROCESS
# ============================================================

from hydrocalc.core.postprocess.export import (
    ITERATION_COLUMNS,
    export_iteration_table_csv,
    export_moody_csv,
    iteration_table_frame,
)
from hydrocalc.core.postprocess.formatting import format_friction_factor, format_significant
from hydrocalc.core.postprocess.moody import (
    FIXED_ED_VALUES,
    build_moody_chart,
    colebrook_vec,
    friction_factor_moody,
    moody_frame,
    operating_point,
)
from hydrocalc.core.postprocess.plots import plot_convergence, plot_moody_chart
from hydrocalc.core.postprocess.summary import compare_friction_equations, summarize_design


REF = dict(L=100.0, D=0.3, ks=0.00015, nu=1e-6, Km=2.0, z1=10.0, z2=0.0)


@pytest.fixture(scope="module")
def design():
    return solve_pipe_design(**REF)


@pytest.fixture(scope="module")
def chart():
    return build_moody_chart(n_points=40)


# ============================================================
# FORMATO
# ============================================================

@pytest.mark.parametrize("f,expected", [
    (Decimal("0.018"), "0.018"),
    (Decimal("0.0177700000000000001"), "0.01777"),
    (Decimal("0.01234567890123456789"), "0.012345678901235"),
    (Decimal("1"), "1"),
    ("0.0200", "0.02"),
])
def test_format_friction_factor(f, expected):
    assert format_friction_factor(f) == expected


def test_format_friction_factor_non_finite():
    assert format_friction_factor(Decimal("NaN")) == ""
    assert format_friction_factor(float("inf")) == ""


@pytest.mark.parametrize("value,expected", [
    (123456789.0, "123456790"),
    (0.000123456789, "0.00012345679"),
    (0.0934217, "0.0934217"),
    (2.5e-8, "2.5e-8"),
    (1.5e22, "1.5e+22"),
    (0.0, "0"),
    (float("nan"), "0"),
    (float("inf"), "0"),
])
def test_format_significant(value, expected):
    assert format_significant(value) == expected


def test_format_significant_rounds_half_even():
    assert format_significant(0.125, digits=2) == "0.12"
    assert format_significant(0.135, digits=2) == "0.14"


# ============================================================
# MOODY
# ============================================================

def test_colebrook_vec_matches_decimal_solver():
    Re = np.array([1e4, 1e5, 1e7])
    f_vec = colebrook_vec(Re, 1e-4)
    for r, fv in zip(Re, f_vec):
        fd = compute_friction_factor("colebrook-white", float(r), 1e-4).value
        assert fv == pytest.approx(fd, rel=1e-9)


def test_colebrook_vec_invalid_reynolds_is_nan():
    out = colebrook_vec(np.array([0.0, -1.0, np.nan, 1e5]), 1e-3)
    assert np.isnan(out[:3]).all()
    assert np.isfinite(out[3])


def test_moody_regions():
    Re = np.array([1000.0, 2000.0, 3000.0, 4000.0, 1e5])
    f = friction_factor_moody(Re, 1e-3)
    turb = colebrook_vec(Re, 1e-3)

    assert f[0] == pytest.approx(64.0 / 1000.0)
    assert f[1] == pytest.approx(64.0 / 2000.0)
    assert f[2] == pytest.approx(0.5 * 64.0 / 3000.0 + 0.5 * turb[2])
    assert f[3] == pytest.approx(turb[3])
    assert f[4] == turb[4]


def test_build_moody_chart(chart):
    assert chart.Re.shape == (40,)
    assert chart.Re[0] == pytest.approx(1e3)
    assert chart.Re[-1] == pytest.approx(1e8)
    assert tuple(chart.f_by_eps) == FIXED_ED_VALUES
    for f in chart.f_by_eps.values():
        assert f.shape == (40,)
        assert np.isfinite(f).all()

    # curvas ordenadas por rugosidad en zona turbulenta
    turb = chart.Re > 4000.0
    curves = [chart.f_by_eps[e][turb] for e in FIXED_ED_VALUES]
    for lo, hi in zip(curves, curves[1:]):
        assert (lo <= hi).all()


@pytest.mark.parametrize("kw", [dict(n_points=1), dict(re_log_min=5.0, re_log_max=5.0)])
def test_build_moody_chart_rejects(kw):
    with pytest.raises(ValueError):
        build_moody_chart(**kw)


def test_operating_point():
    assert operating_point(1e5, 1e-4) == pytest.approx(
        compute_friction_factor("colebrook-white", 1e5, 1e-4).value, rel=1e-9
    )
    assert operating_point(0.0, 1e-4) is None


def test_moody_frame(chart):
    df = moody_frame(chart)
    assert list(df.columns) == ["Re", "eps_over_D", "f"]
    assert len(df) == 40 * len(FIXED_ED_VALUES)
    assert set(df["eps_over_D"]) == set(FIXED_ED_VALUES)


# ============================================================
# RESUMEN
# ============================================================

def test_compare_friction_equations():
    df = compare_friction_equations(1e5, 1e-4)
    assert len(df) == 7
    assert df["error"].isna().all()
    assert df["f"].between(0.01, 0.025).all()
    cw = df.set_index("equation").loc["colebrook-white"]
    assert cw["stop_reason"] == "converged"
    assert cw["iterations"] > 0


def test_compare_friction_equations_keeps_domain_failures():
    df = compare_friction_equations(1e5, 0.0, equations=["haaland", "von-karman"])
    row = df.set_index("equation").loc["von-karman"]
    assert math.isnan(row["f"])
    assert "log10" in row["error"]
    assert np.isfinite(df.set_index("equation").loc["haaland", "f"])


def test_compare_friction_equations_reports_warnings():
    df = compare_friction_equations(1e6, 1e-4, equations=["blasius"])
    assert "Blasius" in df.loc[0, "warning"]


def test_summarize_design(design):
    s = summarize_design(design)
    assert s["Q_m3s"] == design.Q
    assert s["iterations"] == len(design.table)
    assert s["converged"] is True
    assert s["regimen"] == "Turbulento"
    assert s["regime_changes"] == 0
    assert s["flow_regime"] == "turbulento"
    assert s["hf_m"] == design.last_row.hf


# ============================================================
# EXPORT / PLOTS
# ============================================================

def test_iteration_table_frame(design):
    df = iteration_table_frame(design)
    assert list(df.columns) == ITERATION_COLUMNS
    assert len(df) == len(design.table)
    assert df["Q_m3s"].iloc[-1] == design.Q
    assert (df["regimen"] == "Turbulento").all()


def test_export_iteration_table_csv(design, tmp_path):
    out = tmp_path / "iteraciones.csv"
    export_iteration_table_csv(design, str(out))
    df = pd.read_csv(out)
    assert list(df.columns) == ITERATION_COLUMNS
    assert df["iter"].tolist() == list(range(1, len(design.table) + 1))


def test_export_moody_csv(chart, tmp_path):
    out = tmp_path / "moody.csv"
    export_moody_csv(chart, str(out))
    df = pd.read_csv(out)
    assert len(df) == 40 * len(FIXED_ED_VALUES)


def test_plots_write_png(design, chart, tmp_path):
    conv = tmp_path / "plots" / "convergencia.png"
    moody = tmp_path / "plots" / "moody.png"
    plot_convergence(design, out_png=str(conv))
    plot_moody_chart(chart, out_png=str(moody), point=(design.last_row.Re, 0.018))
    assert conv.stat().st_size > 0
    assert moody.stat().st_size > 0


def test_plot_convergence_requires_rows(tmp_path):
    empty = solve_pipe_design(**REF, max_iter=0)
    with pytest.raises(ValueError):
        plot_convergence(empty, out_png=str(tmp_path / "x.png"))
