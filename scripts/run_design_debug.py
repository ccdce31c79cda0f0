import logging

import pandas as pd

from hydrocalc.core.build.config import CalculatorConfig
from hydrocalc.core.build.validate import validate_friction_input, validate_pipe_design_input, raise_on_errors
from hydrocalc.core.models.design import PipeDesignInput
from hydrocalc.core.solver.pipe_design import resolve_gravity, solve
from hydrocalc.core.hydraulics.friction import compute_friction_factor
from hydrocalc.core.hydraulics.headloss import darcy_headloss, equivalent_length, minor_headloss
from hydrocalc.core.postprocess.formatting import format_friction_factor, format_significant
from hydrocalc.core.postprocess.summary import compare_friction_equations, summarize_design
from hydrocalc.core.postprocess.export import iteration_table_frame, export_iteration_table_csv
from hydrocalc.core.postprocess.moody import FIXED_ED_VALUES, build_moody_chart, operating_point
from hydrocalc.core.postprocess.plots import plot_convergence, plot_moody_chart

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# ==========================
# INPUTS
# ==========================

cfg = CalculatorConfig.from_dict({
    "equation": "colebrook-white",
    "tol_hf": 1e-6,
    "tol_rel_q": 1e-4,
    "max_iter": 300,
    "g": 9.81,
})

inp = PipeDesignInput(
    L=100.0,
    D=0.3,
    ks=0.00015,
    nu=1e-6,
    Km=2.0,
    z1=10.0,
    z2=0.0,
)

OUT_TABLE_CSV = "iteraciones_diseno.csv"
OUT_CONV_PNG = "plots/convergencia.png"
OUT_MOODY_PNG = "plots/moody.png"

# ==========================
# 1) Diseño (Q)
# ==========================

raise_on_errors(validate_pipe_design_input(inp))
res = solve(inp, cfg.design)

print("DISEÑO OK")
print("Q [m3/s] =", format_significant(res.Q), "| convergió:", res.converged, f"({res.stop_reason})")
print(iteration_table_frame(res).to_string(index=False, float_format=lambda x: f"{x:12.6g}"))

# ==========================
# 2) Factor de fricción en el punto de operación
# ==========================

last = res.last_row
g = resolve_gravity(inp, cfg.design)
eps_over_D = inp.ks / inp.D

raise_on_errors(validate_friction_input(cfg.friction.equation, Re=last.Re, eps_over_D=eps_over_D))
fr = compute_friction_factor(cfg.friction.equation, last.Re, eps_over_D, config=cfg.friction)
print("\n--- Fricción ---")
print(f"f ({fr.equation}) =", format_friction_factor(fr.f), "| iteraciones:", fr.iterations)

df = compare_friction_equations(last.Re, eps_over_D, config=cfg.friction)
print(df.to_string(index=False))

hf_check = darcy_headloss(f=fr.value, L_m=inp.L, D_m=inp.D, V_m_s=last.V, g_m_s2=g)
hm = minor_headloss(K=inp.Km, V_m_s=last.V, g_m_s2=g)
print("\n--- Pérdidas ---")
print("hf [m] =", format_significant(hf_check), "| hm [m] =", format_significant(hm),
      "| L_eq [m] =", format_significant(equivalent_length(K=inp.Km, D_m=inp.D, f=fr.value)),
      "| H [m] =", format_significant(inp.head))

# ==========================
# 3) Exports
# ==========================

export_iteration_table_csv(res, OUT_TABLE_CSV)
plot_convergence(res, out_png=OUT_CONV_PNG)

chart = build_moody_chart(FIXED_ED_VALUES + (eps_over_D,))
f_op = operating_point(last.Re, eps_over_D)
plot_moody_chart(chart, out_png=OUT_MOODY_PNG, point=(last.Re, f_op) if f_op else None)

print("\nResumen:")
print(pd.Series(summarize_design(res)).to_string())
print("EXPORT OK")
