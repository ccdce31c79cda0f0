from __future__ import annotations

from typing import Optional, Tuple
import os

import matplotlib.pyplot as plt

from hydrocalc.core.models.design import PipeDesignResult
from hydrocalc.core.postprocess.moody import F_MAX, F_MIN, MoodyChart


def plot_convergence(
    result: PipeDesignResult,
    *,
    out_png: str,
    title: str = "Convergencia diseño de conducto",
) -> None:
    """
    hf y Q por iteración (dos paneles). Marca en rojo las iteraciones laminares.
    """
    if not result.table:
        raise ValueError("El resultado no tiene iteraciones para graficar.")

    os.makedirs(os.path.dirname(out_png) or ".", exist_ok=True)

    its = [r.iter for r in result.table]
    hf = [r.hf for r in result.table]
    q = [r.Q for r in result.table]
    lam_its = [r.iter for r in result.table if r.regimen == "Laminar"]
    lam_q = [r.Q for r in result.table if r.regimen == "Laminar"]

    fig, (ax1, ax2) = plt.subplots(2, 1, sharex=True)
    ax1.plot(its, hf, marker="o")
    ax1.set_ylabel("hf [m]")
    ax1.grid(True)

    ax2.plot(its, q, marker="o")
    if lam_its:
        ax2.scatter(lam_its, lam_q, color="red", zorder=3, label="Laminar")
        ax2.legend()
    ax2.set_xlabel("iteración")
    ax2.set_ylabel("Q [m³/s]")
    ax2.grid(True)

    fig.suptitle(title)
    fig.tight_layout()
    fig.savefig(out_png, dpi=150)
    plt.close(fig)


def plot_moody_chart(
    chart: MoodyChart,
    *,
    out_png: str,
    point: Optional[Tuple[float, float]] = None,
    title: str = "Diagrama de Moody",
) -> None:
    """
    Curvas f(Re) log-log por ε/D, banda de transición 2000-4000 sombreada.
    point: (Re, f) opcional para marcar el punto de operación.
    """
    os.makedirs(os.path.dirname(out_png) or ".", exist_ok=True)

    fig, ax = plt.subplots()
    for e, f in chart.f_by_eps.items():
        ax.loglog(chart.Re, f, label=f"ε/D = {e:g}")

    ax.axvspan(2000.0, 4000.0, color="grey", alpha=0.2, label="transición")
    if point is not None:
        ax.scatter([point[0]], [point[1]], color="red", zorder=3)

    ax.set_xlim(float(chart.Re[0]), float(chart.Re[-1]))
    ax.set_ylim(F_MIN, F_MAX)
    ax.set_xlabel("Re")
    ax.set_ylabel("f")
    ax.set_title(title)
    ax.grid(True, which="both", alpha=0.4)
    ax.legend(fontsize="small")

    fig.tight_layout()
    fig.savefig(out_png, dpi=150)
    plt.close(fig)
