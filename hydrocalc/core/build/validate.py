from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, List, Optional

from hydrocalc.core.models.design import PipeDesignInput


@dataclass(frozen=True)
class ValidationIssue:
    level: str              # "error" | "warning"
    message: str
    hint: Optional[str] = None


class InputValidationError(ValueError):
    """Raised when validation finds one or more errors."""
    def __init__(self, issues: List[ValidationIssue]):
        self.issues = issues
        lines = ["Input validation failed with errors:"]
        for it in issues:
            if it.level == "error":
                lines.append(f"- {it.message}" + (f" | hint: {it.hint}" if it.hint else ""))
        super().__init__("\n".join(lines))


# Rangos de validez (advertencia, no bloquean el cálculo)
SWAMEE_JAIN_EPS_RANGE = (1e-6, 1e-2)
SWAMEE_JAIN_RE_RANGE = (5000.0, 1e8)
BLASIUS_RE_RANGE = (4000.0, 1e5)


def _as_number(x: Any) -> Optional[float]:
    """float(x) or None when x is missing, blank or not numeric. NaN passes through."""
    if x is None:
        return None
    if isinstance(x, str):
        x = x.strip().replace(",", ".")
        if x == "":
            return None
    try:
        return float(x)
    except (TypeError, ValueError):
        return None


def _check_field(
    issues: List[ValidationIssue],
    name: str,
    raw: Any,
    *,
    positive: bool = False,
    non_negative: bool = False,
) -> Optional[float]:
    val = _as_number(raw)
    if val is None:
        issues.append(ValidationIssue("error", f"{name} is missing or not numeric: {raw!r}"))
        return None
    if math.isnan(val) or math.isinf(val):
        issues.append(ValidationIssue("error", f"{name} must be finite, got {val}"))
        return None
    if positive and val <= 0:
        issues.append(ValidationIssue("error", f"{name} must be > 0, got {val}"))
    elif non_negative and val < 0:
        issues.append(ValidationIssue("error", f"{name} must be >= 0, got {val}"))
    return val


def advisory_range_issues(equation: str, Re: Optional[float], eps_over_D: Optional[float]) -> List[ValidationIssue]:
    """
    Non-blocking applicability warnings for the correlations that carry a
    documented validity range (Swamee-Jain, Blasius).
    """
    issues: List[ValidationIssue] = []

    if equation == "swamee-jain" and Re is not None and eps_over_D is not None:
        e_lo, e_hi = SWAMEE_JAIN_EPS_RANGE
        r_lo, r_hi = SWAMEE_JAIN_RE_RANGE
        if eps_over_D < e_lo or eps_over_D > e_hi or Re < r_lo or Re > r_hi:
            issues.append(ValidationIssue(
                "warning",
                f"Swamee-Jain outside its validity range (Re={Re:.6g}, eps/D={eps_over_D:.6g}).",
                "Swamee-Jain: 1e-6 <= eps/D <= 1e-2, 5000 <= Re <= 1e8",
            ))

    if equation == "blasius" and Re is not None:
        r_lo, r_hi = BLASIUS_RE_RANGE
        if Re < r_lo or Re > r_hi:
            issues.append(ValidationIssue(
                "warning",
                f"Blasius outside its validity range (Re={Re:.6g}).",
                "Blasius: 4000 <= Re <= 1e5 (smooth pipe)",
            ))

    return issues


def validate_friction_input(
    equation: str,
    *,
    Re: Any = None,
    eps_over_D: Any = None,
    roughness: Any = None,
    diameter: Any = None,
) -> List[ValidationIssue]:
    """
    Caller-side checks before computing a friction factor.

    Re is required by every equation except von-karman; eps/D (direct, or
    roughness + diameter in the same units) by every equation except blasius.
    Returns errors and advisory warnings; caller may raise.
    """
    issues: List[ValidationIssue] = []

    re_val: Optional[float] = None
    if equation != "von-karman":
        re_val = _check_field(issues, "Re", Re, positive=True)

    eod_val: Optional[float] = None
    if equation != "blasius":
        if _as_number(eps_over_D) is not None:
            eod_val = _check_field(issues, "eps_over_D", eps_over_D, non_negative=True)
        elif _as_number(roughness) is None or _as_number(diameter) is None:
            issues.append(ValidationIssue(
                "error",
                "Relative roughness is missing.",
                "Provide eps_over_D, or both roughness and diameter.",
            ))
        else:
            eps = _check_field(issues, "roughness", roughness, non_negative=True)
            D = _check_field(issues, "diameter", diameter, positive=True)
            if eps is not None and D is not None and D > 0:
                eod_val = eps / D

    if not any(i.level == "error" for i in issues):
        issues.extend(advisory_range_issues(equation, re_val, eod_val))

    return issues


def validate_pipe_design_input(inp: PipeDesignInput) -> List[ValidationIssue]:
    """
    The design solver itself does not validate: L, D, nu > 0, g > 0 (if given) and
    ks, Km >= 0 must be enforced here before calling it.
    """
    issues: List[ValidationIssue] = []

    _check_field(issues, "L", inp.L, positive=True)
    _check_field(issues, "D", inp.D, positive=True)
    _check_field(issues, "ks", inp.ks, non_negative=True)
    _check_field(issues, "nu", inp.nu, positive=True)
    _check_field(issues, "Km", inp.Km, non_negative=True)
    z1 = _check_field(issues, "z1", inp.z1)
    z2 = _check_field(issues, "z2", inp.z2)
    if inp.g is not None:
        _check_field(issues, "g", inp.g, positive=True)

    if z1 is not None and z2 is not None and z1 == z2:
        issues.append(ValidationIssue(
            "warning",
            "z1 == z2: no available head, discharge will be zero.",
            "Check reservoir elevations.",
        ))

    return issues


def raise_on_errors(issues: List[ValidationIssue]) -> None:
    errors = [i for i in issues if i.level == "error"]
    if errors:
        raise InputValidationError(errors)
