import decimal
import math
from decimal import Decimal

import pytest

from hydrocalc.core.build.config import (
    CalculatorConfig,
    FrictionConfig,
    PipeDesignConfig,
    RelaxationConfig,
    normalize_equation,
)
from hydrocalc.core.build.validate import (
    InputValidationError,
    raise_on_errors,
    validate_friction_input,
    validate_pipe_design_input,
)
from hydrocalc.core.models.design import PipeDesignInput
from hydrocalc.core.numeric.decimal_context import DecimalConfig, to_decimal


# ============================================================
# decimal_context
# ============================================================

def test_decimal_defaults():
    cfg = DecimalConfig()
    ctx = cfg.make_context()
    assert ctx.prec == 50
    assert ctx.rounding == decimal.ROUND_HALF_EVEN
    assert ctx.traps[decimal.DivisionByZero]
    assert ctx.traps[decimal.InvalidOperation]


def test_decimal_from_dict_rounding_prefix():
    cfg = DecimalConfig.from_dict({"decimal_precision": 30, "decimal_rounding": "half_up"})
    assert cfg.precision == 30
    assert cfg.rounding == decimal.ROUND_HALF_UP


@pytest.mark.parametrize("raw", [{"precision": 0}, {"rounding": "sideways"}])
def test_decimal_from_dict_rejects(raw):
    with pytest.raises(ValueError):
        DecimalConfig.from_dict(raw)


def test_to_decimal():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(" 0,25 ") == Decimal("0.25")
    assert to_decimal(3) == Decimal(3)
    d = Decimal("1.5")
    assert to_decimal(d) is d
    with pytest.raises(TypeError):
        to_decimal(True)
    with pytest.raises(ValueError, match="not a number"):
        to_decimal("abc")
    with pytest.raises(ValueError) as exc:
        to_decimal("1.2.3")
    assert not isinstance(exc.value, decimal.InvalidOperation)


# ============================================================
# config
# ============================================================

@pytest.mark.parametrize("alias,expected", [
    ("Colebrook", "colebrook-white"),
    ("colebrook_white", "colebrook-white"),
    ("Swamee Jain", "swamee-jain"),
    ("von_karman", "von-karman"),
    ("HAALAND", "haaland"),
])
def test_normalize_equation(alias, expected):
    assert normalize_equation(alias) == expected


def test_normalize_equation_unknown():
    with pytest.raises(ValueError, match="desconocida"):
        normalize_equation("hazen-williams")


def test_friction_config_from_dict():
    cfg = FrictionConfig.from_dict({"friction_equation": "serghides", "cw_max_iter": 50, "cw_tol": "1e-12"})
    assert cfg.equation == "serghides"
    assert cfg.max_iter == 50
    assert cfg.tol == "1e-12"
    assert cfg.decimal == DecimalConfig()


@pytest.mark.parametrize("raw", [
    {"cw_max_iter": 0},
    {"cw_tol": "abc"},
    {"cw_tol": "-1e-20"},
    {"seed_f": "0"},
])
def test_friction_config_rejects(raw):
    with pytest.raises(ValueError):
        FrictionConfig.from_dict(raw)


def test_relaxation_defaults():
    r = RelaxationConfig()
    assert (r.lambda_init, r.lambda_min, r.lambda_max) == (1.0, 0.3, 1.0)
    assert (r.shrink, r.grow, r.patience) == (0.5, 1.1, 2)
    r.validate()


@pytest.mark.parametrize("kw", [
    dict(lambda_min=0.0),
    dict(lambda_init=0.1),
    dict(shrink=1.0),
    dict(grow=1.0),
    dict(patience=0),
])
def test_relaxation_rejects(kw):
    with pytest.raises(ValueError):
        RelaxationConfig(**kw).validate()


def test_pipe_design_config_from_dict():
    cfg = PipeDesignConfig.from_dict({"tol_q": 1e-5, "max_iter": 100, "lambda_min": 0.2})
    assert cfg.tol_hf == 1e-6
    assert cfg.tol_rel_q == 1e-5
    assert cfg.max_iter == 100
    assert cfg.relaxation.lambda_min == 0.2


@pytest.mark.parametrize("raw", [{"tol_hf": 0}, {"max_iter": -1}, {"g": 0.0}])
def test_pipe_design_config_rejects(raw):
    with pytest.raises(ValueError):
        PipeDesignConfig.from_dict(raw)


def test_calculator_config_defaults():
    cfg = CalculatorConfig.from_dict({})
    assert cfg.friction.equation == "colebrook-white"
    assert cfg.friction.max_iter == 200
    assert cfg.design.max_iter == 300
    assert cfg.version == 1


# ============================================================
# validate
# ============================================================

def _inp(**kw):
    base = dict(L=100.0, D=0.3, ks=0.00015, nu=1e-6, Km=2.0, z1=10.0, z2=0.0)
    base.update(kw)
    return PipeDesignInput(**base)


def test_valid_design_input_has_no_issues():
    assert validate_pipe_design_input(_inp()) == []


@pytest.mark.parametrize("kw,field", [
    (dict(L=0.0), "L"),
    (dict(D=-0.3), "D"),
    (dict(nu=0.0), "nu"),
    (dict(ks=-1e-4), "ks"),
    (dict(Km=-1.0), "Km"),
    (dict(g=0.0), "g"),
    (dict(z1=math.nan), "z1"),
    (dict(L=math.inf), "L"),
])
def test_invalid_design_input(kw, field):
    issues = validate_pipe_design_input(_inp(**kw))
    errors = [i for i in issues if i.level == "error"]
    assert len(errors) == 1
    assert errors[0].message.startswith(field)
    with pytest.raises(InputValidationError):
        raise_on_errors(issues)


def test_equal_elevations_is_only_a_warning():
    issues = validate_pipe_design_input(_inp(z1=5.0, z2=5.0))
    assert [i.level for i in issues] == ["warning"]
    raise_on_errors(issues)


def test_friction_input_requirements():
    assert validate_friction_input("colebrook-white", Re=1e5, eps_over_D=1e-4) == []
    assert validate_friction_input("blasius", Re=5e4) == []
    assert validate_friction_input("von-karman", eps_over_D=1e-3) == []

    missing = validate_friction_input("haaland", Re=1e5)
    assert [i.level for i in missing] == ["error"]

    no_re = validate_friction_input("haaland", eps_over_D=1e-4)
    assert no_re[0].message.startswith("Re")


def test_friction_input_from_roughness_and_diameter():
    assert validate_friction_input("swamee-jain", Re=1e5, roughness="0,00015", diameter=0.3) == []
    bad = validate_friction_input("swamee-jain", Re=1e5, roughness=0.00015, diameter=0.0)
    assert any(i.level == "error" and i.message.startswith("diameter") for i in bad)


def test_friction_input_advisory_only_without_errors():
    issues = validate_friction_input("swamee-jain", Re=1e5, eps_over_D=0.05)
    assert [i.level for i in issues] == ["warning"]
    raise_on_errors(issues)


def test_input_validation_error_lists_errors_only():
    issues = validate_pipe_design_input(_inp(L=-1.0, z1=5.0, z2=5.0))
    with pytest.raises(InputValidationError) as exc:
        raise_on_errors(issues)
    assert "L must be > 0" in str(exc.value)
    assert "z1 == z2" not in str(exc.value)
