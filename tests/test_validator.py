"""Tests for validator module."""

import pytest

from shiftplanner.errors import ConfigError, InfeasibleConstraintError
from shiftplanner.models import ManualConstraint, OptimizationConfig
from shiftplanner.validator import ConfigValidator, ValidationReport, merge_constraints


@pytest.fixture
def validator():
    """Create a non-strict validator."""
    return ConfigValidator()


def make_config(**overrides):
    values = dict(
        starting_balance=1000.0,
        target_ending_balance=1200.0,
        minimum_balance=500.0,
        population_size=50,
        generations=100,
    )
    values.update(overrides)
    return OptimizationConfig(**values)


def test_valid_config_unchanged(validator, shift_types):
    """Test that a valid config passes without corrections."""
    config = make_config(manual_constraints=[ManualConstraint(day=3, shifts=["large"])])
    corrected, report = validator.validate(config, shift_types)

    assert corrected is config
    assert isinstance(report, ValidationReport)
    assert report.is_valid()
    assert report.warnings == []


def test_negative_balances_clamped(validator):
    """Test that negative balances are clamped to zero."""
    config = make_config(starting_balance=-10.0, target_ending_balance=-5.0, minimum_balance=-1.0)
    corrected, report = validator.validate(config)

    assert corrected.starting_balance == 0.0
    assert corrected.target_ending_balance == 0.0
    assert corrected.minimum_balance == 0.0
    assert len(report.warnings) == 3
    assert config.starting_balance == -10.0


def test_minimum_above_starting_clamped(validator):
    """Test that the minimum balance cannot exceed the starting balance."""
    corrected, report = validator.validate(make_config(minimum_balance=1500.0))

    assert corrected.minimum_balance == 1000.0
    assert any("minimum_balance" in warning for warning in report.warnings)


def test_ga_sizing_clamped(validator):
    """Test population and generation lower bounds."""
    corrected, report = validator.validate(make_config(population_size=3, generations=0))

    assert corrected.population_size == 10
    assert corrected.generations == 1
    assert len(report.warnings) == 2


def test_strict_mode_raises():
    """Test that strict validation raises instead of clamping."""
    with pytest.raises(ConfigError) as excinfo:
        ConfigValidator(strict=True).validate(make_config(population_size=3))
    assert excinfo.value.field == "population_size"
    assert excinfo.value.corrected == 10


@pytest.mark.parametrize("day", [0, 31, -4])
def test_constraint_outside_horizon(validator, day):
    """Test that constraints outside days 1..30 are infeasible."""
    config = make_config(manual_constraints=[ManualConstraint(day=day, shifts=[])])
    with pytest.raises(InfeasibleConstraintError):
        validator.validate(config)


def test_unknown_shift_name(validator, large_only):
    """Test that constraints must name shifts from the table."""
    config = make_config(manual_constraints=[ManualConstraint(day=4, shifts=["medium"])])
    with pytest.raises(InfeasibleConstraintError, match="medium"):
        validator.validate(config, large_only)


def test_conflicting_duplicate_constraints(validator):
    """Test that two different constraints on one day are infeasible."""
    config = make_config(manual_constraints=[
        ManualConstraint(day=7, shifts=[]),
        ManualConstraint(day=7, shifts=["large"]),
    ])
    with pytest.raises(InfeasibleConstraintError, match="conflicting"):
        validator.validate(config)


def test_identical_duplicate_constraints_allowed(validator):
    """Test that repeating the same constraint is harmless."""
    config = make_config(manual_constraints=[
        ManualConstraint(day=7, fixed_balance=900.0),
        ManualConstraint(day=7, fixed_balance=900.0),
    ])
    _, report = validator.validate(config)
    assert report.is_valid()


def test_same_day_constraints_merged(validator):
    """Test that constraints setting different fields on one day are combined."""
    config = make_config(manual_constraints=[
        ManualConstraint(day=5, shifts=[]),
        ManualConstraint(day=9, shifts=["large"]),
        ManualConstraint(day=5, fixed_balance=1000.0),
        ManualConstraint(day=5, fixed_expenses=20.0),
    ])
    corrected, report = validator.validate(config)

    assert report.is_valid()
    assert corrected.manual_constraints == [
        ManualConstraint(day=5, shifts=[], fixed_expenses=20.0, fixed_balance=1000.0),
        ManualConstraint(day=9, shifts=["large"]),
    ]
    assert len(config.manual_constraints) == 4


def test_conflicting_field_named_in_error(validator):
    """Test that only the field set twice with different values is reported."""
    config = make_config(manual_constraints=[
        ManualConstraint(day=5, shifts=[], fixed_balance=900.0),
        ManualConstraint(day=5, fixed_balance=1000.0),
    ])
    with pytest.raises(InfeasibleConstraintError, match="fixed_balance"):
        validator.validate(config)


def test_merge_constraints_keeps_first_seen_order():
    """Test that merging returns one constraint per day in first-seen order."""
    merged, conflicts = merge_constraints([
        ManualConstraint(day=12, fixed_expenses=5.0),
        ManualConstraint(day=3, shifts=["small"]),
        ManualConstraint(day=12, shifts=["small", "large"]),
    ])

    assert conflicts == []
    assert [constraint.day for constraint in merged] == [12, 3]
    assert merged[0].shifts == ["small", "large"]
    assert merged[0].fixed_expenses == 5.0
