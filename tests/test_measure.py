import math

import pytest

from figcomposer.model.measure import Measure, Unit, mils_to_real_units, real_units_to_mils


@pytest.mark.parametrize("unit, mils", [
    (Unit.IN, 1000.0),
    (Unit.CM, 1000.0 / 2.54),
    (Unit.MM, 1000.0 / 25.4),
    (Unit.PT, 1000.0 / 72.0),
])
def test_units_table(unit, mils):
    assert unit.mils_per_unit == pytest.approx(mils)
    assert real_units_to_mils(1.0, unit) == pytest.approx(mils)
    assert mils_to_real_units(mils, unit) == pytest.approx(1.0)


@pytest.mark.parametrize("unit", [Unit.PCT, Unit.USER])
def test_relative_units_have_no_length(unit):
    assert unit.is_relative
    with pytest.raises(ValueError):
        _ = unit.mils_per_unit
    with pytest.raises(ValueError):
        Measure(50.0, unit).to_mils()


def test_measure_rejects_non_finite_value():
    with pytest.raises(ValueError):
        Measure(math.nan, Unit.IN)
    with pytest.raises(ValueError):
        Measure(math.inf)


def test_measure_defaults_to_user_units():
    assert Measure(3.0).unit is Unit.USER
    assert Measure(3.0).is_relative


def test_to_mils():
    assert Measure(2.54, Unit.CM).to_mils() == pytest.approx(1000.0)
    assert Measure(72.0, Unit.PT).to_mils() == pytest.approx(1000.0)


def test_from_mils_limits_precision():
    m = Measure.from_mils(1000.0, Unit.CM)
    assert m.unit is Unit.CM
    assert m.value == pytest.approx(2.54)

    m = Measure.from_mils(1234.5678, Unit.IN, n_frac=1)
    assert m.value == pytest.approx(1.2)


def test_from_mils_relative_unit_falls_back_to_inches():
    m = Measure.from_mils(500.0, Unit.USER)
    assert m == Measure(0.5, Unit.IN)


@pytest.mark.parametrize("text, expected", [
    ("1.5in", Measure(1.5, Unit.IN)),
    (" 50% ", Measure(50.0, Unit.PCT)),
    ("-3u", Measure(-3.0, Unit.USER)),
    ("12pt", Measure(12.0, Unit.PT)),
    ("2.5cm", Measure(2.5, Unit.CM)),
    ("10mm", Measure(10.0, Unit.MM)),
])
def test_from_string(text, expected):
    assert Measure.from_string(text) == expected


@pytest.mark.parametrize("text", ["", "in", "abc", "1.5xx", "nanin", "1.5 inches"])
def test_from_string_invalid(text):
    assert Measure.from_string(text) is None


def test_str():
    assert str(Measure(12.5, Unit.IN)) == "12.5in"
    assert str(Measure(3.0, Unit.PCT)) == "3%"
    assert str(Measure(-0.25)) == "-0.25u"
