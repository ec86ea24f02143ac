import logging
import math

import numpy as np
import pytest

from figcomposer.model.geometry_primitives import Point, Rect
from figcomposer.model.measure import Measure, Unit
from figcomposer.model.viewport import CoordSys, Viewport, ViewportError, undefined_mask


def user(value: float) -> Measure:
    return Measure(value, Unit.USER)


# ------------------------------------------------------------------------------
# Construction
# ------------------------------------------------------------------------------
@pytest.mark.parametrize("log_x, log_y, expected", [
    (False, False, CoordSys.CARTESIAN),
    (True, False, CoordSys.SEMILOG_X),
    (False, True, CoordSys.SEMILOG_Y),
    (True, True, CoordSys.LOG_LOG),
])
def test_cartesian_family(log_x, log_y, expected):
    vp = Viewport.cartesian(1000.0, 1000.0, 1.0, 100.0, 1.0, 100.0, log_x=log_x, log_y=log_y)
    assert vp.coord_sys is expected
    assert not vp.is_polar


def test_log_axis_requires_positive_range(caplog):
    with caplog.at_level(logging.ERROR, logger="figcomposer"):
        with pytest.raises(ViewportError):
            Viewport.cartesian(1000.0, 1000.0, 0.0, 10.0, 1.0, 10.0, log_x=True)
    assert "strictly positive" in caplog.text

    with pytest.raises(ValueError):
        Viewport.cartesian(1000.0, 1000.0, 1.0, 10.0, -1.0, 10.0, log_y=True)


@pytest.mark.parametrize("kwargs", [
    dict(width=math.nan, height=100.0),
    dict(width=100.0, height=math.inf),
    dict(width=-1.0, height=100.0),
])
def test_invalid_dimensions(kwargs):
    with pytest.raises(ViewportError):
        Viewport(**kwargs)


def test_empty_user_range():
    with pytest.raises(ViewportError):
        Viewport.cartesian(1000.0, 1000.0, 5.0, 5.0, 0.0, 1.0)


def test_polar_radius_at_origin_validation():
    with pytest.raises(ViewportError):
        Viewport.polar_plot(1000.0, 1000.0, 100.0, -1.0)
    with pytest.raises(ViewportError):
        Viewport.polar_plot(1000.0, 1000.0, 100.0, 0.0, log_radius=True)


def test_polar_factory_substitutes_min_radius():
    assert Viewport.polar(1000.0, 1000.0, 100.0, 0.0, log_radius=True).radius_at_origin == 0.01
    assert Viewport.polar(1000.0, 1000.0, 100.0, -3.0).radius_at_origin == 0.0


def test_polar_origin_defaults_to_centre():
    vp = Viewport.polar(2000.0, 1000.0, 100.0, 0.0)
    assert vp.polar_origin == Point(1000.0, 500.0)
    assert vp.physical_user_origin == Point(1000.0, 500.0)


def test_zero_angle_is_restricted():
    vp = Viewport.polar_plot(1000.0, 1000.0, 100.0, 0.0, zero_angle=-90.0)
    assert vp.theta_zero == pytest.approx(270.0)


def test_plain_viewport_uses_mils():
    vp = Viewport.plain(100.0, 100.0)
    assert vp.user_to_physical(Point(3.0, 4.0)) == Point(3.0, 4.0)
    assert vp.physical_user_origin == Point(0.0, 0.0)


# ------------------------------------------------------------------------------
# Cartesian, semilog and log-log
# ------------------------------------------------------------------------------
def test_cartesian_user_to_physical(cartesian_vp):
    p = cartesian_vp.user_to_physical(Point(5.0, 0.0))
    assert p.x == pytest.approx(500.0)
    assert p.y == pytest.approx(250.0)


def test_to_physical_mixed_units(cartesian_vp):
    p = cartesian_vp.to_physical(Measure(50.0, Unit.PCT), Measure(1.0, Unit.IN))
    assert p == Point(500.0, 1000.0)

    p = cartesian_vp.to_physical(user(10.0), Measure(10.0, Unit.PCT))
    assert p.x == pytest.approx(1000.0)
    assert p.y == pytest.approx(50.0)


def test_log_log_user_to_physical():
    vp = Viewport.cartesian(1000.0, 1000.0, 1.0, 1000.0, 0.1, 10.0, log_x=True, log_y=True)
    p = vp.user_to_physical(Point(10.0, 1.0))
    assert p.x == pytest.approx(1000.0 / 3)
    assert p.y == pytest.approx(500.0)


@pytest.mark.parametrize("log_x, log_y, point", [
    (True, False, Point(0.0, 5.0)),
    (True, False, Point(-2.0, 5.0)),
    (False, True, Point(5.0, 0.0)),
    (True, True, Point(5.0, -1.0)),
])
def test_log_axis_domain_is_undefined(log_x, log_y, point):
    vp = Viewport.cartesian(1000.0, 1000.0, 1.0, 100.0, 1.0, 100.0, log_x=log_x, log_y=log_y)
    assert vp.user_to_physical(point) is None
    assert vp.to_physical(user(point.x), user(point.y)) is None
    assert undefined_mask(vp.user_to_physical_array([[point.x, point.y]]))[0]


@pytest.mark.parametrize("log_x, log_y, point", [
    (False, False, Point(2.5, -1.75)),
    (False, False, Point(0.001, 4.999)),
    (True, False, Point(3.7, 0.25)),
    (False, True, Point(9.0, 42.5)),
    (True, True, Point(0.5, 77.0)),
])
def test_round_trip(log_x, log_y, point):
    if log_x or log_y:
        vp = Viewport.cartesian(2000.0, 1500.0, 0.1, 10.0, 0.5, 100.0, log_x=log_x, log_y=log_y)
    else:
        vp = Viewport.cartesian(2000.0, 1500.0, 0.0, 10.0, -5.0, 5.0)
    p = vp.to_physical(user(point.x), user(point.y))
    mx, my = vp.physical_to_user(p.x, p.y)
    assert mx.unit is Unit.USER and my.unit is Unit.USER
    assert mx.value == pytest.approx(point.x, abs=1e-3)
    assert my.value == pytest.approx(point.y, abs=1e-3)


def test_physical_to_user_precision_is_clamped():
    vp = Viewport.cartesian(1000.0, 1000.0, 0.0, 1.0, 0.0, 1.0)
    mx, _ = vp.physical_to_user(123.456789, 0.0, precision=5)
    assert mx.value == pytest.approx(0.123)
    mx, _ = vp.physical_to_user(123.456789, 0.0, precision=-1)
    assert mx.value == 0.0


def test_physical_to_user_physical_and_percent_units():
    vp = Viewport.cartesian(1000.0, 1000.0, 0.0, 1.0, 0.0, 1.0)
    mx, my = vp.physical_to_user(1000.0, 500.0, Unit.IN, Unit.PCT)
    assert mx == Measure(1.0, Unit.IN)
    assert my == Measure(50.0, Unit.PCT)


def test_physical_to_user_rejects_non_finite(cartesian_vp):
    assert cartesian_vp.physical_to_user(math.nan, 0.0) is None


def test_distance_in_physical():
    vp = Viewport.cartesian(1000.0, 1000.0, 0.0, 10.0, 0.0, 10.0)
    assert vp.distance_in_physical(Point(0.0, 0.0), Point(3.0, 4.0)) == pytest.approx(500.0)

    log_vp = Viewport.cartesian(1000.0, 1000.0, 1.0, 10.0, 1.0, 10.0, log_x=True)
    assert log_vp.distance_in_physical(Point(-1.0, 1.0), Point(5.0, 5.0)) == 0.0


# ------------------------------------------------------------------------------
# Polar
# ------------------------------------------------------------------------------
def test_polar_user_to_physical():
    vp = Viewport.polar(2000.0, 2000.0, 100.0, 0.0)
    p = vp.user_to_physical(Point(90.0, 5.0))
    assert p.x == pytest.approx(1000.0, abs=1e-9)
    assert p.y == pytest.approx(1500.0)


def test_polar_radius_below_minimum_is_undefined():
    vp = Viewport.polar(2000.0, 2000.0, 100.0, 2.0)
    assert vp.user_to_physical(Point(0.0, 1.0)) is None
    assert vp.user_to_physical(Point(0.0, 2.0)) == Point(1000.0, 1000.0)


def test_polar_reversed_radius_above_maximum_is_undefined():
    vp = Viewport.polar_plot(2000.0, 2000.0, 100.0, 10.0, reverse_radius=True)
    assert vp.user_to_physical(Point(0.0, 11.0)) is None
    p = vp.user_to_physical(Point(0.0, 4.0))
    assert p.x == pytest.approx(1600.0)


def test_polar_reversed_theta():
    vp = Viewport.polar_plot(2000.0, 2000.0, 100.0, 0.0, zero_angle=90.0, reverse_theta=True)
    # zero points up and theta runs clockwise, so 90 points right
    p = vp.user_to_physical(Point(90.0, 5.0))
    assert p.x == pytest.approx(1500.0)
    assert p.y == pytest.approx(1000.0, abs=1e-9)


@pytest.mark.parametrize("radius", [0.0, -5.0])
def test_polar_log_radius_domain_is_undefined(radius):
    vp = Viewport.polar(2000.0, 2000.0, 100.0, 0.01, log_radius=True)
    assert vp.user_to_physical(Point(45.0, radius)) is None
    rev = Viewport.polar_plot(2000.0, 2000.0, 100.0, 10.0, reverse_radius=True, log_radius=True)
    assert rev.user_to_physical(Point(45.0, radius)) is None


def test_polar_percent_and_physical_radius():
    vp = Viewport.polar(2000.0, 1000.0, 100.0, 0.0)
    p = vp.to_physical(user(0.0), Measure(50.0, Unit.PCT))
    assert p.x == pytest.approx(1500.0)
    assert p.y == pytest.approx(500.0)

    p = vp.to_physical(user(0.0), Measure(1.0, Unit.IN))
    assert p.x == pytest.approx(2000.0)

    assert vp.to_physical(user(0.0), Measure(0.0, Unit.PCT)) is None
    assert vp.to_physical(user(0.0), Measure(-1.0, Unit.IN)) is None


def test_polar_percent_theta():
    vp = Viewport.polar(2000.0, 2000.0, 100.0, 0.0)
    p = vp.to_physical(Measure(25.0, Unit.PCT), user(5.0))
    assert p.x == pytest.approx(1000.0, abs=1e-9)
    assert p.y == pytest.approx(1500.0)


def test_polar_without_user_units_is_cartesian():
    vp = Viewport.polar(2000.0, 1000.0, 100.0, 0.0)
    p = vp.to_physical(Measure(1.0, Unit.IN), Measure(50.0, Unit.PCT))
    assert p == Point(1000.0, 500.0)


def test_polar_origin_has_no_user_coordinates():
    vp = Viewport.polar(2000.0, 2000.0, 100.0, 0.0)
    assert vp.physical_to_user(1000.0, 1000.0) is None


@pytest.mark.parametrize("reverse_theta", [False, True])
@pytest.mark.parametrize("reverse_radius", [False, True])
@pytest.mark.parametrize("log_radius", [False, True])
@pytest.mark.parametrize("zero_angle", [0.0, 135.0])
def test_polar_round_trip(reverse_theta, reverse_radius, log_radius, zero_angle):
    radius_at_origin = 10.0 if reverse_radius else 0.5
    vp = Viewport.polar_plot(
        2000.0, 2000.0, 100.0, radius_at_origin,
        zero_angle=zero_angle, reverse_theta=reverse_theta,
        reverse_radius=reverse_radius, log_radius=log_radius
    )
    for theta, r in [(30.0, 4.0), (200.0, 7.5), (359.0, 2.0), (-45.0, 3.0)]:
        p = vp.user_to_physical(Point(theta, r))
        assert p is not None
        m_theta, m_r = vp.physical_to_user(p.x, p.y)
        assert m_theta.value == pytest.approx(theta % 360.0, abs=1e-3)
        assert 0.0 <= m_theta.value < 360.0
        assert m_r.value == pytest.approx(r, abs=1e-3)


def test_polar_inverse_in_percent_and_physical_units():
    vp = Viewport.polar(2000.0, 1000.0, 100.0, 0.0)
    m_theta, m_r = vp.physical_to_user(1000.0, 1000.0, Unit.PCT, Unit.USER)
    assert m_theta == Measure(25.0, Unit.PCT)
    assert m_r == Measure(5.0, Unit.USER)

    m_theta, m_r = vp.physical_to_user(500.0, 500.0, Unit.USER, Unit.PCT)
    assert m_theta.value == pytest.approx(180.0)
    assert m_r == Measure(50.0, Unit.PCT)


def test_polar_inverse_without_user_units_is_cartesian():
    vp = Viewport.polar(2000.0, 1000.0, 100.0, 0.0)
    mx, my = vp.physical_to_user(1000.0, 1000.0, Unit.PCT, Unit.IN)
    assert mx == Measure(50.0, Unit.PCT)
    assert my == Measure(1.0, Unit.IN)


# ------------------------------------------------------------------------------
# Bulk transform
# ------------------------------------------------------------------------------
def test_bulk_transform_matches_scalar():
    vp = Viewport.polar_plot(2000.0, 2000.0, 100.0, 1.0, zero_angle=30.0, reverse_theta=True)
    points = np.array([[0.0, 1.0], [45.0, 3.0], [300.0, 9.5], [10.0, 0.5]])
    mapped = vp.user_to_physical_array(points)
    assert mapped.shape == (4, 2)
    for (theta, r), row in zip(points, mapped):
        p = vp.user_to_physical(Point(theta, r))
        if p is None:
            assert np.isnan(row).all()
        else:
            assert tuple(row) == pytest.approx((p.x, p.y))
    assert undefined_mask(mapped).tolist() == [False, False, False, True]


def test_bulk_transform_never_half_defined():
    vp = Viewport.cartesian(1000.0, 1000.0, 1.0, 100.0, 1.0, 100.0, log_y=True)
    mapped = vp.user_to_physical_array([[5.0, -1.0], [5.0, 10.0], [np.nan, 10.0]])
    assert np.isnan(mapped[0]).all()
    assert not np.isnan(mapped[1]).any()
    assert np.isnan(mapped[2]).all()


# ------------------------------------------------------------------------------
# Measures along one dimension
# ------------------------------------------------------------------------------
def test_measure_to_mils(cartesian_vp):
    assert cartesian_vp.measure_to_mils_x(Measure(50.0, Unit.PCT)) == pytest.approx(500.0)
    assert cartesian_vp.measure_to_mils_y(Measure(50.0, Unit.PCT)) == pytest.approx(250.0)
    assert cartesian_vp.measure_to_mils_y(Measure(2.0, Unit.IN)) == pytest.approx(2000.0)
    with pytest.raises(ValueError):
        cartesian_vp.measure_to_mils_x(user(1.0))


def test_mils_to_measure(cartesian_vp):
    assert cartesian_vp.mils_to_measure_x(500.0, Unit.PCT) == Measure(50.0, Unit.PCT)
    assert cartesian_vp.mils_to_measure_y(125.0, Unit.PCT) == Measure(25.0, Unit.PCT)
    assert cartesian_vp.mils_to_measure_x(1000.0, Unit.IN) == Measure(1.0, Unit.IN)
    with pytest.raises(ValueError):
        cartesian_vp.mils_to_measure_y(1.0, Unit.USER)
    with pytest.raises(ValueError):
        Viewport.plain(0.0, 10.0).mils_to_measure_x(1.0, Unit.PCT)


def test_to_physical_rect(cartesian_vp):
    rect = cartesian_vp.to_physical_rect(user(1.0), user(0.0), Measure(10.0, Unit.PCT), Measure(1.0, Unit.IN))
    assert rect == Rect(100.0, 250.0, 100.0, 1000.0)
    assert rect.contains(Point(150.0, 300.0))

    assert cartesian_vp.to_physical_rect(user(1.0), user(0.0), Measure(-1.0, Unit.IN), Measure(1.0, Unit.IN)) is None
    assert cartesian_vp.to_physical_rect(user(1.0), user(0.0), user(1.0), Measure(1.0, Unit.IN)) is None
