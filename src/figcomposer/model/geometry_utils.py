from __future__ import annotations

from math import pi, cos, sin

from figcomposer.model.geometry_primitives import Point, Vector


def deg2rad(degrees: float) -> float:
    return degrees * pi / 180


def restrict_angle(degrees: float, origin: float = 0.0) -> float:
    """
    Map any angle onto the equivalent angle in [origin, origin + 360).

    Args:
        degrees: Any angle in degrees.
        origin: Start of the 360-degree window, in degrees.

    Returns:
        The equivalent angle inside the window.
    """
    angle = (degrees - origin) % 360.0
    # float modulo can round up to the modulus itself for tiny negative inputs
    if angle >= 360.0:
        angle = 0.0
    return angle + origin


def polar_to_cartesian(length: float, theta_deg: float, origin: Point) -> Point:
    """
    Locate the point at `length` from `origin` along the ray at `theta_deg`.

    The angle is measured counter-clockwise from the rightward direction.
    """
    theta = deg2rad(theta_deg)
    return origin + Vector(length * cos(theta), length * sin(theta))
