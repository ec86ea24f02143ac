"""
Viewport Coordinate Transforms
==============================
A `Viewport` describes one 2D coordinate system laid over a physical
rectangle measured in mils (thousandths of an inch), with the origin at the
rectangle's bottom-left corner. It converts between:

* "user" units, the data coordinates of a graph (linear, logarithmic or polar),
* measures carrying a physical or percentage unit (see `Measure`),
* physical rendering coordinates in mils.

Polar conventions:
    The angular (theta) coordinate is always in degrees. A theta given in
    percent is a percentage of 360 degrees, a theta given in a physical unit
    is taken as degrees. A radius given in percent is relative to the smaller
    viewport dimension. When neither coordinate is in user units the pair is
    treated as plain Cartesian coordinates.

Points that cannot be mapped (log of a non-positive value, radius outside
the radial axis, the polar origin itself) are reported as `None`, never
raised. Bulk transforms report them as a NaN pair.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, NoReturn, Optional, TYPE_CHECKING

import numpy as np

from figcomposer.config import DEFAULT_MIN_LOG_RADIUS, MAX_FRAC_DIGITS, MAX_SIG_DIGITS
from figcomposer.model.geometry_primitives import Point, Rect
from figcomposer.model.geometry_utils import polar_to_cartesian, restrict_angle
from figcomposer.model.measure import Measure, Unit
from figcomposer.utils import is_well_defined, limit_sig_and_frac_digits

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Enums & Errors
# ------------------------------------------------------------------------------
class CoordSys(StrEnum):
    NONE = "none"
    CARTESIAN = "cartesian"
    SEMILOG_X = "semilogX"
    SEMILOG_Y = "semilogY"
    LOG_LOG = "loglog"
    POLAR = "polar"
    POLAR_LOG_R = "semilogR"

    @property
    def is_polar(self) -> bool:
        return self in (CoordSys.POLAR, CoordSys.POLAR_LOG_R)

    @property
    def is_log_x(self) -> bool:
        return self in (CoordSys.SEMILOG_X, CoordSys.LOG_LOG)

    @property
    def is_log_y(self) -> bool:
        return self in (CoordSys.SEMILOG_Y, CoordSys.LOG_LOG)

    @property
    def is_log_r(self) -> bool:
        return self is CoordSys.POLAR_LOG_R


class ViewportError(ValueError):
    """Raised when a viewport cannot be built from the supplied parameters."""


def _fail(msg: str) -> NoReturn:
    logger.error(msg)
    raise ViewportError(msg)


def _log10(value: float) -> Optional[float]:
    return math.log10(value) if value > 0 else None


def _pow10(exponent: float) -> Optional[float]:
    try:
        return 10.0 ** exponent
    except OverflowError:
        return None


def undefined_mask(points: npt.NDArray[np.float64]) -> npt.NDArray[np.bool_]:
    """Rows of an (N, 2) array produced by `Viewport.user_to_physical_array` that are undefined."""
    return np.isnan(points).any(axis=1)


# ------------------------------------------------------------------------------
# Viewport
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class Viewport:
    """
    Immutable description of a 2D coordinate system over a physical rectangle.

    Prefer the factory constructors (`plain`, `cartesian`, `polar`, `polar_plot`)
    over building one field by field.

    Attributes:
        width, height: Physical size in mils.
        coord_sys: Kind of user coordinate system.
        user_origin: User coordinates of the bottom-left corner (log10 space for log axes).
        scale_x, scale_y: Mils per user unit (per decade for log axes).
        polar_origin: Physical location of the polar origin, in mils.
        radius_at_origin: Radial coordinate mapped onto the polar origin.
        radius_scale: Mils per unit radius (per decade for a log radius).
        theta_reversed: Theta increases clockwise.
        radius_reversed: Radius increases toward the polar origin.
        theta_zero: Direction of theta = 0, in degrees CCW from rightward.
    """
    width: float
    height: float
    coord_sys: CoordSys = CoordSys.NONE
    user_origin: Point = Point(0.0, 0.0)
    scale_x: float = 1.0
    scale_y: float = 1.0
    polar_origin: Optional[Point] = None
    radius_at_origin: float = 0.0
    radius_scale: float = 1.0
    theta_reversed: bool = False
    radius_reversed: bool = False
    theta_zero: float = 0.0

    def __post_init__(self) -> None:
        if not is_well_defined(
            self.width, self.height, self.user_origin.x, self.user_origin.y,
            self.scale_x, self.scale_y, self.radius_at_origin, self.radius_scale, self.theta_zero
        ):
            _fail("All viewport parameters must be finite numbers.")
        if self.width < 0 or self.height < 0:
            _fail(f"Viewport size must not be negative, got {self.width} x {self.height} mils.")

        if self.coord_sys.is_polar:
            origin = self.polar_origin
            if origin is None or not is_well_defined(origin.x, origin.y):
                object.__setattr__(self, "polar_origin", Point(self.width / 2, self.height / 2))
            if self.coord_sys.is_log_r and self.radius_at_origin <= 0:
                _fail(f"Radius at origin must be positive on a log radial axis, got {self.radius_at_origin}.")
            if self.radius_at_origin < 0:
                _fail(f"Radius at origin must not be negative, got {self.radius_at_origin}.")

        object.__setattr__(self, "theta_zero", restrict_angle(self.theta_zero))

    # --------------------------------------------------------------------------
    # Factories
    # --------------------------------------------------------------------------
    @classmethod
    def plain(cls, width: float, height: float) -> Viewport:
        """A viewport without a user coordinate system: user units are mils."""
        return cls(width, height)

    @classmethod
    def cartesian(
        cls,
        width: float,
        height: float,
        left: float,
        right: float,
        bottom: float,
        top: float,
        log_x: bool = False,
        log_y: bool = False
    ) -> Viewport:
        """
        A cartesian, semilog or log-log viewport spanning the given user ranges.

        Args:
            width, height: Physical size in mils.
            left, right: User x-coordinates at the left and right edges.
            bottom, top: User y-coordinates at the bottom and top edges.
            log_x, log_y: Whether the dimension is logarithmic (base 10).

        Raises:
            ViewportError: Non-finite input, an empty user range, or a non-positive range on a log axis.
        """
        if not is_well_defined(width, height, left, right, bottom, top):
            _fail("All viewport parameters must be finite numbers.")
        if (log_x and (left <= 0 or right <= 0)) or (log_y and (bottom <= 0 or top <= 0)):
            _fail("User coordinate range must be strictly positive for a logarithmic axis.")

        if log_x:
            left, right = math.log10(left), math.log10(right)
        if log_y:
            bottom, top = math.log10(bottom), math.log10(top)
        if left == right or bottom == top:
            _fail(f"User coordinate range must not be empty: x [{left}, {right}], y [{bottom}, {top}].")

        match (log_x, log_y):
            case (True, True):
                coord_sys = CoordSys.LOG_LOG
            case (True, False):
                coord_sys = CoordSys.SEMILOG_X
            case (False, True):
                coord_sys = CoordSys.SEMILOG_Y
            case _:
                coord_sys = CoordSys.CARTESIAN

        return cls(
            width=width,
            height=height,
            coord_sys=coord_sys,
            user_origin=Point(left, bottom),
            scale_x=width / (right - left),
            scale_y=height / (top - bottom),
        )

    @classmethod
    def polar(
        cls,
        width: float,
        height: float,
        unit_radius: float,
        min_radius: float,
        origin: Optional[Point] = None,
        log_radius: bool = False
    ) -> Viewport:
        """
        A classic polar viewport: theta zero points right and increases CCW, radius grows outward.

        A non-positive `min_radius` is replaced by 0.01 on a log radial axis; a negative one by 0
        on a linear radial axis. The origin defaults to the centre of the viewport.
        """
        if not is_well_defined(unit_radius, min_radius):
            _fail("All viewport parameters must be finite numbers.")
        if log_radius:
            radius_at_origin = min_radius if min_radius > 0 else DEFAULT_MIN_LOG_RADIUS
        else:
            radius_at_origin = max(0.0, min_radius)
        return cls(
            width=width,
            height=height,
            coord_sys=CoordSys.POLAR_LOG_R if log_radius else CoordSys.POLAR,
            polar_origin=origin,
            radius_at_origin=radius_at_origin,
            radius_scale=unit_radius,
        )

    @classmethod
    def polar_plot(
        cls,
        width: float,
        height: float,
        unit_radius: float,
        radius_at_origin: float,
        origin: Optional[Point] = None,
        zero_angle: float = 0.0,
        reverse_theta: bool = False,
        reverse_radius: bool = False,
        log_radius: bool = False
    ) -> Viewport:
        """
        A flexible polar viewport.

        Args:
            width, height: Physical size in mils.
            unit_radius: Mils per unit radius (per decade if `log_radius`).
            radius_at_origin: Radial value at the polar origin. This is the minimum radius, or the
                maximum radius when `reverse_radius` is set.
            origin: Physical location of the polar origin. Defaults to the viewport centre.
            zero_angle: Direction of theta = 0 in degrees, CCW from rightward.
            reverse_theta: Theta increases clockwise.
            reverse_radius: Radius increases toward the origin.
            log_radius: Logarithmic (base 10) radial axis.
        """
        return cls(
            width=width,
            height=height,
            coord_sys=CoordSys.POLAR_LOG_R if log_radius else CoordSys.POLAR,
            polar_origin=origin,
            radius_at_origin=radius_at_origin,
            radius_scale=unit_radius,
            theta_reversed=reverse_theta,
            radius_reversed=reverse_radius,
            theta_zero=zero_angle,
        )

    # --------------------------------------------------------------------------
    # Properties
    # --------------------------------------------------------------------------
    @property
    def is_polar(self) -> bool:
        return self.coord_sys.is_polar

    @property
    def physical_user_origin(self) -> Point:
        """Physical location of the polar origin, or (0, 0) for a non-polar viewport."""
        if self.is_polar:
            return self.polar_origin
        return Point(0.0, 0.0)

    @property
    def _min_dimension(self) -> float:
        return min(self.width, self.height)

    # --------------------------------------------------------------------------
    # Single coordinate helpers
    # --------------------------------------------------------------------------
    def _user_x_to_mils(self, x: float) -> Optional[float]:
        if self.coord_sys.is_log_x:
            x = _log10(x)
            if x is None:
                return None
        return (x - self.user_origin.x) * self.scale_x

    def _user_y_to_mils(self, y: float) -> Optional[float]:
        if self.coord_sys.is_log_y:
            y = _log10(y)
            if y is None:
                return None
        return (y - self.user_origin.y) * self.scale_y

    def _mils_to_user_x(self, x: float) -> Optional[float]:
        if self.scale_x == 0:
            return None
        x = x / self.scale_x + self.user_origin.x
        return _pow10(x) if self.coord_sys.is_log_x else x

    def _mils_to_user_y(self, y: float) -> Optional[float]:
        if self.scale_y == 0:
            return None
        y = y / self.scale_y + self.user_origin.y
        return _pow10(y) if self.coord_sys.is_log_y else y

    def _radius_to_length(self, r: float) -> Optional[float]:
        """Physical distance from the polar origin of the radial user coordinate `r`."""
        origin_r = self.radius_at_origin
        if self.radius_reversed:
            if not r <= origin_r:
                return None
            if self.coord_sys.is_log_r:
                log_r = _log10(r)
                if log_r is None:
                    return None
                length = math.log10(origin_r) - log_r
            else:
                length = origin_r - r
        else:
            if not r >= origin_r:
                return None
            length = math.log10(r) - math.log10(origin_r) if self.coord_sys.is_log_r else r - origin_r
        return length * self.radius_scale

    def _length_to_radius(self, length: float) -> Optional[float]:
        if self.radius_scale == 0:
            return None
        length /= self.radius_scale
        if self.coord_sys.is_log_r:
            factor = _pow10(length)
            if factor is None:
                return None
            return self.radius_at_origin / factor if self.radius_reversed else self.radius_at_origin * factor
        return self.radius_at_origin - length if self.radius_reversed else self.radius_at_origin + length

    def _standard_theta(self, theta: float) -> float:
        """Angle in degrees CCW from rightward for the theta user coordinate."""
        return restrict_angle(self.theta_zero + (-theta if self.theta_reversed else theta))

    def _user_theta(self, standard_theta: float) -> float:
        return (-1.0 if self.theta_reversed else 1.0) * (standard_theta - self.theta_zero)

    def _point_or_none(self, x: Optional[float], y: Optional[float]) -> Optional[Point]:
        if x is None or y is None or not is_well_defined(x, y):
            return None
        return Point(x, y)

    # --------------------------------------------------------------------------
    # Forward transforms
    # --------------------------------------------------------------------------
    def user_to_physical(self, point: Point) -> Optional[Point]:
        """
        Map a point in user units to physical coordinates in mils.

        Returns:
            The physical point, or None if either coordinate cannot be mapped.
        """
        match self.coord_sys:
            case CoordSys.POLAR | CoordSys.POLAR_LOG_R:
                length = self._radius_to_length(point.y)
                if length is None or not is_well_defined(length, point.x):
                    return None
                p = polar_to_cartesian(length, self._standard_theta(point.x), self.polar_origin)
                return self._point_or_none(p.x, p.y)
            case _:
                return self._point_or_none(self._user_x_to_mils(point.x), self._user_y_to_mils(point.y))

    def user_to_physical_array(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Vectorised `user_to_physical` for an (N, 2) array of user points, e.g. a polyline.

        Undefined vertices come back as a NaN pair so a renderer can break the polyline there.
        """
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        x, y = pts[:, 0], pts[:, 1]

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            match self.coord_sys:
                case CoordSys.POLAR | CoordSys.POLAR_LOG_R:
                    origin_r = self.radius_at_origin
                    if self.radius_reversed:
                        valid = y <= origin_r
                        if self.coord_sys.is_log_r:
                            length = np.log10(origin_r) - np.log10(np.where(y > 0, y, np.nan))
                        else:
                            length = origin_r - y
                    else:
                        valid = y >= origin_r
                        length = np.log10(y) - np.log10(origin_r) if self.coord_sys.is_log_r else y - origin_r
                    length = np.where(valid, length, np.nan) * self.radius_scale
                    sign = -1.0 if self.theta_reversed else 1.0
                    theta = np.deg2rad(np.mod(self.theta_zero + sign * x, 360.0))
                    px = self.polar_origin.x + length * np.cos(theta)
                    py = self.polar_origin.y + length * np.sin(theta)
                case _:
                    if self.coord_sys.is_log_x:
                        x = np.log10(np.where(x > 0, x, np.nan))
                    if self.coord_sys.is_log_y:
                        y = np.log10(np.where(y > 0, y, np.nan))
                    px = (x - self.user_origin.x) * self.scale_x
                    py = (y - self.user_origin.y) * self.scale_y
            result = np.column_stack((px, py))

        result[~np.isfinite(result).all(axis=1)] = np.nan
        return result

    def to_physical(self, x: Measure, y: Measure) -> Optional[Point]:
        """
        Map a coordinate pair of measures to physical coordinates in mils.

        Args:
            x: Horizontal coordinate, or theta in a polar viewport.
            y: Vertical coordinate, or radius in a polar viewport.

        Returns:
            The physical point, or None if the pair cannot be mapped.
        """
        if self.is_polar and Unit.USER in (x.unit, y.unit):
            return self._polar_measures_to_physical(x, y)

        match x.unit:
            case Unit.USER:
                px = self._user_x_to_mils(x.value)
            case Unit.PCT:
                px = x.value * self.width / 100.0
            case _:
                px = x.to_mils()
        match y.unit:
            case Unit.USER:
                py = self._user_y_to_mils(y.value)
            case Unit.PCT:
                py = y.value * self.height / 100.0
            case _:
                py = y.to_mils()
        return self._point_or_none(px, py)

    def _polar_measures_to_physical(self, theta: Measure, radius: Measure) -> Optional[Point]:
        theta_deg = theta.value * 3.6 if theta.unit is Unit.PCT else theta.value

        match radius.unit:
            case Unit.USER:
                length = self._radius_to_length(radius.value)
            case Unit.PCT:
                length = radius.value * self._min_dimension / 100.0 if radius.value > 0 else None
            case _:
                length = radius.to_mils() if radius.value > 0 else None
        if length is None or not is_well_defined(length):
            return None

        p = polar_to_cartesian(length, self._standard_theta(theta_deg), self.polar_origin)
        return self._point_or_none(p.x, p.y)

    def to_physical_rect(self, x: Measure, y: Measure, width: Measure, height: Measure) -> Optional[Rect]:
        """
        Physical rectangle with its bottom-left corner at (x, y).

        Returns None if the corner is undefined, a size is in user units or a size is negative.
        """
        corner = self.to_physical(x, y)
        if corner is None or Unit.USER in (width.unit, height.unit):
            return None
        w = self.measure_to_mils_x(width)
        h = self.measure_to_mils_y(height)
        if w < 0 or h < 0:
            return None
        return Rect(corner.x, corner.y, w, h)

    def distance_in_physical(self, p0: Point, p1: Point) -> float:
        """Physical distance in mils between two user points; 0 if either is undefined."""
        a = self.user_to_physical(p0)
        b = self.user_to_physical(p1)
        if a is None or b is None:
            return 0.0
        return a.distance_to(b)

    # --------------------------------------------------------------------------
    # Inverse transforms
    # --------------------------------------------------------------------------
    def physical_to_user(
        self,
        x: float,
        y: float,
        unit_x: Unit = Unit.USER,
        unit_y: Unit = Unit.USER,
        precision: int = MAX_FRAC_DIGITS
    ) -> Optional[tuple[Measure, Measure]]:
        """
        Express a physical point in the requested units; the inverse of `to_physical`.

        Args:
            x, y: Physical coordinates in mils.
            unit_x, unit_y: Desired units of the two coordinates.
            precision: Maximum number of fractional digits, restricted to [0, 3]. Results never
                carry more than 7 significant digits.

        Returns:
            The coordinate pair, or None if the point has no representation in those units.
        """
        if not is_well_defined(x, y):
            return None
        precision = min(MAX_FRAC_DIGITS, max(0, precision))

        if self.is_polar and Unit.USER in (unit_x, unit_y):
            return self._physical_to_polar_measures(x, y, unit_x, unit_y, precision)

        mx = self._axis_measure(x, unit_x, self.width, self._mils_to_user_x, precision)
        my = self._axis_measure(y, unit_y, self.height, self._mils_to_user_y, precision)
        if mx is None or my is None:
            return None
        return mx, my

    def _axis_measure(
        self,
        mils: float,
        unit: Unit,
        extent: float,
        to_user: Callable[[float], Optional[float]],
        precision: int
    ) -> Optional[Measure]:
        match unit:
            case Unit.USER:
                return self._limited_measure(to_user(mils), unit, precision)
            case Unit.PCT:
                return self._limited_measure(mils * 100.0 / extent if extent != 0 else None, unit, precision)
            case _:
                return Measure.from_mils(mils, unit, MAX_SIG_DIGITS, precision)

    def _physical_to_polar_measures(
        self, x: float, y: float, unit_x: Unit, unit_y: Unit, precision: int
    ) -> Optional[tuple[Measure, Measure]]:
        offset = Point(x, y) - self.polar_origin
        length = offset.magnitude
        if length == 0:
            return None

        theta = restrict_angle(self._user_theta(math.degrees(math.atan2(offset.y, offset.x))))
        period = 360.0
        if unit_x is Unit.PCT:
            theta, period = theta / 3.6, 100.0
        # rounding may push the angle up to a full turn
        m_theta = Measure(limit_sig_and_frac_digits(theta, MAX_SIG_DIGITS, precision) % period, unit_x)

        match unit_y:
            case Unit.USER:
                m_radius = self._limited_measure(self._length_to_radius(length), unit_y, precision)
            case Unit.PCT:
                min_dim = self._min_dimension
                m_radius = self._limited_measure(length * 100.0 / min_dim if min_dim != 0 else None, unit_y, precision)
            case _:
                m_radius = Measure.from_mils(length, unit_y, MAX_SIG_DIGITS, precision)
        if m_radius is None:
            return None
        return m_theta, m_radius

    @staticmethod
    def _limited_measure(value: Optional[float], unit: Unit, precision: int) -> Optional[Measure]:
        if value is None or not is_well_defined(value):
            return None
        return Measure(limit_sig_and_frac_digits(value, MAX_SIG_DIGITS, precision), unit)

    # --------------------------------------------------------------------------
    # Measures along one dimension
    # --------------------------------------------------------------------------
    def measure_to_mils_x(self, m: Measure) -> float:
        """
        Horizontal length of a physical or percentage measure, in mils.

        Raises:
            ValueError: If the measure is in user units.
        """
        match m.unit:
            case Unit.USER:
                raise ValueError("A user-unit measure has no viewport-independent length.")
            case Unit.PCT:
                return m.value * self.width / 100.0
            case _:
                return m.to_mils()

    def measure_to_mils_y(self, m: Measure) -> float:
        """Vertical counterpart of `measure_to_mils_x`."""
        match m.unit:
            case Unit.USER:
                raise ValueError("A user-unit measure has no viewport-independent length.")
            case Unit.PCT:
                return m.value * self.height / 100.0
            case _:
                return m.to_mils()

    def mils_to_measure_x(self, mils: float, unit: Unit) -> Measure:
        """
        Express a horizontal length in mils as a physical or percentage measure.

        Percentages keep at most 5 significant and 2 fractional digits.

        Raises:
            ValueError: For user units, or for a percentage of a zero-width viewport.
        """
        return self._mils_to_measure(mils, unit, self.width)

    def mils_to_measure_y(self, mils: float, unit: Unit) -> Measure:
        return self._mils_to_measure(mils, unit, self.height)

    @staticmethod
    def _mils_to_measure(mils: float, unit: Unit, extent: float) -> Measure:
        match unit:
            case Unit.USER:
                raise ValueError("Cannot express a physical length in user units.")
            case Unit.PCT:
                if extent == 0:
                    raise ValueError("Cannot express a length as a percentage of an empty extent.")
                return Measure(limit_sig_and_frac_digits(mils * 100.0 / extent, 5, 2), unit)
            case _:
                return Measure.from_mils(mils, unit)
