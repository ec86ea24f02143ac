"""
Graph
=====
A graph ties the pieces of the model together: the datasets plotted in it,
its two axes and the viewport through which the datasets are drawn.

Data extents feed the auto-range selector, which updates the axes; a fresh
`Viewport` is then built from the validated axis ranges whenever the graph is
drawn.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

import numpy as np
import matplotlib.pyplot as plt

from figcomposer.config import DEFAULT_LOG_AXIS_START, DEFAULT_RADIAL_SPAN
from figcomposer.model.autorange import auto_range, theta_range
from figcomposer.model.axis import GraphAxis, Layout, TickSet
from figcomposer.model.geometry_primitives import Point
from figcomposer.model.viewport import CoordSys, Viewport

if TYPE_CHECKING:
    import numpy.typing as npt
    from matplotlib.figure import Figure

logger = logging.getLogger(__name__)


class AutorangeAxes(StrEnum):
    """Which axes of a graph are auto-ranged."""
    NONE = "none"
    X = "x"
    Y = "y"
    XY = "xy"

    @property
    def is_x_autoranged(self) -> bool:
        return self in (AutorangeAxes.X, AutorangeAxes.XY)

    @property
    def is_y_autoranged(self) -> bool:
        return self in (AutorangeAxes.Y, AutorangeAxes.XY)


def _default_axis() -> GraphAxis:
    return GraphAxis(major=TickSet())


@dataclass
class Graph:
    """
    A 2D graph: datasets in user units, a primary (x or theta) axis and a secondary (y or radial) axis.

    Attributes:
        width, height: Size of the data window, in mils.
        coord_sys: Coordinate system. Use `set_coord_sys` to change it afterwards.
        layout: Quadrant layout, used by polar graphs only.
        autorange: Axes that follow the data.
        primary: Horizontal axis, or theta axis of a polar graph.
        secondary: Vertical axis, or radial axis of a polar graph.
        datasets: (N, 2) arrays of user points.
    """
    width: float = 3000.0
    height: float = 3000.0
    coord_sys: CoordSys = CoordSys.CARTESIAN
    layout: Layout = Layout.QUAD1
    autorange: AutorangeAxes = AutorangeAxes.NONE
    primary: GraphAxis = field(default_factory=_default_axis)
    secondary: GraphAxis = field(default_factory=_default_axis)
    datasets: list[npt.NDArray[np.float64]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.set_coord_sys(self.coord_sys)

    @property
    def is_polar(self) -> bool:
        return self.coord_sys.is_polar

    def set_coord_sys(self, coord_sys: CoordSys) -> None:
        """Change the coordinate system and the kind of both axes with it."""
        self.coord_sys = coord_sys
        self.primary.is_logarithmic = coord_sys.is_log_x
        self.primary.is_theta = coord_sys.is_polar
        self.primary.is_radial = False
        self.secondary.is_logarithmic = coord_sys.is_log_y or coord_sys.is_log_r
        self.secondary.is_theta = False
        self.secondary.is_radial = coord_sys.is_polar

    def add_dataset(self, points: npt.ArrayLike) -> None:
        """
        Add a set of user points to the graph.

        Raises:
            ValueError: If `points` is not an (N, 2) array of numbers.
        """
        data = np.asarray(points, dtype=np.float64)
        if data.ndim != 2 or data.shape[1] != 2:
            msg = f"Dataset must have shape (N, 2), got {data.shape}."
            logger.error(msg)
            raise ValueError(msg)
        self.datasets.append(data)

    def data_range(self) -> tuple[float, float, float, float]:
        """
        Extents of the finite data along each axis.

        Returns:
            (x_min, x_max, y_min, y_max). An axis without finite data gets (0, 0).
        """
        if not self.datasets:
            return 0.0, 0.0, 0.0, 0.0
        points = np.vstack(self.datasets)
        extents: list[float] = []
        for column in (points[:, 0], points[:, 1]):
            finite = column[np.isfinite(column)]
            if finite.size == 0:
                extents.extend((0.0, 0.0))
            else:
                extents.extend((float(finite.min()), float(finite.max())))
        return extents[0], extents[1], extents[2], extents[3]

    def validated_range(self, axis: GraphAxis) -> tuple[float, float]:
        """
        The range of `axis` corrected so that a viewport can always be built from it.

        A log axis gets a positive, non-empty range. A radial axis starts at 0 or above and
        ends above its start. A theta axis covers the quadrants of the layout. A linear axis
        is never empty.
        """
        start, end = axis.range.start, axis.range.end
        if axis.is_logarithmic:
            if start <= 0:
                start = DEFAULT_LOG_AXIS_START
            if end <= 0 or end == start:
                end = start * 10
        elif axis.is_radial:
            start = max(start, 0.0)
            if end <= start:
                end = start + DEFAULT_RADIAL_SPAN
        elif axis.is_theta:
            fixed = theta_range(self.layout)
            start, end = fixed.start, fixed.end
        elif end == start:
            end += 1.0
        return start, end

    def auto_scale_axes(self) -> bool:
        """
        Auto-range the enabled axes to the current data.

        Returns:
            True if either axis changed.
        """
        if self.autorange is AutorangeAxes.NONE:
            return False
        x_min, x_max, y_min, y_max = self.data_range()

        changed = auto_range(self.primary, x_min, x_max, self.layout, enabled=self.autorange.is_x_autoranged)
        if auto_range(self.secondary, y_min, y_max, self.layout, enabled=self.autorange.is_y_autoranged):
            changed = True

        if changed:
            logger.info(
                f"Rescaled axes: primary [{self.primary.start}, {self.primary.end}], "
                f"secondary [{self.secondary.start}, {self.secondary.end}]."
            )
        return changed

    def is_data_out_of_bounds(self) -> bool:
        """True if some data lies outside the validated range of its axis."""
        x_min, x_max, y_min, y_max = self.data_range()
        x_start, x_end = sorted(self.validated_range(self.primary))
        y_start, y_end = sorted(self.validated_range(self.secondary))
        return x_min < x_start or x_max > x_end or y_min < y_start or y_max > y_end

    def viewport(self) -> Viewport:
        """
        Build the viewport of the data window from the validated axis ranges.

        In a polar graph the origin sits in the corner of the quadrant shown, or at the centre
        when all quadrants are shown. The radial range then spans the smaller window dimension
        (half of it for all quadrants).

        Raises:
            ViewportError: If the validated ranges still cannot define a viewport.
        """
        left, right = self.validated_range(self.primary)
        bottom, top = self.validated_range(self.secondary)

        match self.coord_sys:
            case CoordSys.POLAR | CoordSys.POLAR_LOG_R:
                min_radius, max_radius = bottom, top
                x0 = self.width if self.layout in (Layout.QUAD2, Layout.QUAD3) else 0.0
                y0 = self.height if self.layout in (Layout.QUAD3, Layout.QUAD4) else 0.0
                if self.layout is Layout.ALL_QUAD:
                    x0, y0 = self.width / 2, self.height / 2

                if self.coord_sys.is_log_r:
                    span = math.log10(max_radius) - math.log10(min_radius)
                else:
                    span = max_radius - min_radius
                unit_radius = min(self.width, self.height) / span
                if self.layout is Layout.ALL_QUAD:
                    unit_radius /= 2

                return Viewport.polar(
                    self.width, self.height, unit_radius, min_radius,
                    origin=Point(x0, y0),
                    log_radius=self.coord_sys.is_log_r
                )
            case _:
                return Viewport.cartesian(
                    self.width, self.height, left, right, bottom, top,
                    log_x=self.coord_sys.is_log_x,
                    log_y=self.coord_sys.is_log_y
                )

    def plot(self, show: bool = True) -> Figure:
        """
        Preview the datasets as they would be drawn: mapped through the viewport into mils.

        Undefined points leave a gap in the line.
        """
        vp = self.viewport()

        plt.rcParams["figure.constrained_layout.use"] = True
        fig = plt.figure(figsize=(7, 5))
        plt.axis('equal')

        # data window outline
        plt.plot(
            [0, self.width, self.width, 0, 0], [0, 0, self.height, self.height, 0],
            color='gray', lw=0.5
        )
        for i, data in enumerate(self.datasets):
            mapped = vp.user_to_physical_array(data)
            plt.plot(mapped[:, 0], mapped[:, 1], lw=1.5, label=f"dataset {i}")

        plt.title(f"{self.coord_sys} graph")
        plt.xlabel("x (mils)")
        plt.ylabel("y (mils)")
        if self.datasets:
            plt.legend()

        if show:
            plt.show()
        return fig
