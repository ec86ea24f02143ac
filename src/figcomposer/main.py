"""
Demo Entry Point
================
Builds a small semilog graph, lets the axes follow the data and previews the
result.

Why is this file needed?
------------------------
It exercises the whole model in one place: data extents feed the auto-range
selector, the updated axes define a viewport and the viewport maps the data
into mils for the preview plot.
"""
import logging

import numpy as np

from figcomposer.logging_config import setup_logging
from figcomposer.model.axis import Layout
from figcomposer.model.graph import AutorangeAxes, Graph
from figcomposer.model.viewport import CoordSys

logger = logging.getLogger(__name__)


def main() -> None:
    # Add module_levels={"model.autorange": logging.DEBUG} to see every axis update
    setup_logging(level=logging.INFO)

    graph = Graph(width=4000.0, height=3000.0, coord_sys=CoordSys.SEMILOG_Y, autorange=AutorangeAxes.XY)
    t = np.linspace(0.0, 47.0, 200)
    graph.add_dataset(np.column_stack((t, 3.0 * np.exp(t / 8.0))))
    graph.auto_scale_axes()
    logger.info(f"Semilog graph: x {graph.validated_range(graph.primary)}, y {graph.validated_range(graph.secondary)}")

    polar = Graph(coord_sys=CoordSys.POLAR, layout=Layout.ALL_QUAD, autorange=AutorangeAxes.XY)
    theta = np.linspace(0.0, 720.0, 400)
    polar.add_dataset(np.column_stack((theta, theta / 72.0)))
    polar.auto_scale_axes()
    logger.info(f"Polar graph: radius {polar.validated_range(polar.secondary)}")

    graph.plot(show=False)
    polar.plot()


if __name__ == "__main__":
    main()
