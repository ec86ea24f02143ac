import logging

import matplotlib
import pytest

matplotlib.use("Agg")

from figcomposer.model.axis import AxisRange, GraphAxis, TickSet  # noqa: E402
from figcomposer.model.viewport import Viewport  # noqa: E402


@pytest.fixture(autouse=True)
def reset_figcomposer_logger():
    yield
    logger = logging.getLogger("figcomposer")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def linear_axis() -> GraphAxis:
    """A linear axis with a major tick set and the default range [0, 100]."""
    return GraphAxis(range=AxisRange(0.0, 100.0), major=TickSet())


@pytest.fixture
def cartesian_vp() -> Viewport:
    """1000 x 500 mils showing x in [0, 10] and y in [-5, 5]."""
    return Viewport.cartesian(1000.0, 500.0, 0.0, 10.0, -5.0, 5.0)
