"""Viewport coordinate transforms and axis auto-ranging for scientific figures."""
