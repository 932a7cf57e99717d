"""
Visualization components for rover simulation.

This module renders the rover, its trace, world features and proximity
readings onto a matplotlib figure.
"""

from .renderer import CONTEXT_ERROR, RenderSnapshot, SceneRenderer, create_axes

__all__ = [
    "CONTEXT_ERROR",
    "RenderSnapshot",
    "SceneRenderer",
    "create_axes"
]
