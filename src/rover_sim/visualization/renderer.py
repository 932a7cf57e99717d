"""
Top-down scene rendering with matplotlib.

The scene is drawn rover-centred and rover-up: the view is translated to the
rover position and rotated so the rover's heading points to the top of the
viewport. A world point p with the rover at c and heading h (compass, rad)
maps to view coordinates

    v = R(h) · (p − c),   R(h) = [[cos h, −sin h], [sin h, cos h]]

The visible area is a disc of radius min(width, height) / (2 · scale) meters.

Classes:
    RenderSnapshot: Everything needed to draw one frame
    SceneRenderer: Draws snapshots onto a matplotlib Axes
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Sequence, Tuple

from matplotlib.patches import Circle, Polygon

from ..config import GRID_GUTTER, MAX_PROXIMITY_DISTANCE, RENDER_SCALE
from ..geo import LocalPosition
from ..options import RenderingOptions
from ..features import Landmine, Marker, Obstacle, Target

logger = logging.getLogger(__name__)

CONTEXT_ERROR = "Cannot create 2D rendering context for figure."


@dataclass
class RenderSnapshot:
    """Observable simulation state for one rendered frame."""

    position: LocalPosition
    heading: float  # compass degrees
    width: float
    height: float
    wheels: List[Tuple[LocalPosition, float]] = field(default_factory=list)
    trace: List[LocalPosition] = field(default_factory=list)
    markers: Sequence[Marker] = ()
    obstacles: Sequence[Obstacle] = ()
    targets: Sequence[Target] = ()
    landmines: Sequence[Landmine] = ()
    proximity: Sequence[float] = ()
    max_range: float = MAX_PROXIMITY_DISTANCE
    options: RenderingOptions = field(default_factory=RenderingOptions)


def create_axes(element: Any, options: RenderingOptions):
    """
    Obtain the drawing context from the host element.

    Args:
        element: matplotlib Figure to draw into, or an existing Axes
        options: Rendering options providing the canvas size in pixels

    Returns:
        matplotlib Axes covering the whole figure

    Raises:
        RuntimeError: If no 2D drawing context can be obtained
    """
    if element is None:
        raise RuntimeError(CONTEXT_ERROR)

    # An Axes passed directly is used as-is
    if hasattr(element, "add_patch") and hasattr(element, "figure"):
        logger.debug("Drawing into the provided Axes")
        return element

    if not hasattr(element, "add_axes"):
        raise RuntimeError(CONTEXT_ERROR)

    try:
        dpi = element.get_dpi()
        element.set_size_inches(options.width / dpi, options.height / dpi)
        axes = element.add_axes([0.0, 0.0, 1.0, 1.0])
    except (AttributeError, TypeError, ValueError) as exc:
        raise RuntimeError(CONTEXT_ERROR) from exc

    if axes is None:
        raise RuntimeError(CONTEXT_ERROR)
    return axes


class SceneRenderer:
    """
    Draws rover, trace, world features and proximity readings.

    Attributes:
        axes: matplotlib Axes the scene is drawn on
        scale: Pixels per meter
    """

    def __init__(self, axes, scale: float = RENDER_SCALE):
        self.axes = axes
        self.scale = scale
        self.frame_count = 0

    def render(self, snapshot: RenderSnapshot) -> None:
        """Draw one frame and request a canvas redraw."""
        options = snapshot.options
        ax = self.axes
        radius = min(options.width, options.height) / (2 * self.scale)

        ax.clear()
        ax.set_xlim(-radius, radius)
        ax.set_ylim(-radius, radius)
        ax.set_aspect("equal")
        ax.set_axis_off()
        ax.figure.set_facecolor("black")

        viewport = Circle((0, 0), radius, facecolor="black",
                          edgecolor=options.color_grid, linewidth=1.0)
        ax.add_patch(viewport)

        to_view = self._view_transform(snapshot.position, snapshot.heading)
        artists = []

        if options.show_grid:
            artists.extend(self._draw_grid(snapshot.position, radius, to_view, options.color_grid))
        if options.show_trace and snapshot.trace:
            xs, ys = zip(*(to_view(p) for p in [snapshot.position] + list(snapshot.trace)))
            artists.extend(ax.plot(xs, ys, color=options.color_trace, linewidth=1.0))

        for obstacle in snapshot.obstacles:
            artists.append(ax.add_patch(Circle(to_view(obstacle.position), obstacle.radius,
                                               facecolor="none", edgecolor=options.color_obstacle)))
        for target in snapshot.targets:
            artists.append(ax.add_patch(Circle(to_view(target.position), target.radius,
                                               color=options.color_target)))
        for landmine in snapshot.landmines:
            artists.append(ax.add_patch(Circle(to_view(landmine.position), landmine.radius,
                                               color=options.color_landmine)))
        for marker in snapshot.markers:
            x, y = to_view(marker.position)
            artists.append(ax.add_patch(Circle((x, y), 0.25, color=options.color_marker)))
            artists.append(ax.text(x, y + 0.6, marker.label, color=options.color_marker,
                                   ha="center", fontsize=9))

        if options.show_proximity and snapshot.proximity:
            artists.extend(self._draw_proximity(snapshot, options.color_proximity))

        self._draw_rover(snapshot, to_view, options.color_rover)

        if options.show_compass:
            self._draw_compass(snapshot.heading, radius, options.color_compass)

        for artist in artists:
            artist.set_clip_path(viewport)

        ax.figure.canvas.draw_idle()
        self.frame_count += 1

    @staticmethod
    def _view_transform(center: LocalPosition, heading: float):
        h = math.radians(heading)
        cos_h, sin_h = math.cos(h), math.sin(h)
        cx, cy = center

        def to_view(point: LocalPosition) -> Tuple[float, float]:
            dx, dy = point[0] - cx, point[1] - cy
            return dx * cos_h - dy * sin_h, dx * sin_h + dy * cos_h

        return to_view

    def _draw_grid(self, center: LocalPosition, radius: float, to_view, color: str):
        cx, cy = center
        start_x = math.floor((cx - radius) / GRID_GUTTER) * GRID_GUTTER
        start_y = math.floor((cy - radius) / GRID_GUTTER) * GRID_GUTTER
        lines = int(math.ceil(2 * radius / GRID_GUTTER)) + 2

        artists = []
        for i in range(lines):
            gx = start_x + i * GRID_GUTTER
            gy = start_y + i * GRID_GUTTER
            for p1, p2 in (((gx, cy - radius * 1.5), (gx, cy + radius * 1.5)),
                           ((cx - radius * 1.5, gy), (cx + radius * 1.5, gy))):
                (x1, y1), (x2, y2) = to_view(p1), to_view(p2)
                artists.extend(self.axes.plot([x1, x2], [y1, y2], color=color,
                                              linewidth=0.3, alpha=0.5))
        return artists

    def _draw_proximity(self, snapshot: RenderSnapshot, color: str):
        # Readings are rover-relative, so view coordinates need no rotation
        step = 2 * math.pi / len(snapshot.proximity)
        xs, ys = [], []
        for index, distance in enumerate(snapshot.proximity):
            if distance >= snapshot.max_range:
                continue
            xs.append(distance * math.sin(step * index))
            ys.append(distance * math.cos(step * index))
        if not xs:
            return []
        return [self.axes.scatter(xs, ys, s=2, color=color)]

    def _draw_rover(self, snapshot: RenderSnapshot, to_view, color: str) -> None:
        half_w, half_h = snapshot.width / 2, snapshot.height / 2
        body = Polygon([(-half_w, -half_h), (half_w, -half_h), (half_w, half_h), (-half_w, half_h)],
                       closed=True, fill=False, edgecolor=color, linewidth=1.5)
        self.axes.add_patch(body)

        heading = math.radians(snapshot.heading)
        for position, wheel_heading in snapshot.wheels:
            x, y = to_view(position)
            relative = wheel_heading - heading
            dx, dy = 0.15 * math.sin(relative), 0.15 * math.cos(relative)
            self.axes.plot([x - dx, x + dx], [y - dy, y + dy], color=color, linewidth=2.0)

    def _draw_compass(self, heading: float, radius: float, color: str) -> None:
        # North has bearing -heading relative to the rover
        north = math.radians(-heading)
        base_x, base_y = radius * 0.75, radius * 0.75
        length = radius * 0.12
        self.axes.annotate("N",
                           xy=(base_x + length * math.sin(north), base_y + length * math.cos(north)),
                           xytext=(base_x, base_y), color=color, ha="center", va="center",
                           arrowprops={"arrowstyle": "->", "color": color})
