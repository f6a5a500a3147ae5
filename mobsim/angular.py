"""Helper that moves a position around a centre at a constant angular velocity."""

from __future__ import annotations

import math

from mobsim.geometry import Vector, Vector2D
from mobsim.mobility import Simulator


def _acos(value: float) -> float:
    """Arc cosine yielding NaN outside [-1, 1] instead of raising."""
    if math.isnan(value) or value < -1.0 or value > 1.0:
        return math.nan
    return math.acos(value)


class ConstantAngularVelocityHelper:
    """Tracks a position circling a centre; ``omega`` is (angular speed, direction).

    The helper starts paused.
    """

    def __init__(
        self,
        simulator: Simulator,
        center: Vector2D | None = None,
        omega: Vector2D | None = None,
        position: Vector | None = None,
    ) -> None:
        self.simulator = simulator
        self._center = center if center is not None else Vector2D()
        self._omega = omega if omega is not None else Vector2D()
        self._position = position if position is not None else Vector()
        self._last_update = 0.0
        self.paused = True

    @property
    def center(self) -> Vector2D:
        """Centre of the circle."""
        return self._center

    @property
    def omega(self) -> Vector2D:
        """Angular velocity and direction; (0, 1) while paused."""
        return Vector2D(0.0, 1.0) if self.paused else self._omega

    @property
    def position(self) -> Vector:
        """Position as of the last update."""
        return self._position

    @property
    def radius(self) -> float:
        """Distance in the plane from the centre to the current position."""
        return math.hypot(self._position.x - self._center.x, self._position.y - self._center.y)

    def set_center(self, center: Vector2D) -> None:
        """Revolve around ``center`` from now on."""
        self._center = center
        self._last_update = self.simulator.now()

    def set_omega(self, omega: Vector2D) -> None:
        """Change the angular velocity from now on."""
        self._omega = omega
        self._last_update = self.simulator.now()

    def set_position(self, position: Vector) -> None:
        """Move to ``position`` and reset the angular velocity to (0, 1)."""
        self._position = position
        self._omega = Vector2D(0.0, 1.0)
        self._last_update = self.simulator.now()

    def theta(self, position: Vector) -> float:
        """Angle of ``position`` around the centre in [0, 2π), scaled by the current radius."""
        dx = position.x - self._center.x
        dy = position.y - self._center.y
        radius = self.radius
        ratio = dx / radius if radius != 0 else (math.nan if dx == 0 else math.copysign(math.inf, dx))
        angle = _acos(ratio)
        if dy < 0:
            angle = 2 * math.pi - angle
        return angle

    def pause(self) -> None:
        """Stop moving at the current position."""
        self.paused = True

    def unpause(self) -> None:
        """Resume moving at the current angular velocity."""
        self.paused = False

    def update(self) -> None:
        """Advance the position along the circle to the current simulation time."""
        now = self.simulator.now()
        if now < self._last_update:
            raise RuntimeError("simulation time went backwards")
        delta = now - self._last_update
        self._last_update = now
        if self.paused:
            return
        radius = self.radius
        angle = self.theta(self._position) + delta * self._omega.x * self._omega.y
        while angle >= 2 * math.pi:
            angle -= 2 * math.pi
        self._position = Vector(
            radius * math.cos(angle), radius * math.sin(angle), self._position.z
        )