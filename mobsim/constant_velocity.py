"""Helper that moves a position along a constant velocity over simulation time."""

from __future__ import annotations

from typing import Any

from mobsim.geometry import Vector
from mobsim.mobility import Simulator


class ConstantVelocityHelper:
    """Tracks a position moving at a fixed velocity; starts paused."""

    def __init__(
        self,
        simulator: Simulator,
        position: Vector | None = None,
        velocity: Vector | None = None,
    ) -> None:
        self.simulator = simulator
        self._position = position if position is not None else Vector()
        self._velocity = velocity if velocity is not None else Vector()
        self._last_update = 0.0
        self.paused = True

    @property
    def position(self) -> Vector:
        """Position as of the last update."""
        return self._position

    @property
    def velocity(self) -> Vector:
        """Current velocity; zero while paused."""
        return Vector() if self.paused else self._velocity

    def set_position(self, position: Vector) -> None:
        """Move to ``position`` and reset the velocity to zero."""
        self._position = position
        self._velocity = Vector()
        self._last_update = self.simulator.now()

    def set_velocity(self, velocity: Vector) -> None:
        """Change the velocity from now on."""
        self._velocity = velocity
        self._last_update = self.simulator.now()

    def pause(self) -> None:
        """Stop moving at the current position."""
        self.paused = True

    def unpause(self) -> None:
        """Resume moving at the current velocity."""
        self.paused = False

    def update(self) -> None:
        """Advance the position to the current simulation time."""
        now = self.simulator.now()
        if now < self._last_update:
            raise RuntimeError("simulation time went backwards")
        delta = now - self._last_update
        self._last_update = now
        if self.paused:
            return
        self._position = self._position + self._velocity * delta

    def update_with_bounds(self, bounds: Any) -> None:
        """Update, then clamp the position into a rectangle or box."""
        self.update()
        p = self._position
        x = max(bounds.x_min, min(bounds.x_max, p.x))
        y = max(bounds.y_min, min(bounds.y_max, p.y))
        z = p.z
        if hasattr(bounds, "z_min") and hasattr(bounds, "z_max"):
            z = max(bounds.z_min, min(bounds.z_max, z))
        self._position = Vector(x, y, z)