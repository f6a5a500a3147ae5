"""Mobility models with constant velocity or constant acceleration."""

from __future__ import annotations

from mobsim.constant_velocity import ConstantVelocityHelper
from mobsim.geometry import Vector
from mobsim.mobility import MobilityModel, Simulator


class ConstantVelocityMobilityModel(MobilityModel):
    """A model whose velocity stays the same until it is set again."""

    def __init__(self, simulator: Simulator) -> None:
        super().__init__(simulator)
        self._helper = ConstantVelocityHelper(simulator)

    def set_velocity(self, velocity: Vector) -> None:
        """Move at ``velocity`` (m/s) from now on."""
        self._helper.update()
        self._helper.set_velocity(velocity)
        self._helper.unpause()
        self.notify_course_change()

    def _do_get_position(self) -> Vector:
        self._helper.update()
        return self._helper.position

    def _do_set_position(self, position: Vector) -> None:
        self._helper.set_position(position)
        self.notify_course_change()

    def _do_get_velocity(self) -> Vector:
        return self._helper.velocity


class ConstantAccelerationMobilityModel(MobilityModel):
    """A model whose acceleration stays the same until it is set again."""

    def __init__(self, simulator: Simulator) -> None:
        super().__init__(simulator)
        self._base_time = simulator.now()
        self._base_position = Vector()
        self._base_velocity = Vector()
        self._acceleration = Vector()

    def _elapsed(self) -> float:
        return self.simulator.now() - self._base_time

    def set_velocity_and_acceleration(self, velocity: Vector, acceleration: Vector) -> None:
        """Start from the current position with ``velocity`` (m/s) and ``acceleration`` (m/s²)."""
        self._base_position = self._do_get_position()
        self._base_time = self.simulator.now()
        self._base_velocity = velocity
        self._acceleration = acceleration
        self.notify_course_change()

    def _do_get_velocity(self) -> Vector:
        return self._base_velocity + self._acceleration * self._elapsed()

    def _do_get_position(self) -> Vector:
        t = self._elapsed()
        return self._base_position + self._base_velocity * t + self._acceleration * (0.5 * t * t)

    def _do_set_position(self, position: Vector) -> None:
        self._base_velocity = self._do_get_velocity()
        self._base_time = self.simulator.now()
        self._base_position = position
        self.notify_course_change()