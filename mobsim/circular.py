"""Circular patrol mobility: nodes circle a centre in orbits and switch orbits over time."""

from __future__ import annotations

import math
import random

from mobsim.angular import ConstantAngularVelocityHelper
from mobsim.constant_velocity import ConstantVelocityHelper
from mobsim.geometry import Vector, Vector2D
from mobsim.mobility import EventId, MobilityModel, Simulator

_UPDATE_INTERVAL = 0.1


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _divide(numerator: float, denominator: float) -> float:
    """Division that yields an IEEE infinity or NaN instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


class UniformRandomVariable:
    """Uniformly distributed random numbers in [minimum, maximum]."""

    def __init__(self, minimum: float = 0.0, maximum: float = 1.0) -> None:
        if maximum < minimum:
            raise ValueError(f"maximum {maximum} is below minimum {minimum}")
        self.minimum = minimum
        self.maximum = maximum
        self._rng = random.Random()

    def value(self) -> float:
        """Draw the next number."""
        return self._rng.uniform(self.minimum, self.maximum)

    def set_stream(self, stream: int) -> None:
        """Fix the sequence of numbers to the one identified by ``stream``."""
        self._rng = random.Random(stream)


class ConstantTimeCircularMotionModel(MobilityModel):
    """Nodes patrol circular orbits around a centre and switch orbit after a fixed time.

    While patrolling, a node moves along its orbit at the tangential velocity; after
    ``time_to_fly_in_orbit`` seconds it either walks to a neighbouring orbit or flies
    to a random one, moving radially at the radial velocity.
    """

    def __init__(
        self,
        simulator: Simulator,
        *,
        tangential_velocity: float = 5.0,
        radial_velocity: float = 10.0,
        center: Vector2D | None = None,
        time_step: float = 1.0,
        inter_orbit_distance: float = 75.0,
        maximum_radius: float = 750.0,
        time_to_fly_in_orbit: float = 10.0,
        epsilon: float = 0.99,
        walk_or_flight: UniformRandomVariable | None = None,
        walk_choice: UniformRandomVariable | None = None,
        flight_choice: UniformRandomVariable | None = None,
    ) -> None:
        super().__init__(simulator)
        self.tangential_velocity = tangential_velocity
        self.radial_velocity = radial_velocity
        self.center = center if center is not None else Vector2D()
        self.time_step = time_step
        self.inter_orbit_distance = inter_orbit_distance
        self.maximum_radius = maximum_radius
        self.time_to_fly_in_orbit = time_to_fly_in_orbit
        self.epsilon = epsilon
        self.walk_or_flight = walk_or_flight or UniformRandomVariable(0.0, 1.0)
        self.walk_choice = walk_choice or UniformRandomVariable(0.0, 1.0)
        self.flight_choice = flight_choice or UniformRandomVariable(0.0, 2.0)

        self._helper = ConstantAngularVelocityHelper(simulator)
        self._helper.set_center(self.center)
        self._vel_helper = ConstantVelocityHelper(simulator)
        self.number_of_orbits = int(maximum_radius / inter_orbit_distance)
        self.current_position = Vector()
        self._event: EventId | None = None
        self._rotating_time = 0.0
        self._radial_time = 0.0
        self._radial_total_time = 0.0
        self.under_surveillance = False

    def orbit_radius(self) -> float:
        """Radius of the current orbit, or -1.0 while switching orbits."""
        if self.under_surveillance:
            return self._helper.radius
        return -1.0

    def assign_streams(self, stream: int) -> int:
        """Fix the random streams starting at ``stream``; return how many were used."""
        return self._do_assign_streams(stream)

    def _do_assign_streams(self, stream: int) -> int:
        self.walk_choice.set_stream(stream)
        self.flight_choice.set_stream(stream + 1)
        self.walk_or_flight.set_stream(stream + 2)
        return 3

    def _cancel_event(self) -> None:
        if self._event is not None:
            self._event.cancel()

    def _configure_angular_helper(self, position: Vector) -> None:
        dx = self.center.x - position.x
        dy = self.center.y - position.y
        orbit_radius = math.hypot(dx, dy)
        omega = _divide(self.tangential_velocity, orbit_radius)
        odd_or_even = math.fmod(orbit_radius / self.inter_orbit_distance, 2.0)
        self._helper.set_center(self.center)
        self._helper.set_position(position)
        direction = 1.0 if 0.0 < odd_or_even <= 1.0 else -1.0
        self._helper.set_omega(Vector2D(omega, direction))

    def _update_position(self) -> None:
        if self.under_surveillance:
            if self._rotating_time >= self.time_to_fly_in_orbit:
                self._rotating_time = 0.0
                self._helper.pause()
                self.simulator.schedule_now(self._orbit_switch)
                return
            self._helper.update()
            self._rotating_time += _UPDATE_INTERVAL
        else:
            if self._radial_time >= self._radial_total_time:
                self._radial_total_time = 0.0
                self._radial_time = 0.0
                self._vel_helper.pause()
                self.simulator.schedule_now(self._surveil)
                return
            self._vel_helper.update()
            self._radial_time += _UPDATE_INTERVAL
        self._event = self.simulator.schedule(_UPDATE_INTERVAL, self._update_position)

    def _surveil(self) -> None:
        self._vel_helper.update()
        self._vel_helper.pause()
        self._helper.update()
        self._helper.pause()
        self._configure_angular_helper(self._vel_helper.position)
        self._helper.unpause()
        self.under_surveillance = True
        self._event = self.simulator.schedule(_UPDATE_INTERVAL, self._update_position)

    def _random_flight(self, cur_pos: Vector, radius: float, orbit_number: int):
        total_orbits = self.maximum_radius / self.inter_orbit_distance
        probability_step = 1.0 / total_orbits
        rand = self.walk_choice.value()
        final_orbit = math.floor(rand / probability_step) + 1
        if final_orbit > total_orbits:
            final_orbit -= 1
        if final_orbit < orbit_number:
            travel = Vector(self.center.x - cur_pos.x, self.center.y - cur_pos.y, cur_pos.z)
            time = (radius - final_orbit * self.inter_orbit_distance) / self.radial_velocity
            return travel, time, self.radial_velocity, False
        if final_orbit > orbit_number:
            travel = Vector(cur_pos.x - self.center.x, cur_pos.y - self.center.y, cur_pos.z)
            time = (final_orbit * self.inter_orbit_distance - radius) / self.radial_velocity
            return travel, time, self.radial_velocity, False
        return Vector(), self.inter_orbit_distance / self.radial_velocity, self.radial_velocity, True

    def _random_walk(self, cur_pos: Vector, radius: float, orbit_number: int):
        rand = self.walk_choice.value()
        dist = self.inter_orbit_distance
        vel = self.radial_velocity
        inward = Vector(self.center.x - cur_pos.x, self.center.y - cur_pos.y, cur_pos.z)
        outward = Vector(cur_pos.x - self.center.x, cur_pos.y - self.center.y, cur_pos.z)
        stay = (Vector(), dist / vel, vel, True)
        if radius >= self.maximum_radius - dist:
            low = 0.5 - 1.0 / self.number_of_orbits
            if rand <= low:
                fast = 2 * vel
                return inward, (radius - (orbit_number - 2) * dist) / fast, fast, False
            if low <= rand <= 1 - 1.5 / self.number_of_orbits:
                return inward, (radius - (orbit_number - 1) * dist) / vel, vel, False
            return stay
        if radius < 1.5 * dist:
            if rand <= 0.5:
                travel = Vector(cur_pos.x - self.center.x, cur_pos.y - self.center.y, 0.0)
                return travel, ((orbit_number + 1) * dist - radius) / vel, vel, False
            return stay
        if rand <= 0.5:
            return outward, ((orbit_number + 1) * dist - radius) / vel, vel, False
        if rand <= 1 - 0.5 / orbit_number:
            return inward, (radius - (orbit_number - 1) * dist) / vel, vel, False
        return stay

    def _orbit_switch(self) -> None:
        self.under_surveillance = False
        self._helper.update()
        self._helper.pause()
        cur_pos = self._helper.position
        self._vel_helper.pause()
        self._vel_helper.set_position(cur_pos)
        coin_flip = self.walk_or_flight.value()
        radius = self._helper.radius
        orbit_number = _round_half_away(radius / self.inter_orbit_distance)
        if coin_flip >= self.epsilon:
            travel, travel_time, speed, stay = self._random_flight(cur_pos, radius, orbit_number)
        else:
            travel, travel_time, speed, stay = self._random_walk(cur_pos, radius, orbit_number)

        if stay:
            self._event = self.simulator.schedule_now(self._surveil)
            return
        self._radial_total_time = travel_time
        theta = self._helper.theta(travel)
        self._vel_helper.set_velocity(Vector(speed * math.cos(theta), speed * math.sin(theta), 0.0))
        self._vel_helper.update()
        self._vel_helper.unpause()
        self._event = self.simulator.schedule(_UPDATE_INTERVAL, self._update_position)
        self.notify_course_change()

    def _do_set_position(self, position: Vector) -> None:
        self._helper.update()
        self._helper.pause()
        self._helper.set_position(position)
        self._vel_helper.set_position(position)
        self._cancel_event()
        self._configure_angular_helper(position)
        self.current_position = position
        self._event = self.simulator.schedule_now(self._surveil)
        self.under_surveillance = True

    def _do_get_position(self) -> Vector:
        return self._helper.position

    def _do_get_velocity(self) -> Vector:
        if self.under_surveillance:
            theta = self._helper.theta(self._helper.position)
            return Vector(
                -self.tangential_velocity * math.sin(theta),
                self.tangential_velocity * math.cos(theta),
                0.0,
            )
        return self._vel_helper.velocity