import math

import pytest

from mobsim.circular import ConstantTimeCircularMotionModel, UniformRandomVariable
from mobsim.geometry import Vector
from mobsim.mobility import Simulator


def _constant(value):
    return UniformRandomVariable(value, value)


def _model(sim, walk_or_flight=0.0, walk_choice=0.0, **kwargs):
    return ConstantTimeCircularMotionModel(
        sim,
        walk_or_flight=_constant(walk_or_flight),
        walk_choice=_constant(walk_choice),
        **kwargs,
    )


def test_uniform_values_in_range():
    var = UniformRandomVariable(2.0, 3.0)
    values = [var.value() for _ in range(200)]
    assert all(2.0 <= v <= 3.0 for v in values)


def test_uniform_stream_reproducible():
    a = UniformRandomVariable()
    b = UniformRandomVariable()
    a.set_stream(7)
    b.set_stream(7)
    assert [a.value() for _ in range(10)] == [b.value() for _ in range(10)]


def test_uniform_rejects_inverted_bounds():
    with pytest.raises(ValueError):
        UniformRandomVariable(1.0, 0.0)


def test_orbit_radius_before_position_is_set():
    sim = Simulator()
    model = ConstantTimeCircularMotionModel(sim)
    assert model.orbit_radius() == -1.0


def test_assign_streams_uses_three():
    sim = Simulator()
    model = ConstantTimeCircularMotionModel(sim)
    assert model.assign_streams(5) == 3


def test_assign_streams_makes_runs_reproducible():
    results = []
    for _ in range(2):
        sim = Simulator()
        model = ConstantTimeCircularMotionModel(sim)
        model.assign_streams(11)
        model.position = Vector(150.0, 0.0, 0.0)
        sim.run(until=40.0)
        results.append(model.position)
    assert results[0] == results[1]


def test_radius_kept_while_patrolling():
    sim = Simulator()
    model = _model(sim)
    model.position = Vector(150.0, 0.0, 0.0)
    assert model.orbit_radius() == pytest.approx(150.0)
    sim.run(until=5.0)
    assert model.orbit_radius() == pytest.approx(150.0)
    pos = model.position
    assert math.hypot(pos.x, pos.y) == pytest.approx(150.0)


def test_patrol_speed_is_tangential_velocity():
    sim = Simulator()
    model = _model(sim, tangential_velocity=5.0)
    model.position = Vector(150.0, 0.0, 0.0)
    sim.run(until=3.0)
    vel = model.velocity
    assert math.hypot(vel.x, vel.y) == pytest.approx(5.0)


def test_odd_orbit_turns_counterclockwise():
    sim = Simulator()
    model = _model(sim)
    model.position = Vector(75.0, 0.0, 0.0)
    sim.run(until=1.0)
    assert model.position.y > 0


def test_even_orbit_turns_clockwise():
    sim = Simulator()
    model = _model(sim)
    model.position = Vector(150.0, 0.0, 0.0)
    sim.run(until=1.0)
    assert model.position.y < 0


def test_random_walk_outward_switch():
    sim = Simulator()
    model = _model(sim, walk_or_flight=0.0, walk_choice=0.0, radial_velocity=10.0)
    changes = []
    model.add_course_change_listener(changes.append)
    model.position = Vector(150.0, 0.0, 0.0)
    sim.run(until=12.0)
    assert model.orbit_radius() == -1.0
    assert changes == [model]
    vel = model.velocity
    assert math.hypot(vel.x, vel.y) == pytest.approx(10.0)
    sim.run(until=25.0)
    assert model.orbit_radius() > 200.0


def test_random_walk_staying_in_orbit():
    sim = Simulator()
    model = _model(sim, walk_or_flight=0.0, walk_choice=0.9)
    changes = []
    model.add_course_change_listener(changes.append)
    model.position = Vector(150.0, 0.0, 0.0)
    sim.run(until=12.0)
    assert changes == []
    assert model.orbit_radius() == pytest.approx(150.0)


def test_random_flight_inward_switch():
    sim = Simulator()
    model = _model(sim, walk_or_flight=1.0, walk_choice=0.0)
    model.position = Vector(150.0, 0.0, 0.0)
    sim.run(until=12.0)
    assert model.orbit_radius() == -1.0
    sim.run(until=25.0)
    radius = model.orbit_radius()
    assert 0 < radius < 100.0


def test_setting_position_restarts_patrol():
    sim = Simulator()
    model = _model(sim)
    model.position = Vector(150.0, 0.0, 0.0)
    sim.run(until=2.0)
    model.position = Vector(0.0, 225.0, 0.0)
    assert model.orbit_radius() == pytest.approx(225.0)
    sim.run(until=4.0)
    assert model.orbit_radius() == pytest.approx(225.0)