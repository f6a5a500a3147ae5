import pytest

from mobsim.constant_velocity import ConstantVelocityHelper
from mobsim.geometry import Box, Vector
from mobsim.mobility import Simulator


def _advance(sim, seconds, action):
    sim.schedule(seconds, action)
    sim.run()


def test_starts_paused_with_zero_velocity():
    helper = ConstantVelocityHelper(Simulator(), Vector(1, 2, 3), Vector(4, 5, 6))
    assert helper.paused
    assert helper.velocity == Vector()
    assert helper.position == Vector(1, 2, 3)


def test_unpaused_motion_follows_velocity():
    sim = Simulator()
    velocity = Vector(1.0, 2.0, 3.0)
    helper = ConstantVelocityHelper(sim)
    helper.set_velocity(velocity)
    helper.unpause()
    _advance(sim, 2.0, helper.update)
    assert helper.position == Vector(2.0, 4.0, 6.0)
    assert helper.velocity == velocity


def test_paused_does_not_move():
    sim = Simulator()
    start = Vector(5.0, 5.0, 5.0)
    helper = ConstantVelocityHelper(sim, start, Vector(1, 1, 1))
    _advance(sim, 10.0, helper.update)
    assert helper.position == start


def test_pause_keeps_position_reached():
    sim = Simulator()
    helper = ConstantVelocityHelper(sim)
    helper.set_velocity(Vector(1.0, 0.0, 0.0))
    helper.unpause()

    def stop():
        helper.update()
        helper.pause()

    _advance(sim, 3.0, stop)
    reached = helper.position
    _advance(sim, 4.0, helper.update)
    assert helper.position == reached
    assert reached.distance_to(Vector()) == pytest.approx(sim.now() - 4.0)


def test_set_position_resets_velocity():
    sim = Simulator()
    helper = ConstantVelocityHelper(sim, Vector(), Vector(3, 3, 3))
    helper.unpause()
    target = Vector(9.0, 8.0, 7.0)
    helper.set_position(target)
    assert helper.velocity == Vector()
    _advance(sim, 2.0, helper.update)
    assert helper.position == target


def test_update_twice_at_same_time_is_idempotent():
    sim = Simulator()
    helper = ConstantVelocityHelper(sim)
    helper.set_velocity(Vector(2.0, -1.0, 0.5))
    helper.unpause()

    def twice():
        helper.update()
        first = helper.position
        helper.update()
        assert helper.position == first

    _advance(sim, 1.5, twice)
    assert helper.position == Vector(2.0, -1.0, 0.5) * 1.5


def test_update_with_box_bounds_clamps():
    sim = Simulator()
    box = Box(0.0, 10.0, 0.0, 10.0, 0.0, 10.0)
    helper = ConstantVelocityHelper(sim, Vector(5, 5, 5))
    helper.set_velocity(Vector(100.0, -100.0, 100.0))
    helper.unpause()
    _advance(sim, 1.0, lambda: helper.update_with_bounds(box))
    pos = helper.position
    assert box.is_inside(pos)
    assert (pos.x, pos.y, pos.z) == (box.x_max, box.y_min, box.z_max)


def test_update_with_rectangle_bounds_leaves_z():
    class Rect:
        x_min, x_max, y_min, y_max = 0.0, 1.0, 0.0, 1.0

    sim = Simulator()
    helper = ConstantVelocityHelper(sim)
    helper.set_velocity(Vector(5.0, 5.0, 5.0))
    helper.unpause()
    _advance(sim, 1.0, lambda: helper.update_with_bounds(Rect()))
    assert helper.position.x == Rect.x_max
    assert helper.position.y == Rect.y_max
    assert helper.position.z == Vector(5.0, 5.0, 5.0).z