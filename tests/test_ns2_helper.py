import pytest

from mobsim.geometry import Vector
from mobsim.mobility import Node, Simulator
from mobsim.models import ConstantVelocityMobilityModel
from mobsim.ns2_helper import Ns2MobilityHelper


def _trace(tmp_path, text):
    path = tmp_path / "trace.ns_movements"
    path.write_text(text)
    return path


def _install(tmp_path, text, count=2):
    sim = Simulator()
    helper = Ns2MobilityHelper(_trace(tmp_path, text), sim)
    nodes = [Node(i) for i in range(count)]
    helper.install(nodes)
    return sim, nodes


SIMPLE = (
    "$node_(0) set X_ 10.0\n"
    "$node_(0) set Y_ 20.0\n"
    '$ns_ at 1.0 "$node_(0) setdest 13.0 24.0 5.0"\n'
)


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        Ns2MobilityHelper(tmp_path / "absent.ns_movements", Simulator())


def test_initial_position_set_at_install(tmp_path):
    _, nodes = _install(tmp_path, SIMPLE)
    assert nodes[0].mobility.position == Vector(10.0, 20.0, 0.0)


def test_node_without_lines_gets_no_model(tmp_path):
    _, nodes = _install(tmp_path, SIMPLE)
    assert nodes[1].mobility is None


def test_setdest_moves_during_travel(tmp_path):
    sim, nodes = _install(tmp_path, SIMPLE)
    sim.run(until=1.5)
    model = nodes[0].mobility
    assert model.velocity == Vector(3.0, 4.0, 0.0)
    assert model.position.x == pytest.approx(11.5)


def test_setdest_reaches_destination_and_stops(tmp_path):
    sim, nodes = _install(tmp_path, SIMPLE)
    sim.run(until=10.0)
    model = nodes[0].mobility
    assert model.position.x == pytest.approx(13.0)
    assert model.position.y == pytest.approx(24.0)
    assert model.velocity == Vector()


def test_initial_positions_at_end_of_file(tmp_path):
    text = (
        '$ns_ at 1.0 "$node_(0) setdest 13.0 24.0 5.0"\n'
        "$node_(0) set X_ 10.0\n"
        "$node_(0) set Y_ 20.0\n"
    )
    sim, nodes = _install(tmp_path, text)
    sim.run(until=10.0)
    model = nodes[0].mobility
    assert model.position.x == pytest.approx(13.0)
    assert model.position.y == pytest.approx(24.0)


def test_interrupted_movement_continues_from_reached_point(tmp_path):
    text = (
        '$ns_ at 1.0 "$node_(0) setdest 20.0 0.0 1.0"\n'
        '$ns_ at 5.0 "$node_(0) setdest 4.0 3.0 1.0"\n'
    )
    sim, nodes = _install(tmp_path, text)
    sim.run(until=30.0)
    model = nodes[0].mobility
    assert model.position.x == pytest.approx(4.0)
    assert model.position.y == pytest.approx(3.0)
    assert model.velocity == Vector()


def test_scheduled_set_position(tmp_path):
    text = (
        "$node_(0) set X_ 1.0\n"
        '$ns_ at 2.0 "$node_(0) set X_ 7.0"\n'
    )
    sim, nodes = _install(tmp_path, text)
    sim.run(until=3.0)
    assert nodes[0].mobility.position.x == 7.0


def test_zero_speed_keeps_position(tmp_path):
    text = (
        "$node_(0) set X_ 5.0\n"
        '$ns_ at 1.0 "$node_(0) setdest 9.0 9.0 0.0"\n'
    )
    sim, nodes = _install(tmp_path, text)
    changes = []
    nodes[0].mobility.add_course_change_listener(lambda m: changes.append(sim.now()))
    sim.run(until=5.0)
    assert nodes[0].mobility.position == Vector(5.0, 0.0, 0.0)
    assert changes == [1.0]


def test_unknown_node_and_garbage_are_ignored(tmp_path):
    text = (
        "# a comment line\n"
        "this is not a trace line\n"
        "$node_(7) set X_ 3.0\n"
        '$ns_ at -1.0 "$node_(0) setdest 9.0 9.0 1.0"\n'
        "$node_(0) set X_ 2.0\n"
    )
    sim, nodes = _install(tmp_path, text)
    sim.run(until=20.0)
    assert nodes[0].mobility.position == Vector(2.0, 0.0, 0.0)
    assert nodes[1].mobility is None


def test_existing_constant_velocity_model_is_reused(tmp_path):
    sim = Simulator()
    model = ConstantVelocityMobilityModel(sim)
    nodes = [Node(0, model)]
    Ns2MobilityHelper(_trace(tmp_path, "$node_(0) set Y_ 6.0\n"), sim).install(nodes)
    assert nodes[0].mobility is model
    assert model.position.y == 6.0


def test_two_nodes_move_independently(tmp_path):
    text = (
        "$node_(0) set X_ 0.0\n"
        "$node_(1) set X_ 50.0\n"
        '$ns_ at 0.0 "$node_(1) setdest 50.0 10.0 2.0"\n'
    )
    sim, nodes = _install(tmp_path, text)
    sim.run(until=20.0)
    assert nodes[0].mobility.position == Vector(0.0, 0.0, 0.0)
    assert nodes[1].mobility.position.x == pytest.approx(50.0)
    assert nodes[1].mobility.position.y == pytest.approx(10.0)