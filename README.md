# mobsim

Node mobility models that run on a small discrete-event simulator. The package also reads ns-2 movement traces.

## Contents

- `mobsim.geometry`
  - `Vector` is a frozen 3D vector with `+`, `-`, scalar `*` and `distance_to`.
  - `Vector2D` is a 2D vector.
  - `Side` is an enum of the faces of a box.
  - `Box` is an axis-aligned box. Its methods are `is_inside`, `closest_side`, `calculate_intersection` and `is_intersect`. `Box.parse` reads the `xMin|xMax|yMin|yMax|zMin|zMax` text form, and `str(box)` writes that form back out.
- `mobsim.mobility`
  - `Simulator` is the event clock. It provides `now`, `schedule`, `schedule_now` and `run(until=...)`.
  - `EventId` is the handle that scheduling returns. It can be cancelled.
  - `MobilityModel` is the abstract base. It has the `position` and `velocity` properties, course-change listeners, `distance_from` and `assign_streams`.
  - `ConstantPositionMobilityModel` is a model whose position only changes when you set it.
  - `Node` is a numbered node that can carry a mobility model.
- `mobsim.constant_velocity`
  - `ConstantVelocityHelper` moves a position at a fixed velocity. Its `update_with_bounds` clamps the position into a box or a rectangle.
- `mobsim.models`
  - `ConstantVelocityMobilityModel`
  - `ConstantAccelerationMobilityModel`
- `mobsim.angular`
  - `ConstantAngularVelocityHelper` moves a position around a centre.
- `mobsim.circular`
  - `ConstantTimeCircularMotionModel` makes nodes patrol concentric orbits around a centre. After `time_to_fly_in_orbit` seconds, a node switches orbit by a random walk or a random flight.
  - `UniformRandomVariable` provides the model's random numbers. These can be seeded through `assign_streams`.
- `mobsim.ns2_parser` tokenises ns-2 trace lines and classifies them. It provides `parse_ns2_line`, `is_set_initial_pos`, `is_sched_set_pos`, `is_sched_mobility_pos` and related functions.
- `mobsim.ns2_helper`
  - `Ns2MobilityHelper(filename, simulator)` reads a trace.
  - Its `install(nodes)` method gives each node in the trace a `ConstantVelocityMobilityModel` and schedules the node's movements.
- `mobsim.helper`
  - `MobilityHelper` gives nodes a mobility model (by default `ConstantPositionMobilityModel`). It takes each initial position from a position allocator, which is any iterable of `Vector`s. If the allocator runs out of positions, `install` raises `ValueError`.
  - `MobilityHelper.enable_ascii` writes one line to a text stream on every course change.
  - Module functions: `format_course_change`, `round_small` and `distance_squared_between`.

## Installation

```
pip install .
```

## Command line

The `mobsim-ns2-trace` command replays an ns-2 movement trace. It writes one line to the log file each time a node changes course:

```
mobsim-ns2-trace --traceFile=default.ns_movements --nodeNum=2 --duration=100.0 --logFile=ns2-mob.log
```

All four options are required. `--nodeNum` and `--duration` must be positive. If an option is missing or invalid, the command prints a usage message and exits with status 0.

A trace file may contain these statements:

```
$node_(0) set X_ 10.0
$node_(0) set Y_ 20.0
$ns_ at 1.0 "$node_(0) setdest 50.0 60.0 5.0"
$ns_ at 4.0 "$node_(0) set X_ 28.0"
```

Statements that set a node's initial position may appear anywhere in the file. Malformed lines are logged and skipped.

## Library use

```python
from mobsim.geometry import Vector
from mobsim.mobility import Simulator
from mobsim.models import ConstantVelocityMobilityModel

sim = Simulator()
model = ConstantVelocityMobilityModel(sim)
model.position = Vector(0.0, 0.0, 0.0)
model.set_velocity(Vector(1.0, 2.0, 0.0))
sim.run(until=10.0)
print(model.position)   # 10:20:0
```

## What is not included

The package has no built-in position allocators such as grids or random discs. Pass any iterable of `Vector`s to `MobilityHelper.set_position_allocator` instead.

It also has none of the following:

- random-walk or waypoint models
- hierarchical (parent/child) mobility
- a registry of named nodes
- a global node list

## Running the tests

```
pip install .[test]
pytest
```