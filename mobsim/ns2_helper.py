"""Reading ns-2 movement traces and turning them into scheduled node movements."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterator, Sequence

from mobsim.geometry import Vector
from mobsim.mobility import EventId, Node, Simulator
from mobsim.models import ConstantVelocityMobilityModel
from mobsim.ns2_parser import (
    X_COORD,
    Y_COORD,
    Z_COORD,
    ParseResult,
    is_number,
    is_sched_mobility_pos,
    is_sched_set_pos,
    is_set_initial_pos,
    node_id_int,
    node_id_string,
    parse_ns2_line,
)

logger = logging.getLogger(__name__)

_UINT32_MAX = 2**32 - 1
_UINT_RE = re.compile(r"[ \t\n\v\f\r]*\+?(\d+)")


@dataclass
class _DestinationPoint:
    """The last movement scheduled for a node."""

    start_position: Vector = field(default_factory=Vector)
    speed: Vector = field(default_factory=Vector)
    final_position: Vector = field(default_factory=Vector)
    stop_event: EventId | None = None
    travel_start_time: float = 0.0
    target_arrival_time: float = 0.0

    def cancel_stop(self) -> None:
        if self.stop_event is not None:
            self.stop_event.cancel()


def _parse_node_index(text: str) -> int:
    match = _UINT_RE.match(text)
    if match is None:
        return 0
    return min(int(match.group(1)), _UINT32_MAX)


def _with_coord(position: Vector, coord: str, value: float) -> Vector:
    if coord == X_COORD:
        return replace(position, x=value)
    if coord == Y_COORD:
        return replace(position, y=value)
    if coord == Z_COORD:
        return replace(position, z=value)
    return position


def _set_model_position(model: ConstantVelocityMobilityModel, position: Vector) -> None:
    model.position = position


def _float_at(result: ParseResult, index: int) -> float:
    value = result[index].float_value
    return value if value is not None else 0.0


class Ns2MobilityHelper:
    """Configures node movement from an ns-2 movement trace file.

    Initial positions may appear anywhere in the file, including after the
    scheduled movements.
    """

    def __init__(self, filename: str | Path, simulator: Simulator) -> None:
        self.filename = Path(filename)
        self.simulator = simulator
        try:
            with self.filename.open("r"):
                pass
        except OSError as exc:
            raise OSError(
                f"Could not open trace file {self.filename} for reading"
            ) from exc

    def install(self, nodes: Sequence[Node]) -> None:
        """Schedule the movements of the trace on ``nodes``, indexed by node number."""
        self._configure(list(nodes))

    def _lines(self) -> Iterator[tuple[str, ParseResult]]:
        with self.filename.open("r") as trace:
            for raw in trace:
                line = raw.rstrip("\n")
                if not line:
                    continue
                yield line, parse_ns2_line(line)

    def _mobility_model(
        self, id_string: str, nodes: list[Node]
    ) -> ConstantVelocityMobilityModel | None:
        index = _parse_node_index(id_string)
        if index >= len(nodes):
            return None
        node = nodes[index]
        model = node.mobility
        if not isinstance(model, ConstantVelocityMobilityModel):
            model = ConstantVelocityMobilityModel(self.simulator)
            node.mobility = model
        return model

    def _configure(self, nodes: list[Node]) -> None:
        last_pos: dict[int, _DestinationPoint] = {}

        # First pass: initial positions, wherever they are in the file.
        for line, result in self._lines():
            if len(result) != 4:
                continue
            node_id = node_id_string(result)
            index = node_id_int(result)
            if index == -1:
                logger.error("Node number couldn't be obtained (corrupted file?): %s", line)
                continue
            model = self._mobility_model(node_id, nodes)
            if model is None:
                logger.error("Unknown node ID (corrupted file?): %s", node_id)
                continue
            if is_set_initial_pos(result):
                point = _DestinationPoint()
                point.final_position = self._set_initial_position(
                    model, result[2].text, _float_at(result, 3)
                )
                last_pos[index] = point
                logger.debug(
                    "Positions after parse for node %d %s position = %s",
                    index, node_id, point.final_position,
                )

        # Second pass: scheduled events.
        for line, result in self._lines():
            if len(result) not in (4, 7, 8):
                logger.error(
                    "Line has not correct number of parameters (corrupted file?): %s", line
                )
                continue
            node_id = node_id_string(result)
            index = node_id_int(result)
            if index == -1:
                logger.error("Node number couldn't be obtained (corrupted file?): %s", line)
                continue
            model = self._mobility_model(node_id, nodes)
            if model is None:
                logger.error("Unknown node ID (corrupted file?): %s", node_id)
                continue
            if is_set_initial_pos(result):
                continue

            if not is_number(result[2].text):
                logger.warning("Time is not a number: %s", result[2].text)
                continue
            at = _float_at(result, 2)
            if at < 0:
                logger.warning("Time is less than zero: %s", at)
                continue

            if is_sched_mobility_pos(result):
                last = last_pos.setdefault(index, _DestinationPoint())
                if last.target_arrival_time > at:
                    travelled = at - last.travel_start_time
                    reached = Vector(
                        last.start_position.x + last.speed.x * travelled,
                        last.start_position.y + last.speed.y * travelled,
                        0.0,
                    )
                    logger.debug(
                        "Did not reach a destination: final point %s, actually reached %s",
                        last.final_position, reached,
                    )
                    last.cancel_stop()
                    last.final_position = reached
                last_pos[index] = self._set_movement(
                    model,
                    last.final_position,
                    at,
                    _float_at(result, 5),
                    _float_at(result, 6),
                    _float_at(result, 7),
                )
                logger.debug(
                    "Positions after parse for node %d %s position = %s",
                    index, node_id, last_pos[index].final_position,
                )
            elif is_sched_set_pos(result):
                last = last_pos.setdefault(index, _DestinationPoint())
                last.final_position = self._set_sched_position(
                    model, at, result[5].text, _float_at(result, 6)
                )
                if last.target_arrival_time > at:
                    last.cancel_stop()
                last.target_arrival_time = at
                last.travel_start_time = at
                logger.debug(
                    "Positions after parse for node %d %s position = %s",
                    index, node_id, last.final_position,
                )
            else:
                logger.warning("Format Line is not correct: %s", line)

    def _set_movement(
        self,
        model: ConstantVelocityMobilityModel,
        last_position: Vector,
        at: float,
        x_final: float,
        y_final: float,
        speed: float,
    ) -> _DestinationPoint:
        point = _DestinationPoint(
            start_position=last_position,
            final_position=last_position,
            travel_start_time=at,
            target_arrival_time=at,
        )
        if speed == 0:
            point.stop_event = self.simulator.schedule(at, model.set_velocity, Vector())
            return point
        if speed > 0:
            dx = x_final - last_position.x
            dy = y_final - last_position.y
            time = math.sqrt(dx * dx + dy * dy) / speed
            if time == 0:
                return point
            x_speed = dx / time
            y_speed = dy / time
            point.speed = Vector(x_speed, y_speed, 0.0)
            self.simulator.schedule(at, model.set_velocity, Vector(x_speed, y_speed, 0.0))
            point.stop_event = self.simulator.schedule(at + time, model.set_velocity, Vector())
            point.final_position = Vector(
                last_position.x + x_speed * time,
                last_position.y + y_speed * time,
                last_position.z,
            )
            point.target_arrival_time = at + time
        return point

    @staticmethod
    def _set_initial_position(
        model: ConstantVelocityMobilityModel, coord: str, value: float
    ) -> Vector:
        model.position = _with_coord(model.position, coord, value)
        return model.position

    def _set_sched_position(
        self, model: ConstantVelocityMobilityModel, at: float, coord: str, value: float
    ) -> Vector:
        model.position = _with_coord(model.position, coord, value)
        position = model.position
        self.simulator.schedule(at, _set_model_position, model, position)
        return position