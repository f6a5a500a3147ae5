"""Assigning mobility models and initial positions to nodes, and tracing their moves."""

from __future__ import annotations

import itertools
from typing import Any, Iterable, Iterator, TextIO

from mobsim.geometry import Vector
from mobsim.mobility import ConstantPositionMobilityModel, MobilityModel, Node, Simulator


def round_small(value: float) -> float:
    """Round |v| <= 1e-4 to zero and 1e-4 < |v| <= 1e-3 to +/- 1e-3."""
    if -1e-4 <= value <= 1e-4:
        return 0.0
    if 0 <= value <= 1e-3:
        return 1e-3
    if -1e-3 <= value <= 0:
        return -1e-3
    return value


def format_course_change(now: float, node_id: int, position: Vector, velocity: Vector) -> str:
    """One trace line describing a node's course change."""
    pos = [round_small(v) for v in (position.x, position.y, position.z)]
    vel = [round_small(v) for v in (velocity.x, velocity.y, velocity.z)]
    pos_text = ":".join(f"{v:.3f}" for v in pos)
    vel_text = ":".join(f"{v:.3f}" for v in vel)
    return f"now=+{now:g}s node={node_id} pos={pos_text} vel={vel_text}\n"


def distance_squared_between(n1: Node, n2: Node) -> float:
    """Squared distance in metres between two nodes carrying mobility models."""
    if n1.mobility is None or n2.mobility is None:
        raise ValueError("both nodes need a mobility model")
    distance = n1.mobility.distance_from(n2.mobility)
    return distance * distance


def _as_nodes(nodes: Node | Iterable[Node]) -> Iterable[Node]:
    if isinstance(nodes, Node):
        return (nodes,)
    return nodes


class MobilityHelper:
    """Creates a mobility model for each node and gives it an initial position.

    The position allocator is any iterable of vectors; by default every node is
    placed at the origin and gets a constant-position model.
    """

    def __init__(self, simulator: Simulator) -> None:
        self.simulator = simulator
        self._positions: Iterator[Vector] = itertools.repeat(Vector())
        self._model_type: type = ConstantPositionMobilityModel
        self._model_kwargs: dict[str, Any] = {}

    @property
    def mobility_model_type(self) -> str:
        """Name of the currently selected mobility model type."""
        return self._model_type.__name__

    def set_position_allocator(self, allocator: Iterable[Vector]) -> None:
        """Draw initial positions from ``allocator`` from now on."""
        self._positions = iter(allocator)

    def set_mobility_model(self, model_type: type, **kwargs: Any) -> None:
        """Create models of ``model_type`` with ``kwargs`` as attributes on install."""
        self._model_type = model_type
        self._model_kwargs = dict(kwargs)

    def _create_model(self) -> MobilityModel:
        model = self._model_type(self.simulator, **self._model_kwargs)
        if not isinstance(model, MobilityModel):
            raise TypeError(
                f'The requested mobility model is not a mobility model: "{self.mobility_model_type}"'
            )
        return model

    def install(self, nodes: Node | Iterable[Node]) -> None:
        """Give each node a model (unless it has one) and its next initial position."""
        for node in _as_nodes(nodes):
            model = node.mobility
            if model is None:
                model = self._create_model()
                node.mobility = model
            try:
                position = next(self._positions)
            except StopIteration:
                raise ValueError("position allocator has no more positions") from None
            model.position = position

    def assign_streams(self, nodes: Node | Iterable[Node], stream: int) -> int:
        """Fix random streams of the nodes' models from ``stream``; return how many."""
        current = stream
        for node in _as_nodes(nodes):
            if node.mobility is not None:
                current += node.mobility.assign_streams(current)
        return current - stream

    @staticmethod
    def enable_ascii(stream: TextIO, nodes: Node | Iterable[Node]) -> None:
        """Write a line to ``stream`` on every course change of the nodes' models."""
        for node in _as_nodes(nodes):
            model = node.mobility
            if model is None:
                continue

            def write(changed: MobilityModel, node_id: int = node.node_id) -> None:
                owner = changed.node.node_id if changed.node is not None else node_id
                stream.write(
                    format_course_change(
                        changed.simulator.now(), owner, changed.position, changed.velocity
                    )
                )

            model.add_course_change_listener(write)