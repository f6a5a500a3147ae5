"""Command that replays an ns-2 movement trace and logs every course change."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence, TextIO

from mobsim.mobility import MobilityModel, Node, Simulator
from mobsim.ns2_helper import Ns2MobilityHelper

_NOTES = (
    "NOTE: the trace file may be given as an absolute or relative path.\n\n"
    "NOTE 2: Number of nodes present in the trace file must match with the command line "
    "argument and must\n        be a positive number. Note that you must know it before "
    "to be able to load it.\n\n"
    "NOTE 3: Duration must be a positive number. Note that you must know it before to be "
    "able to load it.\n\n"
)


def _course_change_writer(out: TextIO, simulator: Simulator):
    def write(model: MobilityModel) -> None:
        pos = model.position
        vel = model.velocity
        out.write(
            f"+{simulator.now():g}s POS: x={pos.x:g}, y={pos.y:g}, z={pos.z:g}; "
            f"VEL:{vel.x:g}, y={vel.y:g}, z={vel.z:g}\n"
        )

    return write


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ns2-mobility-trace",
        description="Replay an ns-2 movement trace and log course changes.",
    )
    parser.add_argument("--traceFile", default="", help="Ns2 movement trace file")
    parser.add_argument("--nodeNum", type=int, default=0, help="Number of nodes")
    parser.add_argument("--duration", type=float, default=0.0, help="Duration of Simulation")
    parser.add_argument("--logFile", default="", help="Log file")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the trace replay; prints usage and returns 0 when arguments are missing."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.traceFile or args.nodeNum <= 0 or args.duration <= 0 or not args.logFile:
        print(
            f"Usage of {parser.prog} :\n\n"
            f"{parser.prog} --traceFile=default.ns_movements"
            " --nodeNum=2 --duration=100.0 --logFile=ns2-mob.log \n\n" + _NOTES
        )
        return 0

    logging.getLogger("mobsim.ns2_helper").setLevel(logging.DEBUG)

    simulator = Simulator()
    helper = Ns2MobilityHelper(args.traceFile, simulator)
    with open(args.logFile, "w") as log:
        nodes = [Node(i) for i in range(args.nodeNum)]
        helper.install(nodes)
        writer = _course_change_writer(log, simulator)
        for node in nodes:
            if node.mobility is not None:
                node.mobility.add_course_change_listener(writer)
        simulator.run(until=args.duration)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())