"""
CLI entry point for the ftmsim-simulate command.

Computes one move's extruder profile, prints its phase timing and trace
extents, and optionally writes every trace to CSV.
"""

import argparse
import logging
import sys

import numpy as np

from ftmsim.config import (
    DEFAULT_ACCEL_OVERSHOOT,
    DEFAULT_LAYER_HEIGHT_MM,
    DEFAULT_LINE_WIDTH_MM,
    DEFAULT_SAMPLE_RATE_HZ,
    DEFAULT_SMOOTHING_ORDER,
    LOG_LEVEL_DEFAULT,
    TRACE,
)
from ftmsim.filters.advance import composite, extruder_traces
from ftmsim.profile import assemble, move_timings
from ftmsim.types import AdvanceMode, MotionParameters, TrajectoryKind, coerce_advance_mode
from ftmsim.utils.errors import InvalidParameter, ProfileTooLarge
from ftmsim.utils.extents import trace_extents

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "time",
    "position",
    "velocity",
    "acceleration",
    "effective_position",
    "effective_velocity",
    "effective_acceleration",
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fixed-time motion profile simulator")
    parser.add_argument('--trajectory', choices=[k.value for k in TrajectoryKind],
                        default=TrajectoryKind.TRAPEZOIDAL.value, help='Trajectory law')
    parser.add_argument('--distance', type=float, default=10.0, help='Move length (mm)')
    parser.add_argument('--rate', type=float, default=50.0, help='Feed rate (mm/s)')
    parser.add_argument('--acceleration', type=float, default=500.0, help='Acceleration (mm/s^2)')
    parser.add_argument('--overshoot', type=float, default=DEFAULT_ACCEL_OVERSHOOT,
                        help='Mid-ramp acceleration factor (6poly only)')
    parser.add_argument('-k', '--advance-k', type=float, default=0.0, help='Linear advance K (s)')
    parser.add_argument('--advance-mode', choices=[m.value for m in AdvanceMode],
                        default=AdvanceMode.DIRECT.value, help='Linear advance compositing')
    parser.add_argument('--line-width', type=float, default=DEFAULT_LINE_WIDTH_MM, help='Line width (mm)')
    parser.add_argument('--layer-height', type=float, default=DEFAULT_LAYER_HEIGHT_MM,
                        help='Layer height (mm)')
    parser.add_argument('--sample-rate', type=float, default=DEFAULT_SAMPLE_RATE_HZ,
                        help='Motion sample rate (Hz)')
    parser.add_argument('--smoothing-time', type=float, default=0.0, help='Axis smoothing time (s)')
    parser.add_argument('--smoothing-order', type=int, default=DEFAULT_SMOOTHING_ORDER,
                        help='Number of cascaded smoothing stages')
    parser.add_argument('--csv', metavar='PATH', help='Write all traces to a CSV file')

    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase verbosity; -v=INFO, -vv=DEBUG, -vvv=TRACE')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Only log errors')
    parser.add_argument('--log-level', choices=['TRACE', 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Set specific log level')
    return parser


def _log_level(args: argparse.Namespace) -> int:
    if args.log_level:
        if args.log_level == 'TRACE':
            return TRACE
        return getattr(logging, args.log_level)
    if args.verbose >= 3:
        return TRACE
    if args.verbose >= 2:
        return logging.DEBUG
    if args.verbose == 1:
        return logging.INFO
    if args.quiet:
        return logging.ERROR
    return getattr(logging, LOG_LEVEL_DEFAULT)


def params_from_args(args: argparse.Namespace) -> MotionParameters:
    return MotionParameters(
        trajectory=args.trajectory,
        distance=args.distance,
        rate=args.rate,
        acceleration=args.acceleration,
        acceleration_overshoot=args.overshoot,
        advance_k=args.advance_k,
        line_width=args.line_width,
        layer_height=args.layer_height,
        sample_rate=args.sample_rate,
        smoothing_time=args.smoothing_time,
        smoothing_order=args.smoothing_order,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=_log_level(args),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    try:
        params = params_from_args(args)
        timings = move_timings(params)
        profile = assemble(params)
        traces = extruder_traces(profile, params.advance_k)
        mode = coerce_advance_mode(args.advance_mode)
        if mode is AdvanceMode.DIRECT:
            effective = traces.with_advance
        else:
            effective = composite(profile, params.advance_k, mode)
    except (InvalidParameter, ProfileTooLarge) as e:
        logger.error(f"Cannot simulate move: {e}")
        return 2

    print(f"trajectory: {params.trajectory.value}")
    print(f"T1={timings.t1:.6f}s T2={timings.t2:.6f}s T3={timings.t3:.6f}s "
          f"nominal_speed={timings.nominal_speed:.6g}mm/s")
    print(f"samples: {len(profile)} (dt={profile.dt:.6g}s)")

    for label, trace in traces.as_dict().items():
        for name, ext in trace_extents(trace).items():
            print(f"{label:>12} {name:<12} min={ext['min']:.6g} max={ext['max']:.6g}")

    if args.csv:
        table = np.column_stack([
            profile.time,
            profile.position,
            profile.velocity,
            profile.acceleration,
            effective.position,
            effective.velocity,
            effective.acceleration,
        ])
        np.savetxt(args.csv, table, delimiter=",", header=",".join(CSV_COLUMNS), comments="")
        logger.info(f"Wrote {len(profile)} rows to {args.csv}")

    return 0


def main_entry():
    """Entry point for the ftmsim-simulate command."""
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
