import argparse
import logging
from typing import List, Optional
import numpy as np

from .calibration import RobotToolCalibration
from .config import DEFAULT_CONFIG_PATH, CalibrationSettings, load_settings
from .datafile import load_joint_positions_csv, save_calibration_result
from .robot import ROBOT_PRESETS, Robot

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BAD_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolcal",
        description="Calculate the robot tool center point from joint positions that touch one point.")
    parser.add_argument("poses", help="CSV file with columns rax_1..rax_6 and optional eax_a..eax_f")
    parser.add_argument("--robot", default="IRB4600-40/2.55", choices=sorted(ROBOT_PRESETS),
                        help="robot preset (default: %(default)s)")
    parser.add_argument("--config", default=None,
                        help=f"JSON file with calibration settings (default: {DEFAULT_CONFIG_PATH} if it exists)")
    parser.add_argument("--output", default=None, help="write the calibration result to this JSON file")
    parser.add_argument("--plot", action="store_true", help="show the per-pose errors after the calculation")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        if args.config is not None:
            settings = load_settings(args.config)
        elif DEFAULT_CONFIG_PATH.exists():
            settings = load_settings(DEFAULT_CONFIG_PATH)
        else:
            settings = CalibrationSettings()
        robot_positions, external_positions = load_joint_positions_csv(args.poses)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return EXIT_BAD_INPUT

    robot = Robot.preset(args.robot)
    calibration = RobotToolCalibration(robot, robot_positions, external_positions, settings)

    for warning in calibration.check_joint_positions_axis_limits():
        print(f"Warning: {warning}")

    calibration.calculate()

    print(f"TCP: {calibration.tcp_point}")
    print("Maximum error (x, y, z):", np.round(calibration.maximum_error, 3))

    if args.output is not None:
        save_calibration_result(calibration, args.output)

    if args.plot:
        from .plotting import plot_calibration_errors
        plot_calibration_errors(calibration)

    return EXIT_OK
