import csv
import json
import logging
import os
import pathlib
from typing import List, Tuple, Union

from .joint_position import ExternalJointPosition, RobotJointPosition

logger = logging.getLogger(__name__)

ROBOT_COLUMNS = ["rax_1", "rax_2", "rax_3", "rax_4", "rax_5", "rax_6"]
EXTERNAL_COLUMNS = ["eax_a", "eax_b", "eax_c", "eax_d", "eax_e", "eax_f"]


def _parse_value(row: dict, key: str, line: int, allow_empty: bool):
    text = (row.get(key) or "").strip()
    if text == "":
        if allow_empty:
            return None
        raise ValueError(f"Line {line}: missing value for column '{key}'.")
    try:
        return float(text)
    except ValueError as e:
        raise ValueError(f"Line {line}: invalid number {text!r} in column '{key}'.") from e


def load_joint_positions_csv(path: Union[str, pathlib.Path]
                             ) -> Tuple[List[RobotJointPosition], List[ExternalJointPosition]]:
    """
    Read calibration poses from a CSV file.
    Expected header: rax_1..rax_6 and, optionally, eax_a..eax_f (empty cell = axis not connected).
    """
    path = pathlib.Path(path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"The file '{path}' does not exist. Please check the path.")

    robot_positions = []
    external_positions = []

    with open(path, 'r', newline='', encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        if reader.fieldnames is None:
            raise ValueError(f"{path} is empty.")
        # Strip extra whitespace from header keys
        reader.fieldnames = [field.strip() for field in reader.fieldnames]

        missing = [column for column in ROBOT_COLUMNS if column not in reader.fieldnames]
        if missing:
            raise ValueError(f"{path} is missing the columns: {', '.join(missing)}")
        external_columns = [column for column in EXTERNAL_COLUMNS if column in reader.fieldnames]

        # header is line 1
        for line, row in enumerate(reader, start=2):
            if None in row:
                raise ValueError(f"Line {line}: more values than header columns.")
            robot_values = [_parse_value(row, key, line, allow_empty=False) for key in ROBOT_COLUMNS]
            external_values = [_parse_value(row, key, line, allow_empty=True) for key in external_columns]
            robot_positions.append(RobotJointPosition(robot_values))
            external_positions.append(ExternalJointPosition(external_values))

    logger.info(f"Loaded {len(robot_positions)} joint positions from {path}")
    return robot_positions, external_positions


def save_joint_positions_csv(path: Union[str, pathlib.Path],
                             robot_positions: List[RobotJointPosition],
                             external_positions: List[ExternalJointPosition] = None) -> None:
    path = pathlib.Path(path)
    if external_positions is None:
        external_positions = [ExternalJointPosition() for _ in robot_positions]
    if len(robot_positions) != len(external_positions):
        raise ValueError("Robot and external joint position lists must have the same length.")

    with open(path, mode='w', newline='') as file:
        writer = csv.writer(file)
        writer.writerow(ROBOT_COLUMNS + EXTERNAL_COLUMNS)
        for robot_position, external_position in zip(robot_positions, external_positions):
            writer.writerow(robot_position.to_list() +
                            ["" if v is None else v for v in external_position.to_list()])
    logger.info(f"Joint positions logged to {path}")


def calibration_result_to_dict(calibration, name: str = "tool_calibration") -> dict:
    tool = calibration.to_robot_tool()
    return {
        "name": name,
        "robot": calibration.robot.name,
        "tcp": calibration.tcp_point.to_list(),
        "target_point": calibration.target_point.to_list(),
        "maximum_error": calibration.maximum_error.tolist(),
        "errors": {
            "x": calibration.errors_x.tolist(),
            "y": calibration.errors_y.tolist(),
            "z": calibration.errors_z.tolist(),
        },
        "iterations_used": calibration.iterations_used,
        "converged": calibration.converged,
        "settings": calibration.settings.to_dict(),
        "tool_matrix": tool.attachment.A.tolist(),
    }


def save_calibration_result(calibration, path: Union[str, pathlib.Path], name: str = "tool_calibration") -> None:
    path = pathlib.Path(path)
    data = calibration_result_to_dict(calibration, name)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(data, f, indent=4)
    logger.info(f"Saved calibration result to {path}")


def load_calibration_result(path: Union[str, pathlib.Path]) -> dict:
    path = pathlib.Path(path)
    if not path.exists():
        raise FileNotFoundError(f"{path} does not exist.")
    with open(path, 'r') as f:
        return json.load(f)
