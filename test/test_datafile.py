import pytest

from toolcal.calibration import RobotToolCalibration
from toolcal.config import CalibrationSettings
from toolcal.datafile import (load_calibration_result, load_joint_positions_csv,
                              save_calibration_result, save_joint_positions_csv)
from toolcal.joint_position import ExternalJointPosition, RobotJointPosition


def test_load_csv_with_external_axes(tmp_path):
    path = tmp_path / "poses.csv"
    path.write_text(
        "rax_1, rax_2, rax_3, rax_4, rax_5, rax_6, eax_a, eax_b\n"
        "10,20,30,40,50,60,500,\n"
        "-10,-20,-30,-40,-50,-60,750,15\n"
    )

    robot_positions, external_positions = load_joint_positions_csv(path)

    assert robot_positions == [RobotJointPosition(10, 20, 30, 40, 50, 60),
                               RobotJointPosition(-10, -20, -30, -40, -50, -60)]
    assert external_positions == [ExternalJointPosition(500), ExternalJointPosition(750, 15)]


def test_load_csv_without_external_axes(tmp_path):
    path = tmp_path / "poses.csv"
    path.write_text("rax_1,rax_2,rax_3,rax_4,rax_5,rax_6\n0,0,-90,0,0,0\n")

    robot_positions, external_positions = load_joint_positions_csv(path)

    assert robot_positions == [RobotJointPosition(0, 0, -90)]
    assert external_positions == [ExternalJointPosition()]


def test_csv_roundtrip(tmp_path):
    path = tmp_path / "poses.csv"
    robot_positions = [RobotJointPosition(1, 2, 3, 4, 5, 6.5)]
    external_positions = [ExternalJointPosition(None, 250)]

    save_joint_positions_csv(path, robot_positions, external_positions)

    assert load_joint_positions_csv(path) == (robot_positions, external_positions)


def test_missing_column(tmp_path):
    path = tmp_path / "poses.csv"
    path.write_text("rax_1,rax_2,rax_3\n1,2,3\n")

    with pytest.raises(ValueError, match="rax_4"):
        load_joint_positions_csv(path)


def test_invalid_number(tmp_path):
    path = tmp_path / "poses.csv"
    path.write_text("rax_1,rax_2,rax_3,rax_4,rax_5,rax_6\n1,2,three,4,5,6\n")

    with pytest.raises(ValueError, match="Line 2"):
        load_joint_positions_csv(path)


def test_too_many_values(tmp_path):
    path = tmp_path / "poses.csv"
    path.write_text("rax_1,rax_2,rax_3,rax_4,rax_5,rax_6\n1,2,3,4,5,6,7\n")

    with pytest.raises(ValueError, match="more values"):
        load_joint_positions_csv(path)


def test_missing_csv(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_joint_positions_csv(tmp_path / "missing.csv")


def test_save_calibration_result(tmp_path, synthetic_robot, synthetic_positions, known_tcp):
    settings = CalibrationSettings(iterations=2000, precision=1e-6, damping=0.5)
    calibration = RobotToolCalibration(synthetic_robot, synthetic_positions, settings=settings)
    calibration.calculate()
    path = tmp_path / "results" / "tool.json"

    save_calibration_result(calibration, path, name="probe")
    data = load_calibration_result(path)

    assert data["name"] == "probe"
    assert data["robot"] == "FakeRobot"
    assert data["tcp"] == pytest.approx(known_tcp, abs=1e-3)
    assert len(data["errors"]["x"]) == 4
    assert data["settings"]["damping"] == 0.5
    assert data["tool_matrix"][0][3] == pytest.approx(known_tcp[0], abs=1e-3)
    assert data["tool_matrix"][3] == [0.0, 0.0, 0.0, 1.0]
