import numpy as np
import pytest

from toolcal.joint_position import ExternalJointPosition, RobotJointPosition


def test_robot_joint_position_fills_missing_values_with_zero():
    position = RobotJointPosition(10, 20)
    assert position.to_list() == [10.0, 20.0, 0.0, 0.0, 0.0, 0.0]
    assert len(position) == 6


def test_robot_joint_position_from_list():
    assert RobotJointPosition([1, 2, 3, 4, 5, 6]) == RobotJointPosition(1, 2, 3, 4, 5, 6)


def test_external_joint_position_defaults_to_undefined():
    position = ExternalJointPosition(500)
    assert position[0] == 500.0
    assert position[1] is None
    assert position.defined_count == 1
    assert np.isnan(position.to_array()[1])


def test_too_many_values():
    with pytest.raises(ValueError):
        RobotJointPosition(1, 2, 3, 4, 5, 6, 7)


def test_robot_values_must_be_finite():
    with pytest.raises(ValueError):
        RobotJointPosition(0, float("nan"))


def test_duplicate_is_independent():
    position = RobotJointPosition(1, 2, 3, 4, 5, 6)
    duplicate = position.duplicate()
    duplicate[0] = 90

    assert position[0] == 1.0
    assert duplicate[0] == 90.0
    assert type(duplicate) is RobotJointPosition


def test_to_radians():
    np.testing.assert_allclose(RobotJointPosition(180, 90).to_radians()[:2], [np.pi, np.pi / 2])


def test_reset_and_validity():
    position = ExternalJointPosition(1, 2, 3)
    position.reset()
    assert position.defined_count == 0
    assert position.is_valid

    position[2] = float("inf")
    assert not position.is_valid


def test_robot_and_external_positions_are_not_equal():
    assert RobotJointPosition() != ExternalJointPosition(0, 0, 0, 0, 0, 0)
