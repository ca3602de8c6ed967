import numpy as np
import pytest
from spatialmath import SE3

from toolcal.joint_position import RobotJointPosition
from toolcal.point3d import Frame
from toolcal.robot import Interval, Robot


class FakeRobot(Robot):
    """
    Robot stand-in that returns predefined flange frames.
    The first robot axis value of a joint position selects the frame.
    """

    def __init__(self, flange_poses, axis_limits=None):
        # No kinematics model: forward_kinematics is overridden below.
        super().__init__("FakeRobot", kinematics=None,
                         axis_limits=axis_limits or [Interval(-180, 180)] * 6)
        self.flange_poses = flange_poses
        self.calls = []

    @property
    def is_valid(self):
        return True

    def duplicate(self):
        robot = FakeRobot(self.flange_poses, [Interval(l.min, l.max) for l in self.axis_limits])
        robot.tool = self.tool.duplicate()
        return robot

    def forward_kinematics(self, robot_joint_position, external_joint_position=None, use_tool=True):
        self.calls.append(robot_joint_position[0])
        pose = self.flange_poses[int(robot_joint_position[0])]
        if use_tool:
            pose = pose * self.tool.attachment
        return Frame.from_se3(pose)


def flange_poses_for(tcp, target, rotations):
    """Flange poses whose tool point tcp (flange coordinates) lands on target for every rotation."""
    tcp = np.asarray(tcp, dtype=np.float64)
    target = np.asarray(target, dtype=np.float64)
    return [SE3.Rt(R, target - R @ tcp, check=False) for R in rotations]


# Identity and the half turns about x, y and z
HALF_TURNS = [
    np.diag([1.0, 1.0, 1.0]),
    np.diag([1.0, -1.0, -1.0]),
    np.diag([-1.0, 1.0, -1.0]),
    np.diag([-1.0, -1.0, 1.0]),
]


@pytest.fixture
def known_tcp():
    return [12.0, -7.0, 150.0]


@pytest.fixture
def synthetic_robot(known_tcp):
    return FakeRobot(flange_poses_for(known_tcp, [1000.0, 200.0, 500.0], HALF_TURNS))


@pytest.fixture
def synthetic_positions():
    return [RobotJointPosition(i) for i in range(len(HALF_TURNS))]
