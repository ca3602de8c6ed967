from typing import List, Optional

from .joint_position import ExternalJointPosition, RobotJointPosition


class JointTarget:
    """Named pair of robot and external joint positions."""

    def __init__(self, name: str, robot_joint_position: RobotJointPosition,
                 external_joint_position: Optional[ExternalJointPosition] = None):
        self.name = name
        self.robot_joint_position = robot_joint_position
        self.external_joint_position = (ExternalJointPosition() if external_joint_position is None
                                        else external_joint_position)

    def check_axis_limits(self, robot) -> List[str]:
        """
        Checks the axis values against the limits of the robot and its external axes.
        Returns a list with error messages; an empty list means all values are in range.
        """
        errors = []

        for i, limit in enumerate(robot.axis_limits):
            if not limit.includes(self.robot_joint_position[i]):
                errors.append(f"Joint Target {self.name}: Internal axis value {i + 1} is not in range.")

        for i, axis in enumerate(robot.external_axes):
            value = self.external_joint_position[axis.axis_number]
            if value is None:
                errors.append(f"Joint Target {self.name}: External axis value {i + 1} is not defined.")
            elif not axis.axis_limits.includes(value):
                errors.append(f"Joint Target {self.name}: External axis value {i + 1} is not in range.")

        return errors

    def __repr__(self) -> str:
        return (f"JointTarget(name={self.name!r}, robot={self.robot_joint_position}, "
                f"external={self.external_joint_position})")
