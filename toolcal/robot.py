import copy
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import numpy as np
from spatialmath import SE3

from .joint_position import AXIS_COUNT, ExternalJointPosition, RobotJointPosition
from .kinematics import DHKinematics, OPWKinematics
from .point3d import Frame, Point3D


@dataclass
class Interval:
    """Closed range of allowed axis values."""
    min: float
    max: float

    def includes(self, value: float) -> bool:
        return self.min <= value <= self.max

    @classmethod
    def from_list(cls, values: Sequence[float]) -> "Interval":
        return cls(float(values[0]), float(values[1]))

    def to_list(self) -> List[float]:
        return [self.min, self.max]


class RobotTool:
    """
    Tool mounted on the robot flange. The attachment maps coordinates
    expressed in the tool (TCP) frame to coordinates in the flange frame.
    """

    def __init__(self, name: str = "tool0", attachment: Optional[SE3] = None):
        self.name = name
        self.attachment = SE3() if attachment is None else SE3(attachment)

    @classmethod
    def from_point(cls, name: str, point: Point3D) -> "RobotTool":
        return cls(name, SE3.Trans(point.x, point.y, point.z))

    @property
    def tcp_point(self) -> Point3D:
        return Point3D.from_array(self.attachment.t)

    def duplicate(self) -> "RobotTool":
        return RobotTool(self.name, SE3(self.attachment))

    def __repr__(self) -> str:
        return f"RobotTool(name={self.name!r}, tcp={self.tcp_point})"


class ExternalAxis:
    """External axis coupled to a logic slot (0..5 for axes a..f) of the external joint position."""

    moves_robot = False

    def __init__(self, name: str, axis_number: int, axis_limits: Interval):
        if not 0 <= axis_number < AXIS_COUNT:
            raise ValueError(f"Axis number must be in range 0..{AXIS_COUNT - 1}, got {axis_number}.")
        self.name = name
        self.axis_number = axis_number
        self.axis_limits = axis_limits

    def base_offset(self, value: Optional[float]) -> SE3:
        return SE3()

    def duplicate(self) -> "ExternalAxis":
        return copy.deepcopy(self)


class ExternalLinearAxis(ExternalAxis):
    """Linear track; translates the robot base along a world direction (mm)."""

    def __init__(self, name: str, axis_number: int, axis_limits: Interval,
                 direction: Sequence[float] = (1.0, 0.0, 0.0), moves_robot: bool = True):
        super().__init__(name, axis_number, axis_limits)
        direction = np.asarray(direction, dtype=np.float64)
        norm = np.linalg.norm(direction)
        if norm == 0.0:
            raise ValueError("Linear axis direction has zero length.")
        self.direction = direction / norm
        self.moves_robot = moves_robot

    def base_offset(self, value: Optional[float]) -> SE3:
        if value is None:
            return SE3()
        return SE3.Trans(*(self.direction * value))


class ExternalRotationalAxis(ExternalAxis):
    """Positioner axis; it does not move the robot and only takes part in limit checks."""


class Robot:

    def __init__(self, name: str, kinematics, axis_limits: Sequence[Interval],
                 base_frame: Optional[SE3] = None, tool: Optional[RobotTool] = None,
                 external_axes: Optional[List[ExternalAxis]] = None):
        self.name = name
        # kinematics objects are treated as immutable and shared between duplicates
        self.kinematics = kinematics
        self.axis_limits = list(axis_limits)
        self.base_frame = SE3() if base_frame is None else SE3(base_frame)
        self.tool = RobotTool() if tool is None else tool
        self.external_axes = [] if external_axes is None else list(external_axes)

    @classmethod
    def preset(cls, name: str, base_frame: Optional[SE3] = None, tool: Optional[RobotTool] = None,
               external_axes: Optional[List[ExternalAxis]] = None) -> "Robot":
        if name not in ROBOT_PRESETS:
            raise KeyError(f"Unknown robot preset {name!r}. Available: {', '.join(sorted(ROBOT_PRESETS))}")
        kinematics, limits = ROBOT_PRESETS[name]()
        return cls(name, kinematics, [Interval(*limit) for limit in limits], base_frame, tool, external_axes)

    @property
    def is_valid(self) -> bool:
        if self.kinematics is None or not hasattr(self.kinematics, "forward"):
            return False
        if len(self.axis_limits) != AXIS_COUNT:
            return False
        return all(limit.min <= limit.max for limit in self.axis_limits)

    def duplicate(self) -> "Robot":
        return Robot(self.name, self.kinematics,
                     [Interval(limit.min, limit.max) for limit in self.axis_limits],
                     SE3(self.base_frame), self.tool.duplicate(),
                     [axis.duplicate() for axis in self.external_axes])

    def position_frame(self, external_joint_position: Optional[ExternalJointPosition] = None) -> SE3:
        """Robot base pose in the world, moved by the first external axis that carries the robot."""
        if external_joint_position is None:
            return self.base_frame
        for axis in self.external_axes:
            if axis.moves_robot:
                value = external_joint_position[axis.axis_number]
                return axis.base_offset(value) * self.base_frame
        return self.base_frame

    def forward_kinematics(self, robot_joint_position: RobotJointPosition,
                           external_joint_position: Optional[ExternalJointPosition] = None,
                           use_tool: bool = True) -> Frame:
        """
        Calculates the pose of the tool center point (or of the flange when
        use_tool is False) in world coordinates.
        """
        flange = self.kinematics.forward(robot_joint_position.to_radians())
        pose = self.position_frame(external_joint_position) * flange
        if use_tool:
            pose = pose * self.tool.attachment
        return Frame.from_se3(pose)

    def flange_frame(self, robot_joint_position: RobotJointPosition,
                     external_joint_position: Optional[ExternalJointPosition] = None) -> Frame:
        return self.forward_kinematics(robot_joint_position, external_joint_position, use_tool=False)

    def __repr__(self) -> str:
        return f"Robot(name={self.name!r}, tool={self.tool.name!r}, external_axes={len(self.external_axes)})"


def _irb1520id_4_150() -> Tuple[OPWKinematics, list]:
    return (OPWKinematics.abb(a1=160.0, a2=-200.0, b=0.0, c1=453.0, c2=590.0, c3=723.0, c4=200.0),
            [(-170, 170), (-90, 150), (-100, 80), (-155, 155), (-135, 135), (-200, 200)])


def _irb2600_12_165() -> Tuple[OPWKinematics, list]:
    return (OPWKinematics.abb(a1=150.0, a2=-115.0, b=0.0, c1=445.0, c2=700.0, c3=795.0, c4=85.0),
            [(-180, 180), (-95, 155), (-180, 75), (-400, 400), (-120, 120), (-400, 400)])


def _irb2600_12_185() -> Tuple[OPWKinematics, list]:
    return (OPWKinematics.abb(a1=150.0, a2=-115.0, b=0.0, c1=445.0, c2=900.0, c3=795.0, c4=85.0),
            [(-180, 180), (-95, 155), (-180, 75), (-400, 400), (-120, 120), (-400, 400)])


def _irb4600_40_255() -> Tuple[OPWKinematics, list]:
    return (OPWKinematics.abb(a1=175.0, a2=-175.0, b=0.0, c1=495.0, c2=1095.0, c3=1270.0, c4=135.0),
            [(-180, 180), (-90, 150), (-180, 75), (-400, 400), (-120, 125), (-400, 400)])


def _irb6700_235_265() -> Tuple[OPWKinematics, list]:
    return (OPWKinematics.abb(a1=320.0, a2=-200.0, b=0.0, c1=780.0, c2=1135.0, c3=1182.5, c4=200.0),
            [(-170, 170), (-65, 85), (-180, 70), (-300, 300), (-130, 130), (-360, 360)])


def _ur5e() -> Tuple[DHKinematics, list]:
    return DHKinematics.ur5e(), [(-360, 360)] * AXIS_COUNT


ROBOT_PRESETS: Dict[str, Callable] = {
    "IRB1520ID-4/1.5": _irb1520id_4_150,
    "IRB2600-12/1.65": _irb2600_12_165,
    "IRB2600-12/1.85": _irb2600_12_185,
    "IRB4600-40/2.55": _irb4600_40_255,
    "IRB6700-235/2.65": _irb6700_235_265,
    "UR5e": _ur5e,
}
