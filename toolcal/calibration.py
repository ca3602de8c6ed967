import logging
from typing import List, Optional
import numpy as np

from .config import CalibrationSettings
from .joint_position import ExternalJointPosition, RobotJointPosition
from .joint_target import JointTarget
from .point3d import Frame, Point3D
from .robot import Robot, RobotTool

logger = logging.getLogger(__name__)

MINIMUM_POSE_COUNT = 4


class RobotToolCalibration:
    """
    Calculates the tool center point (TCP) from joint positions at which the
    tool tip touched the same physical point.

    The TCP is the offset, expressed in the flange frame, that makes the
    transformed point agree across all poses. Each axis is solved with a
    damped Newton step on the mean absolute deviation from the centroid,
    using a central difference for the derivative.

    The run stops once every damped step is below ``precision``, so with the
    default damping of 0.01 the result lies about ``precision / damping``
    (1 mm) from the optimum; lower the precision or raise the damping for a
    tighter fit.
    """

    def __init__(self, robot: Robot, robot_joint_positions: List[RobotJointPosition],
                 external_joint_positions: Optional[List[ExternalJointPosition]] = None,
                 settings: Optional[CalibrationSettings] = None):
        self._robot = robot.duplicate()
        self._robot_joint_positions = robot_joint_positions
        if external_joint_positions is None:
            external_joint_positions = [ExternalJointPosition() for _ in robot_joint_positions]
        self._external_joint_positions = external_joint_positions

        self.apply_settings(CalibrationSettings() if settings is None else settings)

        self._x = self.x_initial
        self._y = self.y_initial
        self._z = self.z_initial
        self._average_point = np.zeros(3)
        self._iterations_used = 0
        self._converged = False

        self._initialize()

    def duplicate(self) -> "RobotToolCalibration":
        """Returns a deep copy of this calibration."""
        calibration = RobotToolCalibration.__new__(RobotToolCalibration)
        calibration._robot = self._robot.duplicate()
        calibration._robot_joint_positions = [p.duplicate() for p in self._robot_joint_positions]
        calibration._external_joint_positions = [p.duplicate() for p in self._external_joint_positions]
        calibration.apply_settings(self.settings)
        calibration._x = self._x
        calibration._y = self._y
        calibration._z = self._z
        calibration._average_point = self._average_point.copy()
        calibration._iterations_used = self._iterations_used
        calibration._converged = self._converged
        calibration._errors_x = self._errors_x.copy()
        calibration._errors_y = self._errors_y.copy()
        calibration._errors_z = self._errors_z.copy()
        calibration._frames = []
        calibration._rotations = np.zeros((0, 3, 3))
        calibration._translations = np.zeros((0, 3))
        if len(calibration._robot_joint_positions) == len(calibration._external_joint_positions):
            calibration._create_frames()
        return calibration

    # --------------------------
    # Settings
    # --------------------------
    def apply_settings(self, settings: CalibrationSettings) -> None:
        self.iterations = settings.iterations
        self.precision = settings.precision
        self.delta = settings.delta
        self.damping = settings.damping
        self.x_initial = settings.x_initial
        self.y_initial = settings.y_initial
        self.z_initial = settings.z_initial
        self.log_interval = settings.log_interval

    @property
    def settings(self) -> CalibrationSettings:
        return CalibrationSettings(self.iterations, self.precision, self.delta, self.damping,
                                   self.x_initial, self.y_initial, self.z_initial, self.log_interval)

    # --------------------------
    # Initialization
    # --------------------------
    def _initialize(self) -> None:
        robot_positions = self._robot_joint_positions
        external_positions = self._external_joint_positions

        # Pad the shorter list by repeating its last element
        if len(external_positions) == 0 and len(robot_positions) != 0:
            external_positions.extend(ExternalJointPosition() for _ in robot_positions)
        elif 0 < len(robot_positions) < len(external_positions):
            n = len(external_positions) - len(robot_positions)
            logger.warning(f"Padding robot joint positions with {n} copies of the last position.")
            robot_positions.extend(robot_positions[-1].duplicate() for _ in range(n))
        elif 0 < len(external_positions) < len(robot_positions):
            n = len(robot_positions) - len(external_positions)
            logger.warning(f"Padding external joint positions with {n} copies of the last position.")
            external_positions.extend(external_positions[-1].duplicate() for _ in range(n))

        n = len(robot_positions)
        self._frames: List[Frame] = []
        self._rotations = np.zeros((n, 3, 3))
        self._translations = np.zeros((n, 3))
        self._errors_x = np.zeros(n)
        self._errors_y = np.zeros(n)
        self._errors_z = np.zeros(n)

    def reinitialize(self) -> None:
        """Re-runs the list padding and resets the results to the initial guess."""
        self._initialize()
        self._average_point = np.zeros(3)
        self._x = self.x_initial
        self._y = self.y_initial
        self._z = self.z_initial
        self._iterations_used = 0
        self._converged = False

    def check_joint_positions_axis_limits(self) -> List[str]:
        """
        Checks if the joint positions are within the axis limits of the robot.
        Returns a list with error messages; an empty list means all positions are within the limits.
        """
        errors = []
        for i, (robot_position, external_position) in enumerate(
                zip(self._robot_joint_positions, self._external_joint_positions)):
            joint_target = JointTarget(str(i + 1), robot_position, external_position)
            errors.extend(joint_target.check_axis_limits(self._robot))
        return errors

    # --------------------------
    # Calculation
    # --------------------------
    def calculate(self) -> None:
        """Calculates the tool center point."""
        self._x = self.x_initial
        self._y = self.y_initial
        self._z = self.z_initial
        self._iterations_used = 0
        self._converged = False

        self._create_frames()
        n = len(self._frames)

        if n < MINIMUM_POSE_COUNT:
            logger.warning(f"Tool calibration with {n} joint positions; "
                           f"at least {MINIMUM_POSE_COUNT} are needed for a reliable result.")
        if n == 0:
            return

        logger.info(f"Starting tool calibration: {n} poses, iterations={self.iterations}, "
                    f"precision={self.precision}, delta={self.delta}, damping={self.damping}")

        delta = self.delta
        damping = self.damping

        for i in range(self.iterations):
            x_old, y_old, z_old = self._x, self._y, self._z

            fval_x, fval_y, fval_z = self._mean_errors(x_old, y_old, z_old)

            # X
            fval1 = self._mean_errors(x_old + delta, y_old, z_old)[0]
            fval2 = self._mean_errors(x_old - delta, y_old, z_old)[0]
            if fval1 - fval2 != 0:
                self._x -= damping * (fval_x / ((fval1 - fval2) / (2 * delta)))

            # Y
            fval1 = self._mean_errors(x_old, y_old + delta, z_old)[1]
            fval2 = self._mean_errors(x_old, y_old - delta, z_old)[1]
            if fval1 - fval2 != 0:
                self._y -= damping * (fval_y / ((fval1 - fval2) / (2 * delta)))

            # Z
            fval1 = self._mean_errors(x_old, y_old, z_old + delta)[2]
            fval2 = self._mean_errors(x_old, y_old, z_old - delta)[2]
            if fval1 - fval2 != 0:
                self._z -= damping * (fval_z / ((fval1 - fval2) / (2 * delta)))

            self._iterations_used = i + 1

            change_x = abs(x_old - self._x)
            change_y = abs(y_old - self._y)
            change_z = abs(z_old - self._z)

            if self.log_interval > 0 and self._iterations_used % self.log_interval == 0:
                logger.debug(f"Iteration {self._iterations_used}: TCP = ({self._x:.4f}, {self._y:.4f}, {self._z:.4f}), "
                             f"change = ({change_x:.2e}, {change_y:.2e}, {change_z:.2e})")

            if change_x < self.precision and change_y < self.precision and change_z < self.precision:
                self._converged = True
                break

        self._calculate_function_values(self._x, self._y, self._z)

        logger.info(f"Tool calibration finished after {self._iterations_used} iterations "
                    f"(converged={self._converged}): TCP = {self.tcp_point}, "
                    f"maximum error = {np.round(self.maximum_error, 4).tolist()}")

    def _create_frames(self) -> None:
        """Creates the flange frames of all joint positions (forward kinematics with tool0)."""
        self._robot.tool = RobotTool()

        self._frames = []
        for robot_position, external_position in zip(self._robot_joint_positions, self._external_joint_positions):
            self._frames.append(self._robot.forward_kinematics(robot_position, external_position))

        n = len(self._frames)
        self._rotations = np.zeros((n, 3, 3))
        self._translations = np.zeros((n, 3))
        for i, frame in enumerate(self._frames):
            transformation = frame.to_world()
            self._rotations[i] = transformation.R
            self._translations[i] = transformation.t

        if len(self._errors_x) != n:
            self._errors_x = np.zeros(n)
            self._errors_y = np.zeros(n)
            self._errors_z = np.zeros(n)

    def _calculate_function_values(self, x: float, y: float, z: float) -> None:
        """Calculates the errors of every pose: deviation of the transformed point from the average point."""
        points = self._rotations @ np.array([x, y, z]) + self._translations
        self._average_point = points.mean(axis=0)
        errors = np.abs(self._average_point - points)
        self._errors_x = errors[:, 0]
        self._errors_y = errors[:, 1]
        self._errors_z = errors[:, 2]

    def _mean_errors(self, x: float, y: float, z: float):
        self._calculate_function_values(x, y, z)
        return self._errors_x.mean(), self._errors_y.mean(), self._errors_z.mean()

    def to_robot_tool(self, name: str = "tool_calibrated") -> RobotTool:
        """Creates a robot tool with the calculated tool center point."""
        return RobotTool.from_point(name, self.tcp_point)

    # --------------------------
    # Properties
    # --------------------------
    @property
    def is_valid(self) -> bool:
        if not self._robot.is_valid:
            return False
        if len(self._robot_joint_positions) < MINIMUM_POSE_COUNT:
            return False
        if len(self._external_joint_positions) < MINIMUM_POSE_COUNT:
            return False
        if len(self._robot_joint_positions) != len(self._external_joint_positions):
            return False
        if self.iterations < 1:
            return False
        if self.delta < 0:
            return False
        if self.damping < 0:
            return False
        return True

    @property
    def robot(self) -> Robot:
        return self._robot

    @robot.setter
    def robot(self, robot: Robot) -> None:
        self._robot = robot.duplicate()

    @property
    def robot_joint_positions(self) -> List[RobotJointPosition]:
        return self._robot_joint_positions

    @robot_joint_positions.setter
    def robot_joint_positions(self, positions: List[RobotJointPosition]) -> None:
        self._robot_joint_positions = positions

    @property
    def external_joint_positions(self) -> List[ExternalJointPosition]:
        return self._external_joint_positions

    @external_joint_positions.setter
    def external_joint_positions(self, positions: List[ExternalJointPosition]) -> None:
        self._external_joint_positions = positions

    @property
    def frames(self) -> List[Frame]:
        return self._frames

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def z(self) -> float:
        return self._z

    @property
    def tcp_point(self) -> Point3D:
        return Point3D(self._x, self._y, self._z)

    @property
    def target_point(self) -> Point3D:
        """Average of the transformed TCP over all poses, in world coordinates."""
        return Point3D.from_array(self._average_point)

    @property
    def errors_x(self) -> np.ndarray:
        return self._errors_x

    @property
    def errors_y(self) -> np.ndarray:
        return self._errors_y

    @property
    def errors_z(self) -> np.ndarray:
        return self._errors_z

    @property
    def maximum_error(self) -> np.ndarray:
        """Maximum errors in x, y and z direction."""
        if len(self._errors_x) == 0:
            return np.zeros(3)
        return np.array([self._errors_x.max(), self._errors_y.max(), self._errors_z.max()])

    @property
    def iterations_used(self) -> int:
        return self._iterations_used

    @property
    def converged(self) -> bool:
        return self._converged
