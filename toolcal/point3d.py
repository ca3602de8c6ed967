from dataclasses import dataclass, field
from typing import List
import numpy as np
import math
from spatialmath import SE3


@dataclass
class Point3D:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_array(self) -> np.ndarray:
        """Return the point as a NumPy array [x, y, z]."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def to_list(self) -> List[float]:
        """Return the point as a list [x, y, z]."""
        return [self.x, self.y, self.z]

    @classmethod
    def from_array(cls, values) -> "Point3D":
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def distance_to(self, other: "Point3D") -> float:
        """Compute Euclidean distance to another Point3D."""
        return math.sqrt((self.x - other.x) ** 2 +
                         (self.y - other.y) ** 2 +
                         (self.z - other.z) ** 2)

    def transform(self, transformation: SE3) -> "Point3D":
        """Return this point mapped by a rigid transformation."""
        return Point3D.from_array(transformation.R @ self.to_array() + transformation.t)

    def __add__(self, other: "Point3D") -> "Point3D":
        return Point3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Point3D") -> "Point3D":
        return Point3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Point3D":
        return Point3D(self.x * scalar, self.y * scalar, self.z * scalar)

    def __repr__(self) -> str:
        return f"Point3D(x={self.x:.3f}, y={self.y:.3f}, z={self.z:.3f})"


@dataclass(eq=False)
class Frame:
    """
    A rigid frame in 3-D space: an origin and two orthonormal axes.
    The z-axis is derived as x cross y.
    """
    origin: Point3D = field(default_factory=Point3D)
    x_axis: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0]))
    y_axis: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))

    def __post_init__(self):
        x_axis = np.asarray(self.x_axis, dtype=np.float64)
        y_axis = np.asarray(self.y_axis, dtype=np.float64)

        x_norm = np.linalg.norm(x_axis)
        if x_norm == 0.0:
            raise ValueError("Frame x-axis has zero length.")
        x_axis = x_axis / x_norm

        # Gram-Schmidt: y becomes perpendicular to x
        y_axis = y_axis - np.dot(y_axis, x_axis) * x_axis
        y_norm = np.linalg.norm(y_axis)
        if y_norm < 1e-12:
            raise ValueError("Frame axes are parallel or the y-axis has zero length.")

        self.x_axis = x_axis
        self.y_axis = y_axis / y_norm

    @property
    def z_axis(self) -> np.ndarray:
        return np.cross(self.x_axis, self.y_axis)

    @property
    def rotation(self) -> np.ndarray:
        """3x3 matrix with the frame axes as columns."""
        return np.column_stack((self.x_axis, self.y_axis, self.z_axis))

    @classmethod
    def world_xy(cls) -> "Frame":
        return cls()

    @classmethod
    def from_se3(cls, transformation: SE3) -> "Frame":
        R = transformation.R
        return cls(Point3D.from_array(transformation.t), R[:, 0], R[:, 1])

    def to_se3(self) -> SE3:
        return SE3.Rt(self.rotation, self.origin.to_array(), check=False)

    def to_world(self) -> SE3:
        """
        Transformation that maps coordinates expressed in this frame to
        world coordinates (plane to plane from the world XY frame).
        """
        return self.to_se3()

    def duplicate(self) -> "Frame":
        return Frame(Point3D(self.origin.x, self.origin.y, self.origin.z),
                     self.x_axis.copy(), self.y_axis.copy())

    def __repr__(self) -> str:
        return (f"Frame(origin={self.origin}, "
                f"x_axis={np.round(self.x_axis, 3).tolist()}, "
                f"y_axis={np.round(self.y_axis, 3).tolist()})")
