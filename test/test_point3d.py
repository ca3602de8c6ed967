import numpy as np
import pytest
from spatialmath import SE3

from toolcal.point3d import Frame, Point3D


def test_point_arithmetic():
    a = Point3D(1, 2, 3)
    b = Point3D(4, 6, 3)
    assert b - a == Point3D(3, 4, 0)
    assert a + b == Point3D(5, 8, 6)
    assert a * 2 == Point3D(2, 4, 6)
    assert a.distance_to(b) == pytest.approx(5.0)


def test_point_transform():
    point = Point3D(100, 0, 0).transform(SE3.Trans(0, 0, 50) * SE3.Rz(np.pi / 2))
    np.testing.assert_allclose(point.to_array(), [0.0, 100.0, 50.0], atol=1e-12)


def test_frame_orthonormalizes_y_axis():
    frame = Frame(Point3D(), [2, 0, 0], [1, 1, 0])
    np.testing.assert_allclose(frame.x_axis, [1, 0, 0])
    np.testing.assert_allclose(frame.y_axis, [0, 1, 0])
    np.testing.assert_allclose(frame.z_axis, [0, 0, 1])


def test_frame_rejects_parallel_axes():
    with pytest.raises(ValueError):
        Frame(Point3D(), [1, 0, 0], [3, 0, 0])
    with pytest.raises(ValueError):
        Frame(Point3D(), [0, 0, 0], [0, 1, 0])


def test_frame_se3_conversion():
    pose = SE3.Trans(10, 20, 30) * SE3.RPY(0.1, -0.4, 1.2)
    frame = Frame.from_se3(pose)

    np.testing.assert_allclose(frame.to_se3().A, pose.A, atol=1e-12)
    # local to world: the frame origin is the image of the local origin
    np.testing.assert_allclose(Point3D().transform(frame.to_world()).to_array(), [10, 20, 30])


def test_world_xy():
    np.testing.assert_allclose(Frame.world_xy().to_se3().A, np.eye(4))
