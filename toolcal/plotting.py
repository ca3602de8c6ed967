import numpy as np
import matplotlib.pyplot as plt


def plot_calibration_errors(calibration, show: bool = True):
    """Bar chart of the per-pose errors in x, y and z after a calibration."""
    n = len(calibration.errors_x)
    index = np.arange(1, n + 1)
    width = 0.25

    fig = plt.figure(figsize=(10, 5))
    ax = fig.add_subplot(111)
    ax.bar(index - width, calibration.errors_x, width, color='r', label='Error X')
    ax.bar(index, calibration.errors_y, width, color='g', label='Error Y')
    ax.bar(index + width, calibration.errors_z, width, color='b', label='Error Z')
    ax.set_xticks(index)
    ax.set_xlabel('Joint position')
    ax.set_ylabel('Error [mm]')
    ax.set_title(f"TCP {calibration.tcp_point}")
    ax.legend()
    ax.grid(True)
    fig.tight_layout()
    if show:
        plt.show()
    return fig


def plot_calibration_frames(calibration, axis_length: float = 50.0, show: bool = True):
    """3-D view of the flange frames with the calibrated TCP and the target point."""
    fig = plt.figure()
    ax = fig.add_subplot(111, projection='3d')

    tcp = calibration.tcp_point
    for frame in calibration.frames:
        origin = frame.origin.to_array()
        for axis, color in zip((frame.x_axis, frame.y_axis, frame.z_axis), ('red', 'green', 'blue')):
            end = origin + axis * axis_length
            ax.plot([origin[0], end[0]], [origin[1], end[1]], [origin[2], end[2]], color=color)
        point = tcp.transform(frame.to_world())
        ax.scatter(point.x, point.y, point.z, color='black', s=5)

    target = calibration.target_point
    ax.scatter(target.x, target.y, target.z, color='orange', s=50, label="Target point")
    ax.set_xlabel('X [mm]')
    ax.set_ylabel('Y [mm]')
    ax.set_zlabel('Z [mm]')
    ax.legend()
    if show:
        plt.show()
    return fig
