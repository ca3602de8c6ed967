import numpy as np
from math import pi
from typing import Sequence
from roboticstoolbox import DHRobot, RevoluteDH
from spatialmath import SE3


class OPWKinematics:
    """
    Forward kinematics for ortho-parallel 6R arms with a spherical wrist
    (the OPW parameter set of Brandstötter et al.). Lengths in millimeters,
    joint values in radians.
    """

    def __init__(self, a1: float = 0.0, a2: float = 0.0, b: float = 0.0,
                 c1: float = 0.0, c2: float = 0.0, c3: float = 0.0, c4: float = 0.0,
                 offsets: Sequence[float] = (0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
                 signs: Sequence[int] = (1, 1, 1, 1, 1, 1)):
        self.a1 = a1
        self.a2 = a2
        self.b = b
        self.c1 = c1
        self.c2 = c2
        self.c3 = c3
        self.c4 = c4
        self.offsets = np.array(offsets, dtype=np.float64)
        self.signs = np.sign(np.array(signs, dtype=np.float64))

    @classmethod
    def abb(cls, a1, a2, b, c1, c2, c3, c4) -> "OPWKinematics":
        """ABB arms: the zero position of axis 3 has the upper arm horizontal."""
        return cls(a1, a2, b, c1, c2, c3, c4, offsets=(0.0, 0.0, -pi / 2, 0.0, 0.0, 0.0))

    def forward_with_wrist(self, q: Sequence[float]):
        """Return the end frame as SE3 and the wrist center as a 3-vector."""
        q = np.asarray(q, dtype=np.float64)
        if q.shape[0] < 6:
            raise ValueError("Pose does not contain six rotation values.")

        theta = q[:6] * self.signs - self.offsets
        s = np.sin(theta)
        c = np.cos(theta)

        psi3 = np.arctan2(self.a2, self.c3)
        k = np.hypot(self.a2, self.c3)

        # Wrist center in the plane of the arm, then rotated by axis 1
        cx1 = self.c2 * s[1] + k * np.sin(theta[1] + theta[2] + psi3) + self.a1
        cy1 = self.b
        cz1 = self.c2 * c[1] + k * np.cos(theta[1] + theta[2] + psi3)

        wrist = np.array([
            cx1 * c[0] - cy1 * s[0],
            cx1 * s[0] + cy1 * c[0],
            cz1 + self.c1,
        ])

        s23 = np.sin(theta[1] + theta[2])
        c23 = np.cos(theta[1] + theta[2])

        roc = np.array([
            [c[0] * c23, -s[0], c[0] * s23],
            [s[0] * c23, c[0], s[0] * s23],
            [-s23, 0.0, c23],
        ])

        rce = np.array([
            [c[3] * c[4] * c[5] - s[3] * s[5], -c[3] * c[4] * s[5] - s[3] * c[5], c[3] * s[4]],
            [s[3] * c[4] * c[5] + c[3] * s[5], -s[3] * c[4] * s[5] + c[3] * c[5], s[3] * s[4]],
            [-s[4] * c[5], s[4] * s[5], c[4]],
        ])

        roe = roc @ rce
        origin = wrist + self.c4 * roe[:, 2]

        return SE3.Rt(roe, origin, check=False), wrist

    def forward(self, q: Sequence[float]) -> SE3:
        return self.forward_with_wrist(q)[0]

    def __repr__(self) -> str:
        return (f"OPWKinematics(a1={self.a1}, a2={self.a2}, b={self.b}, c1={self.c1}, "
                f"c2={self.c2}, c3={self.c3}, c4={self.c4})")


class DHKinematics(DHRobot):
    """Serial arm described by standard Denavit-Hartenberg rows."""

    def __init__(self, d: Sequence[float], a: Sequence[float], alpha: Sequence[float],
                 offset: Sequence[float] = None, name: str = "DHKinematics"):
        if not (len(d) == len(a) == len(alpha)):
            raise ValueError("DH parameter lists must have the same length.")
        if offset is None:
            offset = [0.0] * len(d)

        links = []
        for j in range(len(d)):
            links.append(RevoluteDH(d=d[j], a=a[j], alpha=alpha[j], offset=offset[j]))

        super().__init__(links, name=name)

    @classmethod
    def ur5e(cls) -> "DHKinematics":
        # link lengths in millimeters
        a = [0, -425.0, -392.2, 0, 0, 0]
        d = [162.5, 0, 0, 133.3, 99.7, 99.6]
        alpha = [pi / 2, 0.0, 0.0, pi / 2, -pi / 2, 0.0]
        return cls(d, a, alpha, name="UR5e")

    def forward(self, q: Sequence[float]) -> SE3:
        return self.fkine(np.asarray(q, dtype=np.float64))
