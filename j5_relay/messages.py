from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Twist:
    """Wire form of a velocity command (only linear.x and angular.z are used)."""

    linear: Vector3 = field(default_factory=Vector3)
    angular: Vector3 = field(default_factory=Vector3)


@dataclass(frozen=True)
class MotionCommand:
    linear_velocity: float  # forward, m/s
    angular_velocity: float  # rotation around Z, rad/s

    def to_twist(self) -> Twist:
        return Twist(
            linear=Vector3(x=self.linear_velocity),
            angular=Vector3(z=self.angular_velocity),
        )

    def as_dict(self) -> dict[str, float]:
        return {"linear_x": self.linear_velocity, "angular_z": self.angular_velocity}


@dataclass(frozen=True)
class Header:
    seq: int = 0
    stamp: float = 0.0  # seconds
    frame_id: str = ""


@dataclass(frozen=True)
class StatusReport:
    external_control_active: bool  # direct link vs. handheld remote
    contactors_closed: bool
    fault_active: bool
    supply_voltage: float  # volts
    header: Header = field(default_factory=Header)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)
