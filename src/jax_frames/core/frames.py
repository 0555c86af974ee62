"""Frame identity: a frame tag plus a logical timestamp."""

import enum
from dataclasses import dataclass


class FrameId(enum.Enum):
    """Base class for frame tags.

    Declare the frames of a system by subclassing with one member per frame::

        class ArmFrame(FrameId):
            BASE = "base"
            GRIPPER = "gripper"

    Members of different subclasses never compare equal.
    """

    def at_time(self, time: int) -> "CoordinateFrame":
        """This frame at the given logical time."""
        return CoordinateFrame.at_time(self, time)


@dataclass(frozen=True)
class CoordinateFrame:
    """A frame tag at a specific logical time.

    Attributes:
        id: frame tag
        time: non-negative integer timestamp
    """
    id: FrameId
    time: int

    def __post_init__(self):
        if not isinstance(self.id, FrameId):
            raise TypeError(f"frame id must be a FrameId member, got {self.id!r}")
        time = int(self.time)
        if time != self.time or time < 0:
            raise ValueError(f"frame time must be a non-negative integer, got {self.time!r}")
        object.__setattr__(self, "time", time)

    @classmethod
    def at_time(cls, id: FrameId, time: int) -> "CoordinateFrame":
        return cls(id=id, time=time)

    def __str__(self):
        return f"{self.id.name}@{self.time}"
