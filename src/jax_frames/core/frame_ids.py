"""Frame tags and coordinate system ids shipped with the library."""

from .coordinate_system import CoordinateSystemId
from .frames import FrameId
from .manifold import Manifold


class GenericFrame(FrameId):
    """Placeholder frames for examples and tests."""
    A = "coordinate_frame_a"
    B = "coordinate_frame_b"
    C = "coordinate_frame_c"


class StereoFrame(FrameId):
    """Frames of a two-camera rig."""
    LEFT_CAMERA = "left_camera"
    RIGHT_CAMERA = "right_camera"


LEFT_CAMERA_SE3 = CoordinateSystemId(StereoFrame.LEFT_CAMERA, Manifold.SE3)
LEFT_CAMERA_IMAGE = CoordinateSystemId(StereoFrame.LEFT_CAMERA, Manifold.RP2)
RIGHT_CAMERA_SE3 = CoordinateSystemId(StereoFrame.RIGHT_CAMERA, Manifold.SE3)
RIGHT_CAMERA_IMAGE = CoordinateSystemId(StereoFrame.RIGHT_CAMERA, Manifold.RP2)
