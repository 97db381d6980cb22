"""Camera module for view and ray generation.

Components:
    pinhole: Simple pinhole (perspective) camera model

Ray generation uses normalized image coordinates:
    s in [0, 1]: left to right across image
    t in [0, 1]: bottom to top across image
"""

from .pinhole import (
    PinholeCamera,
    get_camera_info,
    get_pixel_ray,
    get_ray,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_ray",
    "get_pixel_ray",
    "get_camera_info",
]
