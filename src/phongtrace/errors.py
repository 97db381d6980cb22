"""Exception types raised while building scenes and render targets."""


class SceneConfigError(ValueError):
    """Raised when scene, material, light or camera parameters are invalid.

    Validation happens when configuration values are constructed, so a bad
    scene fails before any rendering starts instead of producing garbage
    pixels.
    """
