"""
Custom exceptions for the pafpose decoder

Provides specific exception types for:
- Configuration errors
- Input validation errors (map shapes)
- Limb topology errors
"""


class PAFPoseException(Exception):
    """
    Base exception class for all pafpose exceptions

    All custom exceptions should inherit from this class so callers can
    catch decoder failures at the application level.
    """
    pass


class ConfigError(PAFPoseException):
    """
    Raised when configuration is invalid or missing

    Reasons:
    - Configuration value is out of valid range
    - Invalid configuration file format
    - Environment variable holds an unparsable value

    Example:
        >>> from pafpose.core.exceptions import ConfigError
        >>> from pafpose.core.config import PAFPoseConfig
        >>> try:
        ...     config = PAFPoseConfig(min_joints_number=0)
        ... except ConfigError as e:
        ...     print(f"Configuration error: {e}")
    """
    pass


class ValidationError(PAFPoseException):
    """
    Raised when input data validation fails

    Applicable to:
    - Heatmap / PAF stack dimensionality
    - Number of channels
    """
    pass


class ShapeMismatchError(ValidationError):
    """
    Raised when heatmap and PAF maps do not share the same height/width

    The driver checks this before any processing starts; the whole
    extraction call is aborted.

    Example:
        >>> import numpy as np
        >>> from pafpose import extract_poses, ShapeMismatchError
        >>> try:
        ...     extract_poses(np.zeros((19, 64, 64)), np.zeros((38, 32, 32)))
        ... except ShapeMismatchError as e:
        ...     print(f"Bad maps: {e}")
    """
    pass


class TopologyError(PAFPoseException):
    """
    Raised when a limb table is inconsistent

    Reasons:
    - Limb references a keypoint type outside [0, num_keypoints)
    - Limb uses negative PAF channel indices
    - Some keypoint type is not covered by any limb
    """
    pass
