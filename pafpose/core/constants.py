"""
Global constants for the pafpose decoder

Includes:
- Default decoding thresholds
- COCO-18 OpenPose keypoint definitions
- OpenPose limb table (keypoint pairs and PAF channels)
"""

# ===== Decoding Defaults =====
DEFAULT_CONFIDENCE_THRESHOLD = 0.1
DEFAULT_MIN_PEAKS_DISTANCE = 3.0
DEFAULT_MID_POINTS_SCORE_THRESHOLD = 0.05
DEFAULT_FOUND_MID_POINTS_RATIO_THRESHOLD = 0.8
DEFAULT_MIN_SUBSET_SCORE = 0.2
DEFAULT_MIN_JOINTS_NUMBER = 3
DEFAULT_NUM_SAMPLE_POINTS = 10

# Sub-pixel offsets are clamped to this range on each axis
MAX_SUBPIXEL_OFFSET = 0.5

# Absent keypoints in finalized poses
ABSENT_ID = -1
ABSENT_COORDINATE = (-1.0, -1.0)

# ===== COCO-18 OpenPose Keypoints =====
OPENPOSE_KEYPOINT_NAMES = [
    'nose',             # 0
    'neck',             # 1
    'right_shoulder',   # 2
    'right_elbow',      # 3
    'right_wrist',      # 4
    'left_shoulder',    # 5
    'left_elbow',       # 6
    'left_wrist',       # 7
    'right_hip',        # 8
    'right_knee',       # 9
    'right_ankle',      # 10
    'left_hip',         # 11
    'left_knee',        # 12
    'left_ankle',       # 13
    'right_eye',        # 14
    'left_eye',         # 15
    'right_ear',        # 16
    'left_ear',         # 17
]

OPENPOSE_NUM_KEYPOINTS = len(OPENPOSE_KEYPOINT_NAMES)

# Heatmap stack carries one extra background channel
OPENPOSE_NUM_HEATMAPS = OPENPOSE_NUM_KEYPOINTS + 1

# ===== OpenPose Limb Table =====
# (keypoint_a, keypoint_b, paf_x_channel, paf_y_channel)
# Order matters: limbs are merged in exactly this sequence.
OPENPOSE_LIMBS = [
    # Torso and arms
    (1, 2, 12, 13),     # neck -> right_shoulder
    (1, 5, 20, 21),     # neck -> left_shoulder
    (2, 3, 14, 15),     # right_shoulder -> right_elbow
    (3, 4, 16, 17),     # right_elbow -> right_wrist
    (5, 6, 22, 23),     # left_shoulder -> left_elbow
    (6, 7, 24, 25),     # left_elbow -> left_wrist
    # Legs
    (1, 8, 0, 1),       # neck -> right_hip
    (8, 9, 2, 3),       # right_hip -> right_knee
    (9, 10, 4, 5),      # right_knee -> right_ankle
    (1, 11, 6, 7),      # neck -> left_hip
    (11, 12, 8, 9),     # left_hip -> left_knee
    (12, 13, 10, 11),   # left_knee -> left_ankle
    # Head
    (1, 0, 28, 29),     # neck -> nose
    (0, 14, 30, 31),    # nose -> right_eye
    (14, 16, 34, 35),   # right_eye -> right_ear
    (0, 15, 32, 33),    # nose -> left_eye
    (15, 17, 36, 37),   # left_eye -> left_ear
    # Ear-shoulder redundancy
    (2, 16, 18, 19),    # right_shoulder -> right_ear
    (5, 17, 26, 27),    # left_shoulder -> left_ear
]

OPENPOSE_NUM_PAFS = 2 * len(OPENPOSE_LIMBS)
