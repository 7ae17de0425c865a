# =========================
# TRIGGER
# =========================
PROBABILITY_THRESHOLD = 0.8     # strictly greater is required
EFFECT_DURATION = 0.3           # seconds of wall-clock time
EFFECT_VOLUME = 1.0

# =========================
# POSE WINDOWS (seconds of instructional-video time)
# =========================
POSE1_WINDOW = (0.9, 3.0)
POSE2_WINDOW = (5.5, 7.5)
POSE3_FIRST_WINDOW = (11.5, 13.0)
POSE3_SECOND_WINDOW = (17.5, 19.5)
POSE4_WINDOW = (15.5, 16.6)
POSE5_START = 19.5              # open-ended

# =========================
# RENDERING
# =========================
LIVE_MIN_PART_CONFIDENCE = 0.5
VIDEO_MIN_PART_CONFIDENCE = 0.6
KEYPOINT_RADIUS = 4
EXPLOSION_SCALE = 3             # explosion circles are KEYPOINT_BASE_RADIUS * scale
KEYPOINT_BASE_RADIUS = 10

LIVE_SIZE = (600, 600)
VIDEO_SIZE = (600, 450)

# =========================
# SKELETON (COCO-17 names)
# =========================
COCO17_NAMES = [
    "nose",
    "left_eye", "right_eye",
    "left_ear", "right_ear",
    "left_shoulder", "right_shoulder",
    "left_elbow", "right_elbow",
    "left_wrist", "right_wrist",
    "left_hip", "right_hip",
    "left_knee", "right_knee",
    "left_ankle", "right_ankle",
]

SKELETON_EDGES = [
    ("left_shoulder", "right_shoulder"),
    ("left_shoulder", "left_elbow"),
    ("left_elbow", "left_wrist"),
    ("right_shoulder", "right_elbow"),
    ("right_elbow", "right_wrist"),
    ("left_shoulder", "left_hip"),
    ("right_shoulder", "right_hip"),
    ("left_hip", "right_hip"),
    ("left_hip", "left_knee"),
    ("left_knee", "left_ankle"),
    ("right_hip", "right_knee"),
    ("right_knee", "right_ankle"),
]

# =========================
# MODEL
# =========================
POSE_LANDMARK_COUNT = 33        # MediaPipe Pose landmarks
LANDMARK_AXES = ("x", "y", "z", "visibility")
MODEL_FILE = "model.pkl"
METADATA_FILE = "metadata.json"
FETCH_TIMEOUT = 10.0
