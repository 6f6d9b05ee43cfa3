# src/posematch/config.py
# ---------------------------------------------------------------
# Global configuration constants for posematch: matcher defaults,
# coordinate bounds, pose-library location and service settings.
# The matching core only reads the constants; environment variables
# are consulted by the HTTP service alone.
# ---------------------------------------------------------------

import logging

# ------------------ Matcher Defaults ------------------

DEFAULT_JOINT_CUTOFF = 0.05          # Max worst-joint distance after alignment (normalized frame units)
DEFAULT_ROTATION_CUTOFF = 0.34       # Max fitted rotation in radians (~19.5 degrees)

# ------------------ Joint Extraction ------------------

COORD_MIN = 0.0                      # Valid projected coordinate range; outside means occluded/invalid
COORD_MAX = 1.0

# ------------------ Pose Library ------------------

POSES_FILE = "poses.json"            # Append-only stream of captured PoseRecords

# ------------------ Service ------------------

ENV_POSES_FILE = "POSEMATCH_POSES_FILE"   # Overrides the library path for the HTTP service
ENV_LOG_LEVEL = "POSEMATCH_LOG_LEVEL"     # e.g. "DEBUG" to see per-pose rejection reasons
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level="INFO") -> None:
    """Basic root logger setup used by the service entry point."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
