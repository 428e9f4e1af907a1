"""
Configuration for the exercise analysis engine and its HTTP shell.
"""

import os
from pathlib import Path

# Frame geometry (pixels). Landmarks arrive already scaled to this frame.
FRAME_WIDTH = int(os.environ.get('FRAME_WIDTH', 640))
FRAME_HEIGHT = int(os.environ.get('FRAME_HEIGHT', 480))
MIN_LANDMARKS = 33

# Side-view check: max horizontal hip separation as a fraction of frame width
VIEWPOINT_HIP_RATIO = float(os.environ.get('VIEWPOINT_HIP_RATIO', 0.1))

# Buffers
SMOOTHING_WINDOW = 3
REP_FRAME_CAPACITY = 30
TREND_HISTORY = 10
TREND_MIN_SAMPLES = 6
TREND_DIFFS = 3
TREND_SPEED = 1.0  # units/frame a trend must exceed before a phase change

# Session defaults
DEFAULT_EXERCISE = os.environ.get('DEFAULT_EXERCISE', 'squat')
DEFAULT_DIFFICULTY = os.environ.get('DEFAULT_DIFFICULTY', 'medium')

# Threshold table loaded by the HTTP shell at start-up
THRESHOLDS_PATH = Path(os.environ.get(
    'THRESHOLDS_PATH',
    Path(__file__).resolve().parent / 'data' / 'thresholds.json'
))

# Service
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
PORT = int(os.environ.get('PORT', 10000))
