"""Compiled-in constants for the attractor viewer."""

SIGMA = 10.0  # Lorenz sigma
RHO = 28.0    # Lorenz rho
BETA = 8.0 / 3.0  # Lorenz beta

DT = 0.001
STEPS_PER_TICK = 50
INITIAL_POSITION = (0.1, 0.0, 0.1)

# Segment colouring (hue in degrees)
HUE_SOURCE_RANGE = (-13.0, 13.0)
HUE_TARGET_RANGE = (25.0, 35.0)
LIGHTNESS_SOURCE_RANGE = (-28.0, 28.0)
LIGHTNESS_TARGET_RANGE = (0.3, 0.7)
SATURATION = 0.8
ALPHA = 0.5

CAMERA_POSITION = (-100.0, 0.0, 150.0)
CAMERA_TARGET = (0.0, 0.0, 0.0)
CAMERA_FOV = 45.0

WINDOW_SIZE = (1280, 720)
WINDOW_TITLE = "Lorenz attractor"
CLEAR_COLOR = "#2b2b2b"

TRAIL_CHUNK_CAPACITY = 20_000  # segments per GPU buffer
