# Application identifiers
APP_ID = "moonphase"
APP_AUTHOR = "moonphase"


# Photographic textures are named moon-<size>.png
TEXTURE_FILE_PATTERN = "moon-*.png"


# Built-in procedural texture sizes
DEFAULT_TEXTURE_SIZES = (64, 256, 1024)


# Rendering defaults
DEFAULT_SIZE = 128
DEFAULT_SHADOW = 0.33
DEFAULT_LIGHT_COLOR = "white"
DEFAULT_DARK_COLOR = "black"
DEFAULT_OUTLINE_COLOR = "black"

# Minimum number of segments used to flatten one arc
MIN_ARC_SEGMENTS = 16
# Maximum length (px) of one flattened arc segment
ARC_SEGMENT_LENGTH = 2.0


# Ephemeris
EPHEMERIS_FILE = "de421.bsp"
# Half width (deg) of the elongation window of new/quarter/full moon
PRINCIPAL_PHASE_HALF_WIDTH_DEG = 6.0

# Default observer (Greenwich)
DEFAULT_LAT = 51.4769
DEFAULT_LON = -0.0005


# Preview window
UPDATE_INTERVAL_MS = 5 * 60 * 1000
TEXT_FONT_SIZE = 12
