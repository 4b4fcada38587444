"""
Constants shared by the pattern coding engine.
"""

# ==================== CORRESPONDENCE MAP CONSTANTS ====================
INVALID_PIXEL = -1  # Pixel could not be decoded
EMPTY_PIXEL = -2    # Pixel has never been written

# ==================== PATTERN GENERATION CONSTANTS ====================
PATTERN_VALUE_ON = 255
PATTERN_VALUE_OFF = 0

# Gray code
DEFAULT_PIXEL_THRESHOLD = 5
DEFAULT_FIXED_THRESHOLD = 128  # Mid-level threshold used without inverted patterns

# Three phase
DEFAULT_MODULATION_THRESHOLD = 5.0
HYBRID_REGIONS_PER_PERIOD = 8
MIN_PIXELS_PER_PERIOD = 8
THREE_PHASE_STEPS = 3

# Maximum pattern value for each supported sinusoid bit depth
THREE_PHASE_MAXIMUM_VALUES = {
    'MONO_8BPP': 255,
    'MONO_7BPP': 127,
    'MONO_6BPP': 63,
    'MONO_5BPP': 31,
}

# ==================== LOGGING CONSTANTS ====================
MAX_LOG_FILE_SIZE = 10 * 1024 * 1024  # 10MB

# ==================== ERROR NAMES ====================
# Generic
FILE_DOES_NOT_EXIST = "FILE_DOES_NOT_EXIST"
IMAGE_EMPTY = "IMAGE_EMPTY"
IMAGE_LOAD_FAILED = "IMAGE_LOAD_FAILED"

# Parameters
PARAMETERS_EMPTY = "PARAMETERS_EMPTY"
PARAMETERS_FILE_DOES_NOT_EXIST = "PARAMETERS_FILE_DOES_NOT_EXIST"
PARAMETERS_FILE_INVALID = "PARAMETERS_FILE_INVALID"
PARAMETERS_FILE_WRITE_FAILED = "PARAMETERS_FILE_WRITE_FAILED"

# Pattern
PATTERN_BITDEPTH_INVALID = "PATTERN_BITDEPTH_INVALID"
PATTERN_COLOR_INVALID = "PATTERN_COLOR_INVALID"
PATTERN_DATA_TYPE_INVALID = "PATTERN_DATA_TYPE_INVALID"
PATTERN_EXPOSURE_TOO_SHORT = "PATTERN_EXPOSURE_TOO_SHORT"
PATTERN_PERIOD_TOO_SHORT = "PATTERN_PERIOD_TOO_SHORT"
PATTERN_PARAMETERS_EMPTY = "PATTERN_PARAMETERS_EMPTY"
PATTERN_IMAGE_DATA_EMPTY = "PATTERN_IMAGE_DATA_EMPTY"
PATTERN_IMAGE_FILE_EMPTY = "PATTERN_IMAGE_FILE_EMPTY"

PATTERN_SEQUENCE_INDEX_OUT_OF_RANGE = "PATTERN_SEQUENCE_INDEX_OUT_OF_RANGE"

# Capture
CAPTURE_TYPE_INVALID = "CAPTURE_TYPE_INVALID"
CAPTURE_SEQUENCE_EMPTY = "CAPTURE_SEQUENCE_EMPTY"
CAPTURE_SEQUENCE_INDEX_OUT_OF_RANGE = "CAPTURE_SEQUENCE_INDEX_OUT_OF_RANGE"
CAPTURE_SEQUENCE_TYPES_NOT_EQUAL = "CAPTURE_SEQUENCE_TYPES_NOT_EQUAL"

# Correspondence map
CORRESPONDENCE_MAP_EMPTY = "CORRESPONDENCE_MAP_EMPTY"
CORRESPONDENCE_MAP_PIXEL_OUT_OF_RANGE = "CORRESPONDENCE_MAP_PIXEL_OUT_OF_RANGE"
CORRESPONDENCE_MAP_SIZE_INVALID = "CORRESPONDENCE_MAP_SIZE_INVALID"

# Structured light
STRUCTURED_LIGHT_NOT_SETUP = "STRUCTURED_LIGHT_NOT_SETUP"
STRUCTURED_LIGHT_CAPTURE_SEQUENCE_EMPTY = "STRUCTURED_LIGHT_CAPTURE_SEQUENCE_EMPTY"
STRUCTURED_LIGHT_CAPTURE_SEQUENCE_SIZE_INVALID = "STRUCTURED_LIGHT_CAPTURE_SEQUENCE_SIZE_INVALID"
STRUCTURED_LIGHT_PATTERN_SIZE_INVALID = "STRUCTURED_LIGHT_PATTERN_SIZE_INVALID"
STRUCTURED_LIGHT_SETTINGS_PATTERN_ROWS_MISSING = "STRUCTURED_LIGHT_SETTINGS_PATTERN_ROWS_MISSING"
STRUCTURED_LIGHT_SETTINGS_PATTERN_COLUMNS_MISSING = "STRUCTURED_LIGHT_SETTINGS_PATTERN_COLUMNS_MISSING"
STRUCTURED_LIGHT_SETTINGS_PATTERN_COLOR_MISSING = "STRUCTURED_LIGHT_SETTINGS_PATTERN_COLOR_MISSING"
STRUCTURED_LIGHT_SETTINGS_PATTERN_ORIENTATION_MISSING = "STRUCTURED_LIGHT_SETTINGS_PATTERN_ORIENTATION_MISSING"
STRUCTURED_LIGHT_SETTINGS_SEQUENCE_INCLUDE_INVERTED_MISSING = "STRUCTURED_LIGHT_SETTINGS_SEQUENCE_INCLUDE_INVERTED_MISSING"
STRUCTURED_LIGHT_PLATFORM_NOT_SETUP = "STRUCTURED_LIGHT_PLATFORM_NOT_SETUP"

# Gray code
GRAY_CODE_PIXEL_THRESHOLD_MISSING = "GRAY_CODE_PIXEL_THRESHOLD_MISSING"
GRAY_CODE_REGIONS_REQUIRE_SUB_PIXELS = "GRAY_CODE_REGIONS_REQUIRE_SUB_PIXELS"
GRAY_CODE_RESOLUTION_TOO_SMALL = "GRAY_CODE_RESOLUTION_TOO_SMALL"

# Three phase
THREE_PHASE_PIXELS_PER_PERIOD_MISSING = "THREE_PHASE_PIXELS_PER_PERIOD_MISSING"
THREE_PHASE_PIXELS_PER_PERIOD_NOT_DIVISIBLE = "THREE_PHASE_PIXELS_PER_PERIOD_NOT_DIVISIBLE"
THREE_PHASE_FREQUENCY_INVALID = "THREE_PHASE_FREQUENCY_INVALID"
THREE_PHASE_BITDEPTH_MISSING = "THREE_PHASE_BITDEPTH_MISSING"
THREE_PHASE_BITDEPTH_TOO_SMALL = "THREE_PHASE_BITDEPTH_TOO_SMALL"
THREE_PHASE_REPEAT_PHASES_INVALID = "THREE_PHASE_REPEAT_PHASES_INVALID"
THREE_PHASE_ONLY_HYBRID_UNWRAP_SUPPORTED = "THREE_PHASE_ONLY_HYBRID_UNWRAP_SUPPORTED"
THREE_PHASE_HYBRID_UNWRAP_MODULE_SETUP_FAILED = "THREE_PHASE_HYBRID_UNWRAP_MODULE_SETUP_FAILED"

# ==================== WARNING NAMES ====================
OVERSAMPLING_SET_TO_ONE = "OVERSAMPLING_SET_TO_ONE"
DECODE_LOW_DYNAMIC_RANGE = "DECODE_LOW_DYNAMIC_RANGE"
DECODE_NO_VALID_PIXELS = "DECODE_NO_VALID_PIXELS"

# Captures whose brightest minus darkest value stays below this are reported
LOW_DYNAMIC_RANGE_LIMIT = 32
