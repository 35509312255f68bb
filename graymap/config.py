"""Central configuration for the graymap library.

All fixed format values and tunable defaults are defined here with
descriptive names.
"""

# =============================================================================
# PIXEL FORMAT
# =============================================================================

# Absolute ceiling of an 8-bit sample (also the fixed ceiling used by negate)
PIX_MAX = 255

# maxval given to new buffers when the caller does not pick one
DEFAULT_MAXVAL = 255

# =============================================================================
# FILE FORMAT (raw PGM)
# =============================================================================

# Magic number of binary graymaps
PGM_MAGIC = b"P5"

# Byte that starts a header comment (comment runs to end of line)
PGM_COMMENT = b"#"

# Bytes accepted as header whitespace (same set as C isspace)
PGM_WHITESPACE = b" \t\n\r\v\f"

# =============================================================================
# INSTRUMENTATION
# =============================================================================

# Counter that records pixel memory accesses
PIXMEM_COUNTER = "pixmem"

# Number of empty loop iterations timed by Instrumentation.calibrate()
CALIBRATION_LOOPS = 1_000_000
