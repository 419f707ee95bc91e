"""
Constants for the Adobe Audience Manager CDF line format and NDJSON output.
"""

# =============================================================================
# CDF Separators
# =============================================================================

# See https://experienceleague.adobe.com/docs/audience-manager/user-guide/implementation-integration-guides/sending-audience-data/batch-data-transfer-explained/cdf-file-structure.html
FIELD_SEPARATOR = "\x01"  # Between the 11 top-level fields
ARRAY_SEPARATOR = "\x02"  # Between elements of an array field
KEYVAL_SEPARATOR = "\x03"  # Between key and value of a request parameter

# Marks an absent value in array fields
NULL_SENTINEL = "\\N"

# =============================================================================
# Field Layout
# =============================================================================

# Top-level fields, in the order they appear on a CDF line
FIELD_NAMES = (
    "eventTime",
    "device",
    "containerId",
    "realizedTraits",
    "realizedSegments",
    "requestParameters",
    "referer",
    "ip",
    "mid",
    "allSegments",
    "allTraits",
)

FIELD_COUNT = len(FIELD_NAMES)

# Fields split on ARRAY_SEPARATOR with NULL_SENTINEL removed
ARRAY_FIELDS = (
    "realizedTraits",
    "realizedSegments",
    "allSegments",
    "allTraits",
)

# =============================================================================
# Referer Decoding
# =============================================================================

REFERER_DECODING_URI = "uri"  # Whole-URI rules, reserved characters stay encoded
REFERER_DECODING_COMPONENT = "component"  # Every escape decoded
REFERER_DECODING_MODES = (REFERER_DECODING_URI, REFERER_DECODING_COMPONENT)

# =============================================================================
# I/O
# =============================================================================

DEFAULT_CHUNK_SIZE = 64 * 1024
NDJSON_CONTENT_TYPE = "application/x-ndjson"
GZIP_MAGIC = b"\x1f\x8b"
