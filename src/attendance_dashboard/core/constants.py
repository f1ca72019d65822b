"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

DEFAULT_API_BASE_URL = "http://localhost:5000/api"
DEFAULT_API_TIMEOUT = 10

RECENT_ACTIVITY_LIMIT = 5
UNKNOWN_LABEL = "Unknown"

# Shown when the API gave no usable message
MSG_NETWORK_ERROR = "Network error. Please check your connection."
MSG_BAD_REQUEST = "Invalid request"
MSG_NOT_FOUND = "Resource not found"
MSG_SERVER_ERROR = "Server error. Please try again later."
MSG_INVALID_RESPONSE = "Invalid response format"
