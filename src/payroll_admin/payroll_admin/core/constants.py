"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MAX_CASCADE_DEPTH = 10
DEFAULT_PRIMARY_KEY = "id"
DEFAULT_DIRECTUS_TIMEOUT = 30.0
