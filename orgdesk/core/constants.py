"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure. Used by
orgdesk.infrastructure.cache.keys and the cache policies.
"""

# Entity prefixes (lowercase; first segment of every cache key)
CACHE_PREFIX_ORGANIZATION = "organization"
CACHE_PREFIX_WORKSPACE = "workspace"
CACHE_PREFIX_USER = "user"
CACHE_PREFIX_STAFF = "staff"
CACHE_PREFIX_DEPARTMENT = "department"
CACHE_PREFIX_ATTENDANCE = "attendance"
CACHE_PREFIX_LEAVE_REQUEST = "leave"
CACHE_PREFIX_PROJECT = "project"
CACHE_PREFIX_TASK = "task"
CACHE_PREFIX_REPORT = "report"
CACHE_PREFIX_REPORT_TEMPLATE = "template"
CACHE_PREFIX_DOCUMENT = "document"
CACHE_PREFIX_NOTIFICATION = "notification"
CACHE_PREFIX_INVITATION = "invitation"
CACHE_PREFIX_DASHBOARD = "dashboard"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Number of attendance rows kept in the per-staff "recent" view
RECENT_ATTENDANCE_LIMIT = 20

# Invitation lifetime
INVITATION_EXPIRY_DAYS = 7
