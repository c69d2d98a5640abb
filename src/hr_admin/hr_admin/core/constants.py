"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 500
DEFAULT_EXPORT_ROW_LIMIT = 5000

MAX_REASON_LENGTH = 1000
MAX_REMARKS_LENGTH = 500

FORCE_APPROVAL_PREFIX = "Administrative override: "
FORCE_APPROVAL_DEFAULT_REMARKS = "Force approved by admin"
BULK_APPROVAL_DEFAULT_REMARKS = "Bulk approved"

DEFAULT_BIOMETRIC_PORT = 4370
DEFAULT_BIOMETRIC_TIMEOUT = 5

AUDIT_LOGGER_NAME = "hr_admin.audit"

NOT_AUTHORIZED_MESSAGE = "You are not authorized to perform this action."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred while processing this request."

# Leave types that draw paid days from a yearly bank.
BANKED_LEAVE_TYPES = ("sick", "vacation")
DEFAULT_LEAVE_BANK_DAYS = 15
LEAVE_BANK_YEARS_BACK = 5
LEAVE_BANK_YEARS_AHEAD = 2
