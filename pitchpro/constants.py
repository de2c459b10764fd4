"""Global constants for the pitchpro application."""

# Firestore collection names
USERS_COLLECTION = "users"
ORGANIZATIONS_COLLECTION = "organizations"
PITCHES_COLLECTION = "pitches"
SESSIONS_COLLECTION = "sessions"
SESSION_CALENDAR_COLLECTION = "sessionCalendar"
ORGANIZATION_STATS_COLLECTION = "organizationStats"
STATS_COLLECTION = "stats"

# Search indices
SESSIONS_INDEX = "sessions"
PERMANENT_SESSIONS_INDEX = "PermanentSessionsId"
TRANSACTIONS_INDEX = "transactions"

# Session fetches run this many document reads concurrently
SESSION_FETCH_BATCH_SIZE = 50

DEFAULT_TIMEZONE = "Africa/Nairobi"

CALENDAR_VISIBLE_STATUSES = ("Confirmed", "Completed")

# Pitch colors, indexed by a hash of the pitch id
PITCH_PALETTE = (
    "#4A7C59",  # primary green
    "#F59E0B",  # amber
    "#EF4444",  # red
    "#3B82F6",  # blue
    "#8B5CF6",  # purple
    "#10B981",  # emerald
    "#F97316",  # orange
    "#6366F1",  # indigo
)
PRIMARY_COLOR = "#4A7C59"
EXPECTED_REVENUE_COLOR = "#3B82F6"

# Calendar event colors
EVENT_COLOR = "#2C6E49"
COMPLETED_EVENT_BACKGROUND = "#D1D5DB"
COMPLETED_EVENT_BORDER = "#9CA3AF"

# Transaction types
INCOME_TRANSACTION_TYPE = "Session2PitchWallet"
WITHDRAWAL_TRANSACTION_TYPE = "PitchWallet2Mpesa"

# Pagination
SESSIONS_PAGE_SIZE = 20
GROUPS_PAGE_SIZE = 10
TRANSACTIONS_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

CURRENCY_PREFIX = "Kshs"
