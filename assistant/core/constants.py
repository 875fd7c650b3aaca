"""Core constants: cache key prefixes, TTLs and list caps.

Single source of truth for cache key structure (DRY). Key builders in
assistant.infrastructure.cache.keys combine these with identifiers.
"""

# Delimiter for composite keys
CACHE_KEY_SEP = ":"
CACHE_WILDCARD = "*"
# SCAN MATCH glob metacharacters; never allowed inside a key component
CACHE_GLOB_CHARS = "*?[]\\"

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR

# Entity stores (whole JSON entity under {prefix}:{id})
CACHE_PREFIX_ORDER = "order"
CACHE_PREFIX_EMAIL = "email"
CACHE_PREFIX_DRAFT = "draft"
CACHE_PREFIX_SCHEDULED_EMAIL = "scheduled_email"
CACHE_PREFIX_TASK = "task"
CACHE_PREFIX_CALENDAR_EVENT = "calendar_event"
CACHE_PREFIX_REMINDER = "reminder"

ORDER_TTL = DAY
EMAIL_TTL = 30 * DAY
DRAFT_TTL = 30 * DAY
SCHEDULED_EMAIL_TTL = 7 * DAY
TASK_TTL = 30 * DAY
CALENDAR_EVENT_TTL = 30 * DAY
REMINDER_TTL = 30 * DAY

# Index lists (ordered IDs under {scope}:{actor_id})
CACHE_PREFIX_USER_ORDERS = "user_orders"
CACHE_PREFIX_USER_EMAILS = "user_emails"
CACHE_PREFIX_USER_DRAFTS = "user_drafts"
CACHE_PREFIX_USER_SCHEDULED_EMAILS = "user_scheduled_emails"
CACHE_PREFIX_CHAT_HISTORY = "chat_history"
CACHE_PREFIX_USER_TASKS = "user_tasks"
CACHE_PREFIX_USER_CALENDAR_EVENTS = "user_calendar_events"
CACHE_PREFIX_USER_REMINDERS = "user_reminders"

USER_ORDERS_CAP = 50
USER_EMAILS_CAP = 100
USER_DRAFTS_CAP = 50
USER_SCHEDULED_EMAILS_CAP = 100
CHAT_HISTORY_CAP = 100
USER_TASKS_CAP = 500
USER_CALENDAR_EVENTS_CAP = 500
USER_REMINDERS_CAP = 500

USER_ORDERS_TTL = 30 * DAY
USER_EMAILS_TTL = 30 * DAY
USER_DRAFTS_TTL = 30 * DAY
USER_SCHEDULED_EMAILS_TTL = 7 * DAY
CHAT_HISTORY_TTL = DAY
USER_TASKS_TTL = 30 * DAY
USER_CALENDAR_EVENTS_TTL = 30 * DAY
USER_REMINDERS_TTL = 30 * DAY

# Query-result caches ({scope}:{actor_id}:{digest}:{page}:{page_size})
CACHE_PREFIX_TASKS = "tasks"
CACHE_PREFIX_CALENDAR_EVENTS = "calendar_events"
CACHE_PREFIX_REMINDERS = "reminders"

TASKS_QUERY_TTL = 5 * MINUTE
CALENDAR_EVENTS_QUERY_TTL = 10 * MINUTE
REMINDERS_QUERY_TTL = 5 * MINUTE

# Read-through catalog caches
CACHE_PREFIX_RESTAURANTS = "restaurants"
CACHE_PREFIX_MENU = "menu"
RESTAURANTS_TTL = 30 * MINUTE
MENU_TTL = HOUR

# Rate limiter scopes ({scope}_rate_limit:{actor_id})
RATE_LIMIT_SUFFIX = "_rate_limit"
RATE_SCOPE_EMAIL = "email"
RATE_SCOPE_CHAT = "chat"
RATE_SCOPE_SOCKET = "socket"

# Readiness check
HEALTH_CHECK_KEY = "health_check"
HEALTH_CHECK_TTL = 10
