"""Session engine constants.

Centralizes the storage key, persisted record format and fallback texts
used by the chat session.
"""

# Fixed key identifying the stored conversation
STORAGE_KEY = "saham-cerdas-chat-history"

# Version written into the persisted envelope
HISTORY_FORMAT_VERSION = 1

# Message id prefixes
USER_ID_PREFIX = "user"
ASSISTANT_ID_PREFIX = "ai"

# Shown when a completion fails without a usable message
UNKNOWN_ERROR_MESSAGE = "Terjadi kesalahan yang tidak diketahui"
