"""UI configuration constants.

Centralizes the widget's texts and display settings.
"""

ASSISTANT_NAME = "Asisten Cerdas"
BRAND_NAME = "Saham Cerdas AI"

# Shown in place of the log while the conversation is empty
WELCOME_MESSAGE = (
    "Halo! 👋 Saya adalah Asisten Cerdas dari Saham Cerdas AI. "
    "Saya siap membantu Anda belajar tentang investasi saham Indonesia. "
    "Silakan tanyakan apa saja seputar pasar modal, analisis saham, "
    "atau cara menggunakan platform kami!"
)

INPUT_PLACEHOLDER = "Tanyakan seputar investasi saham..."
TYPING_INDICATOR = "Mengetik..."
DISMISS_LABEL = "Tutup"
CLEAR_TOOLTIP = "Hapus riwayat chat"
CLEAR_CONFIRM_PROMPT = "Hapus seluruh riwayat chat?"
CONFIRM_YES_LABEL = "Ya"
CONFIRM_NO_LABEL = "Tidak"
TIPS_TEXT = "Tips: Tanyakan tentang analisis saham, cara investasi, atau fitur platform kami"

TOGGLE_LABEL_CLOSED = "💬 Chat"
TOGGLE_LABEL_OPEN = "✕ Tutup"

# Message timestamps, hour:minute like the web widget
MESSAGE_TIME_FORMAT = "%H:%M"

# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100  # Maximum entries in input history
