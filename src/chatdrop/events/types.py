"""Event type constants.

Learn: Centralizing event names as constants prevents typos and makes it
easy to discover everything that travels over the WebSocket channel.
The names are camelCase because browser clients already speak them.
"""

# ─── Chat relay ──────────────────────────────────────────

CHAT_MESSAGE = "chatMessage"

# ─── Upload broadcaster ──────────────────────────────────

NEW_FILE_UPLOADED = "newFileUploaded"

# ─── Connection keepalive ────────────────────────────────

PING = "ping"
PONG = "pong"
