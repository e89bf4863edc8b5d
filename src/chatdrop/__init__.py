"""chatdrop — two small real-time services.

A chat relay that keeps its history in a JSON file, and a file-upload
broadcaster that announces every accepted upload to connected clients.
Both share the same WebSocket hub, middleware and logging setup.
"""

__version__ = "0.1.0"
