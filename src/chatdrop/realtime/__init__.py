"""Real-time infrastructure — in-process hub + WebSocket.

Learn: Events flow through two pieces:
1. Services → Hub.broadcast (one process-wide registry of sockets)
2. /ws endpoint → event handlers registered by each app

Each app owns exactly one Hub, so the chat relay and the upload
broadcaster never see each other's clients.
"""
