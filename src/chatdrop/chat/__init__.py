"""Chat relay — opaque messages, broadcast to everyone, kept in a JSON file."""
