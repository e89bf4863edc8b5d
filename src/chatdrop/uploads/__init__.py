"""Upload broadcaster — files on disk, announced over the hub."""
