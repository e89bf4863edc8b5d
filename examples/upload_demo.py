#!/usr/bin/env python3
"""
chatdrop upload demo — upload a file, then list what the server holds.

Run with: python examples/upload_demo.py [path-to-file]

Requires: pip install httpx
Upload service must be running: chatdrop uploads --port 3001
"""

import sys
from pathlib import Path

import httpx

BASE = "http://localhost:3001"


def main():
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Health check ──────────────────────────────────────────────
    print("Checking upload service...")
    try:
        resp = client.get("/health")
    except httpx.ConnectError:
        print(f"ERROR: Upload service not reachable at {BASE}")
        print("Start it with:  chatdrop uploads --port 3001")
        sys.exit(1)
    health = resp.json()
    print(f"  Status: {health['status']}  clients connected: {health['clients']}")

    # ── Upload ────────────────────────────────────────────────────
    if len(sys.argv) > 1:
        path = Path(sys.argv[1])
        name, content = path.name, path.read_bytes()
    else:
        name, content = "hello.txt", b"hello from chatdrop\n"

    print(f"\n1. Uploading {name} ({len(content)} bytes)...")
    resp = client.post("/upload", files={"myFile": (name, content)})
    assert resp.status_code == 200, f"Failed: {resp.status_code} {resp.text}"
    print(f"   {resp.text}")

    # ── Missing field is rejected ─────────────────────────────────
    print("\n2. Posting without a file...")
    resp = client.post("/upload", data={"note": "no file here"})
    print(f"   {resp.status_code} {resp.text}")

    # ── Listing ───────────────────────────────────────────────────
    print("\n3. Files on the server:")
    for entry in client.get("/files").json():
        print(f"   {entry['name']:40s} {BASE}{entry['path']}")


if __name__ == "__main__":
    main()
