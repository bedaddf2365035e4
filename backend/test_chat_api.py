#!/usr/bin/env python3
"""
Smoke script: exercises the relay endpoints against a running server.

- GET  /health  → {"status": "ok"}
- POST /chat    → {"message": ...} (needs a valid OPENROUTER_API_KEY on the server)
- POST /chat    with a blank prompt → 400 {"error": ...}
- GET  /        → entry document

Run with backend server up (e.g. uvicorn eco_advisor.main:app --port 3000).
"""
import os
import sys

import requests

BASE_URL = os.environ.get("RELAY_API_BASE", "http://localhost:3000").rstrip("/")
PROMPT = os.environ.get("SMOKE_PROMPT", "Is plastic recyclable?")

FAILED = []


def ok(name: str, resp: requests.Response, want_status: int) -> bool:
    if resp.status_code != want_status:
        print(f"  FAIL {name}: got status {resp.status_code}, want {want_status} -> {resp.text[:200]}")
        FAILED.append(name)
        return False
    print(f"  OK   {name}")
    return True


def main() -> None:
    print(f"\nRelay API smoke test ({BASE_URL})")
    print("=" * 50)

    print("\n1. GET /health")
    r = requests.get(f"{BASE_URL}/health", timeout=10)
    ok("GET health", r, 200)

    print("\n2. POST /chat")
    r = requests.post(f"{BASE_URL}/chat", json={"prompt": PROMPT}, timeout=90)
    if ok("POST chat", r, 200):
        print(f"     -> {r.json().get('message', '')[:200]!r}")
    elif r.status_code == 500:
        print("     (500 usually means the upstream key is missing or invalid; check server logs)")

    print("\n3. POST /chat (blank prompt -> 400)")
    r = requests.post(f"{BASE_URL}/chat", json={"prompt": "   "}, timeout=10)
    ok("POST chat blank", r, 400)

    print("\n4. GET / (entry document)")
    r = requests.get(f"{BASE_URL}/", timeout=10)
    ok("GET entry", r, 200)

    print("\n" + "=" * 50)
    if FAILED:
        print(f"FAILED: {len(FAILED)} check(s) -> {FAILED}")
        sys.exit(1)
    print("All relay API checks passed.")
    sys.exit(0)


if __name__ == "__main__":
    main()
