#!/usr/bin/env python3
"""
CourseHub Quickstart — register, log in, and manage courses over HTTP.

Walks through the cookie-session flow: register → login (session cookie)
→ create/list/update courses → a second user is refused → logout.
Run with: python examples/quickstart.py

Requires: pip install httpx
Server must be running: coursehub serve  (http://localhost:3000)
"""

import sys
import uuid

import httpx

BASE = "http://localhost:3000"


def login(name: str, role: str) -> httpx.Client:
    """Register a fresh account and return a client holding its session cookie."""
    run_id = uuid.uuid4().hex[:6]
    email = f"{name.lower()}-{run_id}@example.com"
    password = "demo-password-123"

    client = httpx.Client(base_url=BASE, timeout=10)
    resp = client.post(
        "/register",
        json={"name": name, "email": email, "password": password, "role": role},
    )
    assert resp.status_code == 201, f"Registration failed: {resp.text}"

    resp = client.post("/login", json={"email": email, "password": password})
    assert resp.status_code == 200, f"Login failed: {resp.text}"
    me = resp.json()
    print(f"   {me['name']} logged in as {me['role']} → {me['redirect']}")
    return client


def main():
    # ── Health check ──────────────────────────────────────────────
    print("Checking server health...")
    try:
        resp = httpx.get(f"{BASE}/api/health", timeout=5)
    except httpx.ConnectError:
        print(f"Server not reachable at {BASE}")
        sys.exit(1)
    health = resp.json()
    print(f"  Database: {'✓' if health['database'] == 'ok' else '✗'}")
    print(f"  Redis:    {'✓' if health['redis'] == 'ok' else '✗'}")

    # ── Anonymous requests are refused ────────────────────────────
    print("\n1. Anonymous request...")
    resp = httpx.get(f"{BASE}/api/courses", timeout=5)
    print(f"   GET /api/courses → {resp.status_code} {resp.json()}")

    # ── Two users ─────────────────────────────────────────────────
    print("\n2. Registering and logging in...")
    alice = login("Alice", "teacher")
    bob = login("Bob", "learner")

    # ── Alice creates a course ────────────────────────────────────
    print("\n3. Alice creates a course...")
    resp = alice.post("/api/courses", json={"name": "Intro to SQL", "topic": "databases"})
    assert resp.status_code == 201, f"Failed: {resp.text}"
    course = resp.json()
    print(f"   Course: {course['name']} owned by {course['owner']['name']}")

    # ── Listing is scoped to the owner ────────────────────────────
    print("\n4. Listing courses...")
    print(f"   Alice sees {len(alice.get('/api/courses').json())} course(s)")
    print(f"   Bob sees   {len(bob.get('/api/courses').json())} course(s)")

    # ── Bob may not touch Alice's course ──────────────────────────
    print("\n5. Bob tries to rename Alice's course...")
    resp = bob.put(f"/api/courses/{course['id']}", json={"name": "Mine now"})
    print(f"   → {resp.status_code} {resp.json()}")

    # ── Alice updates it ──────────────────────────────────────────
    print("\n6. Alice renames it...")
    resp = alice.put(f"/api/courses/{course['id']}", json={"name": "Intro to SQL (2nd ed.)"})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   Course: {resp.json()['name']}")

    # ── Logout ────────────────────────────────────────────────────
    print("\n7. Alice logs out...")
    alice.get("/logout")
    resp = alice.get("/api/me")
    print(f"   GET /api/me → {resp.status_code}")

    alice.close()
    bob.close()
    print("\nDone.")


if __name__ == "__main__":
    main()
