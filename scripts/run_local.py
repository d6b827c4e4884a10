#!/usr/bin/env python3
"""Local integration test runner.

Starts the API on the in-memory backend, runs a round of requests against
it and reports results.
"""

import atexit
import os
import signal
import subprocess
import sys
import time

import httpx

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

API = {
    "name": "MindScribe API",
    "module": "mindscribe.main",
    "port": 8000,
}
BASE_URL = f"http://localhost:{API['port']}"

STARTUP_TIMEOUT = 30  # seconds to wait for the server

# ---------------------------------------------------------------------------
# Process management
# ---------------------------------------------------------------------------

_processes: list[subprocess.Popen] = []


def _cleanup() -> None:
    """Kill all child processes."""
    for proc in _processes:
        try:
            proc.terminate()
        except OSError:
            pass
    # Give them a moment, then force-kill
    time.sleep(1)
    for proc in _processes:
        try:
            proc.kill()
        except OSError:
            pass
    print("\n--- All processes cleaned up ---")


atexit.register(_cleanup)
signal.signal(signal.SIGINT, lambda *_: sys.exit(1))
signal.signal(signal.SIGTERM, lambda *_: sys.exit(1))


def start_process(module: str, name: str) -> subprocess.Popen:
    """Start a Python module as a background process on the memory backend."""
    env = {**os.environ, "MINDSCRIBE_STORAGE_BACKEND": "memory"}
    proc = subprocess.Popen(
        [sys.executable, "-m", module],
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        env=env,
    )
    _processes.append(proc)
    print(f"  Started {name} (PID {proc.pid})")
    return proc


def wait_for_api(port: int, timeout: int = STARTUP_TIMEOUT) -> bool:
    """Wait for the FastAPI app to answer /health."""
    url = f"http://localhost:{port}/health"
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            with httpx.Client(timeout=5) as client:
                resp = client.get(url)
                if resp.status_code == 200:
                    print(f"  API (port {port}) is ready")
                    return True
        except (httpx.ConnectError, httpx.ReadTimeout):
            pass
        time.sleep(0.5)
    print(f"  TIMEOUT: API (port {port}) did not start in {timeout}s")
    return False


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def check_samples(client: httpx.Client) -> bool:
    """A fresh store is seeded with the sample collections."""
    counts = client.get(f"{BASE_URL}/health").json()["counts"]
    print(f"Collection sizes: {counts}")
    return counts["notes"] == 4 and counts["tasks"] == 3 and counts["events"] == 4


def check_note_lifecycle(client: httpx.Client) -> bool:
    """Create, find, update and delete a note."""
    note = client.post(
        f"{BASE_URL}/notes",
        json={"title": "Integration note", "category": "Idea", "tags": ["smoke"]},
    ).json()
    found = client.get(f"{BASE_URL}/search", params={"q": "integration"}).json()
    if note["id"] not in {n["id"] for n in found["notes"]}:
        print("  Created note not found by search")
        return False
    updated = client.patch(
        f"{BASE_URL}/notes/{note['id']}", json={"content": "edited"}
    ).json()
    if updated["title"] != "Integration note" or updated["content"] != "edited":
        print(f"  Unexpected update result: {updated}")
        return False
    return client.delete(f"{BASE_URL}/notes/{note['id']}").status_code == 200


def check_task_toggle(client: httpx.Client) -> bool:
    """Toggling twice restores the original completion state."""
    task = client.get(f"{BASE_URL}/tasks").json()[0]
    once = client.post(f"{BASE_URL}/tasks/{task['id']}/toggle").json()
    twice = client.post(f"{BASE_URL}/tasks/{task['id']}/toggle").json()
    return once["completed"] != task["completed"] and twice["completed"] == task["completed"]


def check_calendar(client: httpx.Client) -> bool:
    """The month grid always has six full weeks."""
    view = client.get(f"{BASE_URL}/calendar", params={"month": 10, "year": 2023}).json()
    weeks = view["calendar"]["weeks"]
    print(f"Title: {view['title']}, weeks: {len(weeks)}")
    return len(weeks) == 6 and all(len(week) == 7 for week in weeks)


def check_invalid_event(client: httpx.Client) -> bool:
    """An event ending before it starts is rejected."""
    resp = client.post(
        f"{BASE_URL}/events",
        json={
            "title": "Backwards",
            "start": "2024-01-01T10:00:00Z",
            "end": "2024-01-01T09:00:00Z",
        },
    )
    return resp.status_code == 422


CHECKS = [
    ("Sample data", check_samples),
    ("Note lifecycle", check_note_lifecycle),
    ("Task toggle", check_task_toggle),
    ("Calendar grid", check_calendar),
    ("Invalid event", check_invalid_event),
]


def run_check(name: str, check, client: httpx.Client) -> bool:
    """Run a single check and print its result."""
    print(f"\n{'='*60}")
    print(name)
    print(f"{'='*60}")
    try:
        passed = check(client)
    except (httpx.HTTPError, KeyError, IndexError) as e:
        print(f"ERROR: {e}")
        passed = False
    print(f"RESULT: {'PASS' if passed else 'FAIL'}")
    return passed


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> int:
    print("=" * 60)
    print("MindScribe — Local Integration Tests")
    print("=" * 60)

    print("\n--- Starting API ---")
    start_process(API["module"], API["name"])

    print("\n--- Waiting for API ---")
    if not wait_for_api(API["port"]):
        print("FATAL: API failed to start. Aborting.")
        return 1

    with httpx.Client(timeout=10) as client:
        results = [run_check(name, check, client) for name, check in CHECKS]

    passed_count = sum(results)
    total = len(results)
    print(f"\n{'='*60}")
    print(f"SUMMARY: {passed_count}/{total} checks passed")
    print(f"{'='*60}")
    return 0 if passed_count == total else 1


if __name__ == "__main__":
    sys.exit(main())
