"""
Smoke test — hits every endpoint of a running server.

Usage:
    # Offline:
    VISION_ADAPTER=mock DASHSCOPE_API_KEY= python -m doodle_guess.scripts.serve   (terminal 1)
    python -m doodle_guess.scripts.smoke                                        (terminal 2)

    # Against the fake upstream:
    python -m doodle_guess.scripts.fake_vision_server                           (terminal 1)
    DASHSCOPE_BASE_URL=http://127.0.0.1:9000/v1 DASHSCOPE_API_KEY=dummy \\
        python -m doodle_guess.scripts.serve                                    (terminal 2)
    python -m doodle_guess.scripts.smoke                                        (terminal 3)
"""

import sys
import httpx

from doodle_guess.canvas.surface import StrokeSurface
from doodle_guess.orchestrator.contracts import Point

BASE = "http://localhost:8000"
TIMEOUT = 60.0
passed = 0
failed = 0


def test(name: str, method: str, path: str, body: dict | None = None,
         checks: dict | None = None, status: int = 200):
    global passed, failed
    url = f"{BASE}{path}"
    checks = checks or {}
    try:
        if method == "GET":
            r = httpx.get(url, timeout=TIMEOUT)
        else:
            r = httpx.post(url, json=body if body is not None else {}, timeout=TIMEOUT)

        if r.status_code != status:
            print(f"  FAIL  {name} — HTTP {r.status_code} (expected {status})")
            failed += 1
            return

        data = r.json()
        for key, expected in checks.items():
            actual = data.get(key)
            if actual != expected:
                print(f"  FAIL  {name} — {key}: expected {expected!r}, got {actual!r}")
                failed += 1
                return

        print(f"  OK    {name}")
        passed += 1

    except httpx.ConnectError:
        print(f"  FAIL  {name} — connection refused (is the server running?)")
        failed += 1
    except Exception as e:
        print(f"  FAIL  {name} — {type(e).__name__}: {e}")
        failed += 1


def _sketch() -> str:
    s = StrokeSurface()
    s.begin(Point(100, 100))
    for x, y in [(200, 120), (300, 250), (250, 400)]:
        s.extend(Point(x, y))
    s.end()
    return s.export()


def main():
    print(f"\nIntegration tests against {BASE}\n")
    print("--- Health & Status ---")
    test("GET /health", "GET", "/health", None, {"api": True})
    test("GET /status", "GET", "/status")
    test("GET /models", "GET", "/models")

    print("\n--- Analyze ---")
    image = _sketch()
    test("POST /analyze-drawing (no image)", "POST", "/analyze-drawing", {}, status=400)
    test("POST /analyze-drawing", "POST", "/analyze-drawing",
         {"imageData": image, "modelName": "qwen-vl-max"},
         {"success": True, "model": "Qwen-VL Max (标准版)"})
    test("POST /analyze-drawing (unknown model)", "POST", "/analyze-drawing",
         {"imageData": image, "modelName": "no-such-model"},
         {"success": True})

    print("\n--- Final Status ---")
    test("GET /status (final)", "GET", "/status")

    total = passed + failed
    print(f"\n{'='*40}")
    print(f"  {passed}/{total} passed, {failed} failed")
    print(f"{'='*40}\n")

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
