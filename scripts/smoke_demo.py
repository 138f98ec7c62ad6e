from __future__ import annotations

import argparse
import json
import time
import urllib.error
import urllib.request
from typing import Any


def get_json(url: str, method: str = "GET") -> Any:
    with urllib.request.urlopen(urllib.request.Request(url, method=method), timeout=10) as resp:
        return json.load(resp)


def poll_json(url: str, timeout: int, interval: float = 1.0) -> Any:
    """Retry ``url`` until the server answers or ``timeout`` seconds pass."""
    deadline = time.monotonic() + timeout
    while True:
        try:
            return get_json(url)
        except (urllib.error.URLError, ConnectionError) as exc:
            if time.monotonic() >= deadline:
                raise RuntimeError(f"{url} not reachable after {timeout}s: {exc}") from exc
        time.sleep(interval)


def check_rendered(rendered: dict[str, Any]) -> None:
    content = rendered.get("content") or ""
    if not content:
        raise RuntimeError("Rendered page has no content")
    if "{{" in content:
        raise RuntimeError("Rendered page still contains unprocessed tags")


def main() -> None:
    parser = argparse.ArgumentParser(description="Smoke test against a server seeded by seed_store.py.")
    parser.add_argument("--base-url", default="http://localhost:8080")
    parser.add_argument("--site", default="demo")
    parser.add_argument("--page", default="welcome")
    parser.add_argument("--timeout", type=int, default=60)
    args = parser.parse_args()

    base = args.base_url.rstrip("/")

    options = poll_json(f"{base}/api/sites/{args.site}/layouts/options", args.timeout)["options"]
    if not options:
        raise RuntimeError(f"Site {args.site!r} has no layouts")

    rendered = get_json(f"{base}/api/pages/{args.page}/render")
    check_rendered(rendered)

    if not rendered.get("layout_id"):
        raise RuntimeError(f"Page {args.page!r} has no layout")
    report = get_json(f"{base}/api/layouts/{rendered['layout_id']}/invalidate", method="POST")
    if report.get("failed_layout_ids"):
        raise RuntimeError(f"Invalidation failed for {report['failed_layout_ids']}")
    check_rendered(get_json(f"{base}/api/pages/{args.page}/render"))

    with urllib.request.urlopen(f"{base}/pages/{args.page}", timeout=10) as resp:
        if "text/html" not in resp.headers.get("content-type", ""):
            raise RuntimeError("HTML page view did not return HTML")

    print(f"Smoke test passed ({len(options)} layout option(s)).")


if __name__ == "__main__":
    main()
