import os
import sys

import httpx

from receiptgate.config import Settings

# Healthcheck: validate required ENV and probe the local /healthz endpoint.
#
# Skip the HTTP probe with HEALTHCHECK_SKIP_HTTP=1 (e.g. when only
# validating configuration in CI).


def _check_http(port: int) -> bool:
    try:
        timeout = httpx.Timeout(5.0, connect=3.0)
        resp = httpx.get(f"http://127.0.0.1:{port}/healthz", timeout=timeout)
        resp.raise_for_status()
        return resp.json().get("status") == "ok"
    except (httpx.HTTPError, ValueError):
        return False


def main() -> int:
    settings = Settings()
    missing = settings.missing_required()
    if missing:
        print("missing " + ", ".join(missing), file=sys.stderr)
        return 1

    skip_http = os.getenv("HEALTHCHECK_SKIP_HTTP", "0").strip().lower() in {"1", "true", "yes", "on"}
    if not skip_http and not _check_http(settings.port):
        print("http not ready", file=sys.stderr)
        return 1

    print("ok")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
