from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv


REPO_ROOT = Path(__file__).resolve().parents[1]
ENV_PATH = REPO_ROOT / ".env"

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from app_config import AppConfig  # noqa: E402
from drupal_client import DrupalApiError, DrupalClient  # noqa: E402


def load_env() -> None:
    if ENV_PATH.is_file():
        load_dotenv(ENV_PATH, override=False)


def resolve_base_url(config: AppConfig) -> str:
    if not config.drupal_base_url:
        raise SystemExit("DRUPAL_BASE_URL is required in .env before running this check.")
    return config.drupal_base_url


def main() -> None:
    load_env()
    config = AppConfig.from_env()
    base_url = resolve_base_url(config)

    print(f"Target endpoint: {base_url}")
    print(f"Timeout: {config.http_timeout}s")

    client = DrupalClient(base_url, timeout=config.http_timeout)
    try:
        session = client.connect()
    except DrupalApiError as exc:
        status = f" (HTTP {exc.status_code})" if exc.status_code else ""
        raise SystemExit(f"Connect failed{status}: {exc}") from exc

    print(f"Session name: {session.session_name or '-'}")
    print(f"Session id: {session.session_id[:8]}..." if session.session_id else "Session id: -")
    if session.is_authenticated:
        print(f"Connected as {session.user.name} (uid {session.user.uid}).")
    else:
        print("Connected anonymously (uid 0).")

    if os.getenv("GOOGLE_MAPS_API_KEY"):
        print("Reverse geocoding: enabled")
    else:
        print("Reverse geocoding: disabled (GOOGLE_MAPS_API_KEY not set)")


if __name__ == "__main__":
    main()
