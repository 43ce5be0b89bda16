"""Generate a local development HS256 signing secret for bearer tokens."""

from __future__ import annotations

import secrets
from pathlib import Path

KEYS_DIR = Path(__file__).resolve().parent
SECRET_PATH = KEYS_DIR / "dev.secret"
SECRET_BYTES = 48


def main() -> int:
    """Generate the secret once and skip when the file already exists."""
    if SECRET_PATH.exists():
        print(f"Secret already exists, skipping: {SECRET_PATH}")
        print(f"Use it with: export JWT_SECRET_KEY_PATH={SECRET_PATH}")
        return 0

    KEYS_DIR.mkdir(parents=True, exist_ok=True)
    SECRET_PATH.write_text(secrets.token_urlsafe(SECRET_BYTES), encoding="utf-8")
    SECRET_PATH.chmod(0o600)
    print(f"Generated: {SECRET_PATH}")
    print(f"Use it with: export JWT_SECRET_KEY_PATH={SECRET_PATH}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
