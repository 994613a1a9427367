"""Manual verification: list the installations a GitHub App can see.

Usage:
    TOKENCLONE_APP_ID=123 TOKENCLONE_PEM_PATH=app.pem uv run python scripts/check_app_access.py [installation_id]

With an installation id, also mints a token for it (nothing is cloned).
"""

from __future__ import annotations

import sys

from tokenclone.config import Config
from tokenclone.errors import TokenCloneError
from tokenclone.github.auth import generate_jwt, load_private_key
from tokenclone.github.client import GitHubAppClient, select_installation


def main() -> None:
    config = Config.load()

    if not config.app_id or not config.pem_path:
        print("ERROR: Set TOKENCLONE_APP_ID and TOKENCLONE_PEM_PATH environment variables")
        sys.exit(1)

    installation_id = int(sys.argv[1]) if len(sys.argv) > 1 else None

    try:
        jwt_token = generate_jwt(config.app_id, load_private_key(config.pem_path))
    except TokenCloneError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print(f"Connecting as App {config.app_id}...")
    client = GitHubAppClient(jwt_token)

    try:
        installations = client.list_installations()
        print("\n--- Installations ---")
        for inst in installations:
            print(f"  {inst.id}: {inst.account or '(unknown)'} [{inst.target_type or '?'}]")

        if installation_id is not None:
            chosen = select_installation(installations, installation_id)
            token = client.create_installation_token(chosen.id)
            print(f"\nMinted token for {chosen.id}, expires {token.expires_at}")

        print(f"\nSummary: {len(installations)} installation(s)")

    except TokenCloneError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    finally:
        client.close()


if __name__ == "__main__":
    main()
