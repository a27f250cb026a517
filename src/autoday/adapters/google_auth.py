"""Google OAuth credentials shared by the calendar and tasks adapters."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/calendar.readonly",
    "https://www.googleapis.com/auth/tasks.readonly",
]


class AuthenticationError(Exception):
    """Raised when Google credentials are missing or cannot be refreshed."""

    pass


def token_path(config_folder: str) -> Path:
    return Path(config_folder).expanduser() / "token.json"


def load_credentials(config_folder: str):
    """Load credentials from token.json, refreshing if needed."""
    from google.auth.exceptions import RefreshError
    from google.auth.transport.requests import Request
    from google.oauth2.credentials import Credentials

    path = token_path(config_folder)
    if not path.exists():
        raise AuthenticationError("No Google token. Run 'autoday auth' first.")

    creds = Credentials.from_authorized_user_file(str(path), SCOPES)

    if creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except RefreshError as e:
            raise AuthenticationError(f"Token refresh failed: {e}")
        path.write_text(creds.to_json())
        path.chmod(0o600)

    if not creds.valid:
        raise AuthenticationError("Google token is invalid. Run 'autoday auth' again.")
    return creds


def authenticate(config_folder: str, client_secret_file: str) -> Path:
    """Run the installed-app OAuth flow and save token.json. Returns its path."""
    from google_auth_oauthlib.flow import InstalledAppFlow

    if not client_secret_file:
        raise AuthenticationError("GOOGLE_CLIENT_SECRET_FILE not set in autoday.conf")

    secret_path = Path(client_secret_file).expanduser()
    if not secret_path.exists():
        raise AuthenticationError(f"Client secret file not found: {secret_path}")

    flow = InstalledAppFlow.from_client_secrets_file(str(secret_path), SCOPES)
    creds = flow.run_local_server(port=0)

    path = token_path(config_folder)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(creds.to_json())
    path.chmod(0o600)
    logger.info(f"Saved Google token to {path}")
    return path
