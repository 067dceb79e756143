"""Upload exported inventory reports to a Google Drive folder."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import GDriveConfig
from .export import MIMETYPES

logger = logging.getLogger(__name__)

DEFAULT_MIMETYPE = "application/octet-stream"


def _missing_extra() -> ImportError:
    return ImportError(
        "Google Drive support is not installed:\n"
        "  pip install 'iow[gdrive]'"
    )


def mimetype_for(path: str | Path) -> str:
    """Content type for an export file, judged by its extension."""
    return MIMETYPES.get(Path(path).suffix.lstrip(".").lower(), DEFAULT_MIMETYPE)


class GoogleDriveUploader:
    """Drive client for the ``drive.file`` scope.

    The first upload runs the installed-app OAuth flow in a browser and
    caches the token; later runs refresh it silently.
    """

    SCOPES = ["https://www.googleapis.com/auth/drive.file"]

    def __init__(
        self,
        credentials_path: str | Path = "~/.config/iow/gdrive_credentials.json",
        token_path: str | Path = "~/.config/iow/gdrive_token.json",
        folder_id: str = "",
    ) -> None:
        self._credentials_path = Path(credentials_path).expanduser()
        self._token_path = Path(token_path).expanduser()
        self._folder_id = folder_id
        self._service = None

    @classmethod
    def from_config(cls, config: GDriveConfig) -> GoogleDriveUploader:
        return cls(
            credentials_path=config.credentials_path,
            token_path=config.token_path,
            folder_id=config.folder_id,
        )

    def _load_credentials(self):
        try:
            from google.auth.transport.requests import Request
            from google.oauth2.credentials import Credentials
            from google_auth_oauthlib.flow import InstalledAppFlow
        except ImportError:
            raise _missing_extra()

        creds = None
        if self._token_path.exists():
            creds = Credentials.from_authorized_user_file(
                str(self._token_path), self.SCOPES
            )
        if creds is not None and creds.valid:
            return creds

        if creds and creds.expired and creds.refresh_token:
            logger.info("Refreshing Drive token")
            creds.refresh(Request())
        else:
            if not self._credentials_path.exists():
                raise FileNotFoundError(
                    f"OAuth credentials file not found: {self._credentials_path}\n"
                    "Create an OAuth client (Desktop app) in the Google Cloud "
                    "Console and save its JSON there, or set "
                    "gdrive.credentials_path."
                )
            flow = InstalledAppFlow.from_client_secrets_file(
                str(self._credentials_path), self.SCOPES
            )
            creds = flow.run_local_server(port=0)

        self._token_path.parent.mkdir(parents=True, exist_ok=True)
        self._token_path.write_text(creds.to_json())
        return creds

    def _get_service(self):
        """Return the Drive v3 service, authorizing on first use."""
        if self._service is None:
            try:
                from googleapiclient.discovery import build
            except ImportError:
                raise _missing_extra()
            self._service = build("drive", "v3", credentials=self._load_credentials())
        return self._service

    def upload(
        self,
        file_path: str | Path,
        mimetype: str | None = None,
        filename: str | None = None,
        folder_id: str | None = None,
    ) -> str:
        """Upload an export and return its Drive file ID.

        ``mimetype`` defaults to the type of the export format matching the
        file extension. ``folder_id`` overrides the configured folder.

        Raises:
            FileNotFoundError: If the file or the OAuth client file is missing.
            ImportError: If the ``gdrive`` extra is not installed.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        service = self._get_service()

        from googleapiclient.http import MediaFileUpload

        metadata: dict = {"name": filename or file_path.name}
        target_folder = folder_id or self._folder_id
        if target_folder:
            metadata["parents"] = [target_folder]

        media = MediaFileUpload(
            str(file_path), mimetype=mimetype or mimetype_for(file_path), resumable=True
        )
        result = (
            service.files()
            .create(body=metadata, media_body=media, fields="id")
            .execute()
        )
        logger.info(
            "Uploaded %s to Drive folder %s as %s",
            metadata["name"], target_folder or "(root)", result["id"],
        )
        return result["id"]
