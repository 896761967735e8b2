import json
from typing import Any

import google.auth
from google.oauth2 import credentials as oauth2_credentials
from google.oauth2 import service_account

from uniforge.core import Provider
from uniforge.core.exceptions import ConfigurationError


class GoogleProvider(Provider):
    project: str | None
    service_account_info: str | dict | None
    service_account_file: str | None
    access_token: str | None

    _credentials: Any

    def __init__(
        self,
        project: str | None = None,
        service_account_info: str | dict | None = None,
        service_account_file: str | None = None,
        access_token: str | None = None,
        **kwargs,
    ):
        self.project = project
        self.service_account_info = service_account_info
        self.service_account_file = service_account_file
        self.access_token = access_token
        self._credentials = None
        super().__init__(**kwargs)

    def _get_credentials(self) -> Any:
        """Explicit credentials, or None for application default ones."""
        if self._credentials is not None:
            return self._credentials
        if self.service_account_info is not None:
            info = self.service_account_info
            if isinstance(info, str):
                info = json.loads(info)
            self._credentials = (
                service_account.Credentials.from_service_account_info(info)
            )
        elif self.service_account_file is not None:
            self._credentials = (
                service_account.Credentials.from_service_account_file(
                    self.service_account_file
                )
            )
        elif self.access_token is not None:
            self._credentials = oauth2_credentials.Credentials(
                self.access_token
            )
        return self._credentials

    def _get_project(self) -> str:
        if self.project:
            return self.project
        _, project = google.auth.default()
        if not project:
            raise ConfigurationError("Please specify a Google Cloud project")
        self.project = project
        return project
