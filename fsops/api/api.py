from pathlib import Path
from typing import Optional, Union

from fsops.api._api import _Api
from fsops.api.ops_api import OpsApi
from fsops.io.credentials import ClientConfig
from fsops.io.env import load_env


class Api(_Api):

    def __init__(
        self,
        server_address: Optional[str] = None,
        token: Optional[str] = None,
        retry_count: Optional[int] = 10,
        retry_sleep_sec: Optional[float] = None,
        external_client: Optional[bool] = True,
    ):
        super().__init__(
            server_address=server_address,
            token=token,
            retry_count=retry_count,
            retry_sleep_sec=retry_sleep_sec,
            external_client=external_client,
        )
        self.ops = OpsApi(self)

    @classmethod
    def from_config(cls, config: ClientConfig) -> "Api":
        """Create API client from loaded settings."""
        config.validate_credentials()
        return cls(
            server_address=config.server_address(),
            token=config.token(),
            retry_count=config.FSOPS_RETRY_COUNT,
            retry_sleep_sec=config.FSOPS_RETRY_SLEEP_SEC,
        )

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "Api":
        """Create API client from environment variables."""
        load_env(env_file)
        return cls.from_config(ClientConfig())
