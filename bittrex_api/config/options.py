"""
Client options.

Options are accepted under their camelCase wire names (``baseUrl``,
``apiKey``, ...) or their Python field names. Unknown keys are kept on the
model but have no effect.
"""

import json
import logging
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://bittrex.com/api/v1.1"


class ClientOptions(BaseModel):
    """Settings used by a client when building and dispatching requests."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    base_url: str = Field(DEFAULT_BASE_URL, alias="baseUrl")
    api_key: str = Field("APIKEY", alias="apiKey")
    api_secret: str = Field("APISECRET", alias="apiSecret")
    verbose: bool = False
    cleartext: bool = False
    stream: bool = False

    @classmethod
    def _normalize(cls, values: Mapping[str, Any]) -> Dict[str, Any]:
        aliases = {
            field.alias: name
            for name, field in cls.model_fields.items()
            if field.alias
        }
        return {aliases.get(key, key): value for key, value in values.items()}

    def merge(self, overrides: Mapping[str, Any]) -> "ClientOptions":
        """
        Overlay caller-supplied keys on the current values.

        Args:
            overrides: Partial mapping of options

        Returns:
            A new options object; this one is left untouched
        """
        values = self.model_dump()
        values.update(self._normalize(overrides))
        return type(self).model_validate(values)

    @classmethod
    def from_file(cls, path: str) -> "ClientOptions":
        """
        Load options from a JSON configuration file.

        Args:
            path: Path to the configuration file

        Returns:
            Options with the file's keys applied over the defaults
        """
        with open(path, "r") as f:
            values = json.load(f)

        logger.debug(f"Loaded client options from {path}")
        return cls().merge(values)
