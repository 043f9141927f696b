# src/kucoin_shared/config/models.py

# --- Built Ins  ---
from pathlib import Path
from typing import Optional

# --- Installed  ---
import orjson
from pydantic import BaseModel, ConfigDict, Field, SecretStr, computed_field

# --- Local Application Imports ---
from ..core.enums import ApiGeneration
from ..core.exceptions import ConfigurationError
from ..exchanges.constants import BaseUrls


class Credentials(BaseModel):
    # Keys are optional so one model serves both public and signed clients.
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: Optional[str] = Field(default=None, alias="apiKey")
    secret: Optional[SecretStr] = Field(default=None, alias="apiSecret")
    passphrase: Optional[SecretStr] = Field(default=None, alias="apiPassword")

    def is_configured_for(self, generation: ApiGeneration) -> bool:
        """True when every secret the given API generation signs with is present."""
        if not self.key or not self.secret or not self.secret.get_secret_value():
            return False
        if generation is ApiGeneration.CURRENT:
            return bool(self.passphrase and self.passphrase.get_secret_value())
        return True

    @classmethod
    def from_file(cls, path: str | Path) -> "Credentials":
        """Loads a JSON file holding `apiKey`, `apiSecret` and (current API) `apiPassword`."""
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigurationError(f"Credentials file not found: {config_path}")
        try:
            raw = orjson.loads(config_path.read_bytes())
        except orjson.JSONDecodeError as e:
            raise ConfigurationError(f"Credentials file is not valid JSON: {config_path}") from e
        return cls.model_validate(raw)


class ExchangeSettings(BaseModel):
    generation: ApiGeneration = ApiGeneration.CURRENT
    rest_url: Optional[str] = Field(default=None, description="Overrides the generation's default URL.")
    sandbox: bool = False
    request_timeout_s: float = Field(default=10.0, gt=0)
    clock_skew_threshold_ms: int = Field(
        default=1000,
        gt=0,
        description="Local clock is trusted when it is within this many ms of server time.",
    )
    clock_reprobe_interval_s: Optional[float] = Field(
        default=None,
        gt=0,
        description="Re-run the clock probe after this many seconds. None never re-probes.",
    )
    user_agent: str = "kucoin-shared/0.1"

    @computed_field
    @property
    def base_url(self) -> str:
        """The REST root every endpoint path is appended to."""
        if self.rest_url:
            return self.rest_url.rstrip("/")
        if self.generation is ApiGeneration.LEGACY:
            return BaseUrls.LEGACY
        return BaseUrls.CURRENT_SANDBOX if self.sandbox else BaseUrls.CURRENT

    @classmethod
    def for_generation(cls, generation: ApiGeneration, sandbox: bool = False, **overrides) -> "ExchangeSettings":
        if generation is ApiGeneration.LEGACY and sandbox:
            raise ConfigurationError("The legacy API has no sandbox environment.")
        return cls(generation=generation, sandbox=sandbox, **overrides)
