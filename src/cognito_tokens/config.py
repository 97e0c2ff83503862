from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Cognito user pool configuration read from the environment or a .env file.

    Required environment variables:
    - COGNITO_REGION
    - COGNITO_USERPOOL_ID
    - COGNITO_APP_CLIENT_ID

    Optional:
    - COGNITO_JWKS_TIMEOUT (seconds allowed for the JWKS download, default 5)
    """

    # pydantic-settings matches env keys case-insensitively against the aliases
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    region: str = Field(..., alias="cognito_region")
    user_pool_id: str = Field(..., alias="cognito_userpool_id")
    app_client_id: str = Field(..., alias="cognito_app_client_id")
    jwks_timeout: float = Field(5.0, alias="cognito_jwks_timeout")


# Left as None when the environment is not configured so that modules
# referencing `settings` can still be imported (tests inject their own).
try:
    settings: Optional[Settings] = Settings()
except ValidationError:
    settings = None
