from enum import Enum
from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings


class Env(Enum):
    local = "local"
    dev = "dev"
    prod = "prod"


class Config(BaseSettings):
    env: Env = Env.local
    openai_api_key: SecretStr | None = None
    text_model: str = Field(
        default="gpt-4o-mini",
        validation_alias=AliasChoices("openai_model", "text_model"),
    )
    image_model: str = Field(
        default="dall-e-3",
        validation_alias=AliasChoices("openai_image_model", "image_model"),
    )
    temperature: float = 0.8
    output_dir: Path = Path("output")
    request_timeout: float | None = 180.0
    host: str = "127.0.0.1"
    port: int = 8080

    @property
    def token(self) -> str | None:
        if self.openai_api_key is None:
            return None
        return self.openai_api_key.get_secret_value()
