from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    max_interval: int = Field(default=16, ge=1)  # cap, in questions
    interval_multiplier: int = Field(default=2, ge=1)
    min_questions: int = Field(default=10, ge=0)  # advisory only, see SessionSummary.met_minimum
    weak_miss_rate: float = Field(default=0.5, gt=0.0, le=1.0)
    max_sessions: int = Field(default=1000, ge=1)

    model_config = {"env_prefix": "FLASHDECK_"}


settings = Settings()
