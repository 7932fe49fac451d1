"""Configuration schema — validates analysis-config.yml."""

from pydantic import BaseModel, Field, field_validator, model_validator

MAX_COMPETITORS = 4


class AnalysisConfig(BaseModel):
    """Top-level configuration loaded from analysis-config.yml.

    Every field has a default so a config file can hold only the tuning
    knobs and leave the URLs to the command line.
    """

    # Companies to compare
    primary_url: str = ""
    competitor_urls: list[str] = []

    # Generation service
    model: str = "gpt-4o"
    temperature: float = 0.2  # low but non-zero: stable structure, varied phrasing
    timeout_seconds: float = Field(default=120.0, gt=0)

    # Job lifecycle
    reset_delay_seconds: float = Field(default=3.0, ge=0)

    # Output
    output_directory: str = ""

    @field_validator("temperature")
    @classmethod
    def check_temperature(cls, v: float) -> float:
        if not 0 < v <= 1:
            raise ValueError(f"temperature must be in (0, 1], got {v}")
        return v

    @model_validator(mode="after")
    def check_competitor_count(self) -> "AnalysisConfig":
        if len(self.competitor_urls) > MAX_COMPETITORS:
            raise ValueError(
                f"At most {MAX_COMPETITORS} competitor URLs are supported, "
                f"got {len(self.competitor_urls)}"
            )
        return self
