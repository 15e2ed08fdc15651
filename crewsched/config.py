"""Configuration management using Pydantic BaseSettings."""
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from crewsched.score.rules import ScoringWeights


class Settings(BaseSettings):
    """Application settings with environment variable overrides."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )

    # Data paths
    data_dir: Path = Field(default_factory=lambda: Path("./data"), alias="DATA_DIR")
    out_dir: Path = Field(default_factory=lambda: Path("./out"), alias="OUT_DIR")
    log_dir: Path = Field(default_factory=lambda: Path("./logs"), alias="LOG_DIR")

    # Database
    db_path: Path = Field(default_factory=lambda: Path("./data/crewsched.duckdb"), alias="DB_PATH")

    # Crews without a recorded max daily footage (linear feet)
    default_max_daily_footage: float = Field(default=200, gt=0, alias="DEFAULT_MAX_DAILY_LF")

    # Scoring weights (total: 100)
    weight_preference: float = Field(default=25, ge=0, alias="WEIGHT_PREFERENCE")
    weight_territory: float = Field(default=20, ge=0, alias="WEIGHT_TERRITORY")
    weight_skills: float = Field(default=25, ge=0, alias="WEIGHT_SKILLS")
    weight_capacity: float = Field(default=20, ge=0, alias="WEIGHT_CAPACITY")
    weight_proximity: float = Field(default=10, ge=0, alias="WEIGHT_PROXIMITY")
    avoid_penalty: float = Field(default=10, ge=0, alias="AVOID_PENALTY")
    missing_skill_penalty: float = Field(default=5, ge=0, alias="MISSING_SKILL_PENALTY")

    # Suggestion views
    quick_pick_limit: int = Field(default=3, ge=1, alias="QUICK_PICK_LIMIT")
    quick_pick_min_score: float = Field(default=50, alias="QUICK_PICK_MIN_SCORE")
    best_match_min_score: float = Field(default=60, alias="BEST_MATCH_MIN_SCORE")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Ensure directories exist
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.out_dir.mkdir(parents=True, exist_ok=True)

    @property
    def duckdb_path(self) -> str:
        """Return DuckDB path as string."""
        return str(self.db_path)

    def scoring_weights(self) -> ScoringWeights:
        """Build the immutable weight table from the configured values."""
        return ScoringWeights(
            preference=self.weight_preference,
            territory=self.weight_territory,
            skills=self.weight_skills,
            capacity=self.weight_capacity,
            proximity=self.weight_proximity,
            avoid_penalty=self.avoid_penalty,
            missing_skill_penalty=self.missing_skill_penalty
        )


# Global settings instance
settings = Settings()
