from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    normalizer_fuzzy_threshold: int = 88
    normalizer_enable_fuzzy_fallback: bool = True
    normalizer_min_substring_length: int = 3

    borderline_fraction: float = 0.10
    severity_high_ratio: float = 0.5
    critical_percent_threshold: float = 20.0

    correlation_min_pairs: int = 3
    correlation_significance_threshold: float = 0.5

    trend_min_points: int = 2
    trend_slope_threshold: float = 0.1

    insight_strong_correlation: float = 0.7
    insight_strong_slope: float = 0.2

    reference_data_path: str | None = None


settings = Settings()
