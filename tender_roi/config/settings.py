from __future__ import annotations

from pydantic_settings import BaseSettings

from tender_roi.engine.config import EngineConfig, InferenceConfig, PredictionConfig


class Settings(BaseSettings):
    classification_url: str = ""
    classification_api_key: str = ""
    classification_timeout: float = 30.0

    result_cache_ttl_seconds: float = 3600.0
    batch_max_tenders: int = 10
    compare_min_tenders: int = 2
    compare_max_tenders: int = 5

    default_labor_rate_per_day: float = 800.0
    default_discount_rate: float = 0.08
    enable_roi_prediction: bool = True

    class Config:
        env_file = ".env"
        env_prefix = "TENDER_ROI_"

    def engine_config(self) -> EngineConfig:
        """Build the engine configuration with the deployment's rate defaults."""
        return EngineConfig(
            inference=InferenceConfig(
                default_labor_rate_per_day=self.default_labor_rate_per_day,
                default_discount_rate=self.default_discount_rate,
            ),
            prediction=PredictionConfig(enabled=self.enable_roi_prediction),
        )
