from pydantic_settings import BaseSettings

from engine.grounding.soil_model import SeriesConvergence


class Settings(BaseSettings):
    model_config = {"env_prefix": "", "case_sensitive": False}

    # App
    environment: str = "development"
    debug: bool = True
    app_name: str = "GroundGrid"
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Logging
    log_json: bool = False
    log_level: str = "INFO"

    # Image-charge series (two-layer soil)
    image_series_tolerance: float = 1e-6
    image_series_max_iterations: int = 10_000

    # Potential field heatmaps
    potential_field_default_resolution: int = 60
    potential_field_max_resolution: int = 300
    potential_field_offset_m: float = 1.5
    potential_field_max_sources: int = 20_000

    @property
    def series_convergence(self) -> SeriesConvergence:
        return SeriesConvergence(
            tolerance=self.image_series_tolerance,
            max_iterations=self.image_series_max_iterations,
        )


settings = Settings()
