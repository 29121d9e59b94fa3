"""Runtime configuration.

Uses Pydantic BaseSettings to read environment variables with the
`PRESS_IMPACT_` prefix.

Example:
    export PRESS_IMPACT_EPSILON=1e-6
    export PRESS_IMPACT_PORT=8060
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings read from environment variables.

    Attributes:
        epsilon (float): Responses at or below this magnitude count as zero.
        palette (tuple): Bar colors for negative, zero and positive outcomes.
        workers (int): Threads used to tally large ensembles.
        samples (int): Ensemble size drawn by the demo app.
        host (str): Interface the Dash server binds to.
        port (int): Port the Dash server listens on.
        debug (bool): Run Dash in debug mode.
        log_level (str): Level of the stderr log sink.
        log_dir (str): Directory of the rotated log files.
    """

    model_config = SettingsConfigDict(env_prefix="PRESS_IMPACT_")

    epsilon: float = 1.0e-5
    palette: tuple[str, str, str] = ("#92C5DE", "#F7F7F7", "#F4A582")
    workers: int = 1
    samples: int = 1000
    host: str = "127.0.0.1"
    port: int = 8050
    debug: bool = False
    log_level: str = "ERROR"
    log_dir: str = "logs"

    @field_validator("epsilon")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if not v >= 0:
            raise ValueError("epsilon must be non-negative")
        return v

    @field_validator("workers", "samples")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v


settings = Settings()
