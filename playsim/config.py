# playsim/config.py

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import Force


class SteeringConfig(BaseModel):
    """Tuning values for the reactive defender steering simulator.

    Every constant of the integration loop lives here so callers (and tests)
    can vary them explicitly instead of patching literals.
    """

    model_config = ConfigDict(frozen=True)

    # Integration
    tick: float = Field(default=1.0 / 60.0, gt=0)
    reaction_delay: float = Field(default=0.1, ge=0)

    # Burst response to sharp cuts
    burst_duration: float = Field(default=0.22, ge=0)
    burst_speed_multiplier: float = Field(default=1.2, gt=0)
    burst_accel_multiplier: float = Field(default=1.35, gt=0)
    burst_angle_degrees: float = Field(default=26.0, gt=0, le=180)
    burst_min_speed: float = Field(default=0.5, ge=0)  # yd/s before headings count

    # Braking
    braking_multiplier: float = Field(default=1.7, gt=0)
    braking_alignment: float = Field(default=0.7, ge=-1, le=1)  # cos(~45 deg)

    # Deep-coverage recovery
    deep_speed_multiplier: float = Field(default=1.35, gt=0)
    deep_accel_multiplier: float = Field(default=1.6, gt=0)
    deep_cushion_threshold: float = 1.5

    # Marking the disc holder
    mark_lateral_offset: float = Field(default=2.0, ge=0)
    mark_depth: float = 2.0
    mark_max_cushion: float = Field(default=2.5, gt=0)
    mark_min_break_separation: float = Field(default=0.75, ge=0)
    mark_min_distance: float = Field(default=1.5, ge=0)
    body_radius: float = Field(default=1.0, ge=0)
    avoidance_radius: float = Field(default=2.5, gt=0)
    avoidance_angle_degrees: float = Field(default=60.0, gt=0, le=180)

    # Settling
    snap_distance: float = Field(default=0.05, ge=0)
    mark_snap_distance: float = Field(default=0.02, ge=0)
    snap_target_speed: float = Field(default=0.05, ge=0)


class PlaysimConfig(BaseSettings):
    """Configuration for the playsim engine."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PLAYSIM_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    json_logs: bool = True

    # Play defaults
    default_force: Force = Force.HOME

    # Playback
    playback_frame_interval: float = 0.016  # ~60 FPS
    default_time_scale: float = 1.0

    # Simulation
    steering: SteeringConfig = SteeringConfig()


# Global config instance
config = PlaysimConfig()
