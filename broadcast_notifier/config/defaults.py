"""Default configuration parameters for the broadcast notifier."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PollingParams:
    """Poll loop timing parameters."""
    max_results: int = 5                             # Broadcasts fetched per cycle
    short_interval_seconds: int = 15                 # Sleep when an event is near
    long_interval_seconds: int = 300                 # Sleep otherwise
    near_horizon_seconds: int = 300                  # How far ahead counts as near


@dataclass(frozen=True)
class NotificationParams:
    """Notification channel parameters."""
    webhook_url: str = ""
    spacing_seconds: float = 1.0                     # Pause after every send
    fail_on_delivery_error: bool = True              # Halt on a failed send
    mention: str = "@here"
    schedule_template: str = (
        "Going live at <t:{start_time}:f> (in <t:{start_time}:R>)\n"
        "https://youtu.be/{stream_id}"
    )
    live_template: str = "Live now {mention}"
    complete_template: str = "Stream is over, the VOD will remain available"
    timeout_seconds: int = 30
    dry_run: bool = False                            # Print instead of posting


@dataclass(frozen=True)
class SourceParams:
    """Broadcast source parameters."""
    token_path: str = "persist/.credentials/youtube.json"
    api_base: str = "https://www.googleapis.com/youtube/v3"
    timeout_seconds: int = 30


@dataclass(frozen=True)
class PersistenceParams:
    """State file parameters."""
    path: str = "persist/data.json"


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class NotifierConfig:
    """Complete notifier configuration."""
    polling: PollingParams
    notifications: NotificationParams
    source: SourceParams
    persistence: PersistenceParams
    logging: LoggingParams


def get_default_config() -> NotifierConfig:
    """Get the default configuration instance."""
    return NotifierConfig(
        polling=PollingParams(),
        notifications=NotificationParams(),
        source=SourceParams(),
        persistence=PersistenceParams(),
        logging=LoggingParams(),
    )
