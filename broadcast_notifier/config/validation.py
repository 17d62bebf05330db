"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_polling_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate poll loop parameters."""
        errors = []

        for name in ("short_interval_seconds", "long_interval_seconds", "near_horizon_seconds"):
            if name in params:
                value = params[name]
                if not _is_int(value) or value <= 0:
                    errors.append(ValidationError(
                        field=f"polling.{name}",
                        message="Must be a positive integer",
                        value=value
                    ))

        if "max_results" in params:
            value = params["max_results"]
            if not _is_int(value) or not 1 <= value <= 50:
                errors.append(ValidationError(
                    field="polling.max_results",
                    message="Must be an integer between 1 and 50",
                    value=value
                ))

        short = params.get("short_interval_seconds")
        long = params.get("long_interval_seconds")
        if _is_int(short) and _is_int(long) and short > long:
            errors.append(ValidationError(
                field="polling.short_interval_seconds",
                message="Must not exceed long_interval_seconds",
                value=short
            ))

        return errors

    @staticmethod
    def validate_notification_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate notification channel parameters."""
        errors = []

        if not params.get("dry_run", False):
            url = params.get("webhook_url", "")
            parsed = urlparse(url) if isinstance(url, str) else None
            if not parsed or parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append(ValidationError(
                    field="notifications.webhook_url",
                    message="Must be an http(s) URL (or enable dry_run)",
                    value=url
                ))

        if "spacing_seconds" in params:
            value = params["spacing_seconds"]
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="notifications.spacing_seconds",
                    message="Must be a non-negative number",
                    value=value
                ))

        for name in ("fail_on_delivery_error", "dry_run"):
            if name in params and not isinstance(params[name], bool):
                errors.append(ValidationError(
                    field=f"notifications.{name}",
                    message="Must be a boolean",
                    value=params[name]
                ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="notifications.timeout_seconds",
                    message="Must be a positive integer",
                    value=value
                ))

        for name in ("schedule_template", "live_template", "complete_template"):
            if name in params:
                template = params[name]
                try:
                    template.format(stream_id="id", start_time=0, mention="")
                except (AttributeError, KeyError, IndexError, ValueError) as e:
                    errors.append(ValidationError(
                        field=f"notifications.{name}",
                        message=f"Invalid template ({e!r}); placeholders are "
                                "{stream_id}, {start_time} and {mention}",
                        value=template
                    ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "polling" in config:
            errors.extend(ConfigValidator.validate_polling_params(config["polling"]))

        if "notifications" in config:
            errors.extend(ConfigValidator.validate_notification_params(config["notifications"]))

        path = config.get("persistence", {}).get("path")
        if not path or not isinstance(path, str):
            errors.append(ValidationError(
                field="persistence.path",
                message="Must be a non-empty path",
                value=path
            ))

        level = config.get("logging", {}).get("level", "INFO")
        if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
            errors.append(ValidationError(
                field="logging.level",
                message=f"Must be one of {', '.join(VALID_LOG_LEVELS)}",
                value=level
            ))

        return errors


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
