"""Per-company rule configuration."""
from pydantic import BaseModel, model_validator
from app.services.errors import InvalidConfigError

DEFAULT_GREEN_THRESHOLD = 85
DEFAULT_AMBER_THRESHOLD = 70
DEFAULT_FORECAST_WARNING_THRESHOLD = 80

THRESHOLD_RANGE = (1, 89)
FORECAST_WARNING_RANGE = (50, 89)
CUSTOM_ALERT_RANGE = (60, 85)


def _check_range(key: str, value: int, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if not low <= value <= high:
        raise InvalidConfigError(key, f"must be between {low} and {high}, got {value}")


class RuleConfig(BaseModel):
    """Thresholds in days used. The 90-day cap itself is fixed and not part of the config.

    Constructing an invalid RuleConfig raises InvalidConfigError; classification never
    re-checks these invariants.
    """
    green_threshold: int = DEFAULT_GREEN_THRESHOLD
    amber_threshold: int = DEFAULT_AMBER_THRESHOLD
    forecast_warning_threshold: int = DEFAULT_FORECAST_WARNING_THRESHOLD
    custom_alert_threshold: int | None = None

    @model_validator(mode="after")
    def check_invariants(self):
        _check_range("green_threshold", self.green_threshold, THRESHOLD_RANGE)
        _check_range("amber_threshold", self.amber_threshold, THRESHOLD_RANGE)
        if self.green_threshold <= self.amber_threshold:
            raise InvalidConfigError(
                "green_threshold",
                f"green threshold ({self.green_threshold}) must be greater than amber threshold ({self.amber_threshold})",
            )
        _check_range("forecast_warning_threshold", self.forecast_warning_threshold, FORECAST_WARNING_RANGE)
        if self.custom_alert_threshold is not None:
            _check_range("custom_alert_threshold", self.custom_alert_threshold, CUSTOM_ALERT_RANGE)
        return self

    class Config:
        frozen = True


class RuleSettingsUpdate(BaseModel):
    green_threshold: int = DEFAULT_GREEN_THRESHOLD
    amber_threshold: int = DEFAULT_AMBER_THRESHOLD
    forecast_warning_threshold: int = DEFAULT_FORECAST_WARNING_THRESHOLD
    custom_alert_threshold: int | None = None
    notify_70_days: bool = True
    notify_85_days: bool = True
    notify_90_days: bool = True


class RuleSettingsResponse(RuleSettingsUpdate):
    company_id: int
    is_default: bool = False
