"""Weather data validation: range, consistency and freshness checks.

Input follows the WeatherAPI.com shape (``current``, ``forecast.forecastday``,
location fields). Each check appends to errors (data unusable) or warnings
(data suspicious but usable).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from aptos_signals.validation.models import CapabilityReport, DataQuality, ValidationReport

logger = logging.getLogger(__name__)

DATA_TYPES = ("current", "forecast", "historical", "location")

# Fields each analysis type needs in ``current``
ANALYSIS_REQUIREMENTS: dict[str, list[str]] = {
    "temperature-analysis": ["temp_f", "temp_c"],
    "precipitation-analysis": ["precip_chance", "precip_in", "condition"],
    "wind-analysis": ["wind_mph", "wind_kph", "wind_dir"],
    "outdoor-sports": ["temp_f", "wind_mph", "precip_chance", "condition"],
    "aviation": ["wind_mph", "vis_miles", "condition", "pressure_mb"],
    "agriculture": ["temp_f", "humidity", "precip_in", "uv"],
}

_ESSENTIAL_FIELDS = ("temp_f", "condition", "humidity", "wind_mph")
_IMPORTANT_FIELDS = ("precip_chance", "pressure_mb", "vis_miles")

STALE_AFTER_HOURS = 3.0


def _as_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _parse_time(value: object) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _hours_since(ts: datetime, now: datetime) -> float:
    return (now - ts).total_seconds() / 3600.0


def validate_weather_data(
    data_type: str, data: dict, now: datetime | None = None,
) -> ValidationReport:
    """Validate ``data`` as the given weather data type."""
    now = now or datetime.now(timezone.utc)
    if data_type == "current":
        return validate_current(data, now)
    if data_type == "forecast":
        return validate_forecast(data, now)
    if data_type == "historical":
        return validate_historical(data)
    if data_type == "location":
        return validate_location(data)
    return ValidationReport(valid=False, errors=[f"Unknown weather data type: {data_type}"])


def validate_current(weather: dict, now: datetime | None = None) -> ValidationReport:
    now = now or datetime.now(timezone.utc)
    errors: list[str] = []
    warnings: list[str] = []

    current = weather.get("current")
    if not current:
        return ValidationReport(valid=False, errors=["Missing current weather data"])

    temp_f = _as_float(current.get("temp_f"))
    if "temp_f" in current:
        if temp_f is None:
            errors.append("Invalid temperature (Fahrenheit)")
        else:
            if temp_f < -100 or temp_f > 150:
                errors.append(
                    f"Temperature {temp_f:g}°F outside reasonable range (-100°F to 150°F)"
                )
            if temp_f < -50 or temp_f > 120:
                warnings.append(f"Extreme temperature {temp_f:g}°F - verify accuracy")

    temp_c = _as_float(current.get("temp_c"))
    if "temp_c" in current:
        if temp_c is None:
            errors.append("Invalid temperature (Celsius)")
        elif temp_c < -75 or temp_c > 65:
            errors.append(f"Temperature {temp_c:g}°C outside reasonable range (-75°C to 65°C)")

    if temp_f is not None and temp_c is not None:
        if abs((temp_f - 32) * 5 / 9 - temp_c) > 1:
            warnings.append("Temperature F and C values inconsistent")

    if "humidity" in current:
        humidity = _as_float(current["humidity"])
        if humidity is None:
            errors.append("Invalid humidity value")
        elif not 0 <= humidity <= 100:
            errors.append(f"Humidity {humidity:g}% outside valid range (0-100%)")

    if "wind_mph" in current:
        wind = _as_float(current["wind_mph"])
        if wind is None:
            errors.append("Invalid wind speed (mph)")
        elif wind < 0:
            errors.append("Wind speed cannot be negative")
        elif wind > 200:
            warnings.append(f"Very high wind speed {wind:g} mph - verify accuracy")

    precip_chance = _as_float(current.get("precip_chance"))
    if "precip_chance" in current:
        if precip_chance is None:
            errors.append("Invalid precipitation chance")
        elif not 0 <= precip_chance <= 100:
            errors.append(f"Precipitation chance {precip_chance:g}% outside valid range (0-100%)")

    precip_in = _as_float(current.get("precip_in"))
    if "precip_in" in current:
        if precip_in is None:
            errors.append("Invalid precipitation amount")
        elif precip_in < 0:
            errors.append("Precipitation amount cannot be negative")
        elif precip_in > 10:
            warnings.append(f"Very high precipitation {precip_in:g} inches - verify accuracy")

    condition = current.get("condition")
    if condition:
        text = condition.get("text") if isinstance(condition, dict) else None
        if not isinstance(text, str) or not text:
            warnings.append("Missing or invalid weather condition text")
        elif len(text) < 3:
            warnings.append("Weather condition text too short")

    last_updated = current.get("last_updated")
    if last_updated:
        updated = _parse_time(last_updated)
        if updated is None:
            warnings.append("Invalid last updated timestamp")
        elif _hours_since(updated, now) > STALE_AFTER_HOURS:
            warnings.append("Weather data may be stale (>3 hours old)")

    if precip_chance is not None and precip_in is not None:
        if precip_chance == 0 and precip_in > 0:
            warnings.append("Precipitation amount >0 but chance is 0% - inconsistent")
        if precip_chance > 80 and precip_in == 0:
            warnings.append("High precipitation chance but amount is 0 - potentially inconsistent")

    return ValidationReport(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        data_quality=assess_data_quality(current, now),
    )


def _check_days(days: list, errors: list[str]) -> None:
    """Per-day structure checks shared by forecast and historical data."""
    for index, day in enumerate(days):
        if not isinstance(day, dict):
            errors.append(f"Invalid entry for forecast day {index}")
            continue

        date = day.get("date")
        if not date:
            errors.append(f"Missing date for forecast day {index}")
        elif _parse_time(date) is None:
            errors.append(f"Invalid date format for forecast day {index}: {date}")

        day_data = day.get("day")
        if not day_data:
            errors.append(f"Missing day data for forecast day {index}")
            continue

        max_temp = _as_float(day_data.get("maxtemp_f"))
        min_temp = _as_float(day_data.get("mintemp_f"))
        if max_temp is not None and min_temp is not None and min_temp > max_temp:
            errors.append(
                f"Min temp ({min_temp:g}°F) greater than max temp ({max_temp:g}°F) on day {index}"
            )

        if "daily_chance_of_rain" in day_data:
            rain = _as_float(day_data["daily_chance_of_rain"])
            if rain is None or not 0 <= rain <= 100:
                errors.append(
                    f"Invalid rain chance on day {index}: {day_data['daily_chance_of_rain']}"
                )


def _forecast_days(weather: dict) -> tuple[list | None, str | None]:
    forecast = weather.get("forecast")
    if not forecast or "forecastday" not in forecast or forecast["forecastday"] is None:
        return None, "Missing forecast data"
    days = forecast["forecastday"]
    if not isinstance(days, list):
        return None, "Forecast days must be an array"
    return days, None


def validate_forecast(weather: dict, now: datetime | None = None) -> ValidationReport:
    now = now or datetime.now(timezone.utc)
    days, problem = _forecast_days(weather)
    if days is None:
        return ValidationReport(valid=False, errors=[problem or "Missing forecast data"])

    errors: list[str] = []
    warnings: list[str] = []
    _check_days(days, errors)

    if days and isinstance(days[0], dict):
        first = _parse_time(days[0].get("date"))
        if first is not None:
            today = now.replace(hour=0, minute=0, second=0, microsecond=0)
            days_diff = (first - today).total_seconds() / 86400.0
            if days_diff < -1:
                warnings.append("Forecast starts more than 1 day in the past")
            if days_diff > 1:
                warnings.append("Forecast starts more than 1 day in the future")

    return ValidationReport(valid=not errors, errors=errors, warnings=warnings)


def validate_historical(weather: dict) -> ValidationReport:
    """Same day-level checks as a forecast, without the timeline window."""
    days, problem = _forecast_days(weather)
    if days is None:
        return ValidationReport(valid=False, errors=[problem or "Missing forecast data"])

    errors: list[str] = []
    warnings: list[str] = []
    _check_days(days, errors)
    if not days:
        warnings.append("Historical data contains no days")
    return ValidationReport(valid=not errors, errors=errors, warnings=warnings)


def validate_location(location: dict) -> ValidationReport:
    errors: list[str] = []

    name = location.get("name")
    if not name:
        errors.append("Location name is required")
    elif not isinstance(name, str) or len(name) < 2:
        errors.append("Location name too short or invalid")

    if "lat" in location:
        lat = _as_float(location["lat"])
        if lat is None:
            errors.append("Invalid latitude format")
        elif not -90 <= lat <= 90:
            errors.append(f"Latitude {lat:g} outside valid range (-90 to 90)")

    if "lon" in location:
        lon = _as_float(location["lon"])
        if lon is None:
            errors.append("Invalid longitude format")
        elif not -180 <= lon <= 180:
            errors.append(f"Longitude {lon:g} outside valid range (-180 to 180)")

    return ValidationReport(valid=not errors, errors=errors)


def assess_data_quality(current: dict, now: datetime | None = None) -> DataQuality:
    """Score how complete a ``current`` block is."""
    now = now or datetime.now(timezone.utc)
    score = 0
    max_score = 0

    for name in _ESSENTIAL_FIELDS:
        max_score += 2
        if current.get(name) is not None:
            score += 2

    for name in _IMPORTANT_FIELDS:
        max_score += 1
        if current.get(name) is not None:
            score += 1

    # Freshness bonus only counts when earned
    updated = _parse_time(current.get("last_updated"))
    if updated is not None and _hours_since(updated, now) <= 1:
        max_score += 1
        score += 1

    percent = score / max_score * 100 if max_score else 0.0
    if percent >= 90:
        level = "EXCELLENT"
    elif percent >= 75:
        level = "GOOD"
    elif percent >= 60:
        level = "FAIR"
    else:
        level = "POOR"

    return DataQuality(
        score=percent,
        level=level,
        missing_fields=[f for f in _ESSENTIAL_FIELDS if current.get(f) is None],
    )


def check_capabilities(weather: dict, analysis_type: str) -> CapabilityReport:
    """Whether ``weather['current']`` has what ``analysis_type`` needs."""
    required = ANALYSIS_REQUIREMENTS.get(analysis_type, [])
    current = weather.get("current") or {}
    missing = [f for f in required if current.get(f) is None]
    completeness = (len(required) - len(missing)) / len(required) * 100 if required else 0.0
    return CapabilityReport(
        supported=not missing,
        missing_fields=missing,
        completeness=completeness,
    )
