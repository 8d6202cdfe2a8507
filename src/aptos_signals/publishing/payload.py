"""Build the signal_registry::publish_signal call descriptor."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping

from aptos_signals.common.types import normalize_address
from aptos_signals.publishing.models import EntryFunctionPayload, Signal

REGISTRY_MODULE = "signal_registry"
PUBLISH_FUNCTION = "publish_signal"
COUNT_FUNCTION = "get_signal_count"


def registry_function(module_address: str, name: str) -> str:
    """Fully-qualified Move function id, e.g. ``0x1::signal_registry::publish_signal``."""
    return f"{normalize_address(module_address)}::{REGISTRY_MODULE}::{name}"


def _finite(value: object) -> object:
    """Replace NaN and infinities with None, as JSON has no spelling for them."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Mapping):
        return {str(k): _finite(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(v) for v in value]
    return value


def serialize_weather(weather: object) -> str:
    """Weather context as compact JSON text.

    Never raises: values JSON cannot represent are stringified, non-finite
    floats become null.
    """
    return json.dumps(
        _finite(dict(weather) if weather else {}),
        separators=(",", ":"),
        sort_keys=True,
        default=str,
        allow_nan=False,
    )


def build_publish_payload(signal: Signal, module_address: str) -> EntryFunctionPayload:
    """Turn a Signal into the nine-argument publish_signal call.

    Argument order matches the Move entry function: event id, market title,
    venue, event time (decimal string), snapshot hash, weather JSON, AI digest,
    confidence, odds efficiency.
    """
    return EntryFunctionPayload(
        function=registry_function(module_address, PUBLISH_FUNCTION),
        type_arguments=[],
        function_arguments=[
            signal.event_id,
            signal.market_title,
            signal.venue,
            str(signal.event_time),
            signal.market_snapshot_hash,
            serialize_weather(signal.weather_json),
            signal.ai_digest,
            signal.confidence.value,
            signal.odds_efficiency.value,
        ],
    )
