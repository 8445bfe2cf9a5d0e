"""NexusPulse: repository vitality scoring."""

from nexus_pulse.core import (
    Breakdown,
    RawMetrics,
    VitalityReport,
    compute_vitality,
    validate_raw_metrics,
)
from nexus_pulse.formatting import format_metric_value, relative_time
from nexus_pulse.states import STATE_CONFIGS, StateConfig, VitalityState
from nexus_pulse.trend import Trend

__version__ = "0.1.0"

__all__ = [
    "Breakdown",
    "RawMetrics",
    "STATE_CONFIGS",
    "StateConfig",
    "Trend",
    "VitalityReport",
    "VitalityState",
    "compute_vitality",
    "format_metric_value",
    "relative_time",
    "validate_raw_metrics",
]
