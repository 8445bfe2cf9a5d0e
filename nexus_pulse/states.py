"""
Vitality state definitions and their display configuration.

Each of the five vitality states maps to a fixed set of presentation
metadata consumed by renderers (labels, colors, mascot animation).
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple


class VitalityState(str, Enum):
    """Discrete vitality tiers, ordered by increasing vitality."""

    DORMANT = "dormant"
    RECOVERING = "recovering"
    STABLE = "stable"
    THRIVING = "thriving"
    SUPERNOVA = "supernova"


class MascotAnimation(str, Enum):
    """Animation styles, more energetic as the state advances."""

    IDLE = "idle"
    BREATHE = "breathe"
    PULSE = "pulse"
    ORBIT = "orbit"
    SUPERNOVA = "supernova"


class StateConfig(NamedTuple):
    """Presentation metadata for a single vitality state."""

    label: str
    emoji: str
    color: str  # Theme color token
    glow_color: str  # Hex value for dynamic styling
    description: str
    mascot_animation: MascotAnimation
    particle_count: int
    ring_color: str  # CSS gradient for the mascot ring


STATE_CONFIGS: Mapping[VitalityState, StateConfig] = MappingProxyType(
    {
        VitalityState.DORMANT: StateConfig(
            label="Dormant",
            emoji="🌑",
            color="text-pulse-muted",
            glow_color="#4a5080",
            description="Repository activity has ceased. Awaiting revival.",
            mascot_animation=MascotAnimation.IDLE,
            particle_count=0,
            ring_color="conic-gradient(from 0deg, #4a5080, #2a2d4a, #4a5080)",
        ),
        VitalityState.RECOVERING: StateConfig(
            label="Recovering",
            emoji="🌒",
            color="text-pulse-amber",
            glow_color="#ffb830",
            description="Faint signals detected. Growth patterns emerging.",
            mascot_animation=MascotAnimation.BREATHE,
            particle_count=4,
            ring_color="conic-gradient(from 0deg, #ffb830, #ff6b00, #ffb830)",
        ),
        VitalityState.STABLE: StateConfig(
            label="Stable",
            emoji="🌗",
            color="text-pulse-cyan",
            glow_color="#00d4ff",
            description="Consistent cadence. The system holds steady.",
            mascot_animation=MascotAnimation.PULSE,
            particle_count=8,
            ring_color="conic-gradient(from 0deg, #00d4ff, #0066ff, #00d4ff)",
        ),
        VitalityState.THRIVING: StateConfig(
            label="Thriving",
            emoji="🌕",
            color="text-pulse-green",
            glow_color="#00ff9d",
            description="Peak performance. High contributor momentum detected.",
            mascot_animation=MascotAnimation.ORBIT,
            particle_count=16,
            ring_color=(
                "conic-gradient(from 0deg, #00ff9d, #00b4d8, #6c63ff, #00ff9d)"
            ),
        ),
        VitalityState.SUPERNOVA: StateConfig(
            label="Supernova",
            emoji="✨",
            color="text-yellow-300",
            glow_color="#ff6b35",
            description="CRITICAL MASS ACHIEVED. Extraordinary activity surge.",
            mascot_animation=MascotAnimation.SUPERNOVA,
            particle_count=32,
            ring_color=(
                "conic-gradient(from 0deg, #ff6b35, #ff4069, #6c63ff, "
                "#00ff9d, #ffb830, #ff6b35)"
            ),
        ),
    }
)

_missing_states = set(VitalityState) - set(STATE_CONFIGS)
if _missing_states:
    raise RuntimeError(
        f"Missing state configuration for: {sorted(s.value for s in _missing_states)}"
    )


def get_state_config(state: VitalityState | str) -> StateConfig:
    """
    Look up the display configuration for a vitality state.

    Args:
        state: A VitalityState member or its string value (e.g. "stable").

    Returns:
        The StateConfig entry for that state.

    Raises:
        ValueError: If the string does not name a known state.
    """
    return STATE_CONFIGS[VitalityState(state)]
