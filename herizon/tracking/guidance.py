"""Rule-based health tips for the intake wizard's review step.

Each rule is an independent predicate over the draft paired with one message.
Rules are evaluated in a fixed order and every matching rule contributes its
message; when none match, a single generic tip is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from herizon.models.tracking import SleepQuality, SymptomSeverity, WizardDraft
from herizon.tracking.config_loader import GuidanceConfig, get_tracker_config

logger = logging.getLogger("herizon.tracking.guidance")

CRAMPS = "Lower Abdomen Cramps"
GENERIC_TIP = "Keep tracking your cycle for more personalized insights."


@dataclass(frozen=True)
class TipRule:
    """A single predicate → message rule."""

    name: str
    applies: Callable[[WizardDraft], bool]
    message: str


def _cramp_severity(draft: WizardDraft) -> SymptomSeverity | None:
    return draft.symptom_severities.get(CRAMPS)


def build_tip_rules(config: GuidanceConfig | None = None) -> tuple[TipRule, ...]:
    """Return the ordered rule list for the given normal ranges."""
    g = config or get_tracker_config().guidance

    return (
        TipRule(
            "short_cycle",
            lambda d: d.cycle_duration_days is not None and d.cycle_duration_days < g.min_cycle_days,
            "Your cycle is shorter than average. "
            "Consider consulting with a healthcare professional.",
        ),
        TipRule(
            "long_cycle",
            lambda d: d.cycle_duration_days is not None and d.cycle_duration_days > g.max_cycle_days,
            "Your cycle is longer than average. You may want to discuss it with your doctor.",
        ),
        TipRule(
            "long_period",
            lambda d: (
                d.last_period_duration_days is not None
                and d.last_period_duration_days > g.max_period_days
            ),
            "Your period duration is longer than average. "
            "If this is consistent, consult your healthcare provider.",
        ),
        TipRule(
            "short_period",
            lambda d: (
                d.last_period_duration_days is not None
                and d.last_period_duration_days < g.min_period_days
            ),
            "Your period duration is shorter than average. "
            "Track consistently to identify patterns.",
        ),
        TipRule(
            "severe_cramps",
            lambda d: CRAMPS in d.symptoms and _cramp_severity(d) is SymptomSeverity.severe,
            "For severe cramps, try pain relievers, a heating pad, and gentle exercise. "
            "If pain is debilitating, consult your doctor.",
        ),
        TipRule(
            "cramps",
            lambda d: CRAMPS in d.symptoms and _cramp_severity(d) is not SymptomSeverity.severe,
            "For cramps, try a heating pad, gentle yoga, or over-the-counter pain relievers.",
        ),
        TipRule(
            "fatigue",
            lambda d: "Fatigue" in d.symptoms,
            "Combat fatigue by ensuring adequate iron intake, hydration, and rest.",
        ),
        TipRule(
            "bloating",
            lambda d: "Bloating" in d.symptoms,
            "To reduce bloating, limit salt, avoid carbonated drinks, and eat smaller meals.",
        ),
        TipRule(
            "poor_sleep",
            lambda d: d.sleep_quality in (SleepQuality.poor, SleepQuality.fair),
            "Improve sleep by keeping a regular schedule and avoiding caffeine/screens before bed.",
        ),
        TipRule(
            "low_mood",
            lambda d: not {"Sad", "Angry"}.isdisjoint(d.mood_types),
            "Mood changes are normal. Exercise, mindfulness, and sleep can help.",
        ),
    )


def generate_tips(
    draft: WizardDraft,
    rules: tuple[TipRule, ...] | None = None,
) -> list[str]:
    """Evaluate every rule against the draft, in order.

    Returns:
        Messages of all matching rules, or ``[GENERIC_TIP]`` if none match.
    """
    active = rules if rules is not None else build_tip_rules()
    fired = [rule for rule in active if rule.applies(draft)]
    logger.debug("Tip rules fired: %s", [rule.name for rule in fired] or "none")
    if not fired:
        return [GENERIC_TIP]
    return [rule.message for rule in fired]
