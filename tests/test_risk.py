"""Tests for risk tier classification."""

from __future__ import annotations

import pytest

from app.schemas.compliance import RiskTier
from app.schemas.settings import RuleConfig
from app.services.risk import classify


@pytest.mark.parametrize(
    "days, tier",
    [
        (0, RiskTier.safe),
        (70, RiskTier.safe),
        (71, RiskTier.caution),
        (85, RiskTier.caution),
        (86, RiskTier.breach),
        (91, RiskTier.breach),
        (180, RiskTier.breach),
    ],
)
def test_default_thresholds(days, tier):
    assert classify(days, RuleConfig()) == tier


def test_custom_thresholds():
    config = RuleConfig(green_threshold=60, amber_threshold=30)
    assert classify(30, config) == RiskTier.safe
    assert classify(31, config) == RiskTier.caution
    assert classify(61, config) == RiskTier.breach


def test_classification_is_monotonic():
    config = RuleConfig()
    order = [RiskTier.safe, RiskTier.caution, RiskTier.breach]
    ranks = [order.index(classify(days, config)) for days in range(0, 181)]
    assert ranks == sorted(ranks)
