"""Shared test fixtures for the tender ROI test suite."""

import pytest

from tender_roi.engine.calculator import CostBenefitEngine
from tender_roi.engine.config import EngineConfig
from tender_roi.engine.inference import infer_parameters
from tender_roi.models.tender import TenderInfo


def make_tender(
    tender_id="T-001",
    budget=1_000_000,
    title="Office database upgrade",
    description="",
    purchaser="Acme Manufacturing Ltd",
    **kwargs,
):
    """Helper to create a TenderInfo with minimal boilerplate."""
    return TenderInfo(
        id=tender_id,
        title=title,
        budget=budget,
        description=description,
        purchaser=purchaser,
        **kwargs,
    )


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def engine(config) -> CostBenefitEngine:
    return CostBenefitEngine(config)


@pytest.fixture
def mid_tender() -> TenderInfo:
    """1M enterprise database project: 6 months, 5 people, MEDIUM complexity."""
    return make_tender()


@pytest.fixture
def large_ai_tender() -> TenderInfo:
    """8M AI platform for a bank: 18 months, 12 people, HIGH complexity."""
    return make_tender(
        tender_id="T-AI",
        budget=8_000_000,
        title="AI-powered credit risk analytics platform",
        description="Machine learning models for loan default prediction",
        purchaser="National Bank of Commerce",
    )


@pytest.fixture
def small_tender() -> TenderInfo:
    """300k website refresh for a municipal government."""
    return make_tender(
        tender_id="T-SMALL",
        budget=300_000,
        title="Website content refresh",
        purchaser="Riverside Municipal Government",
    )


@pytest.fixture
def mid_params(mid_tender, config):
    return infer_parameters(mid_tender, None, config.inference)


@pytest.fixture
def large_ai_params(large_ai_tender, config):
    return infer_parameters(large_ai_tender, None, config.inference)
