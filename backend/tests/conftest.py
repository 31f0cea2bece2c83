"""
Shared fixtures for backend unit tests.

Every test gets a fresh BrandEvaluator (bundled guideline, no contextual
oracle) and an empty rate-limit store.
"""
import pytest
from httpx import ASGITransport, AsyncClient

from backend.limits import limiter
from backend.main import app
from backend.services.evaluator import get_evaluator
from brand_compliance.profiles import sample_guideline
from evaluation.service import BrandEvaluator


@pytest.fixture
def evaluator():
    return BrandEvaluator(guideline_loader=sample_guideline)


@pytest.fixture(autouse=True)
def isolated_app(evaluator):
    limiter.reset()
    app.dependency_overrides[get_evaluator] = lambda: evaluator
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def client():
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
