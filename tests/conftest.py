import pytest

from makeover.config import Settings
from makeover.models.schemas import DesignPlan
from tests.helpers import b64, make_png, plan_data


@pytest.fixture
def sample_plan() -> DesignPlan:
    return DesignPlan.model_validate(plan_data())


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def png_base64(png_bytes) -> str:
    return b64(png_bytes)


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(_env_file=None, gemini_api_key="test-key")
