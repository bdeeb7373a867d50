"""Shared pytest fixtures for apidesc tests."""

from pathlib import Path

import pytest
from dotenv import load_dotenv
from hypothesis import settings

from apidesc.core.config import ApiDescConfig

# Load environment variables from .env file
load_dotenv()

# Configure hypothesis for property-based testing
settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("dev", max_examples=20, deadline=None)
settings.load_profile("dev")


@pytest.fixture
def known_classes() -> dict[str, dict]:
    """Provide a small AutoAPI-style class dictionary."""
    return {
        "cPlayer": {"Desc": "A player"},
        "cWorld": {"Desc": "A world"},
        "cEntity": {"Desc": "An entity"},
        "cItem": {"Desc": "An item"},
    }


@pytest.fixture
def test_config() -> ApiDescConfig:
    """Provide a configuration that ignores the environment's .env file."""
    return ApiDescConfig(_env_file=None)


@pytest.fixture
def auto_api_dir(tmp_path: Path) -> Path:
    """Create an AutoAPI directory with two class files."""
    auto_api = tmp_path / "AutoAPI"
    auto_api.mkdir()
    (auto_api / "_files.lua").write_text('return\n{\n\t"cPlayer.lua",\n\t"cWorld.lua",\n}\n')
    (auto_api / "cPlayer.lua").write_text(
        'return\n{\n\tcPlayer =\n\t{\n\t\tDesc = "A player",\n\t},\n}\n'
    )
    (auto_api / "cWorld.lua").write_text(
        'return\n{\n\tcWorld =\n\t{\n\t\tDesc = "A world",\n\t},\n}\n'
    )
    return auto_api
