"""
Pytest configuration and shared fixtures for the pellet tool tests.
"""
import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from pellet_tool.config.settings import Settings


@pytest.fixture
def settings(tmp_path):
    """Settings with the built-in tier table and fake integration config."""
    return Settings(
        project_root=tmp_path,
        pricing_tiers=tmp_path / 'pricing_tiers.csv',
        google_maps_api_key="test-key-not-real",
        depot_location="Sundre, AB, Canada",
        http_timeout=5.0,
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_username="mailer",
        smtp_password="secret",
        smtp_from_email="quotes@example.com",
        notify_email="sales@example.com",
    )


@pytest.fixture
def bare_settings(tmp_path):
    """Settings with no integrations configured."""
    return Settings(project_root=tmp_path, pricing_tiers=tmp_path / 'pricing_tiers.csv')
