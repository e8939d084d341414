"""
Tests for configuration, logging, and row mapping helpers
"""
import logging

import sys
sys.path.insert(0, '.')

from pawtrack.core.config import Settings
from pawtrack.core.logging import setup_logging
from pawtrack.reports.models import AddressComponents


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None, supabase_url=None, supabase_anon_key=None)

        assert settings.reports_table == "reports"
        assert settings.storage_bucket == "report-photos"
        assert settings.supabase_configured is False

    def test_configured(self):
        settings = Settings(_env_file=None, supabase_url="https://x.supabase.co", supabase_anon_key="k")

        assert settings.supabase_configured is True


class TestLogging:

    def test_setup_logging(self):
        logger = setup_logging(level="WARNING")

        assert logger.name == "pawtrack"
        assert logger.level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING


class TestAddressComponents:
    """Test suite for address formatting."""

    def test_street_and_city(self):
        assert AddressComponents(street="Main St", city="Townsville").formatted == "Main St, Townsville"

    def test_place_name_when_no_street(self):
        assert AddressComponents(name="Central Park", city="Townsville").formatted == "Central Park, Townsville"

    def test_region_fallback(self):
        assert AddressComponents(region="North", country="Freedonia").formatted == "North, Freedonia"

    def test_nothing_known(self):
        assert AddressComponents().formatted == ""
