# ===============================================================================
# PYTEST CONFIGURATION FOR EMALL
# ===============================================================================
"""
Global test configuration for EMall.

Test Structure:
- tests/ mirrors apps/ structure for app-specific tests
- tests/api/ for endpoint tests through the DRF test client
- Naming convention: test_{app}_{feature}.py

Run all tests: pytest tests/
"""

import os

import django


def pytest_configure():
    """Configure Django settings for pytest"""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.test')

    # Configure Django
    django.setup()

# ===============================================================================
# PYTEST FIXTURES
# ===============================================================================

import pytest  # noqa: E402
from django.core.cache import cache  # noqa: E402
from rest_framework.test import APIClient  # noqa: E402

from tests.factories.emall import create_customer_user, create_merchant  # noqa: E402


@pytest.fixture(autouse=True)
def clear_throttle_cache():
    """Throttle counters live in the cache, keep tests independent"""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def customer(db):
    """Create test customer"""
    return create_customer_user()


@pytest.fixture
def merchant(db):
    """Create test merchant with store profile"""
    return create_merchant()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def merchant_client(merchant):
    """API client signed in as the merchant"""
    client = APIClient()
    client.force_authenticate(user=merchant.user)
    return client


@pytest.fixture
def customer_client(customer):
    """API client signed in as the customer"""
    client = APIClient()
    client.force_authenticate(user=customer)
    return client
