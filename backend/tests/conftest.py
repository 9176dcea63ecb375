"""
Shared fixtures for the bond calculator tests
"""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from server import app
from fixed_income.models import BondParameters


@pytest.fixture
def client():
    """API client; server errors come back as 500 responses instead of raising"""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def discount_bond_payload():
    """1000 face, 5% annual, priced at 950, 5 years"""
    return {
        "faceValue": 1000,
        "couponRate": 5,
        "marketPrice": 950,
        "yearsToMaturity": 5,
        "couponFrequency": 1
    }


@pytest.fixture
def par_bond_payload():
    """1000 face, 5% semi-annual, priced at par, 5 years"""
    return {
        "faceValue": 1000,
        "couponRate": 5,
        "marketPrice": 1000,
        "yearsToMaturity": 5,
        "couponFrequency": 2
    }


@pytest.fixture
def premium_bond_payload():
    """1000 face, 8% quarterly, priced at 1080, 10 years"""
    return {
        "faceValue": 1000,
        "couponRate": 8,
        "marketPrice": 1080,
        "yearsToMaturity": 10,
        "couponFrequency": 4
    }


@pytest.fixture
def discount_bond(discount_bond_payload):
    return BondParameters(**discount_bond_payload)


@pytest.fixture
def par_bond(par_bond_payload):
    return BondParameters(**par_bond_payload)


@pytest.fixture
def premium_bond(premium_bond_payload):
    return BondParameters(**premium_bond_payload)


@pytest.fixture
def start_date():
    """Fixed schedule start so payment dates are deterministic"""
    return datetime(2025, 1, 31, 12, 0, tzinfo=timezone.utc)
