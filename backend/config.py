"""
Application configuration and constants
"""
import os
from pathlib import Path
from dotenv import load_dotenv

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment ("1", "true", "yes", "on")"""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Application
APP_NAME = os.environ.get('APP_NAME', 'Bond Calculator API')
APP_VERSION = os.environ.get('APP_VERSION', '1.0.0')
API_PREFIX = os.environ.get('API_PREFIX', '/api')

# CORS
CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]

# Logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Diagnostic logging inside the calculation engine (never affects results)
CALCULATION_LOGGING = _env_flag('CALCULATION_LOGGING', True)

# Decimal precision used by the calculation engine
DECIMAL_PRECISION = 28

# Coupon frequencies (payments per year)
COUPON_FREQUENCIES = {
    1: "annual",
    2: "semi-annual",
    4: "quarterly",
    12: "monthly"
}

# Alternate request field names -> canonical field names
FIELD_ALIASES = {
    "frequency": "couponFrequency"
}

# Bond request field rules
# Each entry drives both the request model constraints and the validation messages.
BOND_FIELD_RULES = {
    "faceValue": {
        "label": "Face value",
        "type": "number",
        "required": True,
        "minimum": 1,
    },
    "couponRate": {
        "label": "Coupon rate",
        "type": "number",
        "required": True,
        "minimum": 0.01,
        "maximum": 100,
        "unit": "%",
    },
    "marketPrice": {
        "label": "Market price",
        "type": "number",
        "required": True,
        "minimum": 0.01,
    },
    "yearsToMaturity": {
        "label": "Years to maturity",
        "type": "number",
        "required": True,
        "minimum": 0.1,
        "maximum": 100,
        "maximum_unit": " years",
    },
    "couponFrequency": {
        "label": "Coupon frequency",
        "type": "integer",
        "required": True,
        "allowed": list(COUPON_FREQUENCIES),
    },
    "yieldToMaturity": {
        "label": "Yield to maturity",
        "type": "number",
        "required": False,
        "minimum": 0.01,
        "maximum": 100,
        "unit": "%",
    },
}


def frequency_description() -> str:
    """Human readable list of allowed frequencies, e.g. '1 (annual), 2 (semi-annual), ...'"""
    parts = [f"{n} ({label})" for n, label in COUPON_FREQUENCIES.items()]
    return ", ".join(parts[:-1]) + f", or {parts[-1]}"
