"""
Storefront - Centralized Configuration
========================================
All environment variables and constants are loaded here.
No other module should call os.getenv() directly.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ==========================================
# 🌐 Remote Catalog / Order Service
# ==========================================
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8222").rstrip("/")
API_PREFIX = os.getenv("API_PREFIX", "/api/v1")
API_TIMEOUT = float(os.getenv("API_TIMEOUT") or "15")


# ==========================================
# 🔐 Cookies & CSRF
# ==========================================
AUTH_COOKIE = "auth_token"          # bearer token issued by the auth service
CHECKOUT_COOKIE = "checkout_sid"    # identifies one checkout session

COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"
COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "lax")
CSRF_ENABLED = os.getenv("CSRF_ENABLED", "true").lower() == "true"


# ==========================================
# 🛒 Checkout
# ==========================================
DRAFT_TTL_MINUTES = int(os.getenv("DRAFT_TTL_MINUTES") or "30")

# Stacked discount codes may exceed 100% in total. Legacy behaviour keeps the
# negative total; set to true to floor the payable amount at zero.
CLAMP_NEGATIVE_TOTALS = os.getenv("CLAMP_NEGATIVE_TOTALS", "false").lower() == "true"

CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "$")


# ==========================================
# 🔧 App
# ==========================================
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Base URL of this storefront (used for return pages)
BASE_URL = os.getenv("BASE_URL", "http://127.0.0.1:8000")

# Login is handled by the auth front-end
LOGIN_URL = os.getenv("LOGIN_URL", "/login")
