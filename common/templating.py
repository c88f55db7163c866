"""
Storefront - Template Configuration
=====================================
Jinja2 templates setup with custom filters and global functions.
"""

import os

from fastapi.templating import Jinja2Templates

from config.settings import CURRENCY_SYMBOL
from common.helpers import format_money, to_decimal
from common.flash import get_flashed_messages

# Initialize templates
TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")
templates = Jinja2Templates(directory=TEMPLATE_DIR)


def format_price(value) -> str:
    """Amount with currency symbol, e.g. $1,234.50"""
    return f"{CURRENCY_SYMBOL}{format_money(value)}"


# ==========================================
# Register Filters & Globals
# ==========================================

# Filters (usage in template: {{ value | money }})
templates.env.filters["money"] = format_price
templates.env.filters["percent"] = lambda v: f"{to_decimal(v).normalize():f}%"

# Static asset version for cache busting (bump when CSS/JS changes)
STATIC_VERSION = "1.0"
templates.env.globals["STATIC_VER"] = STATIC_VERSION
templates.env.globals["CURRENCY"] = CURRENCY_SYMBOL

# Flash messages: available in templates via get_flashed_messages(request)
templates.env.globals["get_flashed_messages"] = get_flashed_messages
