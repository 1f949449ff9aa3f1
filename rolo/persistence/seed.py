"""Default subscription plans.

Inserted by the initial migration and loaded into the in-memory database.
"""

from decimal import Decimal
from typing import Any

DEFAULT_PLANS: list[dict[str, Any]] = [
    {
        "name": "free",
        "display_name": "Free",
        "description": "Basic community management for small groups",
        "price_monthly": Decimal("0.00"),
        "price_yearly": Decimal("0.00"),
        "max_team_members": 5,
        "max_viewers": 10,
        "features": {
            "basic_management": True,
            "member_tracking": True,
            "basic_reports": True,
        },
    },
    {
        "name": "starter",
        "display_name": "Starter",
        "description": "Perfect for growing communities",
        "price_monthly": Decimal("19.99"),
        "price_yearly": Decimal("199.99"),
        "max_team_members": 25,
        "max_viewers": 100,
        "features": {
            "basic_management": True,
            "member_tracking": True,
            "basic_reports": True,
            "advanced_analytics": True,
            "email_integration": True,
            "custom_fields": True,
        },
    },
    {
        "name": "professional",
        "display_name": "Professional",
        "description": "Advanced features for established communities",
        "price_monthly": Decimal("49.99"),
        "price_yearly": Decimal("499.99"),
        "max_team_members": 100,
        "max_viewers": 500,
        "features": {
            "basic_management": True,
            "member_tracking": True,
            "basic_reports": True,
            "advanced_analytics": True,
            "email_integration": True,
            "custom_fields": True,
            "advanced_reporting": True,
            "api_access": True,
            "priority_support": True,
        },
    },
    {
        "name": "enterprise",
        "display_name": "Enterprise",
        "description": "Full-featured solution for large organizations",
        "price_monthly": Decimal("99.99"),
        "price_yearly": Decimal("999.99"),
        "max_team_members": -1,
        "max_viewers": -1,
        "features": {
            "basic_management": True,
            "member_tracking": True,
            "basic_reports": True,
            "advanced_analytics": True,
            "email_integration": True,
            "custom_fields": True,
            "advanced_reporting": True,
            "api_access": True,
            "priority_support": True,
            "white_label": True,
            "custom_integrations": True,
            "dedicated_support": True,
        },
    },
]
