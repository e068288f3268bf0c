from nimbiwe.models.agent import Agent
from nimbiwe.models.product import Product
from nimbiwe.models.market import Market
from nimbiwe.models.entry import PriceEntry
from nimbiwe.models.validation import Validation
from nimbiwe.models.auth import OtpCode, RefreshToken
from nimbiwe.models.enums import EntryStatus, Role, Unit, ValidationDecision

__all__ = [
    "Agent",
    "Product",
    "Market",
    "PriceEntry",
    "Validation",
    "OtpCode",
    "RefreshToken",
    "EntryStatus",
    "Role",
    "Unit",
    "ValidationDecision",
]
