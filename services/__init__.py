"""
Services layer for the treatment pricing engine.

- QuotePricingService: prices worksheet lines against one PricingSnapshot
"""

from .quote_service import QuotePricingService

__all__ = [
    "QuotePricingService",
]
