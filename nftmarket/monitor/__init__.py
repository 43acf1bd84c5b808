"""Terminal views over marketplace state.

Modules
-------
renderer
    ``MarketRenderer`` turns oracle reports, listings, receipts and the
    front-end address map into Rich renderables.
"""

from nftmarket.monitor.renderer import MarketRenderer

__all__ = ["MarketRenderer"]
