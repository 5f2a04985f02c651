"""
Indicators computed from synchronized quotes.

Modules:
- usdx: US dollar index over six bucket-aligned currency pairs
"""

from .usdx import USDX, UsdxPair
