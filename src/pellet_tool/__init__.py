"""
Pellet Tool Package

Quote calculator for soil stabilization pellets.
Resolves product quantity, cost and delivery charge for an area, and turns
Alberta Township System land descriptions into coordinates for routing.
"""

__version__ = "1.0.0"
