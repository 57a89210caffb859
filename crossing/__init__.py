"""
Crossing - River crossing puzzle engine

A small, deterministic rule engine for the humans-and-monsters river
crossing puzzle. It provides:
- Game state (avatars, two docks, a boat)
- Board / disembark / launch / complete-voyage commands
- Win and loss evaluation
- Session handling, a REST API and a terminal client
"""

__version__ = "0.1.0"
