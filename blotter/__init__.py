"""
Blotter - Live trading blotter rows with sorting, inline editing and fill highlighting.

Architecture:
- engine/: Column registry, sort keys, highlight state machine
- datafeed/: Simulated market data (random rows + price/fill kicks)
- ui/: Grid state (focus, modes, sort, filter), row view node trees and
  renderers (Textual TUI, PyQt6 window)
"""

__version__ = "0.1.0"
