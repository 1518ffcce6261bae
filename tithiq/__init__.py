"""
Tithiq - Source Package

A personal giving companion: computes recommended charitable-giving
amounts from income, keeps a short history of what was given, and
turns that history into summaries, insights and year-end projections.

DESIGN PRINCIPLES:
1. History is a frozen snapshot of what the user saved
2. Fail soft to a sane default
3. Analytics are pure functions over explicit inputs
4. Every store mutation emits an event
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Tithiq Team"
