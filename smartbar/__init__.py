"""
SmartBAR - Budget Adherence Ratio engine.

Estimates how much should have been spent by a point in a budgeting period
using a front-loaded spending curve blended with learned historical
patterns, and classifies actual spending against it.

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "SmartBAR Team"
