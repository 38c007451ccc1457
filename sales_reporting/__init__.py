"""
Sales Reporting Engine

Time-windowed sales aggregation and reporting for sales agents and
platform administrators.
"""

__version__ = "1.0.0"
