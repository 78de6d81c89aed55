"""
Inventory Soft

Small-business inventory and sales management: product catalog, stock
tracking, sales, calendar events, dashboard metrics and PDF reports.
"""

__version__ = "1.0.0"
