"""
Marine Ops Dashboard

Operations backend for a marine and scrap-recycling business: vessel
purchases and overhauls, crew, maintenance, land and scrap sales,
invoicing, and owner-equity accounting across a group of companies.
"""

__version__ = "0.1.0"
__author__ = "Marine Ops Team"
__license__ = "MIT"
