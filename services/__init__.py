# services/__init__.py

"""
Eunoia Journal services: journal edits, Google Sheets sync and trend analysis
"""
