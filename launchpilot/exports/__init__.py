"""Exports of a projection payload.

- writers.py: CSV emitters (monthly rows, scenario summary)
- reports.py: Markdown projection report
"""
