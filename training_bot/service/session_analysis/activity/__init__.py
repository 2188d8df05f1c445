"""
Activity modules for training session analysis.

This package contains the streak calculator and the trend calculator, which work on
the same grouped-by-day event snapshot as the correlation analysis.
"""
