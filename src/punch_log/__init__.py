"""Punch Log package.

This package is organized by feature modules (records, session, stats, ...)
with a thin Flask controller layer on top of a coordinator facade.
"""
