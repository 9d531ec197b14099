"""
Core cross-cutting pieces shared by telemetry, ledger and analytics.
"""
