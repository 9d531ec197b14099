"""
Analytics: financial metrics, reconciliation, aggregate statistics and the
end-to-end pipeline (tip_reconciler.analytics.pipeline).
"""
