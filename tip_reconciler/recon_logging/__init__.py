"""
Structured logging for Tip Reconciler.

Named recon_logging so it never shadows the stdlib logging module.
"""

from tip_reconciler.recon_logging.logger import LOG_FORMATS, bind_signature, configure_logging, get_logger

__all__ = ["LOG_FORMATS", "bind_signature", "configure_logging", "get_logger"]
