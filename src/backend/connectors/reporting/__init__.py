"""Reporting API connector (network + auth lives here; the settings grid core never imports it)."""

from .client import ReportingHttpError, reporting_get
from .config import ReportingConfig, get_reporting_config
from .source import ReportingClient

__all__ = ["ReportingConfig", "ReportingClient", "ReportingHttpError", "get_reporting_config", "reporting_get"]
