"""Reporting package for diskinsight.

- ScanReport: Sectioned plain-text report of a finished scan.
"""

from diskinsight.reporting.scan_report import ScanReport

__all__ = ["ScanReport"]
