"""Terminal presentation package for diskinsight.

- ScanTUI: Rich tables for scan results and a live scan progress display.
"""

from diskinsight.ui.scan_tui import ScanTUI

__all__ = ["ScanTUI"]
