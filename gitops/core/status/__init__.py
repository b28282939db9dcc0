"""Working-tree status classification and reporting."""

from gitops.core.status.classifier import (
    STATUS_CODES,
    build_status_report,
    classify_file_status,
)

__all__ = ["STATUS_CODES", "build_status_report", "classify_file_status"]
