"""Mapping of decoded Trivy reports into Security Hub findings."""

from .normalizer import (
    format_score,
    image_reference,
    map_cluster_compliance_report,
    map_config_audit_report,
    map_infra_assessment_report,
    map_vulnerability_report,
    normalize_severity,
    truncate_description,
)
from .registry import ReportHandler, available_kinds, get_handler, register_handler

__all__ = [
    "ReportHandler",
    "available_kinds",
    "format_score",
    "get_handler",
    "image_reference",
    "map_cluster_compliance_report",
    "map_config_audit_report",
    "map_infra_assessment_report",
    "map_vulnerability_report",
    "normalize_severity",
    "register_handler",
    "truncate_description",
]
