"""Typed Trivy-operator report models and their decoders."""

from .decoder import (
    decode_cluster_compliance_report,
    decode_config_audit_report,
    decode_infra_assessment_report,
    decode_vulnerability_report,
)
from .schema import (
    Check,
    ClusterComplianceReport,
    ConfigAuditReport,
    InfraAssessmentReport,
    ReportKind,
    TrivyReport,
    Vulnerability,
    VulnerabilityReport,
    WebhookEnvelope,
)

__all__ = [
    "Check",
    "ClusterComplianceReport",
    "ConfigAuditReport",
    "InfraAssessmentReport",
    "ReportKind",
    "TrivyReport",
    "Vulnerability",
    "VulnerabilityReport",
    "WebhookEnvelope",
    "decode_cluster_compliance_report",
    "decode_config_audit_report",
    "decode_infra_assessment_report",
    "decode_vulnerability_report",
]
