"""Decoding of raw webhook bodies into typed Trivy report models."""

from __future__ import annotations

import logging
from typing import Type, TypeVar, Union

from pydantic import ValidationError

from app.errors import ReportDecodeError
from app.reports.schema import (
    ClusterComplianceReport,
    ConfigAuditReport,
    InfraAssessmentReport,
    TrivyReport,
    VulnerabilityReport,
)

logger = logging.getLogger(__name__)

ReportT = TypeVar("ReportT", bound=TrivyReport)
Body = Union[bytes, str]


def _decode(model: Type[ReportT], body: Body) -> ReportT:
    try:
        report = model.model_validate_json(body)
    except ValidationError as exc:
        raise ReportDecodeError(f"error decoding {model.__name__}: {exc}") from exc
    logger.info("Processing report: %s", report.name)
    return report


def decode_config_audit_report(body: Body) -> ConfigAuditReport:
    return _decode(ConfigAuditReport, body)


def decode_infra_assessment_report(body: Body) -> InfraAssessmentReport:
    report = _decode(InfraAssessmentReport, body)
    logger.debug("Report: %s", report.model_dump_json(by_alias=True, indent=2))
    return report


def decode_cluster_compliance_report(body: Body) -> ClusterComplianceReport:
    report = _decode(ClusterComplianceReport, body)
    logger.debug("Report: %s", report.model_dump_json(by_alias=True, indent=2))
    return report


def decode_vulnerability_report(body: Body) -> VulnerabilityReport:
    return _decode(VulnerabilityReport, body)

