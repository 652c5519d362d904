"""Conversion of decoded Trivy reports into ASFF findings."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from app.adapters.identity import AwsIdentity
from app.errors import ReportPreconditionError
from app.models import (
    MAX_DESCRIPTION_LENGTH,
    TRUNCATION_MARKER,
    Finding,
    Recommendation,
    Remediation,
    Resource,
    ResourceDetails,
    Severity,
    SeverityLabel,
)
from app.reports.schema import (
    ClusterComplianceReport,
    ConfigAuditReport,
    InfraAssessmentReport,
    VulnerabilityReport,
)

PRODUCT_FIELDS = {"Product Name": "Trivy"}
CONFIG_AUDIT_TYPES = ["Software and Configuration Checks"]
VULNERABILITY_TYPES = ["Software and Configuration Checks/Vulnerabilities/CVE"]


def normalize_severity(severity: str) -> str:
    """Map Trivy's UNKNOWN onto INFORMATIONAL; every other label passes through."""
    if severity == "UNKNOWN":
        return SeverityLabel.INFORMATIONAL.value
    return severity


def truncate_description(description: str, limit: int = MAX_DESCRIPTION_LENGTH) -> str:
    if len(description) > limit:
        return description[: limit - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER
    return description


def image_reference(registry: str, repository: str, digest: str, tag: str) -> str:
    """Prefer the immutable digest reference, falling back to the tag."""
    if digest:
        return f"{registry}/{repository}@{digest}"
    return f"{registry}/{repository}:{tag}"


def format_score(score: Optional[float]) -> str:
    return f"{score if score is not None else 0.0:f}"


def _timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def map_config_audit_report(
    report: ConfigAuditReport,
    identity: AwsIdentity,
    *,
    now: Optional[datetime] = None,
) -> List[Finding]:
    if not report.metadata.owner_references:
        raise ReportPreconditionError(f"report {report.name} has no owner references")

    owner = report.metadata.owner_references[0].identity
    timestamp = _timestamp(now)
    findings: List[Finding] = []

    for check in report.report.checks:
        if not check.messages:
            raise ReportPreconditionError(f"check {check.id} in report {report.name} has no messages")

        findings.append(
            Finding(
                id=f"{check.id}-{owner}",
                product_arn=identity.product_arn,
                generator_id=f"Trivy/{check.id}",
                aws_account_id=identity.account_id,
                types=list(CONFIG_AUDIT_TYPES),
                created_at=timestamp,
                updated_at=timestamp,
                severity=Severity(label=normalize_severity(check.severity)),
                title=f"Trivy found a misconfiguration in {owner}: {check.title}",
                description=truncate_description(check.description),
                remediation=Remediation(recommendation=Recommendation(text=check.remediation)),
                product_fields=dict(PRODUCT_FIELDS),
                resources=[
                    Resource(
                        type="Other",
                        id=owner,
                        partition=identity.partition,
                        region=identity.region,
                        details=ResourceDetails(other={"Message": check.messages[0]}),
                    )
                ],
            )
        )

    return findings


def map_vulnerability_report(
    report: VulnerabilityReport,
    identity: AwsIdentity,
    *,
    now: Optional[datetime] = None,
) -> List[Finding]:
    data = report.report
    registry = data.registry.server
    repository = data.artifact.repository
    tag = data.artifact.tag
    full_image_name = image_reference(registry, repository, data.artifact.digest, tag)
    image_name = f"{registry}/{repository}"
    container = report.container_name
    timestamp = _timestamp(now)
    findings: List[Finding] = []

    for vulnerability in data.vulnerabilities:
        description = vulnerability.description or vulnerability.title

        findings.append(
            Finding(
                id=f"{full_image_name}-{vulnerability.vulnerability_id}",
                product_arn=identity.product_arn,
                generator_id=f"Trivy/{vulnerability.vulnerability_id}",
                aws_account_id=identity.account_id,
                types=list(VULNERABILITY_TYPES),
                created_at=timestamp,
                updated_at=timestamp,
                severity=Severity(label=normalize_severity(vulnerability.severity)),
                title=f"{image_name}/{container}:{tag} {vulnerability.vulnerability_id}",
                description=truncate_description(description),
                remediation=Remediation(
                    recommendation=Recommendation(
                        text="Upgrade to version " + vulnerability.fixed_version,
                        url=vulnerability.primary_link,
                    )
                ),
                product_fields=dict(PRODUCT_FIELDS),
                resources=[
                    Resource(
                        type="Container",
                        id=image_name,
                        partition=identity.partition,
                        region=identity.region,
                        details=ResourceDetails(
                            other={
                                "Container Image": image_name,
                                "CVE ID": vulnerability.vulnerability_id,
                                "CVE Title": vulnerability.title,
                                "PkgName": vulnerability.resource,
                                "Installed Package": vulnerability.installed_version,
                                "Patched Package": vulnerability.fixed_version,
                                "NvdCvssScoreV3": format_score(vulnerability.score),
                                # Vector data is not carried through yet.
                                "NvdCvssVectorV3": "",
                            }
                        ),
                    )
                ],
            )
        )

    return findings


def map_infra_assessment_report(
    report: InfraAssessmentReport, identity: Optional[AwsIdentity] = None
) -> List[Finding]:
    """Infra assessment reports are accepted and logged but not converted yet."""
    return []


def map_cluster_compliance_report(
    report: ClusterComplianceReport, identity: Optional[AwsIdentity] = None
) -> List[Finding]:
    """Cluster compliance reports are accepted and logged but not converted yet."""
    return []
