from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

CONTAINER_NAME_LABEL = "trivy-operator.container.name"


class ReportKind(str, Enum):
    CONFIG_AUDIT = "ConfigAuditReport"
    INFRA_ASSESSMENT = "InfraAssessmentReport"
    CLUSTER_COMPLIANCE = "ClusterComplianceReport"
    VULNERABILITY = "VulnerabilityReport"


class ReportModel(BaseModel):
    """Base for decoded report documents: unknown keys ignored, explicit nulls fall back to defaults."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class WebhookEnvelope(ReportModel):
    kind: str = ""
    api_version: str = Field(default="", alias="apiVersion")


class OwnerReference(ReportModel):
    api_version: str = Field(default="", alias="apiVersion")
    kind: str = ""
    name: str = ""
    uid: str = ""

    @property
    def identity(self) -> str:
        return f"{self.kind}/{self.name}"


class ObjectMeta(ReportModel):
    name: str = ""
    namespace: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    owner_references: List[OwnerReference] = Field(default_factory=list, alias="ownerReferences")


class Scanner(ReportModel):
    name: str = ""
    vendor: str = ""
    version: str = ""


class Check(ReportModel):
    id: str = Field(default="", alias="checkID")
    title: str = ""
    description: str = ""
    severity: str = ""
    category: str = ""
    messages: List[str] = Field(default_factory=list)
    remediation: str = ""
    success: bool = False


class CheckReportData(ReportModel):
    scanner: Scanner = Field(default_factory=Scanner)
    summary: Dict[str, int] = Field(default_factory=dict)
    checks: List[Check] = Field(default_factory=list)


class Vulnerability(ReportModel):
    vulnerability_id: str = Field(default="", alias="vulnerabilityID")
    resource: str = ""
    installed_version: str = Field(default="", alias="installedVersion")
    fixed_version: str = Field(default="", alias="fixedVersion")
    severity: str = ""
    title: str = ""
    description: str = ""
    primary_link: str = Field(default="", alias="primaryLink")
    links: List[str] = Field(default_factory=list)
    score: Optional[float] = None


class Registry(ReportModel):
    server: str = ""


class Artifact(ReportModel):
    repository: str = ""
    digest: str = ""
    tag: str = ""


class VulnerabilityReportData(ReportModel):
    scanner: Scanner = Field(default_factory=Scanner)
    registry: Registry = Field(default_factory=Registry)
    artifact: Artifact = Field(default_factory=Artifact)
    summary: Dict[str, int] = Field(default_factory=dict)
    vulnerabilities: List[Vulnerability] = Field(default_factory=list)


class TrivyReport(ReportModel):
    kind: str = ""
    api_version: str = Field(default="", alias="apiVersion")
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)

    @property
    def name(self) -> str:
        return self.metadata.name


class ConfigAuditReport(TrivyReport):
    report: CheckReportData = Field(default_factory=CheckReportData)


class InfraAssessmentReport(TrivyReport):
    report: CheckReportData = Field(default_factory=CheckReportData)


class ClusterComplianceReport(TrivyReport):
    spec: Dict[str, Any] = Field(default_factory=dict)
    status: Dict[str, Any] = Field(default_factory=dict)


class VulnerabilityReport(TrivyReport):
    report: VulnerabilityReportData = Field(default_factory=VulnerabilityReportData)

    @property
    def container_name(self) -> str:
        return self.metadata.labels.get(CONTAINER_NAME_LABEL, "")
