from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

SCHEMA_VERSION = "2018-10-08"
RECORD_STATE_ACTIVE = "ACTIVE"
MAX_DESCRIPTION_LENGTH = 1024
TRUNCATION_MARKER = "..."


class SeverityLabel(str, Enum):
    INFORMATIONAL = "INFORMATIONAL"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class AsffModel(BaseModel):
    """Immutable ASFF fragment, populated by field name and serialized by alias."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Severity(AsffModel):
    # Kept as a plain string: unrecognized labels are forwarded for Security Hub to reject.
    label: str = Field(alias="Label")


class Recommendation(AsffModel):
    text: str = Field(alias="Text")
    url: Optional[str] = Field(default=None, alias="Url")


class Remediation(AsffModel):
    recommendation: Recommendation = Field(alias="Recommendation")


class ResourceDetails(AsffModel):
    other: Dict[str, str] = Field(default_factory=dict, alias="Other")


class Resource(AsffModel):
    type: str = Field(alias="Type")
    id: str = Field(alias="Id")
    partition: str = Field(default="aws", alias="Partition")
    region: str = Field(alias="Region")
    details: ResourceDetails = Field(default_factory=ResourceDetails, alias="Details")


class Finding(AsffModel):
    schema_version: str = Field(default=SCHEMA_VERSION, alias="SchemaVersion")
    id: str = Field(alias="Id")
    product_arn: str = Field(alias="ProductArn")
    generator_id: str = Field(alias="GeneratorId")
    aws_account_id: str = Field(alias="AwsAccountId")
    types: List[str] = Field(default_factory=list, alias="Types")
    created_at: str = Field(alias="CreatedAt")
    updated_at: str = Field(alias="UpdatedAt")
    severity: Severity = Field(alias="Severity")
    title: str = Field(alias="Title")
    description: str = Field(alias="Description")
    remediation: Remediation = Field(alias="Remediation")
    product_fields: Dict[str, str] = Field(default_factory=dict, alias="ProductFields")
    resources: List[Resource] = Field(default_factory=list, alias="Resources")
    record_state: str = Field(default=RECORD_STATE_ACTIVE, alias="RecordState")

    def to_asff(self) -> Dict[str, Any]:
        """Return the finding in the shape accepted by ``BatchImportFindings``."""

        return self.model_dump(by_alias=True, exclude_none=True)
