"""Resolution of the AWS account and region findings are attributed to."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError
from pydantic import BaseModel, ConfigDict

from app.errors import IdentityResolutionError
from app.settings import get_settings

logger = logging.getLogger(__name__)

PRODUCT_ARN_TEMPLATE = "arn:{partition}:securityhub:{region}::product/aquasecurity/aquasecurity"


class AwsIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_id: str
    region: str
    partition: str = "aws"

    @property
    def product_arn(self) -> str:
        return PRODUCT_ARN_TEMPLATE.format(partition=self.partition, region=self.region)


def partition_for_region(region: str) -> str:
    if region.startswith("cn-"):
        return "aws-cn"
    if region.startswith("us-gov-"):
        return "aws-us-gov"
    return "aws"


def resolve_region() -> str:
    """Return the boto3 session region, falling back to the configured one."""
    return boto3.session.Session().region_name or get_settings().region


def resolve_identity(sts_client=None, region: Optional[str] = None) -> AwsIdentity:
    """Look up the caller's account id via STS and pair it with the active region."""

    if region is None:
        region = resolve_region()

    try:
        if sts_client is None:
            sts_client = boto3.client("sts", region_name=region)
        identity = sts_client.get_caller_identity()
    except (ClientError, BotoCoreError, NoCredentialsError) as exc:
        raise IdentityResolutionError(f"failed to get caller identity: {exc}") from exc

    account_id = identity.get("Account")
    if not account_id:
        raise IdentityResolutionError("caller identity response did not include an account id")

    return AwsIdentity(account_id=account_id, region=region, partition=partition_for_region(region))


@lru_cache(maxsize=1)
def get_identity() -> AwsIdentity:
    """Return the process-wide identity, resolving it on first use.

    Failed lookups raise and are not cached, so the next request retries.
    """

    identity = resolve_identity()
    logger.info("Resolved AWS identity for account %s in %s", identity.account_id, identity.region)
    return identity
