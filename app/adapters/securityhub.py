"""Batch submission of findings to AWS Security Hub."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, Field

from app.adapters.identity import resolve_region
from app.errors import ExportError
from app.models import Finding

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 100


class ExportResult(BaseModel):
    """Aggregated outcome of all batch submissions for one request."""

    submitted: int = 0
    batches: int = 0
    success_count: int = 0
    failed_count: int = 0
    failed_findings: List[Dict[str, Any]] = Field(default_factory=list)


def chunk_findings(findings: Sequence[Finding], size: int = MAX_BATCH_SIZE) -> List[List[Finding]]:
    """Split findings into contiguous, order-preserving chunks of at most ``size``."""

    if size < 1 or size > MAX_BATCH_SIZE:
        raise ValueError(f"Batch size must be between 1 and {MAX_BATCH_SIZE}, got {size}")
    return [list(findings[start : start + size]) for start in range(0, len(findings), size)]


def import_findings(
    findings: Sequence[Finding],
    *,
    client=None,
    batch_size: int = MAX_BATCH_SIZE,
    region: Optional[str] = None,
) -> ExportResult:
    """Submit findings batch by batch, stopping at the first failed call.

    Batches already accepted before a failure stay in Security Hub; the raised
    ``ExportError`` records how many findings were submitted before it.
    """

    result = ExportResult()
    chunks = chunk_findings(findings, batch_size)
    if not chunks:
        logger.debug("No findings to import")
        return result

    if client is None:
        try:
            client = boto3.client("securityhub", region_name=region or resolve_region())
        except BotoCoreError as exc:
            logger.error("Unable to create Security Hub client: %s", exc)
            raise ExportError(f"error creating Security Hub client: {exc}") from exc

    for index, batch in enumerate(chunks):
        try:
            response = client.batch_import_findings(Findings=[finding.to_asff() for finding in batch])
        except (ClientError, BotoCoreError) as exc:
            logger.error(
                "Batch %d/%d failed after %d findings were submitted: %s",
                index + 1,
                len(chunks),
                result.submitted,
                exc,
            )
            raise ExportError(
                f"error importing findings to Security Hub: {exc}",
                delivered=result.submitted,
            ) from exc

        result.batches += 1
        result.submitted += len(batch)
        result.success_count += response.get("SuccessCount", 0)
        failed = response.get("FailedFindings", [])
        result.failed_count += response.get("FailedCount", len(failed))
        if failed:
            result.failed_findings.extend(failed)
            for item in failed:
                logger.warning(
                    "Security Hub rejected finding %s: %s %s",
                    item.get("Id"),
                    item.get("ErrorCode"),
                    item.get("ErrorMessage"),
                )

    logger.info("%d Findings imported to Security Hub", result.submitted)
    return result
