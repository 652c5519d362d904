"""Routing of an incoming webhook body through decode, mapping and export."""

from __future__ import annotations

import json
import logging
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from app.adapters.identity import get_identity
from app.adapters.securityhub import MAX_BATCH_SIZE, ExportResult, import_findings
from app.errors import EmptyBodyError, InvalidJSONError, UnknownReportKindError, WebhookError
from app.ingest.registry import get_handler
from app.models import Finding
from app.reports.schema import WebhookEnvelope
from app.settings import FeatureFlags

logger = logging.getLogger(__name__)


class DispatchResult(BaseModel):
    kind: str
    report_name: str
    enabled: bool
    findings: List[Finding] = Field(default_factory=list)
    export: ExportResult = Field(default_factory=ExportResult)


def read_envelope(body: bytes) -> WebhookEnvelope:
    if not body:
        logger.warning("Empty request body")
        raise EmptyBodyError()

    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Error decoding JSON: %s", exc)
        raise InvalidJSONError() from exc

    if not isinstance(payload, dict):
        logger.warning("Error decoding JSON: expected an object, got %s", type(payload).__name__)
        raise InvalidJSONError()

    try:
        return WebhookEnvelope.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Error decoding JSON: %s", exc)
        raise InvalidJSONError() from exc


def process_report(
    body: bytes,
    flags: FeatureFlags,
    *,
    batch_size: int = MAX_BATCH_SIZE,
    region: Optional[str] = None,
) -> DispatchResult:
    """Decode, map and export one webhook body.

    Disabled kinds are still decoded, so their names appear in the logs, but
    produce no findings. Export runs even with zero findings, which is a no-op.
    """

    envelope = read_envelope(body)
    handler = get_handler(envelope.kind)
    if handler is None:
        logger.warning("unknown report type: %s", envelope.kind)
        raise UnknownReportKindError(envelope.kind)

    kind = handler.kind.value
    report_name = ""
    try:
        report = handler.decoder(body)
        report_name = report.name
        enabled = handler.enabled(flags)
        findings: List[Finding] = []
        identity = None
        if enabled:
            identity = get_identity() if handler.requires_identity else None
            findings = handler.convert(report, identity)
        else:
            logger.info("%s processing is disabled, skipping report %s", kind, report_name)
    except WebhookError as exc:
        logger.error("Error processing %s %s: %s", kind, report_name or "<undecoded>", exc)
        raise

    try:
        export = import_findings(
            findings,
            batch_size=batch_size,
            region=region or (identity.region if identity else None),
        )
    except WebhookError as exc:
        logger.error("Error importing findings from %s %s: %s", kind, report_name, exc)
        raise

    return DispatchResult(
        kind=kind,
        report_name=report_name,
        enabled=enabled,
        findings=findings,
        export=export,
    )
