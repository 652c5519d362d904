"""Pairing of each report kind with its decoder, mapper and feature flag."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from app.adapters.identity import AwsIdentity
from app.models import Finding
from app.reports.decoder import (
    decode_cluster_compliance_report,
    decode_config_audit_report,
    decode_infra_assessment_report,
    decode_vulnerability_report,
)
from app.reports.schema import ReportKind, TrivyReport
from app.settings import FeatureFlags

from .normalizer import (
    map_cluster_compliance_report,
    map_config_audit_report,
    map_infra_assessment_report,
    map_vulnerability_report,
)

DecodeFunc = Callable[[bytes], TrivyReport]
MapFunc = Callable[..., List[Finding]]


@dataclass(frozen=True)
class ReportHandler:
    kind: ReportKind
    decoder: DecodeFunc
    mapper: MapFunc
    flag: str
    requires_identity: bool = True

    def enabled(self, flags: FeatureFlags) -> bool:
        return bool(getattr(flags, self.flag))

    def convert(self, report: TrivyReport, identity: Optional[AwsIdentity]) -> List[Finding]:
        return self.mapper(report, identity)


_HANDLERS: Dict[ReportKind, ReportHandler] = {}


def register_handler(handler: ReportHandler) -> ReportHandler:
    if handler.flag not in FeatureFlags.model_fields:
        raise ValueError(f"Unknown feature flag '{handler.flag}'")
    if handler.kind in _HANDLERS:
        raise ValueError(f"Handler already registered for '{handler.kind.value}'")
    _HANDLERS[handler.kind] = handler
    return handler


def get_handler(kind: str) -> Optional[ReportHandler]:
    try:
        return _HANDLERS.get(ReportKind(kind))
    except ValueError:
        return None


def available_kinds() -> List[str]:
    """Return sorted report kinds with a registered handler."""

    return sorted(kind.value for kind in _HANDLERS)


register_handler(
    ReportHandler(
        kind=ReportKind.CONFIG_AUDIT,
        decoder=decode_config_audit_report,
        mapper=map_config_audit_report,
        flag="config_audit",
    )
)
register_handler(
    ReportHandler(
        kind=ReportKind.INFRA_ASSESSMENT,
        decoder=decode_infra_assessment_report,
        mapper=map_infra_assessment_report,
        flag="infra_assessment",
        requires_identity=False,
    )
)
register_handler(
    ReportHandler(
        kind=ReportKind.CLUSTER_COMPLIANCE,
        decoder=decode_cluster_compliance_report,
        mapper=map_cluster_compliance_report,
        flag="cluster_compliance",
        requires_identity=False,
    )
)
register_handler(
    ReportHandler(
        kind=ReportKind.VULNERABILITY,
        decoder=decode_vulnerability_report,
        mapper=map_vulnerability_report,
        flag="vulnerability",
    )
)
