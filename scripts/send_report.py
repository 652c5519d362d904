#!/usr/bin/env python3
"""Map a Trivy report file locally or deliver it to a running webhook."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import httpx

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.adapters.identity import AwsIdentity, partition_for_region, resolve_identity
from app.dispatch import read_envelope
from app.errors import UnknownReportKindError, WebhookError
from app.ingest import get_handler


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("report", type=Path, help="Path to a Trivy-operator report in JSON")
    parser.add_argument(
        "--url",
        default=None,
        help="Webhook URL to POST the report to (e.g. http://localhost:8080/trivy-webhook)",
    )
    parser.add_argument(
        "--account",
        default=None,
        help="Account id to use for a dry run instead of calling STS",
    )
    parser.add_argument("--region", default="us-east-1", help="Region to use with --account")
    return parser.parse_args()


def dry_run(body: bytes, account: str | None, region: str) -> int:
    envelope = read_envelope(body)
    handler = get_handler(envelope.kind)
    if handler is None:
        raise UnknownReportKindError(envelope.kind)

    report = handler.decoder(body)
    identity = None
    if handler.requires_identity:
        if account:
            identity = AwsIdentity(account_id=account, region=region, partition=partition_for_region(region))
        else:
            identity = resolve_identity()
    findings = handler.convert(report, identity)

    json.dump([finding.to_asff() for finding in findings], sys.stdout, indent=2)
    sys.stdout.write("\n")
    print(f"{len(findings)} findings mapped from {handler.kind.value} {report.name}", file=sys.stderr)
    return 0


def post(body: bytes, url: str) -> int:
    response = httpx.post(url, content=body, headers={"Content-Type": "application/json"}, timeout=30.0)
    print(f"{response.status_code}: {response.text}")
    return 0 if response.is_success else 1


def main() -> None:
    args = parse_args()
    body = args.report.read_bytes()

    if args.url:
        sys.exit(post(body, args.url))

    try:
        sys.exit(dry_run(body, args.account, args.region))
    except WebhookError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
