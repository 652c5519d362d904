import json
import sys
from pathlib import Path

import boto3
import pytest
from botocore.stub import ANY, Stubber

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.adapters.identity import AwsIdentity, get_identity
from app.settings import get_settings


@pytest.fixture(autouse=True)
def configure_test_env(monkeypatch):
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    for name in (
        "CONFIG_AUDIT_ENABLE",
        "INFRA_ASSESSMENT_ENABLE",
        "CLUSTER_COMPLIANCE_ENABLE",
        "VULNERABILITY_ENABLE",
        "BATCH_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_identity.cache_clear()
    yield
    get_settings.cache_clear()
    get_identity.cache_clear()


@pytest.fixture
def no_session_region(monkeypatch, tmp_path):
    monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "missing-config"))
    monkeypatch.setenv("REGION", "eu-west-1")
    get_settings.cache_clear()
    assert boto3.session.Session().region_name is None


@pytest.fixture
def stubbed_boto3_client(monkeypatch):
    """Hand out real clients wrapped in a Stubber, answering STS and Security Hub calls."""
    import_responses = []
    created = []
    real_client = boto3.client

    def client(service_name, *args, **kwargs):
        instance = real_client(service_name, *args, **kwargs)
        stub = Stubber(instance)
        if service_name == "sts":
            stub.add_response(
                "get_caller_identity",
                {"UserId": "AIDAEXAMPLE", "Account": "123456789012", "Arn": "arn:aws:iam::123456789012:user/trivy"},
                {},
            )
        elif service_name == "securityhub":
            for response in import_responses:
                stub.add_response("batch_import_findings", response, {"Findings": ANY})
        stub.activate()
        created.append({"service": service_name, "region": instance.meta.region_name, "stub": stub})
        return instance

    monkeypatch.setattr(boto3, "client", client)
    yield import_responses, created
    for record in created:
        record["stub"].assert_no_pending_responses()
        record["stub"].deactivate()


@pytest.fixture
def identity():
    return AwsIdentity(account_id="123456789012", region="us-east-1")


@pytest.fixture
def config_audit_builder():
    def _builder(checks=None, owners=None, name="replicaset-nginx-6d4cf56db6"):
        if owners is None:
            owners = [{"apiVersion": "apps/v1", "kind": "ReplicaSet", "name": "nginx-6d4cf56db6"}]
        if checks is None:
            checks = [
                {
                    "checkID": "KSV014",
                    "title": "Root file system is not read-only",
                    "description": "An immutable root file system prevents applications from writing to their local disk.",
                    "severity": "HIGH",
                    "category": "Kubernetes Security Check",
                    "messages": ["Container 'nginx' should set 'securityContext.readOnlyRootFilesystem' to true"],
                    "remediation": "Change 'containers[].securityContext.readOnlyRootFilesystem' to 'true'.",
                    "success": False,
                }
            ]
        return {
            "apiVersion": "aquasecurity.github.io/v1alpha1",
            "kind": "ConfigAuditReport",
            "metadata": {"name": name, "namespace": "default", "ownerReferences": owners},
            "report": {
                "scanner": {"name": "Trivy", "vendor": "Aqua Security", "version": "0.50.1"},
                "summary": {"criticalCount": 0, "highCount": len(checks), "lowCount": 0, "mediumCount": 0},
                "checks": checks,
            },
        }

    return _builder


@pytest.fixture
def vulnerability_builder():
    def _builder(vulnerabilities=None, digest="", tag="1.25.3", container="nginx", name="replicaset-nginx-nginx"):
        if vulnerabilities is None:
            vulnerabilities = [
                {
                    "vulnerabilityID": "CVE-2023-0001",
                    "resource": "openssl",
                    "installedVersion": "3.0.7-r0",
                    "fixedVersion": "3.0.8-r0",
                    "severity": "CRITICAL",
                    "title": "openssl: use-after-free",
                    "description": "A use-after-free in openssl.",
                    "primaryLink": "https://avd.aquasec.com/nvd/cve-2023-0001",
                    "score": 9.8,
                }
            ]
        return {
            "apiVersion": "aquasecurity.github.io/v1alpha1",
            "kind": "VulnerabilityReport",
            "metadata": {
                "name": name,
                "namespace": "default",
                "labels": {"trivy-operator.container.name": container},
            },
            "report": {
                "registry": {"server": "index.docker.io"},
                "artifact": {"repository": "library/nginx", "digest": digest, "tag": tag},
                "scanner": {"name": "Trivy", "vendor": "Aqua Security", "version": "0.50.1"},
                "vulnerabilities": vulnerabilities,
            },
        }

    return _builder


@pytest.fixture
def as_body():
    def _encode(document) -> bytes:
        return json.dumps(document).encode("utf-8")

    return _encode
