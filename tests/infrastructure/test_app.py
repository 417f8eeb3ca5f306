"""Test the CDK entry point."""

import json
import runpy
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.parent.parent
APP_PATH = ROOT / "app.py"


@pytest.fixture()
def cdk_context():
    """Return the context section of cdk.json."""
    with open(ROOT / "cdk.json") as f:
        return json.load(f)["context"]


@pytest.fixture()
def run_app(monkeypatch, tmp_path):
    """Run app.py with the given context, writing the assembly to tmp_path."""

    def _run(context):
        monkeypatch.setenv("CDK_CONTEXT_JSON", json.dumps(context))
        monkeypatch.setenv("CDK_OUTDIR", str(tmp_path))
        return runpy.run_path(str(APP_PATH), run_name="__main__")

    return _run


def test_missing_account_section(run_app):
    """An unknown account name is reported by name."""
    with pytest.raises(KeyError, match="nope"):
        run_app({"account_name": "nope"})


def test_dev_synthesizes(run_app, cdk_context, monkeypatch, tmp_path):
    """The default dev configuration synthesizes the VpcStack template."""
    monkeypatch.setenv("CDK_DEFAULT_ACCOUNT", "111111111111")
    result = run_app(cdk_context)

    assert result["account_name"] == "dev"
    # No account in cdk.json, so the current profile's account is used
    assert result["env"].account == "111111111111"
    assert result["env"].region == "ap-northeast-1"

    with open(tmp_path / "VpcStack.template.json") as f:
        template = json.load(f)
    resource_types = {
        resource["Type"] for resource in template["Resources"].values()
    }
    assert "AWS::ECS::Service" in resource_types
    assert "AWS::ElasticLoadBalancingV2::LoadBalancer" in resource_types


def test_region_defaults(run_app, monkeypatch):
    """A section without a region deploys to ap-northeast-1."""
    monkeypatch.setenv("CDK_DEFAULT_ACCOUNT", "111111111111")
    result = run_app({"account_name": "bare", "bare": {"envname": "bare"}})

    assert result["env"].region == "ap-northeast-1"
