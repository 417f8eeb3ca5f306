"""Setup items for the infrastructure tests."""

import pytest
from aws_cdk import App, Environment, Stack
from aws_cdk import aws_ecs as ecs


@pytest.fixture()
def account():
    """Set the account number to test with."""
    return "1234567890"


@pytest.fixture()
def region():
    """Set the region to test with."""
    return "ap-northeast-1"


@pytest.fixture()
def env(account, region):
    """Set the environment to test with."""
    return Environment(account=account, region=region)


@pytest.fixture()
def app():
    """Return the app to test with."""
    return App()


@pytest.fixture()
def stack(app, env):
    """Return the stack to test with."""
    return Stack(app, "TestStack", env=env)


@pytest.fixture()
def image():
    """Return a container image that needs no local Docker build."""
    return ecs.ContainerImage.from_registry(
        "public.ecr.aws/docker/library/python:3.12-slim"
    )
