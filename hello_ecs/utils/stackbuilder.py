"""Module with helper functions for creating standard sets of stacks."""

from pathlib import Path

from aws_cdk import App, Environment, Stack
from aws_cdk import aws_ecr_assets as ecr_assets
from aws_cdk import aws_ecs as ecs

from hello_ecs.constructs import hello_service_construct, networking_construct

CONTAINER_DIRECTORY = Path(__file__).parent.parent / "container"


def build_hello(
    scope: App,
    env: Environment,
    account_config: dict,
) -> Stack:
    """Build the VPC and the load balanced hello world service.

    Parameters
    ----------
    scope : Construct
        Parent construct.
    env : Environment
        Account and region
    account_config : dict
        Account configuration (envname and the networking/compute options)

    Returns
    -------
    Stack
        The stack holding every resource.

    """
    stack = Stack(scope, "VpcStack", env=env)

    networking = networking_construct.NetworkingConstruct(
        stack,
        "Networking",
        region=env.region,
        availability_zones=account_config.get("availability_zones", ["a", "c"]),
        nat_gateway=account_config.get("nat_gateway", True),
    )

    # Built from the Dockerfile during `cdk deploy` and pushed to the
    # CDK bootstrap repository.
    image_asset = ecr_assets.DockerImageAsset(
        stack,
        "DockerImageAsset",
        directory=str(CONTAINER_DIRECTORY),
        platform=ecr_assets.Platform.LINUX_AMD64,
    )

    hello_service_construct.HelloService(
        stack,
        "HelloService",
        networking=networking,
        image=ecs.ContainerImage.from_docker_image_asset(image_asset),
        envname=account_config["envname"],
        capacity=account_config.get("capacity", "FARGATE"),
    )

    return stack
