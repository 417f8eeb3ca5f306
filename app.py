#!/usr/bin/env python3
"""Serves as the deployment app.

The app defaults to the dev configuration via a default `account_name`
value in `cdk.json`.

To deploy another configuration, specify `--context account_name=<name>`,
e.g. `--context account_name=ec2` for the container-instance-backed service.
"""

import os

from aws_cdk import App, Environment

from hello_ecs.utils.stackbuilder import build_hello

app = App()

# Grab values from context
# account_name is the section we are looking for parameters in
# within the cdk.json file:
#    "account_name": {"region": "ap-northeast-1", "envname": "dev", ...}
# This can be overridden via the command line: `--context account_name=ec2`
account_name = app.node.get_context("account_name")

account_config = app.node.try_get_context(account_name)
if account_config is None:
    raise KeyError(f"No [{account_name}] section found in the cdk.json context.")

# The account number is optional in cdk.json, fall back to the current profile
account = account_config.get("account", os.environ.get("CDK_DEFAULT_ACCOUNT"))
region = account_config.get("region", "ap-northeast-1")

env = Environment(account=account, region=region)
print(f"Using the {account_name} configuration [{account}] in the {region} region.")

build_hello(app, env=env, account_config=account_config)

app.synth()
