#!/usr/bin/env python3
"""AWS CDK app for the unique port custom resource."""

import os

import aws_cdk as cdk

from stacks.unique_port_stack import UniquePortStack

app = cdk.App()

# Define the deployment environment.
# Set CDK_DEFAULT_ACCOUNT and CDK_DEFAULT_REGION in your shell,
# or run `aws login` and CDK will resolve them automatically.
env = cdk.Environment(
    account=os.environ.get("CDK_DEFAULT_ACCOUNT"),
    region=os.environ.get("CDK_DEFAULT_REGION", "us-east-1"),
)

UniquePortStack(
    app,
    "UniquePortStack",
    env=env,
    description="Custom::UniquePort provider - SNS topic, Lambda and DynamoDB tables",
)

app.synth()
