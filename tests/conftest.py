"""Shared fixtures."""

import os
import stat
import sys
from pathlib import Path

import boto3
import pytest
from moto import mock_aws

REGION = "us-east-1"
ENDPOINT = "https://dynamodb.us-east-1.amazonaws.com"
LOCK_TABLE = "unique-port-locks"
PORTS_TABLE = "unique-port-sets"


class FakeLambdaContext:
    """Stand-in for the context object the Lambda runtime passes in."""

    def __init__(self):
        self.function_name = "unique-port"
        self.function_version = "$LATEST"
        self.invoked_function_arn = (
            "arn:aws:lambda:us-east-1:123456789012:function:unique-port"
        )
        self.memory_limit_in_mb = 256
        self.aws_request_id = "c6af9ac6-7b61-11e6-9a41-93e812345678"
        self.log_group_name = "/aws/lambda/unique-port"
        self.log_stream_name = "2026/10/16/[$LATEST]abcdef"
        self.identity = None
        self.client_context = None


@pytest.fixture
def lambda_context():
    """Fake Lambda context."""
    return FakeLambdaContext()


@pytest.fixture
def make_executable(tmp_path):
    """
    Build a stand-in for ./uniqueport.

    The script records its arguments in ``argv.json`` next to itself,
    optionally writes to stdout and stderr, optionally sleeps, then exits
    with the requested status. Each ``directory`` gets its own script.
    """

    def _make(
        exit_code: int = 0,
        sleep_sec: float = 0.0,
        stdout: str = "",
        stderr: str = "",
        directory: str = "bin",
    ) -> Path:
        bin_dir = tmp_path / directory
        bin_dir.mkdir(exist_ok=True)
        argv_file = bin_dir / "argv.json"
        script = bin_dir / "uniqueport"
        script.write_text(
            f"#!{sys.executable}\n"
            "import json, sys, time\n"
            f"open({str(argv_file)!r}, 'w').write(json.dumps(sys.argv[1:]))\n"
            f"sys.stdout.write({stdout!r})\n"
            f"sys.stderr.write({stderr!r})\n"
            "sys.stdout.flush()\n"
            "sys.stderr.flush()\n"
            f"time.sleep({sleep_sec!r})\n"
            f"sys.exit({exit_code!r})\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
    os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
    os.environ['AWS_SECURITY_TOKEN'] = 'testing'
    os.environ['AWS_SESSION_TOKEN'] = 'testing'
    os.environ['AWS_DEFAULT_REGION'] = 'us-east-1'


@pytest.fixture
def dynamodb_tables(aws_credentials):
    """Create mock lock and port set tables."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name=REGION, endpoint_url=ENDPOINT)
        client.create_table(
            TableName=LOCK_TABLE,
            KeySchema=[{"AttributeName": "Name", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "Name", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        client.create_table(
            TableName=PORTS_TABLE,
            KeySchema=[{"AttributeName": "Key", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "Key", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        yield client
