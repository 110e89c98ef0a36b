"""Infrastructure for the Custom::UniquePort CloudFormation provider."""

from aws_cdk import (
    Duration,
    RemovalPolicy,
    Stack,
    CfnOutput,
    aws_dynamodb as dynamodb,
    aws_iam as iam,
    aws_lambda as lambda_,
    aws_sns as sns,
    aws_sns_subscriptions as subscriptions,
)
from constructs import Construct

ASSET_EXCLUDES = [
    "venv/*",
    ".venv/*",
    "__pycache__/*",
    "*.pyc",
    ".git/*",
    "tests/*",
    "infra/*",
    "build/*",
    "*.md",
]


class UniquePortStack(Stack):
    """SNS topic, Lambda function and DynamoDB tables for unique ports."""

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # =======================
        # DYNAMODB TABLES
        # =======================

        # One item per port set: {Key, Members}
        self.ports_table = dynamodb.Table(
            self,
            "PortsTable",
            partition_key=dynamodb.Attribute(
                name="Key", type=dynamodb.AttributeType.STRING
            ),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            removal_policy=RemovalPolicy.RETAIN,
        )

        # One item per held lock: {Name, Expires}
        self.lock_table = dynamodb.Table(
            self,
            "LockTable",
            partition_key=dynamodb.Attribute(
                name="Name", type=dynamodb.AttributeType.STRING
            ),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            removal_policy=RemovalPolicy.DESTROY,
        )

        # =======================
        # SNS TOPIC
        # =======================

        # CloudFormation custom resources use this topic as their ServiceToken
        self.topic = sns.Topic(
            self,
            "UniquePortTopic",
            display_name="Custom::UniquePort requests",
        )

        # =======================
        # LAMBDA - UNIQUE PORT
        # =======================

        # Dependencies (pydantic, pydantic-settings, requests)
        # Note: build this layer with `pip install -t build/layer/python .`
        self.deps_layer = lambda_.LayerVersion(
            self,
            "UniquePortDepsLayer",
            code=lambda_.Code.from_asset("../build/layer"),
            compatible_runtimes=[lambda_.Runtime.PYTHON_3_12],
            description="Python dependencies for the unique port executable",
        )

        role = iam.Role(
            self,
            "UniquePortLambdaRole",
            assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"),
            managed_policies=[
                iam.ManagedPolicy.from_aws_managed_policy_name(
                    "service-role/AWSLambdaBasicExecutionRole"
                )
            ],
        )

        self.ports_table.grant_read_write_data(role)
        self.lock_table.grant_read_write_data(role)

        self.function = lambda_.Function(
            self,
            "UniquePortFunction",
            runtime=lambda_.Runtime.PYTHON_3_12,
            handler="launcher.handler.external",
            code=lambda_.Code.from_asset("..", exclude=ASSET_EXCLUDES),
            role=role,
            timeout=Duration.minutes(2),
            memory_size=256,
            environment={
                "LAUNCHER_LOG_LEVEL": "INFO",
                "UNIQUE_PORT_LOCK_TIMEOUT_SEC": "30",
            },
            layers=[self.deps_layer],
        )

        self.topic.add_subscription(subscriptions.LambdaSubscription(self.function))

        # =======================
        # OUTPUTS
        # =======================

        CfnOutput(
            self,
            "ServiceToken",
            value=self.topic.topic_arn,
            description="ServiceToken for Custom::UniquePort resources",
        )

        CfnOutput(
            self,
            "PortsTableName",
            value=self.ports_table.table_name,
            description="DynamoTable property value",
        )

        CfnOutput(
            self,
            "LockTableName",
            value=self.lock_table.table_name,
            description="DynamoLockTable property value",
        )
