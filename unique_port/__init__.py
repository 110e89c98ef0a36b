"""CloudFormation custom resource that hands out unique ports from DynamoDB."""
