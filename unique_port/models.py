"""Pydantic models for the SNS notification and CloudFormation messages."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

RESOURCE_TYPE = "Custom::UniquePort"


class _PascalModel(BaseModel):
    """Model whose wire names are PascalCase, as AWS sends them."""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
    )


class SNS(_PascalModel):
    """SNS notification published by CloudFormation."""

    message_id: str = ""
    type: str = ""
    topic_arn: str = ""
    subject: Optional[str] = None
    message: str = ""
    timestamp: str = ""


class Record(_PascalModel):
    """One record of an SNS-triggered event."""

    event_source: str = ""
    event_version: str = ""
    event_subscription_arn: str = ""
    sns: SNS


class Message(_PascalModel):
    """The event the Lambda handler passes on the command line."""

    records: List[Record] = Field(default_factory=list)


class CFRequest(_PascalModel):
    """CloudFormation custom resource request."""

    resource_type: str = ""
    request_type: str = ""

    request_id: str = ""
    stack_id: str = ""
    logical_resource_id: str = ""
    physical_resource_id: str = ""
    response_url: str = Field(default="", alias="ResponseURL")

    resource_properties: Dict[str, Any] = Field(default_factory=dict)


class CFResponse(_PascalModel):
    """Response uploaded to CloudFormation's pre-signed URL."""

    request_id: str
    stack_id: str
    logical_resource_id: str

    data: Optional[Dict[str, str]] = None
    physical_resource_id: str = ""
    reason: str = ""
    status: str = "SUCCESS"


class UniquePortProperties(_PascalModel):
    """ResourceProperties of a ``Custom::UniquePort`` resource."""

    dynamo_region: str = ""
    dynamo_endpoint: str = ""
    dynamo_lock_table: str = ""
    dynamo_table: str = ""
    key: str = ""
    initial_port_ranges: List[str] = Field(default_factory=list)
