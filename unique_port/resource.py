"""CloudFormation request handling for ``Custom::UniquePort`` resources."""

import json
import logging
from typing import Dict, Optional, Tuple

import requests
from pydantic import ValidationError

from .config import settings
from .errors import InvalidPropertiesError, UniquePortError
from .models import RESOURCE_TYPE, SNS, CFRequest, CFResponse, UniquePortProperties
from .port_set import PORT_LOWER_BOUND, PORT_RANGE_LENGTH, DynamoPortSet

logger = logging.getLogger(__name__)

REQUIRED_PROPERTIES = [
    ("dynamo_region", "DynamoRegion"),
    ("dynamo_endpoint", "DynamoEndpoint"),
    ("dynamo_lock_table", "DynamoLockTable"),
    ("dynamo_table", "DynamoTable"),
    ("key", "Key"),
]


def handle_formation(sns: SNS) -> None:
    """Handle the SNS notification CloudFormation published for a request."""
    request = CFRequest.model_validate_json(sns.message)
    handle_request(request)


def handle_request(request: CFRequest) -> CFResponse:
    """
    Process one request and upload the response to CloudFormation.

    Failures while handling the resource are reported to CloudFormation as a
    FAILED status. Only a failure to deliver the response itself propagates.

    Returns:
        The response that was sent
    """
    logger.info("got request %r", request)

    physical = request.physical_resource_id
    outputs: Optional[Dict[str, str]] = None
    error: Optional[Exception] = None

    if request.resource_type != RESOURCE_TYPE:
        if request.request_type == "Delete":
            logger.info(
                "treating delete of unknown resource type %s as a no-op",
                request.resource_type,
            )
        else:
            error = UniquePortError(f"unsupported resource type: {request.resource_type}")
    else:
        try:
            physical, outputs = handle_unique_port(request)
        except Exception as e:
            logger.error("Error handling unique port request", exc_info=True)
            error = e

    response = CFResponse(
        request_id=request.request_id,
        stack_id=request.stack_id,
        logical_resource_id=request.logical_resource_id,
        physical_resource_id=physical,
        status="SUCCESS",
        data=outputs,
    )

    if error is not None:
        logger.error("error: %s", error)
        response.reason = str(error)
        response.status = "FAILED"

    put_response(request.response_url, response)
    return response


def _parse_properties(request: CFRequest) -> UniquePortProperties:
    try:
        props = UniquePortProperties.model_validate(request.resource_properties)
    except ValidationError as e:
        raise InvalidPropertiesError(f"invalid resource properties: {e}") from e

    for field, name in REQUIRED_PROPERTIES:
        if not getattr(props, field):
            raise InvalidPropertiesError(f"Must provide '{name}'")
    return props


def handle_unique_port(request: CFRequest) -> Tuple[str, Optional[Dict[str, str]]]:
    """
    Allocate or release a port for a ``Custom::UniquePort`` resource.

    Returns:
        (physical resource id, response data)
    """
    props = _parse_properties(request)

    port_set = DynamoPortSet(
        region=props.dynamo_region,
        endpoint=props.dynamo_endpoint,
        lock_table=props.dynamo_lock_table,
        table=props.dynamo_table,
        key=props.key,
        timeout_sec=settings.lock_timeout_sec,
        lock_ttl_sec=settings.lock_ttl_sec,
        lock_poll_sec=settings.lock_poll_sec,
    )

    if request.request_type == "Create":
        logger.info("GETTING UNIQUE PORT")
        port = str(port_set.pop())
        return f"{props.key}-{port}", {"Port": port}

    if request.request_type == "Update":
        logger.info("UPDATING UNIQUE PORT")
        raise UniquePortError("cannot update")

    if request.request_type == "Delete":
        logger.info("DELETING UNIQUE PORT")
        physical = request.physical_resource_id
        port = physical.rsplit("-", 1)[-1]
        logger.info("parsed port=%s from resource id=%s", port, physical)
        if not port.isdecimal():
            return physical, None
        if not PORT_LOWER_BOUND <= int(port) < PORT_LOWER_BOUND + PORT_RANGE_LENGTH:
            logger.info("port %s is outside the managed range, nothing to return", port)
            return physical, None
        port_set.add(int(port))
        return physical, None

    raise UniquePortError(f"unknown RequestType: {request.request_type}")


def put_response(url: str, response: CFResponse) -> None:
    """Upload the response document to CloudFormation's pre-signed URL."""
    logger.info("responding with %r", response)

    if len(url.split("/", 3)) != 4:
        raise ValueError(f"unexpected response url: {url}")

    body = json.dumps(response.model_dump(by_alias=True))
    resp = requests.put(
        url,
        data=body,
        headers={"Content-Type": "", "Content-Length": str(len(body))},
        timeout=settings.response_timeout_sec,
    )
    logger.info("response %d: %s", resp.status_code, resp.text)
