"""Distributed mutex backed by a DynamoDB lock table."""

import logging
import time
from uuid import uuid4

from botocore.exceptions import ClientError

from .errors import LockTimeoutError

logger = logging.getLogger(__name__)


class DynamoLock:
    """
    Mutex stored as one item in a lock table whose hash key is ``Name``.

    Holding the lock means owning the item. Each item records its owner and
    when it expires, so a holder that died without unlocking is taken over
    once its TTL has passed, and a late release leaves the new owner alone.
    """

    def __init__(
        self,
        client,
        table_name: str,
        name: str,
        ttl_sec: float = 15.0,
        timeout_sec: float = 30.0,
        poll_sec: float = 1.0,
    ):
        """
        Initialize lock.

        Args:
            client: boto3 DynamoDB client
            table_name: Lock table name
            name: Lock item name
            ttl_sec: How long an acquired lock stays valid
            timeout_sec: How long acquire() waits before giving up
            poll_sec: Delay between acquisition attempts
        """
        self.client = client
        self.table_name = table_name
        self.name = name
        self.ttl_sec = ttl_sec
        self.timeout_sec = timeout_sec
        self.poll_sec = poll_sec
        self.owner = uuid4().hex

    def _try_acquire(self) -> bool:
        now = time.time()
        try:
            self.client.put_item(
                TableName=self.table_name,
                Item={
                    "Name": {"S": self.name},
                    "Expires": {"N": str(int((now + self.ttl_sec) * 1000))},
                    "Owner": {"S": self.owner},
                },
                ConditionExpression="attribute_not_exists(#name) OR #expires < :now",
                ExpressionAttributeNames={"#name": "Name", "#expires": "Expires"},
                ExpressionAttributeValues={":now": {"N": str(int(now * 1000))}},
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                return False
            raise
        return True

    def acquire(self) -> None:
        """Block until the lock is held, or raise LockTimeoutError."""
        logger.info("waiting for lock")
        deadline = time.monotonic() + self.timeout_sec

        while not self._try_acquire():
            if time.monotonic() + self.poll_sec > deadline:
                raise LockTimeoutError("timed out waiting for dynamo lock")
            time.sleep(self.poll_sec)

        logger.info("lock acquired")

    def release(self) -> None:
        """Delete the lock item, unless another holder has taken it over."""
        try:
            self.client.delete_item(
                TableName=self.table_name,
                Key={"Name": {"S": self.name}},
                ConditionExpression="#owner = :me",
                ExpressionAttributeNames={"#owner": "Owner"},
                ExpressionAttributeValues={":me": {"S": self.owner}},
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") != "ConditionalCheckFailedException":
                raise
            logger.warning("lock %s expired and was taken over before release", self.name)

    def __enter__(self) -> "DynamoLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
