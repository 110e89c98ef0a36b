"""DynamoDB-backed distributed set of free ports."""

import logging
from typing import Optional

import boto3

from .errors import InvalidPropertiesError, PortsExhaustedError
from .lock import DynamoLock

logger = logging.getLogger(__name__)

PORT_LOWER_BOUND = 10000
PORT_RANGE_LENGTH = 50000

_BITMAP_BYTES = (PORT_RANGE_LENGTH + 7) // 8
_ALL_FREE = (1 << PORT_RANGE_LENGTH) - 1


def encode_members(members: int) -> bytes:
    """Serialize a membership bitmap (bit i set = port LOWER_BOUND+i free)."""
    return members.to_bytes(_BITMAP_BYTES, "little")


def decode_members(blob: bytes) -> int:
    """Inverse of encode_members."""
    return int.from_bytes(blob, "little") & _ALL_FREE


class DynamoPortSet:
    """
    Set of free ports stored as a single DynamoDB item.

    The item is ``{"Key": S, "Members": B}`` and starts out with every port
    in ``[PORT_LOWER_BOUND, PORT_LOWER_BOUND + PORT_RANGE_LENGTH)`` free.
    Reads and writes happen under a DynamoLock named ``<table>-<key>``.
    """

    def __init__(
        self,
        region: str,
        endpoint: str,
        lock_table: str,
        table: str,
        key: str,
        timeout_sec: float = 30.0,
        lock_ttl_sec: float = 15.0,
        lock_poll_sec: float = 1.0,
        client=None,
    ):
        """
        Initialize port set.

        Args:
            region: AWS region of both tables
            endpoint: DynamoDB endpoint URL
            lock_table: Table holding the lock items
            table: Table holding the set item
            key: Hash key of the set item
            timeout_sec: Maximum wait for the lock
            lock_ttl_sec: Lifetime of an acquired lock
            lock_poll_sec: Delay between lock attempts
            client: Pre-built DynamoDB client (built from region/endpoint if None)
        """
        self.key = key
        self.table = table
        self.client = client or boto3.client(
            "dynamodb", region_name=region, endpoint_url=endpoint
        )
        self.lock = DynamoLock(
            self.client,
            lock_table,
            f"{table}-{key}",
            ttl_sec=lock_ttl_sec,
            timeout_sec=timeout_sec,
            poll_sec=lock_poll_sec,
        )

    def _get_members(self) -> Optional[int]:
        out = self.client.get_item(
            TableName=self.table,
            Key={"Key": {"S": self.key}},
            ConsistentRead=True,
        )
        item = out.get("Item")
        if not item:
            return None

        if "Members" not in item or "B" not in item["Members"]:
            raise ValueError(f"item '{self.key}' has no binary Members attribute")
        return decode_members(item["Members"]["B"])

    def _put_members(self, members: int) -> None:
        self.client.put_item(
            TableName=self.table,
            Item={
                "Key": {"S": self.key},
                "Members": {"B": encode_members(members)},
            },
        )

    def _find_or_create(self) -> int:
        members = self._get_members()
        if members is None:
            logger.info(f"saving initial item '{self.key}'")
            self._put_members(_ALL_FREE)
            logger.info("saved initial item")
            members = _ALL_FREE

        logger.info(f"got item '{self.key}' with {bin(members).count('1')} ports")
        return members

    def pop(self) -> int:
        """
        Remove the lowest free port from the set.

        Returns:
            The port number

        Raises:
            PortsExhaustedError: No free port is left
            LockTimeoutError: The set is locked by someone else for too long
        """
        with self.lock:
            members = self._find_or_create()
            if not members:
                raise PortsExhaustedError("No ports remaining")

            index = (members & -members).bit_length() - 1
            self._put_members(members & ~(1 << index))

        port = PORT_LOWER_BOUND + index
        logger.info(f"got port {port}")
        return port

    def add(self, port: int) -> None:
        """Return a port to the set."""
        index = port - PORT_LOWER_BOUND
        if not 0 <= index < PORT_RANGE_LENGTH:
            raise InvalidPropertiesError(f"port {port} is outside the managed range")

        with self.lock:
            members = self._find_or_create()
            self._put_members(members | (1 << index))

        logger.info(f"returned port {port}")

    def __contains__(self, port: int) -> bool:
        members = self._get_members()
        if members is None:
            members = _ALL_FREE
        index = port - PORT_LOWER_BOUND
        return 0 <= index < PORT_RANGE_LENGTH and bool(members >> index & 1)
