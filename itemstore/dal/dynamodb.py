"""
DynamoDB storage engine.
"""

import asyncio
import json
import re
from decimal import Decimal
from typing import Any

import boto3
from aws_lambda_powertools import Logger, Tracer
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from itemstore.constants import DEFAULT_REGION, TABLE_CREATING_STATUS, TABLE_POLL_INTERVAL_SECONDS
from itemstore.dal.interface import IStorageEngine
from itemstore.exceptions import (
    ExistingTableError,
    MissingKeyError,
    MissingTableError,
    TableCreationTimeoutError,
)
from itemstore.models.table import Item, KeySchema, TableDescription

logger = Logger()
tracer = Tracer()

_MISSING_KEY_PATTERN = re.compile(r"Missing the key (\S+)")


def _to_dynamo(item: Item) -> Item:
    # DynamoDB rejects floats, numbers have to be sent as Decimal
    converted: Item = json.loads(json.dumps(item), parse_float=Decimal)
    return converted


def _from_dynamo(value: Any) -> Any:
    # A fractional part (even ".0") marks a float. DynamoDB itself normalises
    # stored numbers, so 2.0 read back from the service is returned as 2.
    if isinstance(value, Decimal):
        return float(value) if value.as_tuple().exponent < 0 else int(value)
    if isinstance(value, dict):
        return {k: _from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_dynamo(v) for v in value]
    return value


class DynamoDBStorageEngine(IStorageEngine):
    """Engine storing each table as a DynamoDB table with string key attributes."""

    def __init__(
        self,
        access_key_id: str,
        secret_access_key: str,
        region: str = DEFAULT_REGION,
        poll_interval: float = TABLE_POLL_INTERVAL_SECONDS,
        max_wait_attempts: int | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            access_key_id: AWS access key id
            secret_access_key: AWS secret access key
            region: AWS region
            poll_interval: Seconds between table status checks after creation
            max_wait_attempts: Status checks allowed before giving up, unbounded when None
        """
        session = boto3.Session(
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region,
        )
        self.client = session.client("dynamodb")
        self.dynamodb = session.resource("dynamodb")
        self.region = region
        self.poll_interval = poll_interval
        self.max_wait_attempts = max_wait_attempts

    def _handle_error(self, error: ClientError, table_name: str) -> None:
        """
        Convert DynamoDB errors to storage exceptions.

        Returns without raising for errors that have no storage equivalent,
        the caller re-raises those unchanged.
        """
        code = error.response["Error"]["Code"]
        message = error.response["Error"].get("Message", "")

        if code == "ResourceNotFoundException":
            raise MissingTableError(table_name) from error
        if code == "ResourceInUseException":
            raise ExistingTableError(table_name) from error
        if code == "ValidationException" and "Missing the key" in message:
            match = _MISSING_KEY_PATTERN.search(message)
            raise MissingKeyError(match.group(1) if match else None) from error
        logger.error(f"DynamoDB error: {error}", extra={"table_name": table_name, "code": code})

    @tracer.capture_method
    async def add_item(self, item: Item, table_name: str) -> Item:
        try:
            await asyncio.to_thread(self.dynamodb.Table(table_name).put_item, Item=_to_dynamo(item))
        except ClientError as e:
            self._handle_error(e, table_name)
            raise
        logger.debug("Stored item in DynamoDB", extra={"table_name": table_name})
        return item

    @tracer.capture_method
    async def create_table(self, table_name: str, hash_key: str, sort_key: str | None = None) -> None:
        attributes = [{"AttributeName": hash_key, "AttributeType": "S"}]
        keys = [{"AttributeName": hash_key, "KeyType": "HASH"}]
        if sort_key:
            attributes.append({"AttributeName": sort_key, "AttributeType": "S"})
            keys.append({"AttributeName": sort_key, "KeyType": "RANGE"})

        try:
            await asyncio.to_thread(
                self.client.create_table,
                TableName=table_name,
                AttributeDefinitions=attributes,
                KeySchema=keys,
                BillingMode="PAY_PER_REQUEST",
            )
        except ClientError as e:
            self._handle_error(e, table_name)
            raise

        await self._wait_for_table(table_name)
        logger.debug("Created DynamoDB table", extra={"table_name": table_name})

    @tracer.capture_method
    async def describe_table(self, table_name: str) -> TableDescription:
        """
        Describe a table.

        Args:
            table_name: Table name

        Returns:
            Resolved key schema and current table status

        Raises:
            MissingTableError: If the table does not exist
        """
        try:
            response = await asyncio.to_thread(self.client.describe_table, TableName=table_name)
        except ClientError as e:
            self._handle_error(e, table_name)
            raise

        table = response.get("Table")
        if not table:
            raise MissingTableError(table_name)
        keys = {key["KeyType"]: key["AttributeName"] for key in table.get("KeySchema", [])}
        if "HASH" not in keys:
            raise MissingKeyError()
        return TableDescription(
            name=table_name,
            key_schema=KeySchema(hash_key=keys["HASH"], sort_key=keys.get("RANGE")),
            status=table.get("TableStatus", ""),
        )

    @tracer.capture_method
    async def get_items(self, table_name: str, hash_key_name: str, hash_key_value: Any) -> list[Item]:
        try:
            response = await asyncio.to_thread(
                self.dynamodb.Table(table_name).query,
                KeyConditionExpression=Key(hash_key_name).eq(hash_key_value),
            )
        except ClientError as e:
            self._handle_error(e, table_name)
            raise

        items: list[Item] = [_from_dynamo(item) for item in response.get("Items", [])]
        logger.debug("Queried DynamoDB", extra={"table_name": table_name, "count": len(items)})
        return items

    async def _wait_for_table(self, table_name: str) -> None:
        attempts = 0
        while True:
            description = await self.describe_table(table_name)
            attempts += 1
            if description.status != TABLE_CREATING_STATUS:
                return
            if self.max_wait_attempts is not None and attempts >= self.max_wait_attempts:
                raise TableCreationTimeoutError(table_name, attempts)
            logger.debug("Waiting for table creation", extra={"table_name": table_name, "attempts": attempts})
            await asyncio.sleep(self.poll_interval)
