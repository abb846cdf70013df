import os

from itemstore.client import StorageClient
from itemstore.constants import DEFAULT_DB_NAME, DEFAULT_LOCATION, DEFAULT_REGION, ENV_CONFIG
from itemstore.dal.dynamodb import DynamoDBStorageEngine
from itemstore.dal.in_memory import InMemoryStorageEngine
from itemstore.dal.interface import IStorageEngine
from itemstore.dal.local_disk import LocalDiskStorageEngine
from itemstore.exceptions import ConfigurationError


def _require(*names: str) -> dict[str, str]:
    missing = [name for name in names if not os.environ.get(name)]
    if missing:
        raise ConfigurationError.missing(missing)
    return {name: os.environ[name] for name in names}


def engine_from_env() -> IStorageEngine:
    kind = os.environ.get(ENV_CONFIG["engine"], "memory").lower()

    if kind == "memory":
        return InMemoryStorageEngine()

    if kind == "file":
        return LocalDiskStorageEngine(
            db_name=os.environ.get(ENV_CONFIG["db_name"], DEFAULT_DB_NAME),
            location=os.environ.get(ENV_CONFIG["location"], DEFAULT_LOCATION),
        )

    if kind == "dynamodb":
        credentials = _require(ENV_CONFIG["id"], ENV_CONFIG["secret"])
        return DynamoDBStorageEngine(
            access_key_id=credentials[ENV_CONFIG["id"]],
            secret_access_key=credentials[ENV_CONFIG["secret"]],
            region=os.environ.get(ENV_CONFIG["region"], DEFAULT_REGION),
        )

    raise ConfigurationError(f"Unknown storage engine '{kind}'")


def client_from_env() -> StorageClient:
    return StorageClient(
        engine=engine_from_env(),
        environment=os.environ.get(ENV_CONFIG["environment"]) or None,
    )
