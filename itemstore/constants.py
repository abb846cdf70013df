# =============================================================================
# STORAGE DEFAULTS
# =============================================================================

# Name of the directory holding every file database under a location
FILE_DB_DIRECTORY = ".filedb"
TABLES_FILE = "tables.json"

DEFAULT_DB_NAME = "default"
DEFAULT_LOCATION = "."

DEFAULT_REGION = "us-east-2"

# Remote table creation polling
TABLE_POLL_INTERVAL_SECONDS = 0.1
TABLE_CREATING_STATUS = "CREATING"

# Separators used to build storage keys
COMPONENT_SEPARATOR = "|"
HASH_SORT_SEPARATOR = "+"

# Environment variables read by the engine container
ENV_CONFIG = {
    "engine": "STORAGE_ENGINE",  # memory | file | dynamodb
    "environment": "STORAGE_ENVIRONMENT",  # Namespace prepended to table names
    "db_name": "STORAGE_DB_NAME",
    "location": "STORAGE_LOCATION",
    "id": "STORAGE_ID",
    "secret": "STORAGE_SECRET",
    "region": "STORAGE_REGION",
}
