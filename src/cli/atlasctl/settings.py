"""Settings and configuration for the atlasctl CLI."""

# API
DEFAULT_BASE_URL = "https://cloud.mongodb.com/api/atlas/v1.0/"
DEFAULT_REQUEST_TIMEOUT = 30
GLOBAL_WRITES_PATH = "groups/{group_id}/clusters/{cluster_name}/globalWrites"
MANAGED_NAMESPACES_PATH = f"{GLOBAL_WRITES_PATH}/managedNamespaces"
CUSTOM_ZONE_MAPPING_PATH = f"{GLOBAL_WRITES_PATH}/customZoneMapping"
CUSTOM_DB_ROLES_PATH = "groups/{group_id}/customDBRoles/roles"
CUSTOM_DB_ROLE_PATH = f"{CUSTOM_DB_ROLES_PATH}/{{role_name}}"

# Custom DB roles
ROLE_NAME_PATTERN = r"^[\w-]+$"
RESERVED_ROLE_NAMES = ["atlasAdmin"]
RESERVED_ROLE_PREFIX = "xgen-"
IMPORT_ID_SEPARATOR = "-"

# Local files
USER_DIR = ".atlasctl"
CONFIG_FILE = "atlasctl.cfg"
STATE_FILE = "state.json"

# Environment variables read from the shell
SHELL_SOURCE = [
    "ATLAS_BASE_URL",
    "ATLAS_PUBLIC_KEY",
    "ATLAS_PRIVATE_KEY",
    "PROJECT_ID",
    "REQUEST_TIMEOUT",
    "STATE_FILE",
    "TEXT_EDITOR",
]

# Scrubbing
SCRUBBED = "*" * 8
SCRUB_KEYS = [
    "key",
    "-key",
    "_key",
    "password",
    "-password",
    "_password",
    "token",
    "-token",
    "_token",
]

# Templates
CONFIG_TEMPLATE = """
[config]
# defaults to https://cloud.mongodb.com/api/atlas/v1.0/
ATLAS_BASE_URL=

# programmatic API key pair
ATLAS_PUBLIC_KEY=
ATLAS_PRIVATE_KEY=

# default project (group) ID for commands that take --project-id
PROJECT_ID=

# seconds; defaults to 30
REQUEST_TIMEOUT=

# defaults to ~/.atlasctl/state.json
STATE_FILE=
TEXT_EDITOR=
"""
