"""Constants for atlasctl tests."""

from atlasctl.settings import DEFAULT_BASE_URL

BASE_URL = "https://atlas.example.test/api/atlas/v1.0/"
PROJECT_ID = "5e2211c17a3e5a48f5497de3"
CLUSTER_NAME = "global-cluster"
ROLE_NAME = "reporting-reader"

GLOBAL_WRITES_URL = (
    f"{BASE_URL}groups/{PROJECT_ID}/clusters/{CLUSTER_NAME}/globalWrites"
)
ROLES_URL = f"{BASE_URL}groups/{PROJECT_ID}/customDBRoles/roles"

# The CLI talks to the default base URL
CLI_GLOBAL_WRITES_URL = (
    f"{DEFAULT_BASE_URL}groups/{PROJECT_ID}/clusters/{CLUSTER_NAME}/globalWrites"
)
CLI_ROLES_URL = f"{DEFAULT_BASE_URL}groups/{PROJECT_ID}/customDBRoles/roles"
