"""Internal constants shared across the library."""

AUTH_BASE_URL = "https://api.secure.mercedes-benz.com"
AUTH_PATH = "/oidc10/auth/oauth/v2/authorize"
TOKEN_PATH = "/oidc10/auth/oauth/v2/token"

BASE_URL = "https://api.mercedes-benz.com"
VEHICLES_PATH = "/vehicledata/v1/vehicles"

#: Default request timeout in seconds.
DEFAULT_TIMEOUT: float = 30.0
#: Timeout used for the resource-list ("awake") request.
DISCOVERY_TIMEOUT: float = 10.0
#: Total attempts made for the resource-list request before giving up.
DISCOVERY_ATTEMPTS = 4

#: Resource schema version this client understands.
EXPECTED_RESOURCE_VERSION = "1.0"

# BYOCAR products registered on the developer portal. Not enforced here,
# the token must simply have been issued with these scopes.
REQUIRED_SCOPES: tuple[str, ...] = (
    "mb:vehicle:mbdata:vehiclestatus",
    "mb:vehicle:mbdata:fuelstatus",
    "mb:vehicle:mbdata:payasyoudrive",
    "mb:vehicle:mbdata:vehiclelock",
    "mb:vehicle:mbdata:evstatus",
)

CONTAINER_VEHICLE_LOCK_STATUS = "vehiclelockstatus"
CONTAINER_PAY_AS_YOU_DRIVE = "payasyoudrive"

# Door lock status values meaning "locked" (internal/external lock).
LOCKED_DOOR_STATES: frozenset[str] = frozenset({"1", "2"})
