SHARED_NAMESPACE = "shared-ui"

EXPERIMENT_COOKIE_NAME = "fs_experiments"
PER_APP_COOKIE_PREFIX = "fs_ex_"

COOKIE_PATH = "/"
COOKIE_MAX_AGE_DAYS = 365
COOKIE_MAX_AGE_SECONDS = COOKIE_MAX_AGE_DAYS * 24 * 60 * 60

# Wire format versions: 1 is template-positional bits, 2 is named pairs
WIRE_VERSION_POSITIONAL = 1
WIRE_VERSION_NAMED = 2
SUPPORTED_WIRE_VERSIONS = (WIRE_VERSION_POSITIONAL, WIRE_VERSION_NAMED)

VARIANT_SEPARATOR = "#"


def per_app_cookie_name(app_name: str) -> str:
    """Name of the reserved per-app cookie (never populated by the codec)."""
    return f"{PER_APP_COOKIE_PREFIX}{app_name}"
