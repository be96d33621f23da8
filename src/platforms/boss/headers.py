"""Browser-mimicking request headers for the BOSS web API."""

from src.core.config import PlatformConfig

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,"
    "image/apng,*/*;q=0.8,application/signed-exchange;v=b3"
)


def build_headers(config: PlatformConfig, credential: str) -> dict[str, str]:
    """Headers sent with every request. The credential is passed through untouched."""
    return {
        "cookie": credential,
        "content-type": FORM_CONTENT_TYPE,
        "accept": _ACCEPT,
        "accept-language": config.accept_language,
        "cache-control": "max-age=0",
        "upgrade-insecure-requests": "1",
        "user-agent": config.user_agent,
    }
