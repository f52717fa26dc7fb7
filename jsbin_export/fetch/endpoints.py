"""URL builders for JS Bin endpoints."""


def login_url(base: str) -> str:
    """Get the login form URL (GET for the form, POST to submit)."""
    return f"{base}/login"


def list_url(base: str) -> str:
    """Get the URL listing the user's bins."""
    return f"{base}/list"


def item_url(base: str, url: str) -> str:
    """Get the quiet view of a bin, rendered without the editor chrome."""
    return f"{base}{url}/quiet"
