"""HTTP session setup shared by providers and file downloads."""

import requests

from fontsdb import __version__

DEFAULT_USER_AGENT = f"fontsdb/{__version__}"


def create_session(user_agent: str = DEFAULT_USER_AGENT, verify_ssl: bool = True) -> requests.Session:
    """Create HTTP session with appropriate configuration."""
    session = requests.Session()
    session.verify = verify_ssl
    session.headers.update({"User-Agent": user_agent})
    return session
