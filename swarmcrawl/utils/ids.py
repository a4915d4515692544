import secrets
import string

BASE62_ALPHABET = string.digits + string.ascii_letters
CRAWL_ID_LENGTH = 6


def generate_crawl_id(length: int = CRAWL_ID_LENGTH) -> str:
    """Return a random base62 token (62**6 ≈ 5.7e10 values for the default length)."""
    return "".join(secrets.choice(BASE62_ALPHABET) for _ in range(length))
