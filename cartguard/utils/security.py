import hmac

def verify_authorization_header(header_value: str | None, expected: str | None) -> bool:
    """True when no header is configured, else a timing-safe comparison."""
    if not expected:
        return True
    if not header_value:
        return False
    return hmac.compare_digest(header_value.encode(), expected.encode())
