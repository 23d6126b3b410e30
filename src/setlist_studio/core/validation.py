"""Detection of hostile input in free-text fields."""

XSS_PATTERNS = (
    "<script",
    "</script>",
    "<img",
    "onerror=",
    "javascript:",
    "<iframe",
    "<svg",
    "onload=",
    "<embed",
    "<object",
)

SQL_INJECTION_PATTERNS = (
    "'; DROP",
    "' OR '1'='1",
    "'; DELETE",
    "'; UPDATE",
    "EXEC(",
    "EXECUTE(",
    "xp_cmdshell",
)

# Matched case-sensitively
CODE_INJECTION_PATTERNS = ("${jndi:", "#{", "{{", "${{")

PATH_TRAVERSAL_PATTERNS = (
    "../",
    "..\\",
    "%2e%2e%2f",
    "%2e%2e/",
    "..%2f",
    "%2e%2e\\",
    "....//",
    "....\\\\",
)

# Cyrillic letters that render like Latin ones
HOMOGLYPHS = frozenset(
    "аеорсх"
    "АВЕКМНОРСТХ"
)


def _contains_any(value: str, patterns: tuple[str, ...]) -> bool:
    lowered = value.lower()
    return any(pattern.lower() in lowered for pattern in patterns)


def check_malicious_content(value: str | None, field_name: str) -> str | None:
    """Return an error message for the first kind of attack found in ``value``."""
    if not value:
        return None

    if _contains_any(value, XSS_PATTERNS):
        return f"{field_name} contains potentially malicious content (XSS attempt detected)"
    if _contains_any(value, SQL_INJECTION_PATTERNS):
        return f"{field_name} contains potentially malicious content (SQL injection attempt detected)"
    if any(pattern in value for pattern in CODE_INJECTION_PATTERNS):
        return f"{field_name} contains potentially malicious content (Code injection attempt detected)"
    if "\x00" in value:
        return f"{field_name} contains null byte characters"
    if any(char in HOMOGLYPHS for char in value):
        return f"{field_name} contains suspicious Unicode characters"
    return None


def contains_path_traversal(value: str | None) -> bool:
    return bool(value) and _contains_any(value, PATH_TRAVERSAL_PATTERNS)


def check_max_length(value: str | None, max_length: int, label: str) -> str | None:
    if value is not None and len(value) > max_length:
        return f"{label} cannot exceed {max_length} characters"
    return None


def check_range(value: int | None, low: int, high: int, message: str) -> str | None:
    if value is not None and not low <= value <= high:
        return message
    return None
