"""
Helpers for ODBC-style SQL Server connection strings.

Connection strings are `key=value` pairs separated by `;`. Keys are
case-insensitive and values may be wrapped in braces so they can contain
`;` themselves (`Driver={ODBC Driver 18 for SQL Server}`), with `}}`
standing for a literal `}` inside braces.
"""
import re
from typing import Dict, List, Optional

SERVER_KEYS = ("server", "data source", "address", "addr", "network address")
DATABASE_KEYS = ("database", "initial catalog")

_SECRET_PATTERN = re.compile(
    r"(?i)\b(pwd|password)(\s*=\s*)(\{(?:[^}]|\}\})*\}|[^;]*)"
)


def _split_segments(text: str) -> List[str]:
    """Split on `;` outside of braced values."""
    segments = []
    current: List[str] = []
    in_braces = False
    i = 0
    while i < len(text):
        char = text[i]
        if in_braces:
            if char == "}":
                if text[i + 1 : i + 2] == "}":
                    current.append("}}")
                    i += 2
                    continue
                in_braces = False
        elif char == "{":
            in_braces = True
        elif char == ";":
            segments.append("".join(current))
            current = []
            i += 1
            continue
        current.append(char)
        i += 1
    segments.append("".join(current))
    return [segment.strip() for segment in segments if segment.strip()]


def parse_connection_string(text: Optional[str]) -> Dict[str, str]:
    """
    Parse a connection string into a dict keyed by lower-cased key.

    Segments without `=` are ignored. Later duplicates win, matching how
    the ODBC driver manager treats repeated keys.

    Args:
        text: Connection string such as "Server=tcp:x,1433;Database=db"

    Returns:
        Mapping of lower-cased keys to unbraced values
    """
    pairs: Dict[str, str] = {}
    if not text:
        return pairs

    for segment in _split_segments(text):
        if "=" not in segment:
            continue
        key, value = segment.split("=", 1)
        key = " ".join(key.lower().split())
        value = value.strip()
        if value.startswith("{") and value.endswith("}"):
            value = value[1:-1].replace("}}", "}")
        if key:
            pairs[key] = value
    return pairs


def is_valid_connection_string(text: Optional[str]) -> bool:
    """
    Check that a connection string names both a server and a database.

    This is a marker check, not a grammar check: anything else in the
    string is left for the driver to accept or reject.
    """
    if not isinstance(text, str):
        return False

    pairs = parse_connection_string(text)
    has_server = any(pairs.get(key) for key in SERVER_KEYS)
    has_database = any(pairs.get(key) for key in DATABASE_KEYS)
    return has_server and has_database


def ensure_driver(text: str, driver: str) -> str:
    """Prefix `Driver={...}` when the connection string has no driver."""
    if "driver" in parse_connection_string(text):
        return text
    return f"Driver={{{driver}}};{text}"


def mask_connection_string(text: Optional[str]) -> str:
    """Replace password values so the string can be logged."""
    if not text:
        return ""
    return _SECRET_PATTERN.sub(lambda match: f"{match.group(1)}{match.group(2)}***", text)


def describe_target(text: Optional[str]) -> str:
    """Short `server/database` label for log lines."""
    pairs = parse_connection_string(text)
    server = next((pairs[key] for key in SERVER_KEYS if pairs.get(key)), "?")
    database = next((pairs[key] for key in DATABASE_KEYS if pairs.get(key)), "?")
    # Keep only the host part of fully qualified Azure names
    host = server.split(",")[0].split(":")[-1]
    if "." in host:
        host = host.split(".")[0]
    return f"{host}/{database}"
