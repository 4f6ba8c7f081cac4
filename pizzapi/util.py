#
import re

WHITESPACE_RE = re.compile(r"\s+")


def strip_whitespace(sql: str) -> str:
    """
    Collapse the whitespace of a (multiline) sql string, so the logged and tested statements are on a single line
    """
    return WHITESPACE_RE.sub(" ", sql).strip()


def quote_alias(name: str) -> str:
    """
    Quoted column aliases keep their case, eg. "gramsFlour"
    """
    return f'"{name}"'
