"""
Static pre-check for calculation snippets.

This is a textual denylist applied before a snippet reaches the interpreter.
It does not understand JavaScript and can be bypassed by building names at
runtime; containment is the job of the isolated interpreter in sandbox.py.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

log = logging.getLogger(__name__)


DANGEROUS_PATTERNS: Tuple[Tuple[str, "re.Pattern[str]"], ...] = (
    ("eval(", re.compile(r"\beval\s*\(", re.IGNORECASE)),
    ("new Function(", re.compile(r"\bnew\s+Function\s*\(", re.IGNORECASE)),
    ("process", re.compile(r"\bprocess\b")),
    ("require(", re.compile(r"\brequire\s*\(", re.IGNORECASE)),
    ("import", re.compile(r"\bimport\s+", re.IGNORECASE)),
    ("global", re.compile(r"\bglobal\b")),
    ("window", re.compile(r"\bwindow\b")),
    ("document", re.compile(r"\bdocument\b")),
    ("fetch(", re.compile(r"\bfetch\s*\(", re.IGNORECASE)),
    ("XMLHttpRequest", re.compile(r"\bXMLHttpRequest\b")),
    ("WebSocket", re.compile(r"\bWebSocket\b")),
)


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


def validate_code(code: Optional[str]) -> ValidationResult:
    if not code or not code.strip():
        return ValidationResult(valid=False, errors=["Code cannot be empty"])

    errors: List[str] = []
    for category, pattern in DANGEROUS_PATTERNS:
        if pattern.search(code):
            errors.append(f"Dangerous pattern detected: {category}")

    if errors:
        log.debug("Snippet rejected by validator: %s", errors)
    return ValidationResult(valid=not errors, errors=errors)
