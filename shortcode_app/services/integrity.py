"""
Derives the diagnostic endpoint's path token from the index template.
"""

import hashlib
import re
from pathlib import Path

from shortcode_app.errors import IntegrityTokenNotFound


INTEGRITY_PATTERN = re.compile(r'integrity="(?!sha)([^"]+)"')


def extract_integrity_code(template: str) -> str:
    """Return the first integrity attribute value not starting with ``sha``."""
    match = INTEGRITY_PATTERN.search(template)
    if not match:
        raise IntegrityTokenNotFound("No non-sha integrity attribute in template")
    return match.group(1)


def compute_flag_token(template_path: Path) -> str:
    """hex(SHA-512(integrity code)) of the template at ``template_path``."""
    template = Path(template_path).read_text(encoding="utf-8")
    code = extract_integrity_code(template)
    return hashlib.sha512(code.encode("utf-8")).hexdigest()
