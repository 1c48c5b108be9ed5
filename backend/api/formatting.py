"""Raw-text rendering of a generated document for the GET endpoint.

The document is serialised inside a one-field JSON object, then the
envelope is peeled off again with text substitutions so the response body
reads like the plain document while still being served as JSON.
"""

from __future__ import annotations

import json
import re


def render_raw_text(field: str, text: str) -> str:
    """Return *text* as it appears inside ``{"<field>": "..."}``, unwrapped.

    Escaped ``\\n`` and ``\\t`` sequences become real newlines and tabs; other
    JSON escapes (quotes, backslashes) are left as serialised.
    """
    body = json.dumps({field: text}, indent=2, ensure_ascii=False)
    body = body.replace("\\n", "\n").replace("\\t", "\t")
    body = re.sub(r'^\{\s*"' + re.escape(field) + r'":\s*"', "", body)
    return re.sub(r'"\s*\}$', "", body)
