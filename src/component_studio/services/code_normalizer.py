"""
Code Normalizer
===============

Turns raw model output into a structured code bundle. The model is asked
for an explanation followed by a JSON object, but replies vary: the JSON
may be embedded in prose, be the whole reply, or be missing in favour of a
markdown code fence. Strategies, first success wins:

1. Embedded JSON: a string-aware balanced-brace scanner yields candidate
   ``{...}`` spans in order of their opening brace, then the greedy span
   from the first ``{`` to the last ``}``; each is parsed and the first
   JSON object carrying at least one output key wins, so stray braces in
   the prose (``style={{...}}``, ``() => {}``) are skipped. Text before
   the span is the explanation.
2. Whole reply parsed as JSON.
3. Prose with an optional fenced block whose content becomes the code for
   the requested dialect.

Afterwards the missing dialect is derived from the other one and the
preview document is rendered. ``normalize`` never raises.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple

from ..constants import DEFAULT_EXPLANATION, FALLBACK_COMPONENT_NAME, FALLBACK_DESCRIPTION, Dialect
from .dialect_converter import jsx_to_tsx, tsx_to_jsx
from .preview_renderer import render_preview

logger = logging.getLogger(__name__)

# Opening braces tried by the scanner before falling back to the greedy span
MAX_CANDIDATES = 64

_FENCED_BLOCK = re.compile(r'```.*?```', re.DOTALL)
_FENCE_BODY = re.compile(r'```(?:[\w+.#-]*[^\S\n]*\n)?(?P<body>.*?)```', re.DOTALL)
_CODE_MARKERS = ('function ', 'const ', 'export')

STRATEGY_EMBEDDED_JSON = 'embedded_json'
STRATEGY_WHOLE_JSON = 'whole_json'
STRATEGY_FENCED = 'fenced'

# Keys of the JSON object the model is asked to return
CONTRACT_KEYS = frozenset({*Dialect.values(), 'css', 'description', 'explanation'})


@dataclass
class NormalizedOutput:
    """Structured result of one generation turn."""
    explanation: str
    jsx: str = ''
    tsx: str = ''
    css: str = ''
    description: str = ''
    preview: str = ''
    strategy: str = STRATEGY_FENCED

    def code_bundle(self) -> Dict[str, str]:
        return {
            'jsx': self.jsx,
            'tsx': self.tsx,
            'css': self.css,
            'description': self.description,
            'preview': self.preview,
        }


# ---------------------------------------------------------------------------
# Stage 1a: candidate spans
# ---------------------------------------------------------------------------

def _matching_brace(text: str, start: int) -> Optional[int]:
    """Index of the ``}`` closing the ``{`` at ``start``, skipping JSON strings."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return index
    return None


def iter_json_candidates(text: str, limit: int = MAX_CANDIDATES) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, end)`` spans (end exclusive) that may hold a JSON object."""
    seen = set()
    attempts = 0
    position = text.find('{')
    while position != -1 and attempts < limit:
        attempts += 1
        end = _matching_brace(text, position)
        if end is not None:
            span = (position, end + 1)
            seen.add(span)
            yield span
        position = text.find('{', position + 1)

    first, last = text.find('{'), text.rfind('}')
    if first != -1 and last > first and (first, last + 1) not in seen:
        yield first, last + 1


# ---------------------------------------------------------------------------
# Stage 1b: first parseable candidate
# ---------------------------------------------------------------------------

def extract_embedded_json(text: str) -> Optional[Tuple[Dict[str, Any], int, int]]:
    """Return the first candidate span that parses to a JSON object with an output key."""
    for start, end in iter_json_candidates(text):
        try:
            parsed = json.loads(text[start:end])
        except ValueError:
            continue
        if isinstance(parsed, dict) and CONTRACT_KEYS.intersection(parsed):
            return parsed, start, end
    return None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ''


def _fields_from_object(data: Dict[str, Any], dialect: str) -> Dict[str, str]:
    dialect_code = _text(data.get(dialect))
    jsx = _text(data.get('jsx')) or (dialect_code if dialect == Dialect.JSX.value else '')
    tsx = _text(data.get('tsx')) or (dialect_code if dialect == Dialect.TSX.value else '')
    return {
        'jsx': jsx,
        'tsx': tsx,
        'css': _text(data.get('css')),
        'description': _text(data.get('description')) or _text(data.get('explanation')),
    }


def _from_fenced_prose(text: str, dialect: str) -> NormalizedOutput:
    explanation = _FENCED_BLOCK.sub('', text).strip()

    match = _FENCE_BODY.search(text)
    code = (match.group('body') if match else text).strip()
    if code and not any(marker in code for marker in _CODE_MARKERS):
        code = f"function {FALLBACK_COMPONENT_NAME}() {{\n  return (\n    {code}\n  );\n}}"

    output = NormalizedOutput(
        explanation=explanation,
        description=FALLBACK_DESCRIPTION,
        strategy=STRATEGY_FENCED,
    )
    setattr(output, dialect, code)
    return output


def parse_model_output(raw_text: str, dialect: str = Dialect.JSX.value) -> NormalizedOutput:
    """Run the three extraction strategies; no derivation, no preview."""
    text = raw_text or ''

    embedded = extract_embedded_json(text)
    if embedded is not None:
        data, start, _end = embedded
        explanation = text[:start].strip() or _text(data.get('explanation')).strip()
        return NormalizedOutput(explanation=explanation, strategy=STRATEGY_EMBEDDED_JSON,
                                **_fields_from_object(data, dialect))

    try:
        data = json.loads(text)
    except ValueError:
        data = None
    if isinstance(data, dict):
        return NormalizedOutput(explanation=_text(data.get('explanation')).strip(),
                                strategy=STRATEGY_WHOLE_JSON,
                                **_fields_from_object(data, dialect))

    return _from_fenced_prose(text, dialect)


def derive_missing_dialect(output: NormalizedOutput) -> NormalizedOutput:
    if output.jsx and not output.tsx:
        output.tsx = jsx_to_tsx(output.jsx)
    elif output.tsx and not output.jsx:
        output.jsx = tsx_to_jsx(output.tsx)
    return output


def normalize(raw_text: str, dialect: str = Dialect.JSX.value) -> NormalizedOutput:
    """Normalize raw model text into explanation, code bundle and preview."""
    if dialect not in Dialect.values():
        dialect = Dialect.JSX.value

    output = derive_missing_dialect(parse_model_output(raw_text, dialect))
    output.explanation = output.explanation or DEFAULT_EXPLANATION

    preview_code, preview_dialect = getattr(output, dialect), dialect
    if not preview_code:
        preview_code, preview_dialect = output.jsx, Dialect.JSX.value
    output.preview = render_preview(preview_code, output.css, preview_dialect)

    logger.debug(
        f"Normalized model output via {output.strategy} "
        f"(jsx={len(output.jsx)} tsx={len(output.tsx)} css={len(output.css)} chars)"
    )
    return output
