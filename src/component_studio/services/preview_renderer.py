"""
Preview Document Synthesizer
============================

Builds the self-contained HTML document the frontend loads into a
sandboxed iframe. The document pulls React 18, ReactDOM, Babel standalone
and Tailwind from CDNs, transpiles the generated code in the browser and
mounts the component it resolves.

Source preparation happens here: ``import`` statements are removed (the
runtime is provided as UMD globals) and ``export`` forms are rewritten so
the code evaluates as a plain script. The name bound by ``export default``
is passed to the document as the declared export, which the in-browser
resolver tries before its fallback matchers.
"""

import re
from dataclasses import dataclass
from typing import Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from ..constants import (
    BABEL_CDN_URL,
    FALLBACK_COMPONENT_NAME,
    PREVIEW_RUNTIME_GLOBALS,
    REACT_CDN_URL,
    REACT_DOM_CDN_URL,
    TAILWIND_CDN_URL,
    Dialect,
)

_IMPORT_STATEMENT = re.compile(
    r'^[ \t]*import\s+(?:[\s\S]*?\sfrom\s+)?[\'"][^\'"\n]+[\'"][ \t]*;?[ \t]*\n?',
    re.MULTILINE,
)
_EXPORT_DEFAULT_DECLARATION = re.compile(
    r'^([ \t]*)export\s+default\s+(?=(?:async\s+)?(?:function|class)\s*\*?\s*([A-Za-z_$][\w$]*))',
    re.MULTILINE,
)
_EXPORT_DEFAULT_IDENTIFIER = re.compile(
    r'^[ \t]*export\s+default\s+([A-Za-z_$][\w$]*)[ \t]*;?[ \t]*$\n?',
    re.MULTILINE,
)
_EXPORT_DEFAULT_EXPRESSION = re.compile(r'^([ \t]*)export\s+default\s+', re.MULTILINE)
_EXPORT_LIST = re.compile(r'^[ \t]*export\s*\{[^}]*\}[^;\n]*;?[ \t]*\n?', re.MULTILINE)
_EXPORT_KEYWORD = re.compile(
    r'^([ \t]*)export\s+(?=(?:async\s+)?(?:const|let|var|function|class)\b)',
    re.MULTILINE,
)

_environment = Environment(
    loader=PackageLoader('component_studio', 'templates'),
    autoescape=select_autoescape(['html']),
    trim_blocks=True,
    lstrip_blocks=True,
)


@dataclass(frozen=True)
class PreparedSource:
    source: str
    declared_export: Optional[str] = None


def prepare_source(code: str) -> PreparedSource:
    """Strip imports and rewrite exports so ``code`` runs as a classic script."""
    source = _IMPORT_STATEMENT.sub('', code)
    declared: Optional[str] = None

    match = _EXPORT_DEFAULT_DECLARATION.search(source)
    if match:
        declared = match.group(2)
        source = _EXPORT_DEFAULT_DECLARATION.sub(r'\1', source, count=1)
    else:
        match = _EXPORT_DEFAULT_IDENTIFIER.search(source)
        if match:
            declared = match.group(1)
            source = _EXPORT_DEFAULT_IDENTIFIER.sub('', source, count=1)
        elif _EXPORT_DEFAULT_EXPRESSION.search(source):
            declared = FALLBACK_COMPONENT_NAME
            source = _EXPORT_DEFAULT_EXPRESSION.sub(rf'\1const {FALLBACK_COMPONENT_NAME} = ', source, count=1)

    source = _EXPORT_LIST.sub('', source)
    source = _EXPORT_KEYWORD.sub(r'\1', source)
    return PreparedSource(source=source.strip(), declared_export=declared)


def _inline_css(css: str) -> str:
    # A literal "</style" would close the element early
    return (css or '').replace('</', '<\\/')


def render_empty_preview() -> str:
    return _environment.get_template('preview/empty.html').render(tailwind_url=TAILWIND_CDN_URL)


def render_preview(code: str, css: str = '', dialect: str = Dialect.JSX.value) -> str:
    """Render the preview document for ``code``; empty code gives the placeholder."""
    if not code or not code.strip():
        return render_empty_preview()

    if dialect not in Dialect.values():
        dialect = Dialect.JSX.value

    prepared = prepare_source(code)
    return _environment.get_template('preview/component.html').render(
        source=prepared.source,
        declared_export=prepared.declared_export,
        dialect=dialect,
        css=_inline_css(css),
        runtime_globals=list(PREVIEW_RUNTIME_GLOBALS),
        react_url=REACT_CDN_URL,
        react_dom_url=REACT_DOM_CDN_URL,
        babel_url=BABEL_CDN_URL,
        tailwind_url=TAILWIND_CDN_URL,
    )
