"""
JSX / TSX Dialect Conversion
============================

Best-effort, purely syntactic derivation of one dialect from the other,
used when the model returns only one of them. These are pattern
substitutions, not a parser: multiple components per file, default exports
and hooks with generic parameters can come out invalid. That is the
accepted behaviour of this fallback path and is not corrected here.
"""

import re

REACT_IMPORT = "import React from 'react';\n"

# JSX -> TSX
_FUNCTION_DECLARATION = re.compile(r'function\s+(\w+)\s*\(')
_COMPONENT_NAME = re.compile(r'(?:const|function)\s+(\w+)')

# TSX -> JSX
_INTERFACE_BLOCK = re.compile(r'(?:export\s+)?interface\s+\w+(?:<[^<>{}]*>)?\s*\{[^{}]*\}\s*')
_FC_ANNOTATION = re.compile(r':\s*React\.FC(?:<[^<>]*(?:<[^<>]*>[^<>]*)*>)?')
_TYPE_NAME = (
    r'(?:[A-Z][\w]*(?:\.[A-Za-z_]\w*)*'
    r'|string|number|boolean|any|void|unknown|never|object|bigint)'
)
_SIMPLE_ANNOTATION = re.compile(
    r'(?<=[\w)\]}])\s*:\s*' + _TYPE_NAME +
    r'(?:<[^<>()]*>)?(?:\[\])*'
    r'(?:\s*\|\s*' + _TYPE_NAME + r'(?:\[\])*)*'
    r'(?=\s*[,)=;{])'
)
_GENERIC_CALL_ARGS = re.compile(r'(?<=\w)<(?:[^<>()=]|<[^<>()=]*>)*>(?=\()')
_ARROW_COMPONENT = re.compile(r'const\s+(\w+)\s*=\s*\(([^()]*)\)\s*=>\s*\{')
_CONST_CALLABLE = re.compile(r'const\s+(\w+)\s*=\s*\(')


def jsx_to_tsx(jsx: str) -> str:
    """Derive TSX from JSX.

    Adds the React import when missing, turns ``function Name(`` into
    ``const Name: React.FC = (`` and, when the component takes props,
    declares an empty ``<Name>Props`` interface and parameterizes the
    first typed declaration with it.
    """
    if not jsx:
        return ''

    tsx = jsx
    if 'import React' not in tsx:
        tsx = REACT_IMPORT + tsx

    tsx = _FUNCTION_DECLARATION.sub(r'const \1: React.FC = (', tsx)

    if '(props' in tsx or '({' in tsx:
        match = _COMPONENT_NAME.search(tsx)
        if match:
            name = match.group(1)
            interface_name = f'{name}Props'
            tsx = f'interface {interface_name} {{}}\n\n' + tsx
            tsx = re.sub(
                rf'const {re.escape(name)}: React\.FC',
                f'const {name}: React.FC<{interface_name}>',
                tsx,
                count=1,
            )
    return tsx


def tsx_to_jsx(tsx: str) -> str:
    """Derive JSX from TSX.

    Strips interface blocks, ``React.FC`` annotations, simple type
    annotations and generic arguments on calls, then rewrites typed
    ``const Name = (`` declarations back into ``function Name(``.
    """
    if not tsx:
        return ''

    jsx = _INTERFACE_BLOCK.sub('', tsx)
    jsx = _FC_ANNOTATION.sub('', jsx)
    jsx = _SIMPLE_ANNOTATION.sub('', jsx)
    jsx = _GENERIC_CALL_ARGS.sub('', jsx)
    jsx = _ARROW_COMPONENT.sub(r'function \1(\2) {', jsx)
    jsx = _CONST_CALLABLE.sub(r'function \1(', jsx)
    return jsx
