"""
Archive Service
===============

Packages component code as a ZIP: the provided source files, a
``package.json`` manifest and a README with usage instructions.
"""

import io
import json
import zipfile
from typing import Optional, Tuple

from werkzeug.utils import secure_filename

from ..constants import DEFAULT_EXPORT_NAME, GENERATION_TITLE, REACT_VERSION_RANGE, TYPESCRIPT_VERSION_RANGE
from .service_base import ValidationError


def export_name(filename: Optional[str]) -> str:
    name = secure_filename(filename or '')
    if '.' in name:
        name = name.rsplit('.', 1)[0]
    return name or DEFAULT_EXPORT_NAME


def build_manifest(name: str) -> str:
    manifest = {
        'name': name,
        'version': '1.0.0',
        'dependencies': {
            'react': REACT_VERSION_RANGE,
            'react-dom': REACT_VERSION_RANGE,
        },
        'devDependencies': {
            '@types/react': REACT_VERSION_RANGE,
            '@types/react-dom': REACT_VERSION_RANGE,
            'typescript': TYPESCRIPT_VERSION_RANGE,
        },
    }
    return json.dumps(manifest, indent=2)


def build_readme(name: str, dialect: str) -> str:
    return (
        f"# {name}\n\n"
        f"Generated component using {GENERATION_TITLE}.\n\n"
        "## Installation\n\n"
        "```bash\nnpm install\n```\n\n"
        "## Usage\n\n"
        "Import and use the component in your React application.\n\n"
        f"```{dialect}\n"
        f"import {name} from './{name}';\n\n"
        "function App() {\n"
        "  return (\n"
        "    <div>\n"
        f"      <{name} />\n"
        "    </div>\n"
        "  );\n"
        "}\n"
        "```\n"
    )


def build_component_archive(jsx: str = '', tsx: str = '', css: str = '',
                            filename: Optional[str] = None) -> Tuple[io.BytesIO, str]:
    """Return ``(buffer, archive_name)`` for the given code."""
    if not (jsx or tsx or css):
        raise ValidationError('No code to download')

    name = export_name(filename)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        if jsx:
            archive.writestr(f"{name}.jsx", jsx)
        if tsx:
            archive.writestr(f"{name}.tsx", tsx)
        if css:
            archive.writestr(f"{name}.css", css)
        archive.writestr('package.json', build_manifest(name))
        archive.writestr('README.md', build_readme(name, 'jsx' if jsx else 'tsx'))

    buffer.seek(0)
    return buffer, f"{name}.zip"
