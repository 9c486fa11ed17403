"""
User Preferences Record
=======================

Explicit, enumerated preference options with documented defaults. Unknown
keys are rejected instead of being stored silently.
"""

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

from ..constants import DEFAULT_MODEL, Dialect

THEMES = ('light', 'dark')


@dataclass(frozen=True)
class Preferences:
    """Per-user generation and UI preferences.

    Attributes:
        theme: UI theme, ``light`` or ``dark``
        default_model: OpenRouter model id used when a request names none
        default_language: code dialect used when a request names none
        auto_save: whether the frontend saves sessions after every turn
    """
    theme: str = 'light'
    default_model: str = DEFAULT_MODEL
    default_language: str = Dialect.JSX.value
    auto_save: bool = True

    def to_dict(self) -> Dict[str, Any]:
        from ..schemas import PreferencesSchema
        return PreferencesSchema().dump(asdict(self))

    def merged(self, changes: Optional[Dict[str, Any]]) -> 'Preferences':
        """Return a copy with validated camelCase ``changes`` applied."""
        if not changes:
            return self
        from ..schemas import load_or_raise, PreferencesSchema
        return replace(self, **load_or_raise(PreferencesSchema(partial=True), changes))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Preferences':
        return cls().merged(data)
