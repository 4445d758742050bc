from __future__ import annotations

from typing import Optional, Protocol


class SettingsStore(Protocol):
    """Key/value system settings (values are stored as strings)."""

    def get_value(self, key: str) -> Optional[str]:
        raise NotImplementedError
