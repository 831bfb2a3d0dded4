from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional


class Store:
    """
    The result of one successful parse.

    Maps section names to the values assigned in that section. Only names
    are kept, never schema objects, so a Store outlives its Parser. A Store
    cannot be changed once the parse that built it has returned.
    """

    __slots__ = ("_sections",)

    def __init__(self, sections: Mapping[str, Mapping[str, Any]]) -> None:
        self._sections: Mapping[str, Mapping[str, Any]] = MappingProxyType(
            {name: MappingProxyType(dict(values)) for name, values in sections.items()}
        )

    def is_section_present(self, section: str) -> bool:
        return section in self._sections

    def has_value(self, section: str, field: str) -> bool:
        values = self._sections.get(section)
        return values is not None and field in values

    def get_value(self, section: str, field: str) -> Optional[Any]:
        """Return the parsed value, or None when the field was never assigned."""
        values = self._sections.get(section)
        if values is None:
            return None
        return values.get(field)

    def sections(self) -> List[str]:
        return list(self._sections)

    def values(self, section: str) -> Mapping[str, Any]:
        return self._sections.get(section, MappingProxyType({}))

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Plain nested dict copy, with list values as lists."""
        out: Dict[str, Dict[str, Any]] = {}
        for name, values in self._sections.items():
            out[name] = {
                k: list(v) if isinstance(v, tuple) else v for k, v in values.items()
            }
        return out

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Store):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Store({self.to_dict()!r})"


class StoreBuilder:
    """Mutable side of a Store, used only by the parse engine."""

    def __init__(self) -> None:
        self._sections: Dict[str, Dict[str, Any]] = {}

    def mark_present(self, section: str) -> None:
        self._sections.setdefault(section, {})

    def set(self, section: str, field: str, value: Any) -> None:
        self._sections.setdefault(section, {})[field] = value

    def get(self, section: str, field: str, default: Any = None) -> Any:
        return self._sections.get(section, {}).get(field, default)

    def build(self) -> Store:
        return Store(self._sections)
