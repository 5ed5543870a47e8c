from __future__ import annotations
from typing import Dict, Iterable, Optional

from jewel_erp.models import Material


class MaterialRegistry:
    """Read-only id -> Material mapping.

    A missing id is a normal answer: the item referencing it was billed
    against a material that has since been deleted, and callers fall back
    to the snapshot fields stored on that item.
    """

    def __init__(self, materials: Iterable[Material] = ()):
        self._by_id: Dict[str, Material] = {m.id: m for m in materials}

    def lookup(self, material_id) -> Optional[Material]:
        if not material_id:
            return None
        return self._by_id.get(material_id)

    __call__ = lookup

    def __contains__(self, material_id) -> bool:
        return self.lookup(material_id) is not None

    def __len__(self) -> int:
        return len(self._by_id)

    def name_for(self, material_id, fallback: str = "") -> str:
        m = self.lookup(material_id)
        return m.name if m else fallback
