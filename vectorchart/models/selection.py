"""Rectangular selection over the shapes of a chart."""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .data_types import Rectangle
from .shape_command import ShapeCommand


@dataclass
class ShapeSelection:
    """Selection rectangle plus the indices of the shapes it holds."""

    rect: Optional[Rectangle] = None
    shape_indices: List[int] = field(default_factory=list)

    @classmethod
    def from_rect(cls, rect: Rectangle, shapes: Sequence[ShapeCommand]) -> "ShapeSelection":
        """Select every shape lying strictly inside ``rect``."""
        indices = [i for i, shape in enumerate(shapes) if shape.is_contained(rect)]
        return cls(rect=rect.clone(), shape_indices=indices)

    def is_hidden(self) -> bool:
        return self.rect is None

    def shapes(self, all_shapes: Sequence[ShapeCommand]) -> List[ShapeCommand]:
        return [all_shapes[i] for i in self.shape_indices if 0 <= i < len(all_shapes)]

    def clear(self) -> None:
        self.rect = None
        self.shape_indices = []

    def clone(self) -> "ShapeSelection":
        return ShapeSelection(
            rect=self.rect.clone() if self.rect is not None else None,
            shape_indices=list(self.shape_indices),
        )
