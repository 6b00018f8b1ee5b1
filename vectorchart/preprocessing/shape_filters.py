"""
Shape filters used to narrow the shapes of a chart before selection.

Each filter reduces a shape to a hashable value (its color, its angle
signature). A FilterPanel groups the shapes of a chart by that value and
lets the caller switch groups on and off; a FilterPipeline applies
several panels in sequence.
"""

import logging
import math
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..config import DEFAULT_CONFIG
from ..models.shape_command import ShapeCommand
from .shape_utils import shape_to_angles


logger = logging.getLogger(__name__)

MISC_HASH = "misc"
TEXT_HASH = "text"


# ==================== FILTER VALUES ====================


@dataclass
class FilterValue:
    """Hash of a shape plus the shape chosen to represent its group."""

    hash: str
    shape: Optional[ShapeCommand] = None

    def update_shape(self, shape: ShapeCommand) -> None:
        """Called for every further shape sharing this hash."""
        return None


@dataclass
class ShapeSignatureValue(FilterValue):
    angles: List[int] = field(default_factory=list)

    @staticmethod
    def _square_ratio(shape: ShapeCommand) -> float:
        rect = shape.rect
        if rect.height == 0:
            return math.inf
        return abs(1 - rect.width / rect.height)

    def update_shape(self, shape: ShapeCommand) -> None:
        # Prefer unfilled and square-ish shapes as the group representative
        if self.shape is None:
            self.shape = shape
            return
        if (not shape.is_filled and self.shape.is_filled) or (
            self._square_ratio(shape) < self._square_ratio(self.shape)
        ):
            self.shape = shape


# ==================== BASE FILTER ====================


class ShapeFilter(ABC):
    """
    Abstract base class for shape filters.

    A filter maps every shape to a FilterValue whose hash decides the
    group the shape falls into.
    """

    @abstractmethod
    def get_value(self, shape: ShapeCommand) -> FilterValue:
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Return filter name for logging"""
        pass

    def min_number_elements(self) -> int:
        """A group needs more members than this to get its own switch."""
        return 0


# ==================== INDIVIDUAL FILTERS ====================


class ColorFilter(ShapeFilter):
    """Groups shapes by effective color (fill if filled, else stroke)."""

    def get_value(self, shape: ShapeCommand) -> FilterValue:
        return FilterValue(hash=shape.style.effective_color, shape=shape)

    def get_name(self) -> str:
        return "Color Filter"


class ShapeSignatureFilter(ShapeFilter):
    """
    Groups shapes by the orientation of their segments.

    Angles are quantized coarsely (multiplicator 45/pi) and measured
    against a fixed direction, so a rotated marker lands in another group.
    Text runs all share the ``"text"`` group.
    """

    def __init__(self, multiplicator: Optional[float] = None):
        if multiplicator is None:
            multiplicator = DEFAULT_CONFIG.SIGNATURE_ANGLE_MULTIPLICATOR / math.pi
        self.multiplicator = multiplicator

    def get_value(self, shape: ShapeCommand) -> FilterValue:
        if shape.is_text:
            return ShapeSignatureValue(hash=TEXT_HASH, shape=shape)
        angles = shape_to_angles(shape, self.multiplicator, related_to_origin=True)
        return ShapeSignatureValue(
            hash=".".join(str(a) for a in angles), shape=shape, angles=angles
        )

    def get_name(self) -> str:
        return "Shape Filter"

    def min_number_elements(self) -> int:
        return 1


# ==================== PANEL ====================


@dataclass
class FilterGroup:
    value: FilterValue
    count: int
    enabled: bool = True

    @property
    def hash(self) -> str:
        return self.value.hash


class FilterPanel:
    """
    Switchable groups of one filter over the shapes of a chart.

    Groups are sorted by size. Only the largest ``max_groups`` groups with
    more than ``min_number_elements`` members get their own switch; the
    rest share a single ``misc`` switch.
    """

    def __init__(self, shape_filter: ShapeFilter, shapes: Iterable[ShapeCommand],
                 max_groups: int = DEFAULT_CONFIG.MAX_FILTER_GROUPS):
        self.filter = shape_filter
        self.max_groups = max_groups
        self.groups: List[FilterGroup] = self._build_groups(list(shapes))
        logger.debug(f"{shape_filter.get_name()}: {len(self.groups)} group(s)")

    def _build_groups(self, shapes: List[ShapeCommand]) -> List[FilterGroup]:
        counts: Counter = Counter()
        values: Dict[str, FilterValue] = {}
        for shape in shapes:
            value = self.filter.get_value(shape)
            if value.hash not in values:
                values[value.hash] = value
            values[value.hash].update_shape(shape)
            counts[value.hash] += 1

        groups = []
        for idx, (hash_, count) in enumerate(counts.most_common()):
            if count > self.filter.min_number_elements() and idx < self.max_groups:
                groups.append(FilterGroup(values[hash_], count))
            else:
                groups.append(FilterGroup(FilterValue(MISC_HASH), 0))
                break
        return groups

    @property
    def hashes(self) -> List[str]:
        return [g.hash for g in self.groups]

    def set_all_checked(self, checked: bool = True) -> None:
        for group in self.groups:
            group.enabled = checked

    def set_checked(self, hashes: Iterable[str]) -> None:
        wanted = set(hashes)
        for group in self.groups:
            group.enabled = group.hash in wanted

    def select_only(self, hash_: str) -> None:
        self.set_checked([hash_])

    def allowed_hashes(self):
        allowed = [g.hash for g in self.groups if g.enabled]
        forbidden = [g.hash for g in self.groups if not g.enabled]
        return allowed, forbidden

    def apply(self, shapes: Iterable[ShapeCommand]) -> List[ShapeCommand]:
        """
        Keep shapes whose group is enabled.

        Shapes of groups without their own switch follow the ``misc`` switch.
        """
        allowed, forbidden = self.allowed_hashes()
        allow_misc = MISC_HASH in allowed
        result = []
        for shape in shapes:
            hash_ = self.filter.get_value(shape).hash
            if hash_ in allowed or (allow_misc and hash_ not in forbidden):
                result.append(shape)
        return result


class FilterPipeline:
    """
    Chains several filter panels.

    Each panel sees the output of the previous one.
    """

    def __init__(self, panels: List[FilterPanel]):
        self.panels = panels
        self.logger = logging.getLogger(__name__)

    def apply(self, shapes: List[ShapeCommand]) -> List[ShapeCommand]:
        current = list(shapes)
        for i, panel in enumerate(self.panels, 1):
            before_count = len(current)
            current = panel.apply(current)
            self.logger.debug(
                f"FilterPipeline: Step {i}/{len(self.panels)} - "
                f"{panel.filter.get_name()}: {before_count} -> {len(current)} shapes"
            )
        return current

    def add_panel(self, panel: FilterPanel) -> None:
        self.panels.append(panel)

    def remove_panel(self, filter_name: str) -> bool:
        """
        Remove a panel by filter name.

        Returns:
            True if the panel was found and removed, False otherwise
        """
        for i, panel in enumerate(self.panels):
            if panel.filter.get_name() == filter_name:
                self.panels.pop(i)
                return True
        return False
