import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from .models import TaskView

logger = logging.getLogger(__name__)


@dataclass
class PinnedDisplay:
    index: int
    display_text: str = ""  # HH:MM:SS#label
    title_text: str = ""  # MM:SS
    # None for deadline tasks, which have no start/pause control
    control_running: Optional[bool] = None
    surface: Any = None

    def apply(self, view: TaskView):
        self.display_text = view.display_text
        self.title_text = view.title_text
        self.control_running = view.running if view.is_duration else None


class SurfaceFactory(Protocol):
    """Creates the secondary always-visible surface of a pinned task."""

    def create_surface(self, display: PinnedDisplay) -> Any: ...

    def update_surface(self, surface: Any, display: PinnedDisplay) -> None: ...

    def destroy_surface(self, surface: Any) -> None: ...


class PinSet:
    """Pinned task indices and the display strings their surfaces show."""

    def __init__(self, factory: Optional[SurfaceFactory] = None):
        self._factory = factory
        self._pins: Dict[int, PinnedDisplay] = {}

    def is_pinned(self, index: int) -> bool:
        return index in self._pins

    def indices(self) -> List[int]:
        return sorted(self._pins)

    def get(self, index: int) -> Optional[PinnedDisplay]:
        return self._pins.get(index)

    def pin(self, view: TaskView) -> PinnedDisplay:
        display = self._pins.get(view.index)
        if display is not None:
            self.refresh(view)
            return display
        display = PinnedDisplay(index=view.index)
        display.apply(view)
        if self._factory is not None:
            display.surface = self._factory.create_surface(display)
        self._pins[view.index] = display
        return display

    def unpin(self, index: int) -> bool:
        display = self._pins.pop(index, None)
        if display is None:
            return False
        self._destroy(display)
        return True

    def refresh(self, view: TaskView):
        display = self._pins.get(view.index)
        if display is None:
            return
        display.apply(view)
        if self._factory is not None and display.surface is not None:
            self._factory.update_surface(display.surface, display)

    def on_task_deleted(self, index: int):
        self.unpin(index)
        shifted = {}
        for i, display in self._pins.items():
            if i > index:
                display.index = i - 1
            shifted[display.index] = display
        self._pins = shifted

    def clear(self):
        for index in list(self._pins):
            self.unpin(index)

    def _destroy(self, display: PinnedDisplay):
        if self._factory is not None and display.surface is not None:
            self._factory.destroy_surface(display.surface)
        display.surface = None

    def __len__(self) -> int:
        return len(self._pins)
