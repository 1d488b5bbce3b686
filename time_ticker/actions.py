"""Menu actions: the Command type, its string codec and the identifier router.

Qt hands back nothing but the triggered entry, so every menu entry is given an
opaque identifier when it is built. The router maps identifier -> action
string (``"toggle_3"``, ``"quit"``) and the codec turns that into a Command.
String prefixes stop here; the rest of the app only sees Command.
"""
import itertools
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import ActionDecodeError, InvalidActionFormat, ParseActionIndex

logger = logging.getLogger(__name__)


class Verb(StrEnum):
    TOGGLE = "toggle"
    RESET = "reset"
    DELETE = "delete"
    PIN = "pin"
    UNPIN = "unpin"
    PINNED_TOGGLE = "pinned_toggle"
    PINNED_RESET = "pinned_reset"
    EDIT = "edit"
    NEW_TASK = "new_task"
    QUIT = "quit"


BARE_VERBS = frozenset({Verb.NEW_TASK, Verb.QUIT})
# longest first so "pinned_toggle_" is tried before anything shorter
_INDEXED_PREFIXES: List[Tuple[str, Verb]] = sorted(
    ((f"{v.value}_", v) for v in Verb if v not in BARE_VERBS),
    key=lambda item: len(item[0]),
    reverse=True,
)

PRESERVED_PREFIXES = ("pinned_", "unpin_")


@dataclass(frozen=True)
class Command:
    verb: Verb
    index: Optional[int] = None

    def __post_init__(self):
        if self.verb in BARE_VERBS:
            if self.index is not None:
                raise ValueError(f"{self.verb} takes no index")
        elif self.index is None or self.index < 0:
            raise ValueError(f"{self.verb} needs a non-negative index")

    def encode(self) -> str:
        if self.index is None:
            return self.verb.value
        return f"{self.verb.value}_{self.index}"


def dispatch(action: str) -> Command:
    """Decode an action string into a Command."""
    for bare in BARE_VERBS:
        if action == bare.value:
            return Command(bare)
    for prefix, verb in _INDEXED_PREFIXES:
        if action.startswith(prefix):
            suffix = action[len(prefix):]
            if not (suffix.isascii() and suffix.isdigit()):
                raise ParseActionIndex(action, suffix)
            return Command(verb, int(suffix))
    raise InvalidActionFormat(action)


class ActionRouter:
    """Opaque menu identifier -> action string table."""

    def __init__(self):
        self._actions: Dict[str, str] = {}
        self._ids = itertools.count(1)

    def new_identifier(self) -> str:
        return f"menu-{next(self._ids)}"

    def register(self, identifier: str, action: str):
        self._actions[identifier] = action

    def bind(self, command: Command) -> str:
        identifier = self.new_identifier()
        self.register(identifier, command.encode())
        return identifier

    def rebuild(self, preserve_prefixes: Iterable[str] = PRESERVED_PREFIXES):
        """Forget every entry except the pinned-surface ones.

        Pinned tray menus are not regenerated with the main menu, so their
        identifiers have to outlive the rebuild.
        """
        prefixes = tuple(preserve_prefixes)
        kept = {i: a for i, a in self._actions.items() if a.startswith(prefixes)}
        self._actions.clear()
        self._actions.update(kept)

    def resolve(self, identifier: str) -> Optional[str]:
        action = self._actions.get(identifier)
        if action is None:
            logger.warning("No action registered for menu id %r", identifier)
            for ident, act in self._actions.items():
                logger.debug("  %s -> %s", ident, act)
        return action

    def route(self, identifier: str) -> Optional[Command]:
        action = self.resolve(identifier)
        if action is None:
            return None
        try:
            return dispatch(action)
        except ActionDecodeError as e:
            logger.warning("Ignoring menu action: %s", e)
            return None

    def _indexed(self):
        for ident, action in list(self._actions.items()):
            try:
                command = dispatch(action)
            except ActionDecodeError:
                continue
            if command.index is not None:
                yield ident, action, command

    def forget_index(self, index: int, prefixes: Iterable[str] = PRESERVED_PREFIXES):
        prefixes = tuple(prefixes)
        for ident, action, command in self._indexed():
            if command.index == index and action.startswith(prefixes):
                del self._actions[ident]

    def shift_after_delete(self, index: int):
        """Keep entries pointing at the same tasks after ``index`` was removed."""
        for ident, _, command in self._indexed():
            if command.index == index:
                del self._actions[ident]
            elif command.index > index:
                self._actions[ident] = Command(command.verb, command.index - 1).encode()

    def actions(self) -> Dict[str, str]:
        return dict(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._actions
