# cultivation/models/option_model.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto

from cultivation.core.constants import (
    KEY_AKEBI_PATH,
    KEY_CLIENT_VERSION,
    KEY_CUSTOM_BACKGROUND,
    KEY_GAME_INSTALL_PATH,
    KEY_GRASSCUTTER_PATH,
    KEY_GRASSCUTTER_WITH_GAME,
    KEY_JAVA_PATH,
    KEY_LANGUAGE,
    KEY_SWAG_MODE,
    KEY_THEME,
)


class PersistMode(Enum):
    WRITE = auto()  # store the given value
    INVERT = auto()  # read the persisted bool, store its negation
    DELEGATE = auto()  # a service decides what ends up in the store


class SideEffect(Enum):
    NONE = auto()
    REFRESH_CACHE = auto()
    IMPORT_BACKGROUND = auto()


class EditPhase(Enum):
    IDLE = auto()
    EDITING = auto()
    PERSISTED = auto()
    SIDE_EFFECT = auto()


@dataclass(frozen=True)
class OptionPolicy:
    """How an edit to one option propagates."""

    key: str
    persist: PersistMode = PersistMode.WRITE
    side_effect: SideEffect = SideEffect.NONE
    reinit_required: bool = False


OPTION_POLICIES: dict[str, OptionPolicy] = {
    policy.key: policy
    for policy in (
        OptionPolicy(KEY_GAME_INSTALL_PATH),
        OptionPolicy(KEY_GRASSCUTTER_PATH),
        OptionPolicy(KEY_JAVA_PATH),
        OptionPolicy(KEY_AKEBI_PATH),
        OptionPolicy(KEY_CLIENT_VERSION, side_effect=SideEffect.REFRESH_CACHE),
        OptionPolicy(KEY_GRASSCUTTER_WITH_GAME, persist=PersistMode.INVERT),
        OptionPolicy(KEY_SWAG_MODE, persist=PersistMode.INVERT),
        OptionPolicy(KEY_LANGUAGE, reinit_required=True),
        OptionPolicy(KEY_THEME, reinit_required=True),
        OptionPolicy(
            KEY_CUSTOM_BACKGROUND,
            persist=PersistMode.DELEGATE,
            side_effect=SideEffect.IMPORT_BACKGROUND,
            reinit_required=True,
        ),
    )
}
