"""Domain enums shared by every layer.

Two domains own independent criterion namespaces: the general-purpose
domain (``audio``) and the routing domain (``route``).
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Domain(StrEnum):
    """Backing subsystem a criterion or parameter belongs to."""

    GENERAL = "audio"
    ROUTING = "route"


class Status(StrEnum):
    """Status codes surfaced to the HAL through ``ServiceResult.status``."""

    OK = "OK"
    BAD_VALUE = "BAD_VALUE"
    NO_INIT = "NO_INIT"


class RogueType(StrEnum):
    """Value types a rogue parameter may carry."""

    UINT = "uint"
    STRING = "string"
    DOUBLE = "double"


class CriterionName(StrEnum):
    """Well-known criterion names addressed by the convenience accessors."""

    STATE_CHANGED = "StatesChanged"
    ANDROID_MODE = "AndroidMode"
    HAS_MODEM = "HasModem"
    MODEM_STATE = "ModemState"
    MODEM_AUDIO_STATUS = "ModemAudioStatus"
    OUTPUT_DEVICE = "OutputDevices"
    INPUT_DEVICE = "InputDevices"
    INPUT_SOURCES = "InputSources"
    OUTPUT_FLAGS = "OutputFlags"
    CSV_BAND = "CsvBandType"
    VOIP_BAND = "VoIPBandType"
    MIC_MUTE = "MicMute"


class AudioBand(IntEnum):
    """Voice band of a CSV or VoIP call."""

    NARROW = 0
    WIDE = 1
    SUPER_WIDE = 2


class ConfigurationError(ValueError):
    """Schema-level defect in the criterion configuration.

    Raised at load time for duplicate names, references to undeclared types
    and malformed value lists. Never raised for runtime input.
    """
