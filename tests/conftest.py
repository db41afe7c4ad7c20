"""Shared pytest fixtures for platstate tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from platstate.config.settings import PlatSettings
from platstate.infrastructure.backends import MemoryGeneralBackend, MemoryRoutingBackend
from platstate.services.engine import PlatformStateEngine

EXAMPLE_CONF = """\
# Shared by both domains
common {
    exclusive-criterion-type {
        ModeType normal,ringtone,in_call,in_communication
    }
    criterion {
        AndroidMode {
            type ModeType
            default normal
            parameter mode
            mapping 0:normal,1:ringtone,2:in_call,3:in_communication
        }
    }
}
audio {
    exclusive-criterion-type {
        ModemType off,on
    }
    criterion {
        ModemState {
            type ModemType
            default off
        }
        HasModem {
            type ModemType
        }
        ModemAudioStatus {
            type ModemType
        }
    }
    rogue-parameter {
        Gain {
            path /Audio/gain
            type double
            parameter gain
            default 0.5
        }
        Tag {
            type string
            parameter tag
        }
    }
}
route {
    inclusive-criterion-type {
        DeviceType speaker,headset,earpiece
        FlagType a,b,c
    }
    exclusive-criterion-type {
        BandType narrow,wide,super_wide
        CodeType x:0x10,y
        MuteType off,on
    }
    criterion {
        OutputDevices {
            type DeviceType
            default speaker
            parameter out_devices
        }
        InputDevices {
            type DeviceType
        }
        CsvBandType {
            type BandType
            default narrow
            parameter band
        }
        VoIPBandType {
            type BandType
        }
        MicMute {
            type MuteType
            parameter mic_mute
            mapping true:on,false:off
        }
        OutputFlags {
            type FlagType
            parameter flags
        }
        Code {
            type CodeType
            parameter code
        }
    }
    rogue-parameter {
        VolumeRamp {
            path /Route/volume/ramp
            type uint
            parameter ramp
            default 10
        }
    }
}
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def conf_file(tmp_path: Path) -> Path:
    """Criterion configuration file with both domains populated."""
    path = tmp_path / "audio_criteria.conf"
    path.write_text(EXAMPLE_CONF)
    return path


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> PlatSettings:
    """Settings isolated from any platstate.toml above the test directory."""
    monkeypatch.delenv("PLATSTATE_CONFIG", raising=False)
    return PlatSettings.from_cli(start=tmp_path)


@pytest.fixture
def general() -> MemoryGeneralBackend:
    return MemoryGeneralBackend()


@pytest.fixture
def routing() -> MemoryRoutingBackend:
    return MemoryRoutingBackend()


@pytest.fixture
def engine(
    settings: PlatSettings,
    general: MemoryGeneralBackend,
    routing: MemoryRoutingBackend,
    conf_file: Path,
) -> PlatformStateEngine:
    """Engine loaded from the example configuration, not yet started."""
    return PlatformStateEngine(settings, general, routing, conf_paths=[conf_file])


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run CLI commands from a temp directory with no platstate.toml."""
    monkeypatch.delenv("PLATSTATE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo handler changes made by ``configure_logging`` during CLI runs."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    plat = logging.getLogger("platstate")
    plat_level = plat.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    plat.setLevel(plat_level)
