"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, platstate.toml only contains overrides.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, PositiveInt

# --- platstate.toml sections ---


class HalConfig(BaseModel):
    """[hal] section — location of the criterion configuration file."""

    model_config = {"frozen": True}

    conf_file_name: str = "audio_criteria.conf"
    vendor_dir: Path = Path("/vendor/etc")
    system_dir: Path = Path("/system/etc")
    conf_path: Path | None = None

    def search_paths(self) -> list[Path]:
        """Vendor file first, system file as fallback.

        An explicit ``conf_path`` replaces both.
        """
        if self.conf_path is not None:
            return [self.conf_path]
        return [self.vendor_dir / self.conf_file_name, self.system_dir / self.conf_file_name]


class RouteConfig(BaseModel):
    """[route] section — routing subsystem settings."""

    model_config = {"frozen": True}

    pfw_conf_dir: Path = Path("/etc/parameter-framework")
    pfw_conf_file_name: str = "RouteParameterFramework.xml"
    pfw_verbose: bool = False

    @property
    def pfw_conf_path(self) -> Path:
        return self.pfw_conf_dir / self.pfw_conf_file_name


class DebugConfig(BaseModel):
    """[debug] section — firmware error dump."""

    model_config = {"frozen": True}

    chunk_size: PositiveInt = 998
    path_list_parameter: str = "/Route/debug_fs/debug_files/path_list/"
