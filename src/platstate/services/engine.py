"""PlatformStateEngine — synchronizes HAL parameters with both domains.

The engine is the single entry point used by the surrounding HAL code.
It loads the criterion configuration at construction, then serves:

- :meth:`set_parameters` / :meth:`get_parameters` for ``key=value`` strings;
- :meth:`set_value` / :meth:`get_value` for programmatic criterion access;
- :meth:`print_platform_firmware_error_info` for diagnostics.

Writes run under the exclusive side of one reader/writer lock. Pending
changes are committed to both backends only when the aggregator reports
one, and routing reconsideration is triggered after the lock is released.

INVARIANT: No notification is ever sent while the lock is held.
"""

from __future__ import annotations

import codecs
import logging
import shlex
from pathlib import Path
from typing import TYPE_CHECKING, Any

from platstate.config.logging import route_backend_sink
from platstate.domain.parameters import RogueParameter
from platstate.domain.types import AudioBand, CriterionName, Status
from platstate.infrastructure.backends import BackendError
from platstate.infrastructure.keyvalue import KeyValuePairs
from platstate.infrastructure.rwlock import RWLock
from platstate.services.loader import ConfigurationLoader
from platstate.services.result import ServiceError, ServiceResult
from platstate.services.state import PlatformModel

if TYPE_CHECKING:
    from platstate.config.settings import PlatSettings
    from platstate.infrastructure.backends import GeneralBackend, RoutingBackend
    from platstate.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


def _devices_criterion(is_out: bool) -> str:
    return CriterionName.OUTPUT_DEVICE if is_out else CriterionName.INPUT_DEVICE


def _band(value: int) -> AudioBand | int:
    """Known bands come back as :class:`AudioBand`, other codes as plain ints."""
    try:
        return AudioBand(value)
    except ValueError:
        return value


class PlatformStateEngine:
    """Platform-state synchronization engine.

    Args:
        settings: Injected configuration (file locations, debug options).
        general: General-purpose backend, also the routing-reconsideration target.
        routing: Routing backend with atomic ``apply_configurations``.
        plugin_manager: Optional pluggy manager receiving lifecycle hooks.
        conf_paths: Overrides the vendor/system search paths of ``settings.hal``.
    """

    def __init__(
        self,
        settings: PlatSettings,
        general: GeneralBackend,
        routing: RoutingBackend,
        *,
        plugin_manager: PluginManager | None = None,
        conf_paths: list[Path] | None = None,
    ) -> None:
        self._settings = settings
        self._general = general
        self._routing = routing
        self._plugins = plugin_manager
        self._lock = RWLock()

        logger.info("Route PFW: using configuration file %s", settings.route.pfw_conf_path)
        routing.set_logger(route_backend_sink(verbose=settings.route.pfw_verbose))

        self._model = PlatformModel(general, routing)
        self.conf_path = self._load(conf_paths or settings.hal.search_paths())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _load(self, paths: list[Path]) -> Path | None:
        loader = ConfigurationLoader(self._model)
        for path in paths:
            loaded = loader.load_file(path)
            self._dispatch("post_load", path=str(path), loaded=loaded)
            if loaded:
                return path
            logger.info("Criterion configuration %s not found", path)
        logger.error(
            "None of the criterion configuration files could be found: %s",
            ", ".join(str(p) for p in paths),
        )
        return None

    def start(self) -> ServiceResult:
        """Start the routing backend."""
        try:
            self._routing.start()
        except BackendError as exc:
            logger.error("Route PFW start error: %s", exc)
            return ServiceResult(
                ok=False,
                op="start",
                error=ServiceError(code=Status.NO_INIT, message=str(exc)),
            )
        logger.debug("Route PFW successfully started")
        return ServiceResult(ok=True, op="start")

    def is_started(self) -> bool:
        started = self._routing.is_started()
        logger.debug("Route PFW started: %s", started)
        return started

    def sync(self) -> ServiceResult:
        """Apply every parameter default and commit, without notifying routing."""
        with self._lock.write():
            errors, changed = self._model.parameters.apply_defaults()
            for name in changed:
                self._model.aggregator.mark(name)
            committed = self._model.commit()
        if errors:
            return ServiceResult(
                ok=False,
                op="sync",
                data={"changed": committed},
                error=ServiceError(
                    code=Status.BAD_VALUE,
                    message=f"{errors} default value(s) could not be applied",
                ),
            )
        return ServiceResult(ok=True, op="sync", data={"changed": committed})

    # ------------------------------------------------------------------
    # Parameter strings
    # ------------------------------------------------------------------

    def set_parameters(self, key_value_pairs: str, *, synchronous: bool = False) -> ServiceResult:
        """Apply ``key=value;...`` updates and commit when anything changed.

        Unknown keys are returned as warnings; values that fail conversion
        make the result ``BAD_VALUE`` while every other pair still applies.
        """
        warnings: list[str] = []
        with self._lock.write():
            logger.debug("set_parameters: %s", key_value_pairs)
            pairs = KeyValuePairs.parse(key_value_pairs)
            rejected: list[str] = []
            for key, value in pairs.items():
                claim = self._model.parameters.claim(key, value)
                if not claim.matched:
                    continue
                pairs.remove(key)
                if not claim.ok:
                    rejected.append(key)
                for name in claim.changed:
                    self._model.aggregator.mark(name)

            if len(pairs):
                logger.warning("Unhandled argument: %s", pairs)
                warnings.extend(f"Unhandled key: {key}" for key in pairs)

            changed: list[str] | None = None
            if self._model.aggregator.has_changed:
                changed = self._model.commit()

        if changed is not None:
            self._notify(changed, synchronous)

        data = {"committed": changed is not None, "changed": changed or []}
        if rejected:
            return ServiceResult(
                ok=False,
                op="set_parameters",
                data=data,
                warnings=warnings,
                error=ServiceError(
                    code=Status.BAD_VALUE,
                    message=f"Invalid value for {', '.join(rejected)}",
                    detail={"keys": rejected},
                ),
            )
        return ServiceResult(ok=True, op="set_parameters", data=data, warnings=warnings)

    def get_parameters(self, keys: str) -> str:
        """Return ``key=value;...`` for the requested keys that resolve."""
        with self._lock.read():
            requested = KeyValuePairs.parse(keys)
            return str(KeyValuePairs(self._model.parameters.resolve(requested.keys())))

    def parameter_keys(self) -> list[str]:
        """Every configuration key bound by the loaded configuration."""
        with self._lock.read():
            return self._model.parameters.keys()

    # ------------------------------------------------------------------
    # Programmatic access
    # ------------------------------------------------------------------

    def get_value(self, name: str) -> int:
        """Current value of criterion *name*, routing domain first; 0 if unknown."""
        with self._lock.read():
            criterion = self._model.lookup(name)
            return criterion.value if criterion is not None else 0

    def set_value(self, value: int, name: str) -> None:
        """Set criterion *name* in every domain declaring it and mark changes.

        Nothing is committed; see :meth:`update_platform_state`.
        """
        with self._lock.write():
            for state in (self._model.routing, self._model.general):
                if name in state.criteria and state.criteria.set(name, value):
                    self._model.aggregator.mark(name)

    def update_platform_state(self, *, synchronous: bool = False) -> bool:
        """Commit pending programmatic changes and notify routing.

        Returns whether a commit happened.
        """
        with self._lock.write():
            if not self._model.aggregator.has_changed:
                return False
            changed = self._model.commit()
        self._notify(changed, synchronous)
        return True

    def has_platform_state_changed(self) -> bool:
        with self._lock.read():
            return self._model.aggregator.has_changed

    def describe(self) -> dict[str, Any]:
        """Snapshot of declared types, criteria and parameters per domain."""
        with self._lock.read():
            domains: dict[str, Any] = {}
            for state in (self._model.general, self._model.routing):
                domains[state.domain.value] = {
                    "types": {
                        name: {
                            "inclusive": state.types.get(name).inclusive,
                            "values": state.types.get(name).values,
                        }
                        for name in state.types.names()
                    },
                    "criteria": {c.name: c.value for c in state.criteria},
                }
            return {
                "conf_path": str(self.conf_path) if self.conf_path else None,
                "domains": domains,
                "parameters": [
                    {
                        "key": p.key,
                        "name": p.name,
                        "domain": p.domain.value,
                        "kind": "rogue" if isinstance(p, RogueParameter) else "criterion",
                    }
                    for p in self._model.parameters
                ],
                "tracked": self._model.aggregator.tracked,
            }

    # Convenience accessors for well-known criteria.

    def set_mode(self, mode: int) -> None:
        self.set_value(mode, CriterionName.ANDROID_MODE)

    def get_mode(self) -> int:
        return self.get_value(CriterionName.ANDROID_MODE)

    def set_mic_mute(self, muted: bool) -> None:
        self.set_value(int(muted), CriterionName.MIC_MUTE)

    def is_mic_muted(self) -> bool:
        return bool(self.get_value(CriterionName.MIC_MUTE))

    def set_modem_alive(self, alive: bool) -> None:
        self.set_value(int(alive), CriterionName.MODEM_STATE)

    def is_modem_alive(self) -> bool:
        return bool(self.get_value(CriterionName.MODEM_STATE))

    def set_modem_audio_available(self, available: bool) -> None:
        self.set_value(int(available), CriterionName.MODEM_AUDIO_STATUS)

    def is_modem_audio_available(self) -> bool:
        return bool(self.get_value(CriterionName.MODEM_AUDIO_STATUS))

    def set_modem_embedded(self, embedded: bool) -> None:
        self.set_value(int(embedded), CriterionName.HAS_MODEM)

    def is_modem_embedded(self) -> bool:
        return bool(self.get_value(CriterionName.HAS_MODEM))

    def set_devices(self, devices: int, *, is_out: bool) -> None:
        self.set_value(devices, _devices_criterion(is_out))

    def get_devices(self, *, is_out: bool) -> int:
        return self.get_value(_devices_criterion(is_out))

    def set_input_sources(self, sources: int) -> None:
        self.set_value(sources, CriterionName.INPUT_SOURCES)

    def get_input_source(self) -> int:
        return self.get_value(CriterionName.INPUT_SOURCES)

    def set_output_flags(self, flags: int) -> None:
        self.set_value(flags, CriterionName.OUTPUT_FLAGS)

    def get_output_flags(self) -> int:
        return self.get_value(CriterionName.OUTPUT_FLAGS)

    def set_csv_band_type(self, band: AudioBand) -> None:
        self.set_value(int(band), CriterionName.CSV_BAND)

    def get_csv_band_type(self) -> AudioBand | int:
        return _band(self.get_value(CriterionName.CSV_BAND))

    def set_voip_band_type(self, band: AudioBand) -> None:
        self.set_value(int(band), CriterionName.VOIP_BAND)

    def get_voip_band_type(self) -> AudioBand | int:
        return _band(self.get_value(CriterionName.VOIP_BAND))

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def print_platform_firmware_error_info(self, paths: list[str] | None = None) -> list[str]:
        """Stream debug files into the error log, chunk by chunk.

        *paths* defaults to the path list stored by the routing backend at
        ``settings.debug.path_list_parameter``. Returns the dumped paths.
        """
        logger.error("^^^^  Print platform audio firmware error info  ^^^^")
        chunk_size = self._settings.debug.chunk_size
        dumped: list[str] = []

        with self._lock.read():
            if paths is None:
                raw = self._routing.get_parameter(self._settings.debug.path_list_parameter)
                if raw is None:
                    logger.error("Could not get debug file path list from routing backend")
                    return dumped
                paths = shlex.split(str(raw))

            for path in paths:
                logger.error("Opening file %s and reading it", path)
                try:
                    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
                    with Path(path).open("rb") as stream:
                        while chunk := stream.read(chunk_size):
                            if text := decoder.decode(chunk):
                                logger.error("%s", text)
                        if tail := decoder.decode(b"", final=True):
                            logger.error("%s", tail)
                except OSError as exc:
                    logger.error("Unable to open file %s: %s", path, exc)
                    continue
                dumped.append(path)
        return dumped

    # ------------------------------------------------------------------
    # Notification (lock must not be held)
    # ------------------------------------------------------------------

    def _notify(self, changed: list[str], synchronous: bool) -> None:
        self._general.reconsider_routing(synchronous)
        self._dispatch("post_commit", changed=changed, synchronous=synchronous)

    def _dispatch(self, hook_name: str, **payload: object) -> None:
        if self._plugins is None:
            return
        self._plugins.dispatch(hook_name, **payload)
