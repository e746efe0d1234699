"""
Bootstrap orchestrator — the top-to-bottom run.

Flow:
    probe → select package manager → mandatory installs → optional installs
    → framework → plugins → .zshrc edits → login shell

Each step records a StepResult. A fatal result raises a BootstrapError,
which stops the run before any later step has side effects; run()
converts it into ``RunResult.halted``.
"""

from __future__ import annotations

import logging
import shlex

from shellstrap.adapters.registry import AdapterRegistry
from shellstrap.core.context import BootstrapContext
from shellstrap.core.data import catalog
from shellstrap.core.errors import BootstrapError, ConfigFileMissing, MandatoryInstallFailed
from shellstrap.core.models.capability import ConfigEdit, PluginSpec
from shellstrap.core.models.outcome import Outcome, RunResult, StepResult
from shellstrap.core.services.config_patch import ConfigFileUnreadable, ConfigPatcher, plugins_edit
from shellstrap.core.services.framework import FrameworkInstaller
from shellstrap.core.services.installer import Installer
from shellstrap.core.services.package_managers import PackageManager, select_package_manager
from shellstrap.core.services.plugins import PluginFetcher
from shellstrap.core.services.probe import CapabilityProber
from shellstrap.core.services.shell_switch import SHELL_STEP, ShellSwitcher

logger = logging.getLogger(__name__)

_UNSET = object()


class Orchestrator:
    """Run every bootstrap step once, in order.

    Args:
        context: The run context.
        registry: Adapter registry with ``shell`` and ``git`` adapters.
        prober: Capability prober (default: real PATH lookups).
        manager: Package manager to use. Left unset, it is detected once
            from the prober; pass None explicitly to simulate a host
            without one.
    """

    def __init__(
        self,
        context: BootstrapContext,
        registry: AdapterRegistry,
        prober: CapabilityProber | None = None,
        manager: PackageManager | None | object = _UNSET,
    ):
        self.context = context
        self.registry = registry
        self.prober = prober or CapabilityProber(registry=registry)
        self._manager = manager

    def run(self) -> RunResult:
        result = RunResult()
        logger.info("Bootstrapping zsh and oh-my-zsh for %s", self.context.home)
        try:
            self._run(result)
        except BootstrapError as e:
            result.halted = str(e)
            logger.error("Bootstrap halted: %s", e)
        return result

    # ── Steps ───────────────────────────────────────────────────

    def _run(self, result: RunResult) -> None:
        if self.context.check_network:
            self._check_network(result)

        manager = self._select_manager()
        result.package_manager = manager.name if manager else None
        installer = Installer(self.context, self.registry, self.prober, manager)

        for capability in catalog.MANDATORY_CAPABILITIES:
            self._require(result.record(installer.ensure(capability)))

        optional = [*catalog.OPTIONAL_TOOLS, *self.context.extra_capabilities]
        if manager is not None and catalog.COMMAND_NOT_FOUND.packages_for(manager.name):
            optional.append(catalog.COMMAND_NOT_FOUND)
        ready: set[str] = set()
        for capability in optional:
            step = result.record(installer.ensure(capability))
            if capability.mandatory:
                self._require(step)
            if step.ok:
                ready.add(capability.name)

        framework = FrameworkInstaller(self.context, self.registry, self.prober)
        self._require(result.record(framework.ensure()))

        fetcher = PluginFetcher(self.context, self.registry)
        fetched = []
        for spec in self._plugins():
            if result.record(fetcher.fetch(spec)).ok:
                fetched.append(spec.name)

        patcher = self._patch_config(result, self._plugin_names(fetched, ready), ready)
        if patcher.backup_path is not None:
            result.backup_path = str(patcher.backup_path)

        if self.context.switch_shell:
            self._switch_shell(result)

    def _check_network(self, result: RunResult) -> None:
        logger.info("Checking network connectivity...")
        online = self.prober.probe_network(self.context.network_hosts)
        if online is False:
            result.record(StepResult(
                step="probe:network",
                outcome=Outcome.FAILED_NON_FATAL,
                message="no network connection detected; downloads will likely fail",
            ))
            logger.warning("No network connection detected")
        elif online:
            logger.info("Network connection OK")

    def _select_manager(self) -> PackageManager | None:
        if self._manager is _UNSET:
            self._manager = select_package_manager(self.prober)
        return self._manager  # type: ignore[return-value]

    def _require(self, step: StepResult) -> None:
        if step.outcome is Outcome.FAILED_FATAL:
            raise MandatoryInstallFailed(step)

    def _plugins(self) -> list[PluginSpec]:
        return [*catalog.DEFAULT_PLUGINS, *self.context.extra_plugins]

    def _plugin_names(self, fetched: list[str], ready: set[str]) -> list[str]:
        """The plugins line for this host, in load order."""
        names = ["git", *fetched]
        if "fzf" in ready:
            names.append("fzf")
        if catalog.COMMAND_NOT_FOUND.name in ready:
            names.append("command-not-found")
        names += catalog.BUILTIN_PLUGINS
        names += [tool for tool in catalog.TOOL_PLUGINS if self.prober.has(tool)]
        if "autojump" in ready:
            names.append("autojump")
        names += self.context.enable_plugins

        # zsh-syntax-highlighting must be sourced after every other plugin
        if "zsh-syntax-highlighting" in names:
            names.remove("zsh-syntax-highlighting")
            names.append("zsh-syntax-highlighting")
        return list(dict.fromkeys(names))

    def _patch_config(
        self,
        result: RunResult,
        plugin_names: list[str],
        ready: set[str],
    ) -> ConfigPatcher:
        patcher = ConfigPatcher(self.context.zshrc, self.context.timestamp)
        if not self.context.zshrc.is_file():
            raise ConfigFileMissing(str(self.context.zshrc))

        logger.info("Configuring %s...", self.context.zshrc)
        try:
            content = patcher.read()
        except ConfigFileUnreadable as e:
            logger.warning("%s", e)
            zshrc = shlex.quote(str(self.context.zshrc))
            result.record(StepResult(
                step="config:zshrc",
                outcome=Outcome.FAILED_NON_FATAL,
                message=str(e),
                remediation=f"iconv -f ISO-8859-1 -t UTF-8 {zshrc} > {zshrc}.utf8 && mv {zshrc}.utf8 {zshrc}",
            ))
            return patcher

        edits: list[ConfigEdit] = []
        plugins = plugins_edit(content, plugin_names)
        if plugins is not None:
            edits.append(plugins)
        else:
            result.record(StepResult(step="config:plugins", outcome=Outcome.ALREADY_PRESENT))
        edits += catalog.config_blocks(self.prober.has, plugin_names, "direnv" in ready)
        edits += self.context.extra_blocks

        for edit in edits:
            try:
                result.record(patcher.apply_edit(edit))
            except OSError as e:
                logger.warning("Editing %s for %s failed: %s", self.context.zshrc, edit.name, e)
                result.record(StepResult(
                    step=f"config:{edit.name}",
                    outcome=Outcome.FAILED_NON_FATAL,
                    message=str(e),
                ))
        return patcher

    def _switch_shell(self, result: RunResult) -> None:
        shell_path = self.prober.resolve(self.context.shell_name)
        if shell_path is None:
            result.record(StepResult(
                step=SHELL_STEP,
                outcome=Outcome.FAILED_NON_FATAL,
                message=f"{self.context.shell_name} not found on PATH",
                remediation=f"chsh -s $(which {self.context.shell_name})",
            ))
            return
        switcher = ShellSwitcher(self.context, self.registry)
        result.record(switcher.set_default_shell(shell_path))

