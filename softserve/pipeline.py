"""
High-level orchestration for softserve.

Creating a theme is an ordered list of stages:
  - validating the theme name,
  - planning and preparing the install directory,
  - choosing a package manager and probing the network,
  - installing the generator package, and
  - handing over to the generator's theme initializer.

Each stage either returns the updated Config or raises. The runner stops
at the first failure and, once the install directory has been touched,
rolls back whatever the pipeline created.
"""

from __future__ import annotations

import enum
import logging
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .config import Config
from .directory import plan_directory, prepare_root
from .errors import CommandError, SoftserveError
from .initializer import (
    InitSummary,
    check_for_script_dep,
    check_node_version,
    resolve_initializer,
)
from .install import run_install
from .naming import check_theme_name
from .package_manager import probe_package_manager
from .rollback import rollback

LOG = logging.getLogger(__name__)


class PipelineState(enum.Enum):
    IDLE = "idle"
    NAME_VALIDATED = "name-validated"
    DIRECTORY_PLANNED = "directory-planned"
    PROBE_COMPLETE = "probe-complete"
    INSTALLED = "installed"
    INITIALIZED = "initialized"
    FAILED = "failed"


@dataclass
class Stage:
    """One step of the pipeline and the state it leads to on success."""

    name: str
    run: Callable[[Config], Config]
    reaches: PipelineState


@dataclass
class PipelineOutcome:
    """
    Result of a pipeline run.

    On failure, failed_stage and error describe what went wrong and the
    last successfully reached state is kept in last_state.
    """

    state: PipelineState
    config: Config
    last_state: PipelineState = PipelineState.IDLE
    failed_stage: Optional[str] = None
    error: Optional[BaseException] = None
    rolled_back: bool = False

    @property
    def ok(self) -> bool:
        return self.state is PipelineState.INITIALIZED

    @property
    def summary(self) -> Optional[InitSummary]:
        return self.config.summary


def validate_name(config: Config) -> Config:
    check_theme_name(config.theme_name, config.original_directory)
    return config


def plan_and_prepare_directory(config: Config) -> Config:
    return prepare_root(plan_directory(config))


def initialize_theme(config: Config) -> Config:
    root = config.root
    if root is None:
        raise SoftserveError("install directory has not been planned")

    package_name = config.package_name
    check_node_version(root, package_name)
    check_for_script_dep(root, package_name)

    initializer = resolve_initializer(package_name)
    config.summary = initializer.initialize(
        root,
        config.theme_name,
        config.verbose,
        config.original_directory,
    )
    return config


def default_stages() -> List[Stage]:
    return [
        Stage("validate-name", validate_name, PipelineState.NAME_VALIDATED),
        Stage("plan-directory", plan_and_prepare_directory, PipelineState.DIRECTORY_PLANNED),
        Stage("probe-package-manager", probe_package_manager, PipelineState.PROBE_COMPLETE),
        Stage("install", run_install, PipelineState.INSTALLED),
        Stage("initialize", initialize_theme, PipelineState.INITIALIZED),
    ]


def run_pipeline(config: Config, stages: Optional[Sequence[Stage]] = None) -> PipelineOutcome:
    """
    Run the stages in order, short-circuiting on the first failure.

    Rollback runs on every failure that happens after the install
    directory was prepared; earlier failures have nothing to undo.
    KeyboardInterrupt is rolled back the same way and then re-raised.
    """

    LOG.debug("Starting softserve with config: %s", config)

    state = PipelineState.IDLE
    for stage in stages if stages is not None else default_stages():
        LOG.info("Running stage %s", stage.name)
        try:
            config = stage.run(config)
        except KeyboardInterrupt:
            LOG.debug("Stage %s interrupted", stage.name)
            if config.root_prepared and config.root is not None:
                print()
                print("Aborting installation.")
                rollback(config.root, config.theme_name)
            raise
        except Exception as exc:  # noqa: BLE001
            LOG.debug("Stage %s failed", stage.name, exc_info=True)
            outcome = PipelineOutcome(
                state=PipelineState.FAILED,
                config=config,
                last_state=state,
                failed_stage=stage.name,
                error=exc,
            )
            if config.root_prepared and config.root is not None:
                _report_abort(exc)
                rollback(config.root, config.theme_name)
                outcome.rolled_back = True
            return outcome
        state = stage.reaches

    return PipelineOutcome(state=state, config=config, last_state=state)


def _report_abort(exc: BaseException) -> None:
    print()
    print("Aborting installation.")
    if isinstance(exc, CommandError):
        print(f"  {exc.command} has failed.")
    elif isinstance(exc, SoftserveError):
        print(str(exc))
    else:
        print("Unexpected error. Please report it as a bug:")
        print(repr(exc))
    print()


def create_theme(config: Config) -> int:
    """
    Entry point for the main CLI command; returns the process exit code.
    """

    outcome = run_pipeline(config)
    if outcome.ok:
        if outcome.summary is not None:
            print(outcome.summary.render())
        return 0

    if not outcome.rolled_back:
        # Nothing was created yet, so the error is the whole story.
        error = outcome.error
        if isinstance(error, SoftserveError):
            print(str(error), file=sys.stderr)
        else:
            print("Unexpected error. Please report it as a bug:", file=sys.stderr)
            print(repr(error), file=sys.stderr)
    return 1
