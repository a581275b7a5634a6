"""
Child-process launcher for per-platform follower scrapers.

Every (platform, target) pair runs as its own interpreter process so a crashed
or hung browser only ever takes down one run. Batches run platforms in a fixed
order per target; targets may run in parallel on a bounded thread pool.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from pathlib import Path

from app.scraping.logging_utils import log_event
from app.scraping.types import BatchSummary, LaunchResult, Platform, TargetLaunchResults

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SCRAPER_SCRIPTS_DIR = Path(__file__).resolve().parent / "jobs"
SCRAPER_SCRIPTS: dict[str, str] = {
    Platform.FACEBOOK.value: "facebook_follower_count.py",
    Platform.INSTAGRAM.value: "instagram_follower_count.py",
    Platform.LINKEDIN.value: "linkedin_follower_count.py",
}
BATCH_PLATFORMS: tuple[str, ...] = tuple(SCRAPER_SCRIPTS)

ProcessRunner = Callable[..., subprocess.CompletedProcess]


class ScraperProcessLauncher:
    """
    Runs scraper scripts as isolated child processes and reports exit status.
    """

    def __init__(
        self,
        *,
        scripts_dir: Path = SCRAPER_SCRIPTS_DIR,
        python_executable: str | None = None,
        max_workers: int = 1,
        process_timeout_seconds: float | None = None,
        runner: ProcessRunner = subprocess.run,
        executor_factory: Callable[[int], Executor] | None = None,
    ) -> None:
        self._scripts_dir = scripts_dir
        self._python_executable = python_executable or sys.executable
        self._max_workers = max(1, max_workers)
        self._process_timeout_seconds = process_timeout_seconds
        self._runner = runner
        self._executor_factory = executor_factory or (
            lambda workers: ThreadPoolExecutor(
                max_workers=workers,
                thread_name_prefix="scraper-launcher",
            )
        )

    def script_path(self, platform: str) -> Path | None:
        script = SCRAPER_SCRIPTS.get(platform.strip().lower())
        if script is None:
            return None
        return (self._scripts_dir / script).resolve()

    def run(self, platform: str, target_id: str | int) -> LaunchResult:
        """
        Run one scraper process to completion. Never raises.
        """

        target = str(target_id)
        script_path = self.script_path(platform)
        if script_path is None:
            log_event(
                logger,
                logging.ERROR,
                "scraper_platform_unknown",
                platform=platform,
                target_id=target,
            )
            return LaunchResult(
                success=False,
                platform=platform,
                target_id=target,
                error="Unknown platform",
            )

        command = [self._python_executable, str(script_path), target]
        log_event(
            logger,
            logging.INFO,
            "scraper_process_starting",
            platform=platform,
            target_id=target,
            command=command,
        )
        try:
            completed = self._runner(
                command,
                cwd=str(PROJECT_ROOT),
                env=self._child_env(),
                stdin=subprocess.DEVNULL,
                stdout=None,
                stderr=None,
                shell=False,
                check=False,
                timeout=self._process_timeout_seconds,
            )
        except subprocess.TimeoutExpired:
            message = f"Scraper timed out after {self._process_timeout_seconds}s"
            log_event(
                logger,
                logging.ERROR,
                "scraper_process_timeout",
                platform=platform,
                target_id=target,
            )
            return LaunchResult(success=False, platform=platform, target_id=target, error=message)
        except (OSError, subprocess.SubprocessError) as exc:
            log_event(
                logger,
                logging.ERROR,
                "scraper_process_spawn_failed",
                platform=platform,
                target_id=target,
                error=str(exc),
            )
            return LaunchResult(success=False, platform=platform, target_id=target, error=str(exc))

        if completed.returncode == 0:
            log_event(
                logger,
                logging.INFO,
                "scraper_process_succeeded",
                platform=platform,
                target_id=target,
            )
            return LaunchResult(success=True, platform=platform, target_id=target, exit_code=0)

        log_event(
            logger,
            logging.ERROR,
            "scraper_process_failed",
            platform=platform,
            target_id=target,
            exit_code=completed.returncode,
        )
        return LaunchResult(
            success=False,
            platform=platform,
            target_id=target,
            error=f"Scraper exited with code {completed.returncode}",
            exit_code=completed.returncode,
        )

    def submit(self, platform: str, target_id: str | int, executor: Executor) -> Future:
        """
        Schedule one scraper process on an executor and return its future.
        """

        return executor.submit(self.run, platform, target_id)

    def run_target(self, target_id: str | int) -> TargetLaunchResults:
        """
        Run every platform for one target, in platform order.
        """

        target = str(target_id)
        log_event(logger, logging.INFO, "target_scrape_started", target_id=target)
        results = [self.run(platform, target) for platform in BATCH_PLATFORMS]
        log_event(
            logger,
            logging.INFO,
            "target_scrape_completed",
            target_id=target,
            succeeded=sum(1 for item in results if item.success),
        )
        return TargetLaunchResults(target_id=target, platforms=results)

    def run_batch(self, target_ids: Sequence[str | int]) -> BatchSummary:
        """
        Run all platforms for every target and aggregate the outcome.
        """

        if not target_ids:
            return BatchSummary(total_targets=0, total_success=0, total_failed=0, results=[])

        if self._max_workers == 1:
            results = [self.run_target(target_id) for target_id in target_ids]
        else:
            workers = min(self._max_workers, len(target_ids))
            with self._executor_factory(workers) as executor:
                futures = [executor.submit(self.run_target, target_id) for target_id in target_ids]
                results = [future.result() for future in futures]

        total_success = sum(
            1 for target in results for result in target.platforms if result.success
        )
        total_failed = sum(
            1 for target in results for result in target.platforms if not result.success
        )
        log_event(
            logger,
            logging.INFO,
            "scrape_batch_completed",
            total_targets=len(target_ids),
            total_success=total_success,
            total_failed=total_failed,
        )
        return BatchSummary(
            total_targets=len(target_ids),
            total_success=total_success,
            total_failed=total_failed,
            results=results,
        )

    @staticmethod
    def _child_env() -> dict[str, str]:
        env = dict(os.environ)
        existing = env.get("PYTHONPATH")
        root = str(PROJECT_ROOT)
        env["PYTHONPATH"] = f"{root}{os.pathsep}{existing}" if existing else root
        return env
