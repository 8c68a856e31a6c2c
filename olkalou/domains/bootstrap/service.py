# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database bootstrap service.

Brings the hosted backend to a usable state and records what has been
done so repeated runs are cheap. Every step is idempotent: it is skipped
when its flag is set, and it adopts existing remote rows instead of
writing duplicates when the flag was lost.

The bootstrap flow:
1. Verify the backend connection (fatal on failure)
2. Verify every table answers a limit-1 query (fatal on failure)
3. Seed the grading scale
4. Seed default accounts with their profiles
5. Seed sample data (books, activities, fees, announcements)
6. Record the schema version

Seeding failures become warnings on the report and never stop the run.

Example:
    >>> initializer = DatabaseInitializer(gateway, tracker, settings.bootstrap)
    >>> report = await initializer.run(progress=print)
    >>> report.success
    True
"""

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, Optional, Union
from uuid import uuid4

from olkalou.core.config.settings import BootstrapSettings
from olkalou.domains.bootstrap.exceptions import InitializerDisposedError
from olkalou.domains.bootstrap.models import (
    BootstrapPhase,
    InitializationReport,
    InitializationStatus,
    OperationResult,
    ProgressEvent,
    StepResult,
    StepStatus,
)
from olkalou.infrastructure.database.connection import RemoteStoreGateway
from olkalou.infrastructure.database.models import (
    ENTITY_TYPES,
    Activity,
    Announcement,
    Fees,
    GradingBand,
    LibraryBook,
    RemoteEntity,
    Student,
    User,
)
from olkalou.infrastructure.database.seeds import (
    AccountSeed,
    build_activities,
    build_announcements,
    build_default_accounts,
    build_fees,
    build_grading_scale,
    build_library_books,
)
from olkalou.infrastructure.state.tracker import MigrationFlag, MigrationStateTracker
from olkalou.utils.logging import bind_context

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], Union[None, Awaitable[None]]]
AccountBuilder = Callable[[str], list[AccountSeed]]

USER_DATA_RESET_NOTE = "User data reset requested but not implemented for safety"


class DatabaseInitializer:
    """Idempotent bootstrap of the school backend.

    One instance runs at most one bootstrap at a time. Callers arriving
    while a run is in flight share its report.

    Attributes:
        _gateway: Remote store gateway used for probes and inserts.
        _tracker: Persisted per-step completion flags.
        _config: Retry counts, delays and seed options.

    Example:
        >>> async with DatabaseInitializer(gateway, tracker) as initializer:
        ...     status = await initializer.get_status()
        ...     if not status.is_fully_initialized:
        ...         await initializer.run()
    """

    def __init__(
        self,
        gateway: RemoteStoreGateway,
        tracker: MigrationStateTracker,
        config: Optional[BootstrapSettings] = None,
        account_builder: AccountBuilder = build_default_accounts,
    ) -> None:
        """Initialize the bootstrap service.

        Args:
            gateway: Remote store gateway. Initialized on demand.
            tracker: Migration state tracker.
            config: Bootstrap settings. Defaults to environment values.
            account_builder: Builds the default roster from the seed
                password.
        """
        self._gateway = gateway
        self._tracker = tracker
        self._config = config or BootstrapSettings()
        self._account_builder = account_builder

        self._phase = BootstrapPhase.IDLE
        self._disposed = False
        self._run_lock = asyncio.Lock()
        self._current_run: Optional[asyncio.Task[InitializationReport]] = None

    @property
    def phase(self) -> BootstrapPhase:
        return self._phase

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def schema_version(self) -> int:
        return self._config.schema_version

    # ========== Public API ==========

    async def run(self, progress: Optional[ProgressCallback] = None) -> InitializationReport:
        """Run the bootstrap, or join the run already in flight.

        Args:
            progress: Optional observer, plain or async, receiving
                ProgressEvents. Its errors are logged and ignored. A caller
                joining an in-flight run does not receive its events.

        Returns:
            InitializationReport for the run. Never raises for step failures.

        Raises:
            InitializerDisposedError: If dispose() has been called.
        """
        self._ensure_not_disposed()

        async with self._run_lock:
            if self._current_run is None or self._current_run.done():
                self._current_run = asyncio.create_task(self._execute(progress))
            else:
                logger.info("Bootstrap already in progress, waiting for it")
            task = self._current_run

        # Cancelling one waiter must not cancel the run shared with others
        return await asyncio.shield(task)

    async def get_status(self) -> InitializationStatus:
        """Read bootstrap progress without touching the backend.

        Raises:
            StateStoreError: If the state store cannot be read.
        """
        state = await self._tracker.snapshot()
        return InitializationStatus.from_state(state, self.schema_version)

    async def is_initialization_needed(self) -> bool:
        status = await self.get_status()
        return not status.is_fully_initialized

    async def get_initialization_summary(self) -> str:
        status = await self.get_status()
        return status.summary()

    async def reset_state(self, include_user_data: bool = False) -> OperationResult:
        """Forget all bootstrap progress.

        Remote rows are never deleted. With ``include_user_data`` the
        request is logged and noted on the result.

        Raises:
            InitializerDisposedError: If dispose() has been called.
        """
        self._ensure_not_disposed()

        try:
            await self._tracker.clear_all()
        except Exception as e:
            logger.error("Database reset failed: %s", e, exc_info=True)
            return OperationResult.failed(f"Database reset failed: {e}")

        self._phase = BootstrapPhase.IDLE
        logger.info("Bootstrap state cleared")

        if include_user_data:
            logger.warning(USER_DATA_RESET_NOTE)
            return OperationResult.succeeded(details=USER_DATA_RESET_NOTE)
        return OperationResult.succeeded()

    def dispose(self) -> None:
        """Mark the instance unusable. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        logger.debug("Database initializer disposed")

    async def __aenter__(self) -> "DatabaseInitializer":
        self._ensure_not_disposed()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.dispose()

    # ========== Run ==========

    def _ensure_not_disposed(self) -> None:
        if self._disposed:
            raise InitializerDisposedError()

    async def _execute(self, progress: Optional[ProgressCallback]) -> InitializationReport:
        run_id = str(uuid4())
        bind_context(bootstrap_run_id=run_id)
        started = time.perf_counter()
        report = InitializationReport(metadata={"run_id": run_id, "steps": {}})

        def record(step: str, result: StepResult) -> None:
            report.metadata["steps"][step] = result.status.value
            if result.status == StepStatus.WARNING and result.error_message:
                report.warnings.append(result.error_message)

        logger.info("Starting database initialization")

        try:
            # 1. Connection
            self._phase = BootstrapPhase.VERIFYING_CONNECTION
            await self._notify(progress, "Verifying Connection", 10)
            result = await self._verify_connection()
            record("verify_connection", result)
            if result.is_fatal:
                return self._fail(report, result.error_message, started)

            # 2. Tables
            self._phase = BootstrapPhase.VERIFYING_TABLES
            await self._notify(progress, "Verifying Tables", 20)
            result = await self._verify_tables()
            record("verify_tables", result)
            if result.is_fatal:
                return self._fail(report, result.error_message, started)

            # 3. Grading scale
            self._phase = BootstrapPhase.SEEDING_GRADING
            await self._notify(progress, "Setting up Grading System", 40)
            record("seed_grading", await self._seed_grading_scale())

            # 4. Default accounts
            self._phase = BootstrapPhase.SEEDING_DEFAULT_USERS
            await self._notify(progress, "Creating Default Users", 60)
            record("seed_default_users", await self._seed_default_users())

            # 5. Sample data
            self._phase = BootstrapPhase.SEEDING_SAMPLE_DATA
            await self._notify(progress, "Setting up Sample Data", 80)
            sample_results = await self._seed_sample_data()
            for name, sub_result in sample_results.items():
                record(f"seed_{name}", sub_result)

            # 6. Schema version
            self._phase = BootstrapPhase.FINALIZING
            await self._notify(progress, "Finalizing", 100)
            await self._tracker.set_version(self.schema_version)
            report.metadata["schema_version"] = self.schema_version

        except Exception as e:
            logger.exception("Unexpected error during initialization")
            return self._fail(report, f"Unexpected error during initialization: {e}", started)

        self._phase = BootstrapPhase.DONE
        report.success = True
        report.duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "Database initialization completed in %.0f ms with %d warning(s)",
            report.duration_ms,
            len(report.warnings),
        )
        await self._notify(progress, "Completed", 100, is_completed=True)
        return report

    def _fail(
        self,
        report: InitializationReport,
        message: Optional[str],
        started: float,
    ) -> InitializationReport:
        self._phase = BootstrapPhase.FAILED
        report.success = False
        report.error_message = message
        report.duration_ms = (time.perf_counter() - started) * 1000
        logger.error("Database initialization failed: %s", message)
        return report

    async def _notify(
        self,
        progress: Optional[ProgressCallback],
        step_name: str,
        percent: int,
        *,
        is_completed: bool = False,
        error_message: Optional[str] = None,
    ) -> None:
        if progress is None:
            return
        event = ProgressEvent(
            step_name=step_name,
            percent_complete=percent,
            is_completed=is_completed,
            error_message=error_message,
        )
        try:
            outcome = progress(event)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.warning("Progress observer failed on '%s': %s", step_name, e)

    # ========== Steps ==========

    async def _verify_connection(self) -> StepResult:
        try:
            if not self._gateway.is_initialized:
                await self._gateway.initialize()
            health = await self._gateway.health_check()
        except Exception as e:
            logger.error("Connection verification failed: %s", e)
            return StepResult.fatal(f"Connection verification failed: {e}")

        if not health.is_healthy:
            return StepResult.fatal(f"Remote store connection unhealthy: {health.message}")

        logger.info("Remote store connection verified")
        return StepResult.ok()

    async def _verify_tables(self) -> StepResult:
        try:
            if await self._tracker.get_flag(MigrationFlag.TABLES_VERIFIED):
                logger.info("Tables already verified, skipping")
                return StepResult.ok("skipped")

            outcomes = await asyncio.gather(
                *(self._probe_table(entity_cls) for entity_cls in ENTITY_TYPES)
            )
            failures = [message for message in outcomes if message is not None]
            if failures:
                return StepResult.fatal(f"Table verification failed for: {', '.join(failures)}")

            await self._tracker.set_flag(MigrationFlag.TABLES_VERIFIED)
        except Exception as e:
            return StepResult.fatal(f"Table verification failed: {e}")

        logger.info("All %d tables verified", len(ENTITY_TYPES))
        return StepResult.ok()

    async def _probe_table(self, entity_cls: type[RemoteEntity]) -> Optional[str]:
        """Query one row of a table, retrying with a linear backoff.

        Returns:
            None when the table answered, else the failure message.
        """
        attempts = self._config.max_retry_attempts
        table = entity_cls.__tablename__

        for attempt in range(1, attempts + 1):
            try:
                await self._gateway.query(entity_cls, limit=1)
                logger.debug("Table %s verified", table)
                return None
            except Exception as e:
                if attempt >= attempts:
                    logger.error("Table %s verification failed: %s", table, e)
                    return f"Table '{table}' verification failed: {e}"
                logger.warning(
                    "Table %s probe attempt %d/%d failed: %s", table, attempt, attempts, e
                )
                await asyncio.sleep(self._config.retry_delay_seconds * attempt)

        return None

    async def _has_rows(self, entity_cls: type[RemoteEntity], **filters: Any) -> bool:
        rows = await self._gateway.query(entity_cls, filters=filters or None, limit=1)
        return bool(rows)

    async def _insert_validated(self, row: RemoteEntity) -> None:
        row.validate_and_raise()
        await self._gateway.insert(row)

    async def _insert_all(self, rows: list[RemoteEntity]) -> int:
        for index, row in enumerate(rows):
            if index:
                await asyncio.sleep(self._config.insert_delay_seconds)
            await self._insert_validated(row)
        return len(rows)

    async def _seed_grading_scale(self) -> StepResult:
        try:
            if await self._tracker.get_flag(MigrationFlag.GRADING_SEEDED):
                logger.info("Grading system already migrated, skipping")
                return StepResult.ok("skipped")

            if await self._has_rows(GradingBand):
                logger.info("Grading bands already present, adopting them")
                await self._tracker.set_flag(MigrationFlag.GRADING_SEEDED)
                return StepResult.ok("adopted existing rows")

            count = await self._insert_all(build_grading_scale())
            await self._tracker.set_flag(MigrationFlag.GRADING_SEEDED)
        except Exception as e:
            logger.error("Grading system migration failed: %s", e)
            return StepResult.warning(f"Grading system migration failed: {e}")

        logger.info("Grading system migrated with %d bands", count)
        return StepResult.ok()

    async def _seed_default_users(self) -> StepResult:
        try:
            if await self._tracker.get_flag(MigrationFlag.DEFAULT_USERS_SEEDED):
                logger.info("Default users already created, skipping")
                return StepResult.ok("skipped")

            if await self._has_rows(User):
                logger.info("Users already present, adopting them")
                await self._tracker.set_flag(MigrationFlag.DEFAULT_USERS_SEEDED)
                return StepResult.ok("adopted existing rows")

            password = self._config.default_password.get_secret_value()
            # bcrypt hashing is CPU bound
            accounts = await asyncio.to_thread(self._account_builder, password)

            for index, seed in enumerate(accounts):
                if index:
                    await asyncio.sleep(self._config.user_insert_delay_seconds)
                await self._insert_validated(seed.user)
                seed.link()
                await self._insert_validated(seed.profile)
                logger.debug("Created %s account %s", seed.user.user_type, seed.user.id)

            await self._tracker.set_flag(MigrationFlag.DEFAULT_USERS_SEEDED)
        except Exception as e:
            logger.error("Default users creation failed: %s", e)
            return StepResult.warning(f"Default users creation failed: {e}")

        logger.info("Created %d default accounts", len(accounts))
        return StepResult.ok()

    async def _seed_sample_data(self) -> dict[str, StepResult]:
        """Run the four sample seeders concurrently.

        Each seeder isolates its own failure. The flag is set once all of
        them have returned, whatever their outcome.
        """
        if not self._config.seed_sample_data:
            logger.info("Sample data seeding disabled")
            return {"sample_data": StepResult.ok("disabled")}

        try:
            if await self._tracker.get_flag(MigrationFlag.SAMPLE_DATA_SEEDED):
                logger.info("Sample data already migrated, skipping")
                return {"sample_data": StepResult.ok("skipped")}
        except Exception as e:
            return {"sample_data": StepResult.warning(f"Sample data migration failed: {e}")}

        seeders: list[tuple[str, str, Callable[[], Awaitable[StepResult]]]] = [
            ("library_books", "Library books", self._seed_library_books),
            ("activities", "Activities", self._seed_activities),
            ("fees", "Fees", self._seed_fees),
            ("announcements", "Announcements", self._seed_announcements),
        ]
        outcomes = await asyncio.gather(
            *(self._isolated(label, seeder) for _, label, seeder in seeders)
        )
        results = {name: outcome for (name, _, _), outcome in zip(seeders, outcomes)}

        try:
            await self._tracker.set_flag(MigrationFlag.SAMPLE_DATA_SEEDED)
        except Exception as e:
            results["sample_data"] = StepResult.warning(f"Sample data migration failed: {e}")
        return results

    async def _isolated(
        self, label: str, seeder: Callable[[], Awaitable[StepResult]]
    ) -> StepResult:
        try:
            return await seeder()
        except Exception as e:
            logger.error("%s migration failed: %s", label, e)
            return StepResult.warning(f"{label} migration failed: {e}")

    async def _seed_library_books(self) -> StepResult:
        if await self._has_rows(LibraryBook):
            return StepResult.ok("adopted existing rows")
        count = await self._insert_all(build_library_books())
        logger.info("Seeded %d library books", count)
        return StepResult.ok()

    async def _seed_activities(self) -> StepResult:
        if await self._has_rows(Activity):
            return StepResult.ok("adopted existing rows")
        count = await self._insert_all(build_activities())
        logger.info("Seeded %d activities", count)
        return StepResult.ok()

    async def _seed_fees(self) -> StepResult:
        students = await self._gateway.query(Student, limit=1)
        if not students:
            logger.info("No student found, skipping sample fees")
            return StepResult.ok("no student")

        student = students[0]
        if await self._has_rows(Fees, student_id=student.id):
            return StepResult.ok("adopted existing rows")

        await self._insert_validated(build_fees(student.id))
        logger.info("Seeded fee account for student %s", student.id)
        return StepResult.ok()

    async def _seed_announcements(self) -> StepResult:
        if await self._has_rows(Announcement):
            return StepResult.ok("adopted existing rows")
        count = await self._insert_all(build_announcements())
        logger.info("Seeded %d announcements", count)
        return StepResult.ok()
