"""Batch job that pre-populates the translation cache.

Refreshes the language list and then every (language, platform) bucket
unconditionally, ignoring the staleness checks, so the cache is warm before
traffic arrives. Can run once from the command line or periodically with
the ``schedule`` library.
"""

import argparse
import functools
import time
from typing import Iterable, List, Optional

import schedule

from languagecenter.core.config import get_settings
from languagecenter.core.logging import get_module_logger
from languagecenter.infrastructure.i18n.factory import create_translator
from languagecenter.infrastructure.i18n.translator import TranslationResolver
from languagecenter.infrastructure.operations.result import OperationResult

logger = get_module_logger()


def warm_cache(
    translator: TranslationResolver, platforms: Optional[Iterable[str]] = None
) -> OperationResult:
    """Refresh languages and every language/platform string bucket.

    Args:
        translator: Resolver whose registry and cache are refreshed.
        platforms: Platforms to warm (default: LANGUAGECENTER_WARM_PLATFORMS).

    Returns:
        OperationResult with ``{"refreshed": [...], "failed": [...]}`` as
        data; a transient error when at least one bucket failed.

    Raises:
        RemoteError: If the language refresh fails and nothing is cached.
    """
    if platforms is None:
        platforms = get_settings().languagecenter.WARM_PLATFORMS
    platforms = list(platforms)

    translator.update_languages().log_failure(
        logger, "warm_cache_language_refresh_failed"
    )

    refreshed: List[str] = []
    failed: List[str] = []
    for codename in translator.get_languages():
        for platform in platforms:
            bucket = f"{codename}/{platform}"
            bucket_result = translator.update_strings(codename, platform)
            if bucket_result.is_success:
                refreshed.append(bucket)
                continue

            bucket_result.log_failure(
                logger, "warm_cache_bucket_failed", locale=codename, platform=platform
            )
            failed.append(bucket)

    data = {"refreshed": refreshed, "failed": failed}
    if failed:
        return OperationResult.transient_error(
            f"Cache update failed for {len(failed)} bucket(s)",
            error_code="PARTIAL_REFRESH",
            data=data,
        )

    logger.info("warm_cache_completed", bucket_count=len(refreshed))
    return OperationResult.success(data=data, message="Cache update completed!")


def safe_run(job):
    @functools.wraps(job)
    def wrapper(*args, **kwargs):
        try:
            return job(*args, **kwargs)
        except Exception as e:
            logger.error("scheduled_job_failed", job=job.__name__, error=str(e))
            return None

    return wrapper


def register_warm_cache(
    translator: TranslationResolver,
    minutes: int = 60,
    scheduler: Optional[schedule.Scheduler] = None,
    platforms: Optional[Iterable[str]] = None,
) -> schedule.Job:
    """Schedule warm_cache every ``minutes`` minutes.

    A failing run is logged and does not stop the scheduler.

    Args:
        translator: Resolver to warm.
        minutes: Interval between runs.
        scheduler: Scheduler to register on (default: the schedule module's
            default scheduler).
        platforms: Platforms to warm.

    Returns:
        The scheduled job.
    """
    scheduler = scheduler or schedule.default_scheduler
    job = scheduler.every(minutes).minutes.do(
        safe_run(warm_cache), translator=translator, platforms=platforms
    )
    logger.info("warm_cache_scheduled", minutes=minutes)
    return job


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="languagecenter-cache",
        description="Cache data from the remote translation service.",
    )
    parser.add_argument(
        "--platform",
        action="append",
        dest="platforms",
        help="Platform to warm (repeatable, default from settings)",
    )
    parser.add_argument(
        "--every",
        type=int,
        default=None,
        metavar="MINUTES",
        help="Keep running and warm the cache every MINUTES minutes",
    )
    args = parser.parse_args(argv)

    translator = create_translator(preload=False)
    result = warm_cache(translator, platforms=args.platforms)
    print(result.message)

    if args.every is None:
        return 0 if result.is_success else 1

    register_warm_cache(translator, minutes=args.every, platforms=args.platforms)
    while True:
        schedule.run_pending()
        time.sleep(1)


if __name__ == "__main__":
    raise SystemExit(main())
