"""
License check: which AstrologyAPI endpoints does this account include?

What this does:
  1. Loads ASTROLOGY_API_USER_ID / ASTROLOGY_API_KEY from .env or the environment
  2. Calls every endpoint once with built-in sample birth data
  3. Writes API_Availability_Report.md (accessible vs. 405/401/404/...)

Run:  python3 check_availability.py [report-path]
Makes one upstream request per endpoint (~28 calls against your quota).
"""
import asyncio
import logging
import sys
from pathlib import Path

from config import get_settings
from astroclient.services.astrology_api import AsyncAstrologyAPI
from astroclient.services.auth import ClientConfig
from astroclient.services.availability import probe_availability, render_markdown

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("check_availability")


async def main():
    # ── 1. Load config ───────────────────────────────────────────────────────
    settings = get_settings()
    config = ClientConfig.from_settings(settings)

    if not config.has_credentials:
        logger.error("ASTROLOGY_API_USER_ID / ASTROLOGY_API_KEY not set — add them to .env and retry.")
        sys.exit(1)

    report_path = Path(sys.argv[1] if len(sys.argv) > 1 else settings.AVAILABILITY_REPORT_FILE)

    # ── 2. Probe ─────────────────────────────────────────────────────────────
    async with AsyncAstrologyAPI(config) as api:
        report = await probe_availability(api)

    # ── 3. Report ────────────────────────────────────────────────────────────
    report_path.write_text(render_markdown(report), encoding="utf-8")

    logger.info("=" * 60)
    logger.info(f"ACCESSIBLE ({len(report.accessible)}):")
    for r in report.accessible:
        logger.info(f"  ✓ {r.name}")
    logger.info(f"NOT ACCESSIBLE ({len(report.not_accessible)}):")
    for r in report.not_accessible:
        logger.info(f"  ✗ {r.name} - {r.message}")
    logger.info("=" * 60)
    logger.info(f"Report saved to {report_path.resolve()}")


if __name__ == "__main__":
    asyncio.run(main())
