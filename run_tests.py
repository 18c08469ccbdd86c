#!/usr/bin/env python3
# ================================================================================
# Test Runner Script
# ================================================================================
#
# Entry point for executing the test suites with a consistent set of options.
#
# Features:
#   - Run framework unit tests (no browser needed)
#   - Run end-to-end UI tests against the configured servers
#   - Generate Allure reports
#
# Browser and server settings are passed to the tests through the same
# environment overrides TestProperties reads (BROWSER_TYPE, SERVERS_LAB_URL...).
#
# Usage:
#   python run_tests.py --suite unit
#   python run_tests.py --suite ui --browser firefox --no-headless
#   python run_tests.py --suite all --tags P0 smoke --lab-url https://lab:8443/OpenELIS-Global
#
# ================================================================================

import argparse
import os
import shutil
import subprocess
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger


# Configure logging
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    level="INFO"
)


SUITE_PATHS = {
    "unit": ["qaframework/unit"],
    "ui": ["qaframework/ui_testing/tests"],
    "all": ["qaframework"],
}


class TestRunner:
    """
    Orchestrates a pytest run.

    This class handles:
    - Test suite selection
    - Environment overrides for browser and servers
    - Report generation
    """

    __test__ = False

    def __init__(
        self,
        suite: str = "all",
        tags: Optional[List[str]] = None,
        browser: str = "chromium",
        headless: bool = True,
        allure_report: bool = True,
        verbose: bool = False,
        server_urls: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize test runner.

        Args:
            suite: Test suite to run - "unit", "ui", "all"
            tags: List of pytest markers to filter tests
            browser: Browser for UI tests - "chromium", "firefox", "webkit"
            headless: Run browser in headless mode
            allure_report: Generate Allure report
            verbose: Enable verbose output
            server_urls: Base URL overrides keyed by server group (emr, lab, facility)
        """
        self.suite = suite
        self.tags = tags or []
        self.browser = browser
        self.headless = headless
        self.allure_report = allure_report
        self.verbose = verbose
        self.server_urls = {k: v for k, v in (server_urls or {}).items() if v}

        # Paths
        self.root_dir = Path(__file__).parent
        self.reports_dir = self.root_dir / "reports"
        self.allure_results = self.reports_dir / "allure-results"
        self.allure_report_dir = self.reports_dir / "allure-report"

    @property
    def runs_browser(self) -> bool:
        return self.suite in ("ui", "all")

    def run(self) -> int:
        """
        Execute the test run.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        logger.info("=" * 60)
        logger.info("Starting Test Execution")
        logger.info("=" * 60)
        logger.info(f"Suite: {self.suite}")
        logger.info(f"Tags: {self.tags or 'All'}")
        if self.runs_browser:
            logger.info(f"Browser: {self.browser}")
            logger.info(f"Headless: {self.headless}")
            for group, url in self.server_urls.items():
                logger.info(f"{group} server: {url}")
        logger.info("=" * 60)

        self._prepare_environment()

        cmd = self._build_pytest_command()
        logger.info(f"Executing: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, cwd=str(self.root_dir), env=self._build_env())
            exit_code = result.returncode
        except OSError as e:
            logger.error(f"Test execution failed: {e}")
            exit_code = 1

        if self.allure_report:
            self._generate_allure_report()

        self._print_summary(exit_code)
        return exit_code

    def _prepare_environment(self) -> None:
        """Create the report directories."""
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        self.allure_results.mkdir(parents=True, exist_ok=True)
        logger.debug("Environment prepared")

    def _build_env(self) -> Dict[str, str]:
        env = dict(os.environ)
        env["BROWSER_TYPE"] = self.browser
        env["BROWSER_HEADLESS"] = "true" if self.headless else "false"
        for group, url in self.server_urls.items():
            env[f"SERVERS_{group.upper()}_URL"] = url
        return env

    def _build_pytest_command(self) -> List[str]:
        """Build the pytest command with all options."""
        cmd = [sys.executable, "-m", "pytest", *SUITE_PATHS[self.suite]]

        if self.tags:
            cmd.extend(["-m", " or ".join(self.tags)])

        if self.runs_browser:
            cmd.append("--run-e2e")

        if self.allure_report:
            cmd.extend(["--alluredir", str(self.allure_results)])

        cmd.append("-v" if self.verbose else "-q")
        return cmd

    def _generate_allure_report(self) -> None:
        """Generate Allure HTML report."""
        logger.info("Generating Allure report...")

        try:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            report_path = self.reports_dir / f"allure-report-{timestamp}"

            subprocess.run([
                "allure", "generate",
                str(self.allure_results),
                "-o", str(report_path),
                "--clean"
            ], check=True)

            # Create/update latest symlink
            latest_link = self.allure_report_dir
            if latest_link.is_symlink():
                latest_link.unlink()
            elif latest_link.exists():
                shutil.rmtree(latest_link)

            latest_link.symlink_to(report_path.name)

            logger.info(f"Report generated: {report_path}")

        except FileNotFoundError:
            logger.warning("Allure CLI not found. Please install Allure to generate reports.")
        except subprocess.CalledProcessError as e:
            logger.error(f"Failed to generate Allure report: {e}")

    def _print_summary(self, exit_code: int) -> None:
        """Print test execution summary."""
        logger.info("=" * 60)
        if exit_code == 0:
            logger.info("TEST EXECUTION COMPLETED SUCCESSFULLY")
        else:
            logger.error(f"TEST EXECUTION FAILED (exit code: {exit_code})")

        if self.allure_report:
            logger.info(f"Report available at: {self.allure_report_dir}")

        logger.info("=" * 60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Facility Registry QA Test Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the framework unit tests
  python run_tests.py --suite unit --no-allure

  # Run P0 smoke tests end to end
  python run_tests.py --suite ui --tags P0 smoke

  # Run UI tests with visible browser against a local lab server
  python run_tests.py --suite ui --no-headless --browser firefox \\
      --lab-url https://localhost:8443/OpenELIS-Global
        """
    )

    parser.add_argument(
        "--suite",
        choices=sorted(SUITE_PATHS),
        default="all",
        help="Test suite to run (default: all)"
    )

    parser.add_argument(
        "--tags",
        nargs="+",
        default=[],
        help="Pytest markers to filter tests (e.g., P0 smoke regression)"
    )

    parser.add_argument(
        "--browser",
        choices=["chromium", "firefox", "webkit"],
        default="chromium",
        help="Browser for UI tests (default: chromium)"
    )

    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Run browser in headed mode (visible)"
    )

    parser.add_argument("--emr-url", help="Override servers.emr_url")
    parser.add_argument("--lab-url", help="Override servers.lab_url")
    parser.add_argument("--facility-url", help="Override servers.facility_url")

    parser.add_argument(
        "--no-allure",
        action="store_true",
        help="Disable Allure report generation"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args()

    runner = TestRunner(
        suite=args.suite,
        tags=args.tags,
        browser=args.browser,
        headless=not args.no_headless,
        allure_report=not args.no_allure,
        verbose=args.verbose,
        server_urls={
            "emr": args.emr_url,
            "lab": args.lab_url,
            "facility": args.facility_url,
        },
    )

    sys.exit(runner.run())


if __name__ == "__main__":
    main()
