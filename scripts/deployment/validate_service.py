#!/usr/bin/env python3
"""
Validation script for the short-link service.
Exercises a live running service end to end and cleans up what it creates.

Usage:
    python validate_service.py --url http://localhost:9200
"""

import argparse
import sys
import time
from datetime import datetime
from typing import Callable, Optional, Tuple

import requests


class ServiceValidator:
    """Validates short-link service functionality."""

    def __init__(self, base_url: str = "http://localhost:9200", timeout: float = 5):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.test_results = []
        self.created_codes = []

    def print_header(self, text: str):
        """Print a formatted header."""
        print(f"\n{'='*60}")
        print(f"  {text}")
        print(f"{'='*60}\n")

    def check(self, name: str, fn: Callable[[], Tuple[bool, str]]) -> bool:
        """Run one check, recording and printing its outcome."""
        try:
            passed, details = fn()
        except requests.RequestException as e:
            passed, details = False, f"Error: {e}"

        self.test_results.append((name, passed))
        print(f"{'✅ PASS' if passed else '❌ FAIL'} - {name}")
        if details:
            print(f"       {details}")
        return passed

    def _create(self, url: str, **extra) -> requests.Response:
        response = self.session.post(
            f"{self.base_url}/api/links",
            json={"url": url, **extra},
            timeout=self.timeout,
        )
        if response.status_code == 201:
            self.created_codes.append(response.json()["code"])
        return response

    def _info(self, code: str) -> requests.Response:
        return self.session.get(f"{self.base_url}/api/links/{code}", timeout=self.timeout)

    def _status_is(self, response: requests.Response, expected: int) -> Tuple[bool, str]:
        return response.status_code == expected, f"Status: {response.status_code} (expected {expected})"

    def test_health_check(self) -> bool:
        def run():
            data = self.session.get(f"{self.base_url}/api/health", timeout=self.timeout).json()
            return data.get("status") == "healthy", f"Store: {data.get('store')}"
        return self.check("Health Check", run)

    def test_create_link(self) -> Optional[str]:
        result = {}

        def run():
            response = self._create(f"https://example.com/validate/{int(time.time())}", validity_minutes=5)
            if response.status_code != 201:
                return False, f"Status: {response.status_code}"
            data = response.json()
            result["code"] = data["code"]
            ok = data["clicks"] == 0 and not data["expired"]
            return ok, f"Code: {data['code']}, URL: {data['short_url']}, expires {data['expires_at']}"

        self.check("Create Link", run)
        return result.get("code")

    def test_redirect_counts_click(self, code: str) -> bool:
        def run():
            response = self.session.get(f"{self.base_url}/{code}", allow_redirects=False, timeout=self.timeout)
            if response.status_code != 302:
                return False, f"Status: {response.status_code} (expected 302)"
            clicks = self._info(code).json().get("clicks")
            return clicks == 1, f"Location: {response.headers.get('Location', '')[:50]}, clicks: {clicks}"
        return self.check("Redirect Counts Click", run)

    def test_duplicate_custom_code(self) -> bool:
        custom_code = f"validate-{int(time.time())}"

        def run():
            first = self._create("https://example.com/custom", custom_code=custom_code)
            if first.status_code != 201:
                return False, f"First create status: {first.status_code}"
            return self._status_is(self._create("https://example.com/other", custom_code=custom_code), 409)
        return self.check("Duplicate Code Rejection", run)

    def test_invalid_input(self) -> bool:
        def run():
            bad_url = self._create("not-a-valid-url").status_code
            bad_validity = self._create("https://example.com", validity_minutes=1441).status_code
            return (bad_url, bad_validity) == (400, 400), f"URL: {bad_url}, validity: {bad_validity} (expected 400, 400)"
        return self.check("Invalid Input Rejection", run)

    def test_unknown_code(self) -> bool:
        return self.check("Unknown Code", lambda: self._status_is(
            self.session.get(f"{self.base_url}/nonexistent999", allow_redirects=False, timeout=self.timeout),
            404,
        ))

    def test_delete(self, code: str) -> bool:
        def run():
            deleted = self.session.delete(f"{self.base_url}/api/links/{code}", timeout=self.timeout)
            if deleted.status_code != 204:
                return False, f"Delete status: {deleted.status_code}"
            self.created_codes.remove(code)
            return self._status_is(self._info(code), 404)
        return self.check("Delete Link", run)

    def cleanup(self):
        for code in list(self.created_codes):
            self.session.delete(f"{self.base_url}/api/links/{code}", timeout=self.timeout)
        self.created_codes.clear()

    def run_all_tests(self) -> bool:
        """Run all validation tests."""
        self.print_header("Short-link Service Validation")
        print(f"Testing service at: {self.base_url}")
        print(f"Timestamp: {datetime.now().isoformat()}\n")

        if not self.test_health_check():
            print("\n❌ Health check failed. Service may not be running.")
            print(f"   Make sure the service is accessible at {self.base_url}")
            return False

        try:
            code = self.test_create_link()
            if code:
                self.test_redirect_counts_click(code)
            self.test_duplicate_custom_code()
            self.test_invalid_input()
            self.test_unknown_code()
            if code:
                self.test_delete(code)
        finally:
            self.cleanup()

        self.print_summary()
        return all(passed for _, passed in self.test_results)

    def print_summary(self):
        """Print test summary."""
        total = len(self.test_results)
        passed = sum(1 for _, p in self.test_results if p)
        failed = total - passed

        self.print_header("Test Summary")
        print(f"Total Tests:  {total}")
        print(f"✅ Passed:     {passed}")
        print(f"❌ Failed:     {failed}")

        if failed > 0:
            print("\n⚠️  Failed tests:")
            for name, ok in self.test_results:
                if not ok:
                    print(f"   - {name}")

        print()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Validate short-link service functionality"
    )
    parser.add_argument(
        "--url",
        default="http://localhost:9200",
        help="Base URL of the service (default: http://localhost:9200)"
    )

    args = parser.parse_args()

    validator = ServiceValidator(args.url)

    try:
        success = validator.run_all_tests()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\n⚠️  Validation interrupted by user")
        sys.exit(2)
    except Exception as e:
        print(f"\n\n❌ Validation failed with error: {str(e)}")
        sys.exit(3)


if __name__ == "__main__":
    main()
