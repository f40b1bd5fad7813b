#!/usr/bin/env python3
"""Send sample host and service notifications for manual verification.

Runs the CLI with the same arguments Nagios would pass for a host
PROBLEM/RECOVERY and a service PROBLEM/RECOVERY, so the rendered mails can
be checked in a real mailbox.

Usage:
    python scripts/send_test_notifications.py --to you@example.com
    python scripts/send_test_notifications.py --to you@example.com --dry-run
    python scripts/send_test_notifications.py --to you@example.com --only service-problem
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from nagios_notify.main import main as notify_main

SAMPLE_DATE = "Wed Sep 20 10:43:55 JST 2023"
SAMPLE_OUTPUT = "これはテストメールです"

SCENARIOS = {
    "host-problem": ["-t", "host", "-n", "PROBLEM", "-s", "", "-S", "CRITICAL", "-o", ""],
    "host-recovery": ["-t", "host", "-n", "RECOVERY", "-s", "", "-S", "OK", "-o", ""],
    "service-problem": ["-t", "service", "-n", "PROBLEM", "-s", "HTTP", "-S", "CRITICAL", "-o", SAMPLE_OUTPUT],
    "service-recovery": ["-t", "service", "-n", "RECOVERY", "-s", "HTTP", "-S", "OK", "-o", SAMPLE_OUTPUT],
}


def main() -> int:
    parser = argparse.ArgumentParser(description="Send sample Nagios notifications")
    parser.add_argument("--to", required=True, help="Recipient address")
    parser.add_argument("--config", type=Path, default=None, help="Configuration file")
    parser.add_argument("--dry-run", action="store_true", help="Render without sending")
    parser.add_argument("--only", choices=sorted(SCENARIOS), help="Run a single scenario")
    args = parser.parse_args()

    names = [args.only] if args.only else list(SCENARIOS)
    failures = 0

    for name in names:
        argv = [
            "-v",
            "-a", args.to,
            "-H", "example.com",
            "-A", "192.168.0.1",
            "-d", SAMPLE_DATE,
            *SCENARIOS[name],
        ]
        if args.config:
            argv += ["--config", str(args.config)]
        if args.dry_run:
            argv.append("--dry-run")

        print(f"=== {name}")
        code = notify_main(argv)
        print(f"=== {name}: exit code {code}\n")
        if code != 0:
            failures += 1

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
