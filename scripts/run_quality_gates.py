#!/usr/bin/env python3
"""
Quality gates for the section designer.

Runs lint, type and test gates plus a rules gate that loads the packaged
designer rules, then writes a JSON summary to artifacts/.

Usage:
    python scripts/run_quality_gates.py
    python scripts/run_quality_gates.py --only tests rules
"""

from __future__ import annotations

import argparse
import datetime
import json
import subprocess
import sys
from pathlib import Path
from typing import TypedDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ARTIFACTS_DIR = PROJECT_ROOT / "artifacts"

# --- Types ---


class GateResult(TypedDict):
    status: str  # "pass" | "fail"
    exit_code: int
    stdout: str
    stderr: str
    command: list[str]


class GatesReport(TypedDict):
    timestamp_utc: str
    overall_status: str
    gates: dict[str, GateResult]


# --- Config ---

COMMANDS: dict[str, list[str]] = {
    "lint": [sys.executable, "-m", "ruff", "check", "src", "tests"],
    "types": [sys.executable, "-m", "mypy", "src"],
    "rules": [
        sys.executable,
        "-c",
        "from src.rules.loader import load_default_rules; "
        "print(load_default_rules().version)",
    ],
    "tests": [sys.executable, "-m", "pytest", "-q", "--maxfail=1"],
}

# --- Execution ---


def run_command(name: str, cmd: list[str]) -> GateResult:
    print(f"[{name}] Running: {' '.join(cmd)} ...", end="", flush=True)
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=False,
            cwd=PROJECT_ROOT,
        )
    except OSError as e:
        print(" ERROR")
        return {"status": "fail", "exit_code": -1, "stdout": "", "stderr": str(e), "command": cmd}

    status = "pass" if result.returncode == 0 else "fail"
    print(f" {status.upper()}")
    return {
        "status": status,
        "exit_code": result.returncode,
        "stdout": result.stdout,
        "stderr": result.stderr,
        "command": cmd,
    }


def build_report(results: dict[str, GateResult]) -> GatesReport:
    overall_pass = all(res["status"] == "pass" for res in results.values())
    return {
        "timestamp_utc": datetime.datetime.now(datetime.UTC).isoformat(),
        "overall_status": "pass" if overall_pass else "fail",
        "gates": results,
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run section designer quality gates")
    parser.add_argument("--only", nargs="+", choices=sorted(COMMANDS), help="gates to run")
    args = parser.parse_args(argv)

    selected = args.only or list(COMMANDS)
    results = {name: run_command(name, COMMANDS[name]) for name in selected}
    report = build_report(results)

    ARTIFACTS_DIR.mkdir(exist_ok=True)
    report_path = ARTIFACTS_DIR / "quality_gates_run.json"
    with open(report_path, "w") as f:
        json.dump(report, f, indent=2)
    print(f"\nReport written to: {report_path}")

    if report["overall_status"] == "pass":
        print("\nSUCCESS: All quality gates passed.")
        return 0

    print("\nFAILURE: One or more quality gates failed.")
    for name, res in results.items():
        if res["status"] == "fail":
            print(f"\n--- {name} FAILED (exit code {res['exit_code']}) ---")
            if res["stdout"].strip():
                print(res["stdout"])
            if res["stderr"].strip():
                print(res["stderr"])
    return 1


if __name__ == "__main__":
    sys.exit(main())
