#!/usr/bin/env python3
"""
Development script for Fitplan
Run with: python scripts/dev.py [command]
"""

import argparse
import subprocess
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from fitplan.models import SCHEMA_SQL

ROOT = Path(__file__).parent.parent
console = Console()


def run_command(cmd: list[str], description: str = "") -> bool:
    """Run a command from the project root, reporting failures"""
    if description:
        print(f"🚀 {description}")

    try:
        subprocess.run(cmd, check=True, cwd=ROOT)
        return True
    except subprocess.CalledProcessError as e:
        print(f"❌ Command failed: {' '.join(cmd)}")
        print(f"Error: {e}")
        return False


def serve():
    print("🏋️ Starting Fitplan development server...")
    run_command(
        ["uvicorn", "fitplan.main:app", "--reload", "--host", "0.0.0.0", "--port", "8000"],
        "Starting FastAPI server with hot reload",
    )


def test():
    if not run_command(["pytest", "-v"], "Running tests"):
        sys.exit(1)


def lint():
    run_command(["flake8", "fitplan", "tests"], "Running flake8 linting")


def check():
    """Run lint and tests, failing if either does"""
    print("🔍 Running all checks...")
    success = True
    success &= run_command(["black", "--check", "fitplan", "tests"], "Checking code formatting")
    success &= run_command(["flake8", "fitplan", "tests"], "Running linting")
    success &= run_command(["pytest", "-v"], "Running tests")

    if success:
        print("✅ All checks passed!")
    else:
        print("❌ Some checks failed!")
        sys.exit(1)


def db_migrate():
    """Print the table definitions to paste into the Supabase SQL editor"""
    console.print("🗄️ [bold yellow]Run this SQL in your Supabase dashboard:[/bold yellow]")
    console.print(Panel(Syntax(SCHEMA_SQL.strip(), "sql"), title="fitplan schema", border_style="blue"))


def main():
    parser = argparse.ArgumentParser(description="Fitplan development tools")
    commands = {
        "serve": serve,
        "test": test,
        "lint": lint,
        "check": check,
        "db-migrate": db_migrate,
    }
    parser.add_argument("command", choices=list(commands), help="Command to run")

    args = parser.parse_args()
    commands[args.command]()


if __name__ == "__main__":
    main()
