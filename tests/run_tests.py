"""
Developer runner for the MedPrep API: tests, coverage, formatting and type checks.
Provides easy commands to run different test categories and generate coverage reports.
"""

import subprocess
import sys
import os
from pathlib import Path


def run_command(command, description):
    """Run a command and handle output"""
    print(f"\n{'='*60}")
    print(f"Running: {description}")
    print(f"Command: {command}")
    print(f"{'='*60}")

    result = subprocess.run(command, shell=True, capture_output=True, text=True)

    if result.stdout:
        print(result.stdout)
    if result.stderr:
        print("STDERR:", result.stderr)

    return result.returncode == 0


COMMANDS = {
    "all": ("python -m pytest tests/ -v", "Running all tests"),
    "unit": ("python -m pytest tests/unit/ -v", "Running unit tests"),
    "functional": ("python -m pytest tests/functional/ -v", "Running functional tests"),
    "api": ("python -m pytest tests/functional/test_*_api.py -v", "Running API tests"),
    "coverage": (
        "python -m pytest tests/ --cov=medprep --cov-report=html --cov-report=term-missing -v",
        "Running tests with coverage report",
    ),
    "resources": ("python -m pytest tests/ -k 'resource' -v", "Running resources module tests"),
    "subscriptions": ("python -m pytest tests/ -k 'subscription' -v", "Running subscriptions module tests"),
    "format": ("black medprep tests", "Formatting with black"),
    "typecheck": ("mypy medprep", "Type checking with mypy"),
    "install": ('pip install -e ".[test]"', "Installing test dependencies"),
}


def main():
    """Main test runner"""
    # Change to project root directory
    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    if len(sys.argv) < 2 or sys.argv[1].lower() not in COMMANDS:
        print("Usage: python tests/run_tests.py [command]")
        print("\nAvailable commands:")
        for name, (_, description) in COMMANDS.items():
            print(f"  {name:<14} - {description}")
        sys.exit(1)

    command = sys.argv[1].lower()
    success = run_command(*COMMANDS[command])

    if command == "coverage" and success:
        print("\n📊 Coverage report generated in htmlcov/index.html")

    if success:
        print("\n✅ Completed successfully!")
    else:
        print("\n❌ Some tests failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
