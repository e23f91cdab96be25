#!/usr/bin/env python
"""
Rewrite saved projects in the current file format.

Usage:
    python scripts/migrate_projects.py
    python scripts/migrate_projects.py --projects-dir /path/to/projects --dry-run
"""
import argparse
import json
import sys
from pathlib import Path

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.config import config, SCHEMA_VERSION
from profitcalc.data.migration import detect_version
from profitcalc.data.persistence import list_projects, load_project, save_project


def main():
    parser = argparse.ArgumentParser(description="Upgrade saved project files")
    parser.add_argument(
        "--projects-dir",
        type=str,
        default=None,
        help="Override projects directory"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report versions without writing"
    )

    args = parser.parse_args()
    projects_dir = Path(args.projects_dir) if args.projects_dir else config.projects_dir

    print("=" * 60)
    print(f"Project migration (current format v{SCHEMA_VERSION})")
    print("=" * 60)
    print(f"Source directory: {projects_dir}")
    print()

    failed = 0
    for path in list_projects(projects_dir):
        try:
            version = detect_version(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError, AttributeError) as e:
            print(f"  ✗ {path.name}: unreadable ({e})")
            failed += 1
            continue

        if version >= SCHEMA_VERSION:
            print(f"  ✓ {path.name}: v{version}")
            continue

        if args.dry_run:
            print(f"  ⚠ {path.name}: v{version} (would upgrade)")
            continue

        result = load_project(path)
        saved = save_project(result.project, path) if result.success else None
        if saved is not None and saved.success:
            print(f"  ✓ {path.name}: v{version} → v{SCHEMA_VERSION}")
        else:
            print(f"  ✗ {path.name}: {result.error or saved.error}")
            failed += 1

    print()
    print("=" * 60)
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
