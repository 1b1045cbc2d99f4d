"""
Run all data pipelines in sequence.

Same as the `lupa-sync` console script, for running from a checkout.

Usage:
    uv run python scripts/pipelines/sync_all.py                 # Run everything
    uv run python scripts/pipelines/sync_all.py --deputies      # Selective
    uv run python scripts/pipelines/sync_all.py --dry-run       # See what would run
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from lupa.pipelines import cli

if __name__ == "__main__":
    cli()
