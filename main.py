"""
Entry point for the psg refresh tooling.

Run with:
    python main.py refresh
    python main.py --help
"""
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from psg.cli.main import run

if __name__ == "__main__":
    run()
