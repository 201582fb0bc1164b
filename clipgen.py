#!/usr/bin/env python3

"""
Video Router CLI

Sends one video generation request to the chosen provider (Veo 2, Veo 3,
RunwayML, Luma, Stability, OpenAI Sora) and prints the resulting video URLs
and cost.

Usage:
    ./clipgen.py -p "Your prompt here"
    ./clipgen.py --provider runwayml -i still.png -p "Animate this scene"
    ./clipgen.py --list-providers

For detailed usage information, run:
    ./clipgen.py --help
"""

import sys
from pathlib import Path

# Add the package to the path for local imports
sys.path.insert(0, str(Path(__file__).parent))

from video_router.cli import main


if __name__ == "__main__":
    sys.exit(main())
