#!/usr/bin/env python
"""
Print the geocoder calculation for a land description.

Usage:
    python scripts/debug_lsd.py "4-12-34-5 W5"
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from pellet_tool.engine import LandDescription, ConversionError
from pellet_tool.geo import DEFAULT_CALIBRATION, convert_with_trace


def debug(text: str):
    try:
        land = LandDescription.parse(text)
    except ValueError as e:
        print(f"Could not read land description: {e}")
        sys.exit(1)

    print(f"Calibration: {DEFAULT_CALIBRATION.name}")
    print(f"  township height: {DEFAULT_CALIBRATION.township_height}°")
    print(f"  range width:     {DEFAULT_CALIBRATION.range_width}° (before cos(lat))")
    print()

    try:
        coordinate, trace = convert_with_trace(land)
    except ConversionError as e:
        print(f"Conversion failed: {e}")
        sys.exit(1)

    for step, desc, val in trace:
        if val:
            print(f"→ {step}: {desc} = {val}")
        else:
            print(f"→ {step}: {desc}")

    print()
    print(f"https://www.google.com/maps?q={coordinate.as_query()}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)
    debug(sys.argv[1])
