"""
Slew And Wait Example

Connects to the hand controller, reports the mount, slews to an
azimuth/altitude position and polls until the goto finishes.

Usage:
    python examples/slew_and_wait.py /dev/ttyUSB0 180 45
"""

import sys
import time

from nexstar_serial import NexStarTelescope, TelescopeModel, TelescopeTimeoutError


def main() -> int:
    port = sys.argv[1] if len(sys.argv) > 1 else "/dev/ttyUSB0"
    azimuth = float(sys.argv[2]) if len(sys.argv) > 2 else 180.0
    altitude = float(sys.argv[3]) if len(sys.argv) > 3 else 45.0

    with NexStarTelescope(port) as telescope:
        model = telescope.get_model()
        if isinstance(model, TelescopeModel):
            print(f"✓ Connected to {model.display_name}")
        else:
            print(f"⚠ Connected to {model}")

        if not telescope.is_aligned():
            print("⚠ Telescope is not aligned, goto will be inaccurate")

        telescope.goto_azm_alt(azimuth, altitude)
        print(f"Slewing to Az {azimuth:.2f}°, Alt {altitude:.2f}°", end="", flush=True)

        try:
            while telescope.is_moving():
                print(".", end="", flush=True)
                time.sleep(0.5)
        except KeyboardInterrupt:
            telescope.cancel_goto()
            print("\n✗ Goto cancelled")
            return 1
        except TelescopeTimeoutError as e:
            print(f"\n✗ {e}")
            return 1

    print("\n✓ Slew complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
