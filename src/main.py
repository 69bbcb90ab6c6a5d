"""Entry point kept minimal by delegating to Engine."""

import argparse
import dataclasses

from config import AppConfig
from core.engine import Engine


def parse_args(argv=None) -> AppConfig:
    cfg = AppConfig.from_env()
    ap = argparse.ArgumentParser(description="Render a small 3D solar system")
    ap.add_argument(
        "--base-path",
        default=cfg.base_path,
        help="Directory holding textures/ (default: $SOLAR_BASE_PATH or ./static/)",
    )
    ap.add_argument("--width", type=int, default=cfg.width, help="Window width in pixels")
    ap.add_argument("--height", type=int, default=cfg.height, help="Window height in pixels")
    ap.add_argument("--fullscreen", action="store_true", default=cfg.fullscreen)
    args = ap.parse_args(argv)
    return dataclasses.replace(
        cfg,
        base_path=args.base_path,
        width=args.width,
        height=args.height,
        fullscreen=args.fullscreen,
    )


def main(argv=None):  # small wrapper for clarity / debuggers
    Engine(parse_args(argv)).run()


if __name__ == "__main__":
    main()
