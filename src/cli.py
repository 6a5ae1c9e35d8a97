import argparse
import json
import sys

from dotenv import load_dotenv

from src.geometry.export import write_geometries
from src.orca.parser import parse_orca_output
from src.utils.config import get_log_level
from src.utils.logger import get_logger, set_global_log_level

logger = get_logger(__name__)

FRAME_CHOICES = ("all", "initial", "final")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="visor-parse",
        description="Extract geometries, energy, field and adsorption site from an ORCA log.",
    )
    parser.add_argument("logfile", type=str, help="Path to the ORCA .out/.log file.")
    parser.add_argument("--xyz", type=str, default=None, help="Write the selected frames to this extended XYZ file.")
    parser.add_argument("--frame", choices=FRAME_CHOICES, default="all", help="Frames written with --xyz.")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (0 for compact output).")
    return parser.parse_args(argv)


def _select_frames(result, frame: str):
    if not result.geometries:
        return ()
    if frame == "initial":
        return (result.initial_atoms,)
    if frame == "final":
        return (result.final_atoms,)
    return result.geometries


def main_cli(argv=None) -> int:
    load_dotenv()
    set_global_log_level(get_log_level())
    args = parse_args(argv)

    try:
        with open(args.logfile, "r", encoding="utf-8", errors="replace") as f:
            text = f.read()
    except OSError as e:
        logger.error(f"Unable to read {args.logfile}: {e}")
        return 1

    result = parse_orca_output(text)

    if args.xyz:
        frames = _select_frames(result, args.frame)
        if frames:
            energy = None if args.frame == "initial" else result.energy
            write_geometries(frames, args.xyz, final_energy=energy)
        else:
            logger.warning(f"No coordinate blocks in {args.logfile}; {args.xyz} not written")

    indent = args.indent if args.indent > 0 else None
    print(json.dumps(result.to_dict(), indent=indent))
    return 0


if __name__ == '__main__':
    sys.exit(main_cli())
