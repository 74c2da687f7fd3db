"""Command-line entry points for capture scripts."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Sequence

from ..camera.base import VirtualCamera
from ..camera.catalog import default_controls, load_control_catalog
from ..capture.session import CaptureSession
from ..config.schema import ScriptConfig, SessionConfig
from ..models.controls import ControlId, control_type_name
from ..script.loader import CaptureScript


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Validate and replay per-frame camera control scripts',
    )
    parser.add_argument(
        '--log-level',
        default='INFO',
        help='Logging level (DEBUG, INFO, WARNING, ...)',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    check = subparsers.add_parser('check', help='Parse a script and list its frames')
    _add_script_arguments(check)

    run = subparsers.add_parser('run', help='Replay a script on a virtual camera')
    _add_script_arguments(run)
    run.add_argument(
        '--frames',
        type=_non_negative_int,
        required=True,
        help='Number of requests to queue (frame indices start at 0)',
    )
    return parser


def _add_script_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('script', type=Path, help='Capture script (YAML)')
    parser.add_argument(
        '--catalog',
        type=Path,
        default=None,
        help='YAML control catalog (defaults to the built-in control set)',
    )
    parser.add_argument(
        '--strict-frame-numbers',
        action='store_true',
        help='Reject frame keys that are not plain non-negative integers',
    )


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO))
    logger = logging.getLogger(__name__)

    cfg = SessionConfig(
        script=args.script,
        frames=getattr(args, 'frames', 0),
        catalog=args.catalog,
        script_options=ScriptConfig(strict_frame_numbers=args.strict_frame_numbers),
    )
    logger.debug('Session config: %s', cfg)

    camera = VirtualCamera(_load_catalog(cfg, logger))
    script = CaptureScript(camera, cfg.script, cfg.script_options)
    if not script.valid:
        logger.error('Invalid capture script %s', cfg.script)
        return 1

    if args.command == 'check':
        _log_frames(logger, script)
        return 0

    CaptureSession(camera, script, cfg.frames).run()
    return 0


def _load_catalog(cfg: SessionConfig, logger: logging.Logger) -> List[ControlId]:
    if cfg.catalog is None:
        return default_controls()
    try:
        controls = load_control_catalog(cfg.catalog)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Failed to load control catalog: {exc}") from exc
    logger.info('Loaded %d control(s) from %s', len(controls), cfg.catalog.name)
    return controls


def _log_frames(logger: logging.Logger, script: CaptureScript) -> None:
    table = script.table
    logger.info('Script %s is valid | %d frame(s)', script.path.name, len(table))
    for frame in table:
        for control, value in table.lookup(frame):
            logger.info(
                'Frame %d: %s (%s) = %r',
                frame,
                control.name,
                control_type_name(value.type),
                value.value,
            )


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid frame count '{value}'.") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError('Frame count must be >= 0.')
    return parsed
