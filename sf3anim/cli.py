#!/usr/bin/env python3
"""
Command-line front end for the SF3 animation codec.

    sf3anim info anim.bytes
    sf3anim csv anim.bytes -o out.csv
    sf3anim repack anim.bytes -o longer.bytes --frames 120
"""

import argparse
import logging
import os
import sys

from sf3anim import __version__
from sf3anim.codec import AnimationReader, AnimationWriter, FormatError
from sf3anim.config import load_config
from sf3anim.export import CsvExporter, csv_filename
from sf3anim.timeline import loop_frames


def _read_file(path: str) -> bytes:
    with open(path, 'rb') as f:
        return f.read()


def cmd_info(args, config, logger) -> int:
    """Print header summary."""
    reader = AnimationReader(config.codec.to_options(), logger)
    animation, descriptor = reader.load_bytes(_read_file(args.file), os.path.basename(args.file))

    print(f'File: {args.file}')
    print(f'Signature offset: {descriptor.header_start}')
    print(f'Opaque header words: {descriptor.garbage_word_count}')
    print(f'Frames: {animation.frames_count}')
    print(f'Bones: {animation.bones_count}')
    print(f'Bone ids: {", ".join(str(b) for b in animation.bone_ids)}')
    print(f'Header end: {descriptor.header_end}')
    print(f'Animation data end: {descriptor.animation_data_end}')
    print(f'Trailing bytes: {len(animation.trailing_data or b"")}')
    return 0


def cmd_csv(args, config, logger) -> int:
    """Export frames as CSV."""
    reader = AnimationReader(config.codec.to_options(), logger)
    animation, _ = reader.load(args.file)

    exporter = CsvExporter(
        precision=config.export.precision,
        frame_base=config.export.frame_base,
        sort_by_bone_id=config.export.sort_by_bone_id,
        logger=logger,
    )
    path = args.output
    if path is None:
        path = os.path.join(os.path.dirname(os.path.abspath(args.file)), csv_filename(args.file))
    rows = exporter.save(animation, path)
    print(f'Wrote {rows} rows to {path}')
    return 0


def cmd_repack(args, config, logger) -> int:
    """Decode, optionally loop to a new length, and re-encode."""
    options = config.codec.to_options()
    original = _read_file(args.file)
    animation, descriptor = AnimationReader(options, logger).load_bytes(
        original, os.path.basename(args.file)
    )

    if args.frames is not None:
        animation = loop_frames(animation, args.frames)

    output = args.output
    if output is None:
        stem, ext = os.path.splitext(args.file)
        output = f'{stem}_repacked{ext}'

    size = AnimationWriter(options, logger).save(output, animation, descriptor, original)
    print(f'Wrote {animation.frames_count} frames ({size} bytes) to {output}')
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='sf3anim', description='SF3 animation codec tools')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--config', help='Path to a YAML config file')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    sub = parser.add_subparsers(dest='command', required=True)

    info = sub.add_parser('info', help='Show header summary')
    info.add_argument('file', help='Animation file')
    info.set_defaults(func=cmd_info)

    csv_cmd = sub.add_parser('csv', help='Export frames as CSV')
    csv_cmd.add_argument('file', help='Animation file')
    csv_cmd.add_argument('--output', '-o', help='Output CSV path (default: <name>_extracted.csv)')
    csv_cmd.set_defaults(func=cmd_csv)

    repack = sub.add_parser('repack', help='Re-encode, optionally looping to a new frame count')
    repack.add_argument('file', help='Base animation file')
    repack.add_argument('--output', '-o', help='Output path (default: <name>_repacked.<ext>)')
    repack.add_argument('--frames', type=int, help='Loop frames to this count')
    repack.set_defaults(func=cmd_repack)

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)

    level = logging.DEBUG if args.verbose else getattr(logging, config.logging.level, logging.WARNING)
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')
    logger = logging.getLogger('sf3anim')

    try:
        return args.func(args, config, logger)
    except (FormatError, OSError, ValueError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
