"""Headless scene exporter: CLI entry point.

Reads a scene JSON file and compiles it to a self-contained HTML5 ad:
one responsive document serving every size, or one document per size.

Usage:
    adcanvas-export <scene.json> [-o OUTPUT_DIR] [-s 300x250,728x90] [--per-size] [--loop N] [-v]
    adcanvas-export --sample -o out/

Examples:
    adcanvas-export spring_promo.json
    adcanvas-export spring_promo.json -o dist/ -s 300x250,728x90 --per-size
    adcanvas-export spring_promo.json --loop 0
"""

import sys
import os
import re
import argparse
import logging

# Add editor/src to path so imports work when run as a script
_src_dir = os.path.dirname(os.path.abspath(__file__))
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from version import get_version


def _output_stem(name: str) -> str:
    """File-system friendly stem for a scene name"""
    stem = re.sub(r'[^A-Za-z0-9._-]+', '_', name.strip()).strip('_.')
    return stem or 'ad'


def _parse_sizes(value: str) -> list:
    """'300x250, 728x90' -> ['300x250', '728x90']"""
    return [part.strip() for part in value.split(',') if part.strip()]


def _load_scene(args):
    from models.scene import Scene, create_sample_scene

    if args.sample:
        return create_sample_scene()
    with open(args.input_file, 'r', encoding='utf-8') as f:
        return Scene.from_json(f.read())


def _build_jobs(sizes, per_size: bool, stem: str):
    """(output file name, target sizes) pairs"""
    if per_size:
        return [(f"{stem}_{size}.html", [size]) for size in sizes]
    return [(f"{stem}.html", sizes)]


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='adcanvas-export',
        description='Compile an ad scene to self-contained HTML5 (headless).',
    )
    parser.add_argument(
        'input_file',
        nargs='?',
        help='Path to a scene JSON file.',
    )
    parser.add_argument(
        '-o', '--output',
        default='./output',
        help='Output directory for HTML files (default: ./output).',
    )
    parser.add_argument(
        '-s', '--sizes',
        help='Comma-separated sizes to export, first one is the base (default: all scene sizes).',
    )
    parser.add_argument(
        '--per-size',
        action='store_true',
        help='Write one document per size instead of one responsive document.',
    )
    parser.add_argument(
        '--loop',
        type=int,
        help='Override the scene loop count (-1 infinite, 0 play once, N repeats).',
    )
    parser.add_argument(
        '--sample',
        action='store_true',
        help='Export the built-in sample scene instead of reading a file.',
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {get_version()}',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    args = parser.parse_args(argv)

    # Logging
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    if not args.sample:
        if not args.input_file:
            parser.error('an input file is required unless --sample is given')
        if not os.path.isfile(args.input_file):
            print(f"Error: Input file not found: {os.path.abspath(args.input_file)}")
            sys.exit(1)
    if args.loop is not None and args.loop < -1:
        parser.error('--loop must be -1, 0 or a positive repeat count')

    from services.scene_compiler import compile_scene

    try:
        scene = _load_scene(args)
    except ValueError as e:
        print(f"Error: Could not read scene: {e}")
        sys.exit(1)
    if args.loop is not None:
        scene.animation_loop = args.loop

    sizes = _parse_sizes(args.sizes) if args.sizes else scene.size_keys
    if not sizes:
        print("Error: No sizes to export.")
        sys.exit(1)

    output_dir = os.path.abspath(args.output)
    os.makedirs(output_dir, exist_ok=True)

    jobs = _build_jobs(sizes, args.per_size, _output_stem(scene.name))
    print(f"Exporting '{scene.name}' ({scene.get_layer_count()} layers) for {', '.join(sizes)} ...")

    written = 0
    failed = 0
    for file_name, targets in jobs:
        try:
            document = compile_scene(scene, targets)
            with open(os.path.join(output_dir, file_name), 'w', encoding='utf-8') as f:
                f.write(document)
            written += 1
            print(f"  [{written}/{len(jobs)}] {file_name}")
        except Exception as e:
            failed += 1
            print(f"  [FAIL] {file_name}: {e}")
            if args.verbose:
                import traceback
                traceback.print_exc()

    print(f"\nDone. Wrote {written} document(s) to {output_dir}/")
    if failed:
        print(f"  ({failed} failed)")
    if not written:
        sys.exit(1)


if __name__ == '__main__':
    main()
