#!/usr/bin/python3
# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Command-line front end.

    svdimage svd    example.pgm            # U.pgm, D.pgm, VTranspose.pgm
    svdimage approx example.pgm -k 1 -k 5  # A1.pgm, A5.pgm
    svdimage pinv   example.pgm            # Pseudoinverse.pgm, IHat.pgm
    svdimage all    example.pgm            # everything, k = 1..5
    svdimage report example.pgm --csv errors.csv
    svdimage dump   example.pgm example.txt
"""

import argparse
import logging
import os

from . import __version__
from .errors import IOFailure, SvdImageError
from .image import to_matrix
from .pgm import ENCODINGS, read_pgm, write_matrix_text
from .pipeline import (
    approximate_and_render,
    decompose_and_render,
    pseudoinverse_and_render,
    run,
)
from .report import approximation_report
from .svd import PROVIDERS, decompose

logger = logging.getLogger(__name__)


def _load(args):
    image = read_pgm(args.input)
    factors = decompose(to_matrix(image), args.provider)
    return image, factors


def _out_dir(args) -> str:
    out_dir = args.output_dir or os.path.dirname(args.input) or "."
    try:
        os.makedirs(out_dir, exist_ok=True)
    except OSError as exc:
        raise IOFailure(f"cannot create {out_dir}: {exc}") from exc
    return out_dir


def _render_options(args) -> dict:
    return {"encoding": args.encoding, "dump_text": args.dump_text}


def _cmd_svd(args):
    image, factors = _load(args)
    paths = decompose_and_render(
        image, _out_dir(args), factors, **_render_options(args)
    )
    for path in paths:
        print(path)


def _cmd_approx(args):
    image, factors = _load(args)
    paths = approximate_and_render(
        image, args.k, _out_dir(args), factors, **_render_options(args)
    )
    for path in paths.values():
        print(path)


def _cmd_pinv(args):
    image, factors = _load(args)
    paths = pseudoinverse_and_render(
        image, _out_dir(args), factors, rcond=args.rcond, **_render_options(args)
    )
    for path in paths:
        print(path)


def _cmd_all(args):
    paths = run(
        args.input,
        _out_dir(args),
        args.k,
        provider=args.provider,
        **_render_options(args),
    )
    for path in paths:
        print(path)


def _cmd_report(args):
    image, factors = _load(args)
    df = approximation_report(to_matrix(image), factors, args.k or None)
    print(df.to_string(index=False))
    if args.csv:
        try:
            df.to_csv(args.csv, index=False)
        except OSError as exc:
            raise IOFailure(f"cannot write {args.csv}: {exc}") from exc


def _cmd_dump(args):
    image = read_pgm(args.input)
    write_matrix_text(to_matrix(image), args.output)
    print(args.output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="svdimage",
        description="Low-rank approximation and pseudoinverse of grayscale "
        "PGM images via the SVD.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="log progress (-v) or debugging detail (-vv)",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("input", help="input PGM image (P2 or P5)")
    common.add_argument(
        "--provider",
        choices=sorted(PROVIDERS),
        default="numpy",
        help="SVD provider (default: numpy)",
    )

    render = argparse.ArgumentParser(add_help=False)
    render.add_argument(
        "-o",
        "--output-dir",
        default=None,
        help="output directory (default: next to input)",
    )
    render.add_argument(
        "--encoding",
        choices=sorted(ENCODINGS),
        default="plain",
        help="PGM encoding of the outputs: plain (P2) or raw (P5)",
    )
    render.add_argument(
        "--dump-text",
        action="store_true",
        help="also write each rendered matrix as whitespace-separated text",
    )

    ranks = argparse.ArgumentParser(add_help=False)
    ranks.add_argument(
        "-k",
        type=int,
        action="append",
        help="rank to approximate with; repeatable "
        "(default: 1..5, capped at the smaller image side)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("svd", parents=[common, render], help="render U, D and V^T")
    p.set_defaults(func=_cmd_svd)

    p = sub.add_parser(
        "approx", parents=[common, render, ranks], help="render rank-k approximations"
    )
    p.set_defaults(func=_cmd_approx)

    p = sub.add_parser(
        "pinv", parents=[common, render], help="render the pseudoinverse and A @ A^+"
    )
    p.add_argument(
        "--rcond",
        type=float,
        default=None,
        help="relative cutoff for small singular values (default: max(R, C) * eps)",
    )
    p.set_defaults(func=_cmd_pinv)

    p = sub.add_parser(
        "all",
        parents=[common, render, ranks],
        help="factors, approximations and pseudoinverse",
    )
    p.set_defaults(func=_cmd_all)

    p = sub.add_parser(
        "report", parents=[common, ranks], help="print approximation errors per k"
    )
    p.add_argument("--csv", default=None, help="also write the table as CSV")
    p.set_defaults(func=_cmd_report)

    p = sub.add_parser("dump", help="write the image matrix as whitespace text")
    p.add_argument("input", help="input PGM image (P2 or P5)")
    p.add_argument("output", help="text file to write")
    p.set_defaults(func=_cmd_dump)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        args.func(args)
    except SvdImageError as exc:
        logger.error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
