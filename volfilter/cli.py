# -*- coding: utf-8 -*-
"""
volfilter Command Line - Apply a filter to a volume file.

Usage::

    volfilter INPUT {fft,gradient,median,smooth} OUTPUT [options]

Filter options are generated from the parameter declarations of each
filter's configuration class, so every configuration field is exposed as
``--<name>``. Options shared by several filters (``--stdev``,
``--magnitude``, ``--extent``) are defined once; options that do not apply
to the selected filter are ignored with a warning.

The configuration is built and validated before the input is opened, so
invalid options never cause any file to be read or written.

Exit status is 0 on success, 1 on a configuration, geometry, processing
or I/O error, and 2 on a usage error.

Author
------
Duane Smalley, PhD

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-17

Modified
--------
2026-10-17
"""

# Standard library
import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Set

# volfilter internal
from volfilter.IO import open_volume, write_volume
from volfilter.exceptions import VolfilterError
from volfilter.filter import FILTERS, filter_class
from volfilter.filter.config import FilterConfig
from volfilter.filter.params import ParamSpec
from volfilter.image import stride as _stride
from volfilter.image.array import ArrayImage
from volfilter.vocabulary import FilterKind

logger = logging.getLogger(__name__)


def _list_of(item_type: type) -> Callable[[str], tuple]:
    """argparse type converting ``'1,2,3'`` into a tuple of *item_type*."""
    def convert(text: str) -> tuple:
        try:
            return tuple(item_type(item) for item in text.split(','))
        except ValueError:
            raise argparse.ArgumentTypeError(
                f"expected a comma-separated list of {item_type.__name__} "
                f"values, got {text!r}"
            ) from None
    return convert


def _option_owners() -> Dict[str, List[FilterKind]]:
    """Filters accepting each configuration option, in declaration order."""
    owners: Dict[str, List[FilterKind]] = {}
    for kind, cls in FILTERS.items():
        for spec in cls.config_class.__param_specs__:
            owners.setdefault(spec.name, []).append(kind)
    return owners


def _add_option(group, spec: ParamSpec, owners: Sequence[FilterKind]) -> None:
    names = ', '.join(kind.value for kind in owners)
    help_text = f"[{names}] {spec.description}" if spec.description else f"[{names}]"
    if spec.param_type is bool:
        group.add_argument(
            f"--{spec.name}", action='store_true',
            default=argparse.SUPPRESS, help=help_text,
        )
    elif spec.is_sequence:
        group.add_argument(
            f"--{spec.name}", type=_list_of(spec.item_type),
            metavar='VALUES', default=argparse.SUPPRESS, help=help_text,
        )
    else:
        group.add_argument(
            f"--{spec.name}", type=spec.param_type,
            default=argparse.SUPPRESS, help=help_text,
        )


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser.

    Returns
    -------
    argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog='volfilter',
        description=(
            "Perform filtering operations on 3D / 4D volumes. For 4D "
            "inputs, each 3D volume is filtered independently."
        ),
    )
    parser.add_argument(
        "input", type=Path, help="The input volume.",
    )
    parser.add_argument(
        "filter", choices=FilterKind.names(),
        help="The type of filter to apply.",
    )
    parser.add_argument(
        "output", type=Path, help="The output volume.",
    )

    owners = _option_owners()
    added: Set[str] = set()
    for kind, cls in FILTERS.items():
        description = cls.__processor_tags__['description']
        group = parser.add_argument_group(
            f"{kind.value} filter options", description,
        )
        for spec in cls.config_class.__param_specs__:
            if spec.name in added:
                continue
            added.add(spec.name)
            _add_option(group, spec, owners[spec.name])

    common = parser.add_argument_group("output and execution options")
    common.add_argument(
        "--strides", type=_stride.parse, default=None,
        help="Symbolic strides of the output, e.g. '1,2,3' or '0,0,0,1' "
             "(default: chosen by the filter).",
    )
    common.add_argument(
        "--nthreads", type=int, default=1,
        help="Number of worker threads for 4D+ inputs (default: 1).",
    )
    verbosity = common.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-q", "--quiet", action='store_true',
        help="Only report errors.",
    )
    verbosity.add_argument(
        "-v", "--verbose", action='count', default=0,
        help="Report progress; repeat for debug output.",
    )
    return parser


def configure_logging(quiet: bool, verbose: int) -> None:
    """Install the console log handler for the requested verbosity."""
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(name)s: [%(levelname)s] %(message)s',
    )


def build_config(kind: FilterKind, options: Dict[str, Any]) -> FilterConfig:
    """Validated configuration for *kind* from parsed option values.

    Options not declared by the filter's configuration class are dropped
    with a warning.

    Raises
    ------
    ConfigurationError
        If the options are invalid for the filter.
    """
    config_class = filter_class(kind).config_class
    accepted = {spec.name for spec in config_class.__param_specs__}
    for name in sorted(set(options) - accepted):
        logger.warning("option --%s does not apply to the %s filter; ignored",
                       name, kind.value)
    return config_class(
        **{name: value for name, value in options.items() if name in accepted}
    )


def run(
    input_path: Path,
    kind: FilterKind,
    output_path: Path,
    config: FilterConfig,
    strides: Optional[Sequence[int]] = None,
    workers: int = 1,
) -> None:
    """Open *input_path*, apply the filter and write *output_path*."""
    source = open_volume(input_path)
    volume_filter = filter_class(kind)(source, config, workers=workers)
    if strides is not None:
        volume_filter.set_strides(strides)
    volume_filter.message = f"applying {kind.value} filter to {input_path}"
    destination = ArrayImage.allocate(volume_filter.header, name=str(output_path))

    def progress(fraction: float) -> None:
        logger.debug("%s: %.0f%%", kind.value, 100.0 * fraction)

    volume_filter(source, destination, progress_callback=progress)
    write_volume(destination, output_path)
    logger.info("wrote %s", output_path)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point of the ``volfilter`` command.

    Parameters
    ----------
    argv : Sequence[str], optional
        Arguments, excluding the program name. Default ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.nthreads < 1:
        parser.error(f"--nthreads must be positive, got {args.nthreads}")
    configure_logging(args.quiet, args.verbose)

    kind = FilterKind(args.filter)
    common = {'input', 'filter', 'output', 'strides', 'nthreads',
              'quiet', 'verbose'}
    options = {k: v for k, v in vars(args).items() if k not in common}

    try:
        config = build_config(kind, options)
        run(args.input, kind, args.output, config,
            strides=args.strides, workers=args.nthreads)
    except (VolfilterError, OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
