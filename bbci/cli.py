# -*- coding: utf-8 -*-
"""
Check variables stored in a data file against type specifications.

Usage:
    bbci-check-type recording.mat "cnt=STRUCT(x fs clab)" "mrk=!STRUCT(time y)"
    bbci-check-type features.npz "fv=DOUBLE[- 64]" -v

Supported files: MATLAB .mat (structs become dicts, cells become lists),
numpy .npz (one variable per array) and .npy (one variable named after the
file stem).
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import scipy.io

from bbci import config
from bbci.__version__ import get_version_info
from bbci.misc.check_type import check_type_named
from bbci.misc.errors import TypeCheckError

logger = logging.getLogger(__name__)


def load_variables(path: str) -> Dict[str, Any]:
    """
    Load all variables of a .mat, .npz or .npy file into a dict.

    Raises:
        FileNotFoundError: If path does not exist
        ValueError: If the file type is not supported
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == '.mat':
        data = scipy.io.loadmat(str(path), **config.MAT_LOAD_OPTIONS)
        variables = {k: v for k, v in data.items() if not k.startswith('__')}
    elif suffix == '.npz':
        with np.load(path, allow_pickle=False) as data:
            variables = {k: data[k] for k in data.files}
    elif suffix == '.npy':
        variables = {path.stem: np.load(path, allow_pickle=False)}
    else:
        raise ValueError(f"Unsupported file type '{suffix}' (use .mat, .npz or .npy)")

    logger.info(f"Loaded {len(variables)} variable(s) from {path}: {sorted(variables)}")
    return variables


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Check variables of a .mat/.npz/.npy file against type specifications',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('path', help='Data file to load')
    parser.add_argument(
        'checks',
        nargs='+',
        metavar='NAME=TYPE',
        help="Variable name and type specification, e.g. 'x=DOUBLE[- 3]'"
    )
    parser.add_argument('--version', action='version', version=get_version_info())
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')
    args = parser.parse_args(argv)

    for check in args.checks:
        if '=' not in check:
            parser.error(f"Invalid check '{check}', expected NAME=TYPE")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run all checks and return the exit status (1 if any check failed).
    """
    args = parse_arguments(argv)
    logging.basicConfig(level=logging.INFO, format=config.LOG_FORMAT)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    variables = load_variables(args.path)

    n_failed = 0
    for check in args.checks:
        name, _, type_def = check.partition('=')
        try:
            check_type_named(name.strip(), type_def.strip(), variables)
        except (TypeCheckError, NameError) as e:
            logger.error(f"✗ {e}")
            n_failed += 1
        else:
            logger.info(f"✓ {name.strip()}: {type_def.strip()}")

    logger.info(f"{len(args.checks) - n_failed} of {len(args.checks)} check(s) passed")
    return 1 if n_failed else 0


if __name__ == '__main__':
    sys.exit(main())
