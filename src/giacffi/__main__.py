#!/usr/bin/env python3
"""
Command line front end for giacffi.

Usage:
    python -m giacffi eval EXPR [--epsilon E] [--factor | --simplify | --rational]
    python -m giacffi ifactor N
    python -m giacffi demo
    python -m giacffi info

Examples:
    # Factor a polynomial
    python -m giacffi eval "x^2-1" --factor

    # Approximate a float by a fraction at a given precision
    python -m giacffi eval 12.9642857143 --epsilon 1e-6 --rational

    # Prime factorization of an integer of any size
    python -m giacffi ifactor 1234567890123456789

Every command exits with status 0 on success and 1 when the engine reports
an error or the shim library cannot be loaded.
"""

import argparse
import sys

from . import __version__
from ._ffi import library_origin, require_library
from .context import Context, release_globals
from .errors import GiacError
from .gen import Gen


def cmd_eval(args):
    """Evaluate an expression, optionally post-processing it."""
    with Context() as ctx:
        if args.epsilon is not None:
            ctx.set_epsilon(args.epsilon)
        value = ctx.eval(args.expr)
        if args.factor:
            value = value.factor(ctx)
        elif args.simplify:
            value = value.simplify(ctx)
        elif args.rational:
            value = value.float_to_rational(ctx)
        print(value)
    return 0


def cmd_ifactor(args):
    """Print the prime factorization of an integer."""
    with Context() as ctx:
        print(ctx.eval(args.n).ifactor(ctx))
    return 0


def cmd_demo(args):
    """Factor a small polynomial sum and compute a determinant."""
    with Context() as ctx:
        e = Gen.from_str("x^4", ctx)
        g = e * ctx.eval("x^5")
        g += e
        print(g.factor(ctx))
        print(Gen.from_str("[[1,2],[3,4]]", ctx).det(ctx).to_int())
    release_globals()
    return 0


def cmd_info(args):
    """Report where the shim was loaded from."""
    require_library()
    print(f"giacffi {__version__}")
    print(f"shim: {library_origin() or 'installed programmatically'}")
    with Context() as ctx:
        print(f"default epsilon: {ctx.epsilon:g}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='python -m giacffi',
        description='Evaluate expressions with the giac computer algebra system',
    )

    subparsers = parser.add_subparsers(dest='action', required=True)

    eval_parser = subparsers.add_parser('eval', help='Parse and evaluate an expression')
    eval_parser.add_argument('expr', help='giac source text')
    eval_parser.add_argument('--epsilon', type=float, metavar='E',
                             help='Precision used by rational approximation')
    post = eval_parser.add_mutually_exclusive_group()
    post.add_argument('--factor', action='store_true', help='Factor the result')
    post.add_argument('--simplify', action='store_true', help='Simplify the result')
    post.add_argument('--rational', action='store_true',
                      help='Approximate the result by a fraction')

    ifactor_parser = subparsers.add_parser('ifactor', help='Factor an integer')
    ifactor_parser.add_argument('n', help='Integer to factor')

    subparsers.add_parser('demo', help='Run a short demonstration')
    subparsers.add_parser('info', help='Show shim library information')

    args = parser.parse_args(argv)

    commands = {
        'eval': cmd_eval,
        'ifactor': cmd_ifactor,
        'demo': cmd_demo,
        'info': cmd_info,
    }
    try:
        return commands[args.action](args)
    except GiacError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
