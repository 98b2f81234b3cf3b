# Copyright 2012 Matt Chaput. All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
#    1. Redistributions of source code must retain the above copyright notice,
#       this list of conditions and the following disclaimer.
#
#    2. Redistributions in binary form must reproduce the above copyright
#       notice, this list of conditions and the following disclaimer in the
#       documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY MATT CHAPUT ``AS IS'' AND ANY EXPRESS OR
# IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF
# MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO
# EVENT SHALL MATT CHAPUT OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
# LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA,
# OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING
# NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#
# The views and conclusions contained in the software and documentation are
# those of the authors and should not be interpreted as representing official
# policies, either expressed or implied, of Matt Chaput.

"""
Runs the automaton stack-machine interpreter.

Usage: python -m fakit [options] [FILE]

Words are read from FILE, or from standard input when FILE is omitted, until
the input ends or a DONE word is reached.
"""

import sys
from contextlib import ExitStack
from optparse import OptionParser

from loguru import logger

from fakit import versionstring
from fakit.interpreter import Interpreter


def _parser():
    p = OptionParser(usage="%prog [options] [FILE]", version=versionstring())
    p.add_option(
        "-o",
        "--output",
        dest="output",
        metavar="FILE",
        help="Write results to FILE instead of standard output.",
        default=None,
    )
    p.add_option(
        "-v",
        "--verbose",
        dest="verbose",
        action="store_true",
        help="Log each interpreter step to standard error.",
        default=False,
    )
    return p


def main(argv=None):
    """
    Parses the command line and runs the interpreter.

    Args:
        argv (list, optional): Command-line arguments without the program
            name. Defaults to sys.argv[1:].

    Returns:
        int: The process exit status.
    """
    p = _parser()
    options, args = p.parse_args(argv)
    if len(args) > 1:
        p.error("expected at most one input file")

    if options.verbose:
        logger.remove()
        logger.add(sys.stderr, level="DEBUG")
        logger.enable("fakit")

    with ExitStack() as stack:
        infile = stack.enter_context(open(args[0])) if args else sys.stdin
        if options.output:
            outfile = stack.enter_context(open(options.output, "w"))
        else:
            outfile = sys.stdout
        Interpreter(out=outfile).run(infile)
    return 0


if __name__ == "__main__":
    sys.exit(main())
