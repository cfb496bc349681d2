#!/usr/bin/env python3
"""
Run All Tests
=============

Runs the lar_math suite from any location:
    python3 src/run_tests.py

Extra arguments are passed to pytest:
    python3 src/run_tests.py -k exterior
"""

import os
import subprocess
import sys
from pathlib import Path


def main(argv=None):
    src_root = Path(__file__).parent.resolve()

    env = os.environ.copy()
    pythonpath = env.get('PYTHONPATH', '')
    env['PYTHONPATH'] = os.pathsep.join(p for p in (str(src_root), pythonpath) if p)

    args = list(sys.argv[1:] if argv is None else argv)
    result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests/', '-v', '--tb=short', *args],
        cwd=src_root,
        env=env,
    )
    return result.returncode


if __name__ == '__main__':
    sys.exit(main())
