from __future__ import annotations

import os
import sys
from typing import Optional

import cement
import yaml
from loguru import logger

from runorder.config import RunOrderConfig
from runorder.core import TestUnit
from runorder.exceptions import RunOrderError
from runorder.version import __version__ as VERSION

BANNER = f"runorder {VERSION}"


def _read_tests(names: list[str], filename: Optional[str]) -> list[str]:
    tests = list(names)
    if filename:
        with open(filename) as f:
            tests += [line.strip() for line in f if line.strip()]
    return tests


class BaseController(cement.Controller):  # type: ignore
    class Meta:
        label = "base"
        description = "Decides the order in which test classes should run"
        arguments = [
            (["--version"], {"action": "version", "version": BANNER}),
        ]

    def default(self):
        # type: () -> None
        self.app.args.print_help()

    @cement.ex(
        help="prints the order in which a given set of tests should run",
        arguments=[
            (["filename"],
             {"help": "a configuration file describing how tests should be ordered."}),
            (["tests"],
             {"help": "the names of the test classes (or methods) to order.",
              "nargs": "*"}),
            (["--tests-from"],
             {"help": "path to a file listing one test per line.",
              "dest": "tests_from",
              "type": str}),
            (["--methods"],
             {"help": ("treats tests as method requests of the form "
                       "method(pkg.Class) and orders them by the specified "
                       "order."),
              "action": "store_true"}),
            (["--seed"],
             {"help": "random number generator seed",
              "type": int}),
            (["--threads"],
             {"dest": "threads",
              "type": int,
              "help": "number of threads over which the tests will be run"}),
            (["--silent"],
             {"help": "prevents logging to the stderr",
              "action": "store_true"}),
            (["-v", "--verbose"],
             {"help": "enables verbose TRACE-level logging to the stderr",
              "action": "store_true"}),
        ],
    )  # type: ignore
    def order(self) -> None:
        """Orders a given set of tests and prints them, one per line."""
        filename: str = self.app.pargs.filename
        seed: Optional[int] = self.app.pargs.seed
        threads: Optional[int] = self.app.pargs.threads
        verbose_logging: bool = self.app.pargs.verbose

        # remove all existing loggers
        logger.remove()
        logger.enable("runorder")
        if not self.app.pargs.silent:
            logging_level = "TRACE" if verbose_logging else "INFO"
            logger.add(sys.stderr, level=logging_level)

        # load the configuration file
        filename = os.path.abspath(filename)
        cfg_dir = os.path.dirname(filename)
        with open(filename) as f:
            yml = yaml.safe_load(f) or {}

        try:
            cfg = RunOrderConfig.from_yml(yml,
                                          dir_=cfg_dir,
                                          seed=seed,
                                          threads=threads)
            logger.info(f"using configuration: {cfg}")
            calculator = cfg.build()
            tests = _read_tests(self.app.pargs.tests, self.app.pargs.tests_from)

            if self.app.pargs.methods:
                key = calculator.method_sort_key()
                ordered = sorted(tests, key=key) if key else tests
            else:
                units = calculator.order_test_classes(TestUnit(t) for t in tests)
                ordered = list(units.names)
        except RunOrderError as error:
            logger.error(str(error))
            sys.exit(1)

        for name in ordered:
            print(name)


class CLI(cement.App):  # type: ignore
    class Meta:
        label = "runorder"
        catch_signals = None
        handlers = [BaseController]


def main() -> None:
    with CLI() as app:
        app.run()
