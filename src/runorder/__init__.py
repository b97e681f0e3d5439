from loguru import logger as _logger

_logger.disable("runorder")

import runorder.exceptions
from runorder.calculator import RunOrderCalculator
from runorder.core import TestsToRun, TestUnit
from runorder.parameters import RunOrderParameters
from runorder.pattern import MatchPattern, resolve_patterns
from runorder.statistics import RunEntry, RunStatistics
from runorder.strategy import RunOrder
from runorder.version import __version__
