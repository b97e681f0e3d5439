from __future__ import annotations

__all__ = ("RunOrderConfig",)

import os
import typing as t
from typing import Any, NoReturn, Optional

import attr
from loguru import logger

from .calculator import RunOrderCalculator
from .exceptions import BadConfigurationException
from .parameters import RunOrderParameters


@attr.s(frozen=True, auto_attribs=True)
class RunOrderConfig:
    """A configuration for ordering a test run.

    Attributes
    ----------
    parameters: RunOrderParameters
        Describes the strategy, statistics, seed, and specified order that
        should be used to order tests.
    threads: int
        The number of threads over which tests will be run.
    """
    parameters: RunOrderParameters
    threads: int = attr.ib(default=1)

    @threads.validator
    def validate_threads(self, attribute: attr.Attribute[int], value: int) -> None:
        if value < 1:
            m = "number of threads must be greater than or equal to 1."
            raise BadConfigurationException(m)

    @staticmethod
    def from_yml(
        yml: dict[str, Any],
        dir_: Optional[str] = None,
        *,
        seed: Optional[int] = None,
        threads: Optional[int] = None,
    ) -> RunOrderConfig:
        """Loads a configuration from a YAML dictionary.

        Parameters
        ----------
        yml: dict[str, Any]
            The contents of the configuration file.
        dir_: str, optional
            The directory containing the configuration file, against which
            relative paths are resolved.
        seed: int, optional
            Overrides the random seed given by the configuration.
        threads: int, optional
            Overrides the number of threads given by the configuration.

        Raises
        ------
        BadConfigurationException
            If an illegal configuration is provided.
        UnknownStrategy
            If the configuration names a strategy that does not exist.
        """
        def err(m: str) -> NoReturn:
            raise BadConfigurationException(m)

        if not isinstance(yml, dict):
            err("configuration should be an object")
        section = yml.get("run-order", {})
        if not isinstance(section, dict):
            err("'run-order' section should be an object")

        strategies: t.Optional[str | list[str]] = section.get("strategies")
        if strategies is not None:
            is_list = isinstance(strategies, list) \
                and all(isinstance(s, str) for s in strategies)
            if not isinstance(strategies, str) and not is_list:
                err("'strategies' property should be a string or a list of strings")

        statistics_file: Optional[str] = section.get("statistics-file")
        if statistics_file is not None:
            if not isinstance(statistics_file, str):
                err("'statistics-file' property should be a string")
            if not os.path.isabs(statistics_file) and dir_:
                statistics_file = os.path.join(dir_, statistics_file)

        # seed provided on the command line takes precedence
        if seed is None and "seed" in section:
            if not isinstance(section["seed"], int) or isinstance(section["seed"], bool):
                err("'seed' property should be an int.")
            seed = section["seed"]

        specified_order: Optional[str] = section.get("specified-order")
        if specified_order is not None:
            if isinstance(specified_order, list):
                if not all(isinstance(p, str) for p in specified_order):
                    err("'specified-order' property should only contain strings")
                specified_order = ",".join(specified_order)
            elif not isinstance(specified_order, str):
                err("'specified-order' property should be a string or a list of strings")

        if threads is None and "threads" in section:
            if not isinstance(section["threads"], int) or isinstance(section["threads"], bool):
                err("'threads' property should be an int")
            threads = section["threads"]
        elif threads is None:
            threads = 1

        parameters = RunOrderParameters(strategies,
                                        statistics_file=statistics_file,
                                        random_seed=seed,
                                        specified_order=specified_order)
        logger.debug(f"loaded run order parameters: {parameters}")
        return RunOrderConfig(parameters=parameters, threads=threads)

    def build(self, **kwargs: Any) -> RunOrderCalculator:
        """Builds the run order calculator described by this configuration.
        Keyword arguments are passed to the calculator.
        """
        return RunOrderCalculator(self.parameters, self.threads, **kwargs)
