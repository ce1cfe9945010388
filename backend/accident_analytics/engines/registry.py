"""
Engine registry for running the analysis engines.

The EngineRegistry holds the engines and runs them in parallel over one
dataset snapshot. Engines share no mutable state, so they can run on a
thread pool without coordination.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List

from ..models.accident import AccidentDataset
from .base import AnalysisEngine
from .exceptions import AnalysisEngineError

logger = logging.getLogger(__name__)


class EngineRegistry:
    """
    Centralized registry for analysis engines.

    Example:
        registry = EngineRegistry(max_workers=4)
        registry.register('trends', TrendEngine())
        registry.register('correlation', CorrelationEngine())

        results = registry.run_all(dataset)
        report = results['trends']
    """

    def __init__(self, max_workers: int = 4):
        """
        Args:
            max_workers: Maximum number of engines running at the same time.
        """
        self.engines: Dict[str, AnalysisEngine] = {}
        self.max_workers = max_workers

    def register(self, name: str, engine: AnalysisEngine) -> None:
        """
        Register an engine instance.

        Raises:
            ValueError: If engine name already registered
        """
        if name in self.engines:
            raise ValueError(f"Engine '{name}' already registered")

        self.engines[name] = engine
        logger.debug(f"✓ Registered engine: {name}")

    def run_all(self, dataset: AccidentDataset) -> Dict[str, Any]:
        """
        Run every registered engine in parallel.

        There is no partial result: the first engine failure is raised
        after the remaining engines have finished.

        Args:
            dataset: Read-only snapshot shared by all engines

        Returns:
            Dictionary mapping engine name to its result

        Raises:
            AnalysisEngineError: If any engine fails
        """
        if not self.engines:
            logger.warning("No engines to run")
            return {}

        results: Dict[str, Any] = {}
        errors: List[AnalysisEngineError] = []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self._run_engine, name, engine, dataset): name
                for name, engine in self.engines.items()
            }
            for future in as_completed(futures):
                name = futures[future]
                try:
                    results[name] = future.result()
                except AnalysisEngineError as e:
                    errors.append(e)

        if errors:
            raise errors[0]

        # Keep registration order for callers that iterate the results
        return {name: results[name] for name in self.engines}

    def _run_engine(self, name: str, engine: AnalysisEngine, dataset: AccidentDataset) -> Any:
        logger.debug(f"→ Running engine: {name}")
        try:
            result = engine.run(dataset)
        except Exception as e:
            logger.error(f"✗ Engine '{name}' failed: {e}", exc_info=True)
            raise AnalysisEngineError(name, str(e), e) from e
        logger.debug(f"✓ Engine '{name}' finished")
        return result

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<EngineRegistry("
            f"engines={len(self.engines)}, "
            f"max_workers={self.max_workers})>"
        )
