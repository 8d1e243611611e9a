"""Main cleaning pipeline: staging files in, clean tables out."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import polars as pl

from .config import DATASETS, STAGE_ORDER, PipelineSettings
from .config.settings import resolve_stage
from .diagnostics import VerificationReport, verify_table
from .obs import audit
from .readers import ReaderRegistry, load_staging, registry as reader_registry
from .storage import TableStore
from .transforms import CLEANERS, output_schema

logger = logging.getLogger(__name__)


@dataclass
class StageResult:
    dataset: str
    clean_table: str
    rows_in: int = 0
    rows_out: int = 0
    stats: Dict[str, int] = field(default_factory=dict)
    report: Optional[VerificationReport] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PipelineContext:
    """Everything one pipeline invocation owns: settings, output store, results.

    A context is built per run; nothing is shared between runs. Concurrent runs
    against the same output directory must be serialized by the caller.
    """

    def __init__(
        self,
        settings: PipelineSettings,
        store: Optional[TableStore] = None,
        readers: Optional[ReaderRegistry] = None,
    ):
        self.settings = settings
        self.store = store or TableStore(settings.output_dir, settings.output_format)
        self.readers = readers or reader_registry
        self.results: List[StageResult] = []

    @property
    def cleaner_config(self) -> Dict[str, object]:
        return {"as_of": self.settings.as_of}


class MarketingPipeline:
    """Runs the per-dataset cleaners in a fixed order; each stage is independent."""

    def __init__(self, context: PipelineContext):
        self.context = context

    def clean_frame(self, dataset: str, staging: pl.DataFrame) -> Tuple[pl.DataFrame, Dict[str, int]]:
        """Clean an in-memory staging frame without touching storage."""
        cleaner = CLEANERS[dataset](self.context.cleaner_config)
        clean = cleaner.clean(staging)
        return clean, dict(cleaner.stats)

    def run_stage(self, stage) -> StageResult:
        """Load staging, clean, swap the clean table in, verify."""
        dataset = resolve_stage(stage)
        spec = DATASETS[dataset]
        result = StageResult(dataset=dataset, clean_table=spec.clean_table)
        settings = self.context.settings
        try:
            staging = load_staging(dataset, settings.staging_dir, self.context.readers)
            result.rows_in = staging.height
            clean, stats = self.clean_frame(dataset, staging)
            audit(spec.clean_table, staging, clean, spec.key_columns)
            self.context.store.write(spec.clean_table, clean)
            result.rows_out = clean.height
            result.stats = stats
        except Exception as e:
            # Other datasets do not depend on this one; keep going
            logger.error(f"Stage {dataset} failed, {spec.clean_table} left unchanged: {e}")
            result.error = str(e)
        else:
            extras = {k: v for k, v in stats.items() if k not in {"rows_in", "rows_out"}}
            result.report = verify_table(
                dataset, clean, rows_in=result.rows_in, extras=extras, log=settings.diagnostics
            )
        self.context.results.append(result)
        return result

    def run(self, stages: Optional[Iterable] = None) -> List[StageResult]:
        """Run the selected stages (default: those in the settings) in canonical order."""
        if stages is None:
            selected = list(self.context.settings.stages)
        else:
            wanted = {resolve_stage(s) for s in stages}
            selected = [name for name in STAGE_ORDER if name in wanted]

        logger.info(f"Running stages: {selected}")
        results = [self.run_stage(name) for name in selected]
        failed = [r.dataset for r in results if not r.ok]
        if failed:
            logger.error(f"Pipeline finished with failed stages: {failed}")
        else:
            logger.info("Pipeline finished: all stages succeeded")
        return results

    def load_clean_tables(self) -> Dict[str, pl.DataFrame]:
        """Read back every clean table that currently exists."""
        tables = {}
        for dataset in STAGE_ORDER:
            name = DATASETS[dataset].clean_table
            if self.context.store.exists(name):
                tables[dataset] = self.context.store.read(name, output_schema(dataset))
        return tables


def run_pipeline(settings: PipelineSettings, stages: Optional[Iterable] = None) -> List[StageResult]:
    """Convenience wrapper: one context, one pipeline, one run."""
    return MarketingPipeline(PipelineContext(settings)).run(stages)
