# pipeline.py
"""Per-unit driver: select units, look up bodies, extract, render and write.

Units are handled one at a time in declaration order. Each unit gets its own
description; the only thing units share is the output directory.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from cfg_builder import extract_cfg
from errors import CfgError
from flowchart_generator import SinkRegistry, render, write
from ir_model import Item, Program
from metrics_calculator import calculate_metrics
from unit_selector import select_units

logger = logging.getLogger(__name__)


@dataclass
class RunConfig:
    out_dir: Path = Path(".")
    fail_fast: bool = True
    write_files: bool = True


@dataclass
class UnitResult:
    unit: Item
    description: str
    metrics: dict
    sink: Optional[Path] = None


@dataclass
class RunReport:
    results: List[UnitResult] = field(default_factory=list)
    failures: List[Tuple[Item, CfgError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def process_unit(program: Program, unit: Item, sinks: Optional[SinkRegistry] = None) -> UnitResult:
    """Run one unit end to end. Nothing is written unless rendering succeeded."""
    body = program.body(unit.id)
    cfg = extract_cfg(body, unit_id=unit.id)
    description = render(cfg)
    result = UnitResult(unit=unit, description=description, metrics=calculate_metrics(cfg))
    if sinks is not None:
        result.sink = sinks.claim(unit)
        write(description, result.sink)
    return result


def run(program: Program, config: Optional[RunConfig] = None) -> RunReport:
    config = config or RunConfig()
    sinks = SinkRegistry(config.out_dir) if config.write_files else None
    report = RunReport()

    for unit_id in select_units(program.items):
        unit = program.item(unit_id)
        try:
            result = process_unit(program, unit, sinks)
        except CfgError as exc:
            logger.error("unit %s (%s) failed: %s", unit.id, unit.name, exc)
            if config.fail_fast:
                raise
            report.failures.append((unit, exc))
            continue
        logger.info("unit %s: %d blocks -> %s", unit.name, result.metrics["blocks"], result.sink or "<memory>")
        report.results.append(result)

    return report
