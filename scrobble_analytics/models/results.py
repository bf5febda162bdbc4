"""Outcome summaries returned by the pipelines"""
from dataclasses import dataclass
from pathlib import Path

@dataclass
class IngestResult:
    """Counts from one ingestion run"""
    ingested: int
    skipped: int
    output_path: Path

@dataclass
class BuildResult:
    """Counts from one analytics build"""
    processed: int
    output_path: Path
