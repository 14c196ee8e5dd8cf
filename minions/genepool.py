"""
Gene Pool Files

A gene pool is a CSV of genotypes, one row per minion, used to seed new
runs with evolved founders or to share populations between runs.

COLUMNS:
    genotype    bitstring, MSB-first per field
    lineage_id  lineage the minion belonged to
    generation  generations since the lineage founder
    gender      decoded gender symbol, informational
    layout      fingerprint of the genome layout the row was written with
"""

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

import structlog

from .errors import MalformedGenotype
from .genotype import Genotype, GenomeLayout

logger = structlog.get_logger(__name__)


HEADER = ['genotype', 'lineage_id', 'generation', 'gender', 'layout']


@dataclass
class GenePoolEntry:
    """One imported founder."""
    genotype: Genotype
    lineage_id: Optional[str] = None
    generation: int = 0


@dataclass
class GenePoolImport:
    """Result of reading a gene pool. Malformed rows are reported, not raised."""
    accepted: List[GenePoolEntry] = field(default_factory=list)
    rejected: List[Tuple[int, str]] = field(default_factory=list)   # (line number, reason)

    @property
    def genotypes(self) -> List[Genotype]:
        return [e.genotype for e in self.accepted]


def export_gene_pool(minions: Iterable, filepath: Union[str, Path]) -> Path:
    """
    Write the genotypes of the given minions to a CSV gene pool.

    Args:
        minions: Living minions, written in ascending id order
        filepath: Destination file

    Returns:
        Path to the written file
    """
    filepath = Path(filepath)
    if filepath.parent and not filepath.parent.exists():
        filepath.parent.mkdir(parents=True, exist_ok=True)

    rows = 0
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(HEADER)
        for m in sorted(minions, key=lambda m: m.id):
            writer.writerow([
                m.genotype.to_bitstring(),
                m.lineage_id,
                m.generation,
                m.gender.symbol,
                m.genotype.layout.fingerprint,
            ])
            rows += 1

    logger.info("gene_pool_exported", path=str(filepath), genotypes=rows)
    return filepath


def import_gene_pool(filepath: Union[str, Path], layout: GenomeLayout) -> GenePoolImport:
    """
    Read a CSV gene pool.

    Rows with a wrong-length or non-binary genotype, a foreign layout
    fingerprint, or an unparsable generation are skipped and listed in
    `rejected`; the rest are returned in file order.
    """
    filepath = Path(filepath)
    result = GenePoolImport()

    with open(filepath, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames or 'genotype' not in reader.fieldnames:
            raise ValueError(f"{filepath} is not a gene pool (no 'genotype' column)")

        for row in reader:
            line = reader.line_num
            fingerprint = (row.get('layout') or '').strip()
            if fingerprint and fingerprint != layout.fingerprint:
                _reject(result, line, f"layout {fingerprint} does not match {layout.fingerprint}")
                continue
            try:
                genotype = Genotype.from_bitstring((row.get('genotype') or '').strip(), layout)
                generation = int(row.get('generation') or 0)
            except (MalformedGenotype, ValueError) as e:
                _reject(result, line, str(e))
                continue
            result.accepted.append(GenePoolEntry(
                genotype=genotype,
                lineage_id=(row.get('lineage_id') or '').strip() or None,
                generation=generation,
            ))

    logger.info("gene_pool_imported", path=str(filepath),
                accepted=len(result.accepted), rejected=len(result.rejected))
    return result


def _reject(result: GenePoolImport, line: int, reason: str):
    logger.warning("gene_pool_row_rejected", line=line, reason=reason)
    result.rejected.append((line, reason))
