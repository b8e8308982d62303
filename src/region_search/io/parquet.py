from __future__ import annotations

import io
import os
from pathlib import Path
from typing import Iterable, Literal

import polars as pl
import pyarrow.parquet as pq

from region_search.core.geometry import MatchingArea


PARQUET_MAGIC = b"PAR1"


class RegionSchema:
    schema = {
        "area_index": pl.Int64,
        "start_page": pl.Int64,
        "end_page": pl.Int64,
        "page": pl.Int64,
        "top": pl.Float64,
        "left": pl.Float64,
        "width": pl.Float64,
        "height": pl.Float64,
    }


def regions_frame(areas: Iterable[MatchingArea]) -> pl.DataFrame:
    """One row per SubSection, in area discovery order then page order."""
    records: list[dict] = []
    for area_index, area in enumerate(areas):
        for sub in area.subsections():
            records.append(
                {
                    "area_index": area_index,
                    "start_page": area.start_page,
                    "end_page": area.end_page,
                    "page": sub.page,
                    "top": float(sub.rect.top),
                    "left": float(sub.rect.left),
                    "width": float(sub.rect.width),
                    "height": float(sub.rect.height),
                }
            )
    return pl.DataFrame(records, schema=RegionSchema.schema)


def _assert_parquet_magic(path: Path) -> None:
    """
    Quick integrity check for common truncation/corruption cases:
    parquet files must start and end with the magic bytes PAR1.
    """
    try:
        size = path.stat().st_size
    except FileNotFoundError as exc:
        raise OSError(f"Parquet file not found: {path}") from exc

    if size < 8:
        raise OSError(f"Parquet file too small to be valid ({size} bytes): {path}")

    with path.open("rb") as f:
        start = f.read(4)
        if start != PARQUET_MAGIC:
            raise OSError(f"Parquet magic header missing for {path} (got {start!r})")
        f.seek(-4, io.SEEK_END)
        end = f.read(4)
        if end != PARQUET_MAGIC:
            raise OSError(f"Parquet magic footer missing for {path} (got {end!r})")


def _validate_parquet_quick(path: Path) -> None:
    """Magic bytes plus a readable footer and first batch."""
    _assert_parquet_magic(path)
    pf = pq.ParquetFile(path)
    try:
        _ = pf.metadata
        for _ in pf.iter_batches(batch_size=1):
            break
    finally:
        pf.close()


def write_regions_parquet(
    areas: Iterable[MatchingArea] | pl.DataFrame,
    out_path: Path | str,
    *,
    compression: Literal["lz4", "uncompressed", "snappy", "gzip", "brotli", "zstd"] = "zstd",
) -> Path:
    """
    Write region rows to parquet through a temp file and an atomic replace.

    Returns:
        Path: The written file.
    """
    df = areas if isinstance(areas, pl.DataFrame) else regions_frame(areas)
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = out_path.with_name(out_path.name + ".tmp")
    try:
        tmp_path.unlink(missing_ok=True)
        df.write_parquet(tmp_path, compression=compression)
        _validate_parquet_quick(tmp_path)
        os.replace(tmp_path, out_path)
    finally:
        tmp_path.unlink(missing_ok=True)
    return out_path


def read_regions_parquet(path: Path | str) -> pl.DataFrame:
    path = Path(path)
    _assert_parquet_magic(path)
    df = pl.read_parquet(path)
    missing = [c for c in RegionSchema.schema if c not in df.columns]
    if missing:
        raise ValueError(f"{path} is missing region columns: {missing}")
    return df.select(list(RegionSchema.schema)).cast(RegionSchema.schema)
