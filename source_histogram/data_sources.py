"""Data producers for the histogram: two random generators and a file loader."""

from __future__ import annotations

import base64
import binascii
import io
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Optional, Union

import numpy as np
import pandas as pd

from . import config

Dataset = np.ndarray


class FileParseError(ValueError):
    """Raised when an uploaded file cannot be reduced to one numeric column."""

    def __init__(self, message: str, *, file_name: Optional[str] = None):
        super().__init__(message)
        self.file_name = file_name

    def __str__(self) -> str:
        base = super().__str__()
        if self.file_name:
            return f"{self.file_name}: {base}"
        return base


@dataclass(frozen=True)
class FileSpec:
    path: Union[str, Path, IO[str]]
    header: bool = config.HEADER_DEFAULT
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        if isinstance(self.path, (str, Path)):
            return Path(self.path).name
        return "upload"


def _resolve_rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def generate_normal(
    size: int = config.SAMPLE_SIZE,
    *,
    mean: float = config.NORMAL_MEAN,
    sd: float = config.NORMAL_SD,
    rng: Optional[np.random.Generator] = None,
) -> Dataset:
    return _resolve_rng(rng).normal(mean, sd, size).astype(float)


def generate_poisson(
    size: int = config.SAMPLE_SIZE,
    *,
    rate: float = config.POISSON_RATE,
    rng: Optional[np.random.Generator] = None,
) -> Dataset:
    return _resolve_rng(rng).poisson(rate, size).astype(float)


def is_accepted_filename(name: Optional[str]) -> bool:
    if not name:
        return False
    return Path(name).suffix.lower() in config.ACCEPTED_EXTENSIONS


def decode_upload_contents(contents: Optional[str], *, file_name: Optional[str] = None) -> str:
    """Decode a browser upload payload (``data:<mime>;base64,<data>``) to text."""
    if not contents:
        raise FileParseError("No file content provided.", file_name=file_name)
    if "," not in contents:
        raise FileParseError("Invalid upload payload.", file_name=file_name)
    _meta, b64 = contents.split(",", 1)
    try:
        raw = base64.b64decode(b64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FileParseError("Upload payload is not valid base64.", file_name=file_name) from exc
    for enc in config.UPLOAD_ENCODINGS:
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    raise FileParseError("Unable to decode uploaded text content.", file_name=file_name)


def load_single_column(spec: FileSpec) -> Dataset:
    """Parse a one-column numeric text file.

    With ``spec.header`` the first row is taken as the column name, so a file
    of N lines yields N - 1 values; otherwise every row is data.
    """
    name = spec.display_name
    try:
        frame = pd.read_csv(
            spec.path,
            header=0 if spec.header else None,
            skip_blank_lines=True,
            dtype=str,
            keep_default_na=False,
        )
    except FileNotFoundError as exc:
        raise FileParseError("File not found.", file_name=name) from exc
    except pd.errors.EmptyDataError as exc:
        raise FileParseError("File is empty.", file_name=name) from exc
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
        raise FileParseError(f"File could not be read: {exc}", file_name=name) from exc

    if frame.shape[1] != 1:
        raise FileParseError(
            f"Expected exactly one column, found {frame.shape[1]}.", file_name=name
        )
    if frame.shape[0] == 0:
        raise FileParseError("File contains no data rows.", file_name=name)

    column = frame.iloc[:, 0].astype(str).str.strip()
    blank = column == ""
    if blank.any():
        row = int(np.argmax(blank.to_numpy())) + 1
        raise FileParseError(f"Missing value in data row {row}.", file_name=name)
    values = pd.to_numeric(column, errors="coerce").to_numpy(dtype=float)
    bad = ~np.isfinite(values)
    if bad.any():
        idx = int(np.argmax(bad))
        raise FileParseError(
            f"Non-numeric value {column.iloc[idx]!r} in data row {idx + 1}.", file_name=name
        )
    return values


def upload_file_spec(contents: Optional[str], file_name: Optional[str], header: bool) -> FileSpec:
    if file_name and not is_accepted_filename(file_name):
        raise FileParseError(
            "Only .csv and .txt files are accepted.", file_name=file_name
        )
    text = decode_upload_contents(contents, file_name=file_name)
    return FileSpec(path=io.StringIO(text), header=bool(header), name=file_name)
