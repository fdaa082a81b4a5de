"""
Table: the in-memory dataset every PyEconometrics component consumes.

A Table is an ordered set of named, equal-length columns. Numeric columns
are stored as float64 arrays, categorical columns as object arrays of
strings. Tables are immutable: every operation returns a new Table and the
underlying arrays are marked read-only.

Usage:
    from pyeconometrics import Table

    tbl = Table.from_columns(y=[1, 2, 3], x=[4, 5, 6], region=['a', 'b', 'a'])
    tbl = Table.from_file("data/Table2_1.dta")
    tbl = Table.from_dataframe(df)

    tbl.columns          # ('y', 'x', 'region')
    tbl['x']             # array([4., 5., 6.])
    tbl.take([0, 0, 2])  # bootstrap-style row subset
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyeconometrics.core.exceptions import DatasetLoadError, DimensionError

if TYPE_CHECKING:
    import pandas as pd


def _as_column(values: ArrayLike, name: str) -> NDArray:
    """Coerce one column to float64 (numeric) or str objects (categorical)."""
    arr = np.asarray(values)
    if arr.ndim != 1:
        raise DimensionError(
            f"column {name!r}: expected 1D values, got shape {arr.shape}"
        )
    if arr.dtype == np.bool_:
        arr = arr.astype(np.float64)
    elif np.issubdtype(arr.dtype, np.number):
        arr = arr.astype(np.float64, copy=True)
    else:
        arr = np.array(
            [None if _is_missing(v) else str(v) for v in arr], dtype=object
        )
    arr.setflags(write=False)
    return arr


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and np.isnan(value)


@dataclass(frozen=True)
class Table:
    """
    Immutable, ordered collection of named columns.

    Construct via the factory classmethods, not directly.
    """
    _columns: dict[str, NDArray]
    _n_rows: int
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Column access ===

    @property
    def columns(self) -> tuple[str, ...]:
        """Column names in order."""
        return tuple(self._columns)

    @property
    def n_rows(self) -> int:
        """Number of rows (observations)."""
        return self._n_rows

    @property
    def metadata(self) -> dict[str, Any]:
        """Provenance metadata (source, path)."""
        return self._metadata.copy()

    def __getitem__(self, key: str) -> NDArray:
        """
        Access a named column.

        Raises:
            KeyError: If the column does not exist, listing available columns
        """
        if key not in self._columns:
            raise KeyError(
                f"Table has no column {key!r}. Available: {list(self._columns)}"
            )
        return self._columns[key]

    def __contains__(self, key: object) -> bool:
        return key in self._columns

    def __len__(self) -> int:
        return self._n_rows

    def is_categorical(self, name: str) -> bool:
        """True if the named column holds categorical (string) values."""
        return self[name].dtype == object

    def numeric_columns(self) -> tuple[str, ...]:
        return tuple(c for c in self._columns if not self.is_categorical(c))

    # === Derivation (all return new Tables) ===

    def take(self, indices: ArrayLike) -> Table:
        """Row subset by integer positions; repeats are allowed."""
        idx = np.asarray(indices, dtype=np.intp)
        columns = {name: arr[idx] for name, arr in self._columns.items()}
        for arr in columns.values():
            arr.setflags(write=False)
        return Table(_columns=columns, _n_rows=len(idx), _metadata=self._metadata)

    def select(self, names: Iterable[str]) -> Table:
        """Keep only the named columns, in the order given."""
        names = list(names)
        columns = {name: self[name] for name in names}
        return Table(_columns=columns, _n_rows=self._n_rows, _metadata=self._metadata)

    def drop(self, names: Iterable[str]) -> Table:
        """Remove the named columns; unknown names raise KeyError."""
        names = set(names)
        for name in names:
            self[name]
        columns = {k: v for k, v in self._columns.items() if k not in names}
        return Table(_columns=columns, _n_rows=self._n_rows, _metadata=self._metadata)

    def with_column(self, name: str, values: ArrayLike) -> Table:
        """Add or replace a column."""
        arr = _as_column(values, name)
        if arr.shape[0] != self._n_rows:
            raise DimensionError(
                f"column {name!r} has length {arr.shape[0]}, table has {self._n_rows} rows"
            )
        columns = dict(self._columns)
        columns[name] = arr
        return Table(_columns=columns, _n_rows=self._n_rows, _metadata=self._metadata)

    def to_dataframe(self) -> 'pd.DataFrame':
        """Export as a pandas DataFrame (columns in order)."""
        import pandas as pd
        return pd.DataFrame({name: np.array(arr) for name, arr in self._columns.items()})

    def __repr__(self) -> str:
        return f"Table(n_rows={self._n_rows}, columns={list(self._columns)})"

    # === Factory methods ===

    @classmethod
    def from_columns(
        cls,
        columns: Mapping[str, ArrayLike] | None = None,
        /,
        **named_columns: ArrayLike,
    ) -> Table:
        """
        Construct from a mapping and/or keyword arguments of column values.

        Raises:
            DimensionError: If columns have different lengths
        """
        merged: dict[str, ArrayLike] = dict(columns or {})
        merged.update(named_columns)

        storage = {name: _as_column(values, name) for name, values in merged.items()}
        lengths = {name: arr.shape[0] for name, arr in storage.items()}
        if len(set(lengths.values())) > 1:
            details = ", ".join(f"{k}={v}" for k, v in lengths.items())
            raise DimensionError(f"Inconsistent column lengths: {details}")

        n_rows = next(iter(lengths.values()), 0)
        return cls(_columns=storage, _n_rows=n_rows, _metadata={'source': 'columns'})

    @classmethod
    def from_dataframe(cls, df: 'pd.DataFrame', *, source_path: str | None = None) -> Table:
        """
        Construct from a pandas DataFrame.

        Numeric and boolean columns become float64; object, string and
        category columns become categorical.
        """
        import pandas as pd

        storage: dict[str, NDArray] = {}
        for col in df.columns:
            series = df[col]
            if isinstance(series.dtype, pd.CategoricalDtype):
                values = series.astype(object).to_numpy()
            else:
                values = series.to_numpy()
            storage[str(col)] = _as_column(values, str(col))

        metadata: dict[str, Any] = {'source': 'dataframe'}
        if source_path:
            metadata['source_path'] = source_path
        return cls(_columns=storage, _n_rows=len(df), _metadata=metadata)

    @classmethod
    def from_file(cls, path: str | Path, *, columns: list[str] | None = None) -> Table:
        """
        Load a dataset from disk (CSV, TSV, Stata .dta, NPY).

        Args:
            path: File path
            columns: Optional subset of columns to keep (names for .npy)

        Raises:
            DatasetLoadError: On any I/O, parse or schema failure, with the
                path and the underlying cause attached
        """
        path = Path(path)
        suffix = path.suffix.lower()

        try:
            if suffix in ('.csv', '.tsv'):
                import pandas as pd
                sep = '\t' if suffix == '.tsv' else ','
                df = pd.read_csv(path, sep=sep, usecols=columns)
                return cls.from_dataframe(df, source_path=str(path))
            if suffix == '.dta':
                import pandas as pd
                df = pd.read_stata(path, columns=columns)
                return cls.from_dataframe(df, source_path=str(path))
            if suffix == '.npy':
                data = np.load(path, allow_pickle=False)
                if data.ndim != 2:
                    raise DimensionError(f"expected a 2D array, got shape {data.shape}")
                names = columns or [f"x{i}" for i in range(data.shape[1])]
                if len(names) != data.shape[1]:
                    raise DimensionError(
                        f"{len(names)} column names for {data.shape[1]} columns"
                    )
                table = cls.from_columns({n: data[:, i] for i, n in enumerate(names)})
                return Table(
                    _columns=table._columns,
                    _n_rows=table.n_rows,
                    _metadata={'source': 'file', 'source_path': str(path)},
                )
        except DatasetLoadError:
            raise
        except Exception as e:
            raise DatasetLoadError(
                f"Failed to load dataset {str(path)!r}: {e}", path=path, cause=e
            ) from e

        raise DatasetLoadError(f"Unknown file format: {suffix!r}", path=path)
