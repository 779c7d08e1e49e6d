"""
Reference datasets bundled with appstudio.

    from appstudio.datasets import faithful, iris

    faithful()["waiting"]       # numpy array of 272 waiting times (minutes)
    iris().head()               # first six rows, as a Dataset
"""

import functools
from typing import Any, Dict, Iterator, List

import numpy as np

from appstudio.util import PARENT_PATH

DATA_PATH = PARENT_PATH / "data"


class Dataset:
    """An ordered set of equal-length, named numpy columns."""

    def __init__(self, columns: Dict[str, Any], name: str | None = None):
        self.name = name
        self.columns = {k: np.asarray(v) for k, v in columns.items()}
        lengths = {len(v) for v in self.columns.values()}
        if len(lengths) > 1:
            raise ValueError(f"Columns must have equal length, got {sorted(lengths)}")

    @property
    def names(self) -> List[str]:
        return list(self.columns)

    def __len__(self) -> int:
        for column in self.columns.values():
            return len(column)
        return 0

    def __getitem__(self, key: str) -> np.ndarray:
        try:
            return self.columns[key]
        except KeyError:
            raise KeyError(
                f"No column named {key!r}. Available columns: {', '.join(self.names)}"
            ) from None

    def __contains__(self, key: str) -> bool:
        return key in self.columns

    def __iter__(self) -> Iterator[str]:
        return iter(self.columns)

    def __repr__(self):
        return f"<Dataset {self.name or ''} rows={len(self)}, columns={self.names}>"

    def head(self, n: int = 6) -> "Dataset":
        return Dataset({k: v[:n] for k, v in self.columns.items()}, name=self.name)

    def records(self) -> List[Dict[str, Any]]:
        return [
            {k: v[i].item() for k, v in self.columns.items()} for i in range(len(self))
        ]

    def describe(self) -> "Dataset":
        """Min, max and mean of every numeric column."""
        numeric = [k for k, v in self.columns.items() if np.issubdtype(v.dtype, np.number)]
        return Dataset(
            {
                "column": numeric,
                "min": [self.columns[k].min() for k in numeric],
                "max": [self.columns[k].max() for k in numeric],
                "mean": [self.columns[k].mean() for k in numeric],
            },
            name=f"{self.name} summary" if self.name else None,
        )

    def for_json(self):
        return {k: v.tolist() for k, v in self.columns.items()}


def read_csv(path, name=None) -> Dataset:
    table = np.genfromtxt(path, delimiter=",", names=True, dtype=None, encoding="utf-8")
    return Dataset({k: table[k] for k in table.dtype.names}, name=name)


@functools.cache
def _load(name: str) -> Dataset:
    dataset = read_csv(DATA_PATH / f"{name}.csv", name=name)
    # shared between callers
    for column in dataset.columns.values():
        column.flags.writeable = False
    return dataset


def iris() -> Dataset:
    """
    Edgar Anderson's iris measurements: 150 flowers, three species.

    Columns: sepal_length, sepal_width, petal_length, petal_width (cm) and species.
    """
    return _load("iris")


def faithful() -> Dataset:
    """
    Old Faithful geyser eruptions in Yellowstone: 272 observations.

    Columns: eruptions (eruption time, minutes) and waiting (time to next eruption, minutes).
    """
    return _load("faithful")
