"""
Price data feed for the overlay engine.

The advisor API answers every analysis request with a JSON payload whose
``chart`` key holds the closing-price history as ``{date, close}`` records.
This module turns such payloads (or equivalent lists, DataFrames, JSON and CSV
files) into validated ``PricePoint`` sequences. It never talks to the network.
"""

import json
import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd

from advisor_chart.core.types import PricePoint

__all__ = [
    "DataFeedError",
    "ValidationError",
    "AdvisorSnapshot",
    "parse_price_points",
    "load_price_points",
    "load_advisor_snapshot",
    "to_frame",
]

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("date", "close")

PriceSource = Union[Mapping[str, Any], Sequence[Mapping[str, Any]], pd.DataFrame, str, Path]


class DataFeedError(Exception):
    """Base exception for data feed errors."""

    pass


class ValidationError(DataFeedError):
    """Raised when price records fail validation."""

    pass


@dataclass
class AdvisorSnapshot:
    """
    Non-chart part of an advisor payload.

    Every field is optional because the API leaves values null when it could
    not compute them (for instance no quote for a delisted ticker).
    """

    ticker: str
    name: Optional[str] = None
    industry: Optional[str] = None
    current_price: Optional[float] = None
    change_percent: Optional[float] = None
    recommendation: Optional[str] = None
    rationale: Optional[str] = None
    indicators: dict[str, Optional[float]] = field(default_factory=dict)
    var95: Optional[float] = None
    var99: Optional[float] = None
    chart: list[PricePoint] = field(default_factory=list)


def _naive_utc(stamp: pd.Timestamp) -> pd.Timestamp:
    if stamp.tzinfo is not None:
        return stamp.tz_convert("UTC").tz_localize(None)
    return stamp


def _normalize_date(raw: Any, position: int) -> str:
    """
    Date text for a record.

    Naive strings are kept as written. Zoned values are converted to UTC and
    written without an offset so every date in a history compares the same way.
    """
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise ValidationError(f"Record {position} has an empty date")
        try:
            stamp = pd.Timestamp(text)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Record {position} has an invalid date '{raw}'") from e
        if stamp.tzinfo is None:
            return text
        stamp = _naive_utc(stamp)
        if stamp == stamp.normalize():
            return stamp.strftime("%Y-%m-%d")
        return stamp.isoformat()
    if isinstance(raw, (datetime, date, pd.Timestamp)):
        return _naive_utc(pd.Timestamp(raw)).strftime("%Y-%m-%d")
    raise ValidationError(
        f"Record {position} date must be a string or date, got {type(raw).__name__}"
    )


def _normalize_close(raw: Any, position: int) -> float:
    if isinstance(raw, bool):
        raise ValidationError(f"Record {position} close must be numeric, got bool")
    try:
        close = float(raw)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Record {position} close '{raw}' is not numeric") from e
    if not math.isfinite(close) or close <= 0:
        raise ValidationError(f"Record {position} close must be a positive number, got {raw}")
    return close


def parse_price_points(records: Sequence[Mapping[str, Any]]) -> list[PricePoint]:
    """
    Validate ``{date, close}`` records and convert them to PricePoints.

    Args:
        records: Records in chronological order

    Returns:
        List of PricePoints in the same order.

    Raises:
        ValidationError: If a record is missing a key, a close is not a
            positive number, a date cannot be parsed, or the dates are not
            strictly ascending.
    """
    if isinstance(records, (str, bytes)) or not isinstance(records, Sequence):
        raise ValidationError(
            f"Price records must be a sequence, got {type(records).__name__}"
        )

    points = []
    previous: Optional[pd.Timestamp] = None
    for i, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise ValidationError(f"Record {i} must be an object, got {type(record).__name__}")
        missing = [key for key in REQUIRED_KEYS if key not in record]
        if missing:
            raise ValidationError(f"Record {i} missing required keys: {missing}")

        point = PricePoint(
            date=_normalize_date(record["date"], i),
            close=_normalize_close(record["close"], i),
        )
        stamp = pd.Timestamp(point.date)
        if previous is not None and stamp <= previous:
            raise ValidationError(
                f"Record {i} date {point.date} is not after the previous session"
            )
        previous = stamp
        points.append(point)

    logger.debug("Parsed %d price points", len(points))
    return points


def _records_from_frame(df: pd.DataFrame) -> list[dict[str, Any]]:
    frame = df.copy()
    frame.columns = [str(col).lower().replace(" ", "_") for col in frame.columns]
    if "date" not in frame.columns:
        frame = frame.reset_index()
        frame.columns = [str(col).lower() for col in frame.columns]
        if "date" not in frame.columns and "index" in frame.columns:
            frame = frame.rename(columns={"index": "date"})
    if "close" not in frame.columns:
        raise ValidationError("Price DataFrame must contain a 'close' column")
    if "date" not in frame.columns:
        raise ValidationError("Price DataFrame must contain a 'date' column or date index")
    return frame[["date", "close"]].to_dict(orient="records")


def _read_file(path: Path) -> Any:
    if not path.exists():
        raise DataFeedError(f"Price file not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        if suffix == ".csv":
            return pd.read_csv(path)
    except (json.JSONDecodeError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise DataFeedError(f"Could not parse price file {path}: {e}") from e

    raise DataFeedError(f"Unsupported price file format '{suffix}', expected .json or .csv")


def load_price_points(source: PriceSource) -> list[PricePoint]:
    """
    Load PricePoints from any supported source.

    Args:
        source: An advisor payload (dict with a ``chart`` key), a list of
            ``{date, close}`` records, a DataFrame, or a path to a ``.json``
            or ``.csv`` file holding one of those.

    Returns:
        Validated PricePoints in chronological order.

    Raises:
        DataFeedError: If the source cannot be read.
        ValidationError: If the records are malformed.
    """
    if isinstance(source, (str, Path)):
        source = _read_file(Path(source))

    if isinstance(source, pd.DataFrame):
        return parse_price_points(_records_from_frame(source))

    if isinstance(source, Mapping):
        if "chart" not in source:
            raise ValidationError("Advisor payload has no 'chart' key")
        chart = source["chart"]
        if chart is None:
            logger.warning("Advisor payload for %s has an empty chart", source.get("ticker"))
            return []
        return parse_price_points(chart)

    return parse_price_points(source)


def _optional_float(raw: Any) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def load_advisor_snapshot(payload: Union[Mapping[str, Any], str, Path]) -> AdvisorSnapshot:
    """
    Parse a full advisor payload, chart included.

    Scalar fields are read leniently (missing or malformed values become
    ``None``); the chart is validated like any other price source.

    Raises:
        DataFeedError: If the payload is not an object or has no ticker.
    """
    if isinstance(payload, (str, Path)):
        payload = _read_file(Path(payload))
    if not isinstance(payload, Mapping):
        raise DataFeedError(f"Advisor payload must be an object, got {type(payload).__name__}")
    if not payload.get("ticker"):
        raise DataFeedError("Advisor payload has no ticker")

    indicators = payload.get("indicators") or {}
    risk = payload.get("risk") or {}

    return AdvisorSnapshot(
        ticker=str(payload["ticker"]),
        name=payload.get("name"),
        industry=payload.get("industry"),
        current_price=_optional_float(payload.get("currentPrice")),
        change_percent=_optional_float(payload.get("changePercent")),
        recommendation=payload.get("recommendation"),
        rationale=payload.get("rationale"),
        indicators={key: _optional_float(value) for key, value in indicators.items()},
        var95=_optional_float(risk.get("var95")),
        var99=_optional_float(risk.get("var99")),
        chart=load_price_points(payload) if "chart" in payload else [],
    )


def to_frame(points: Sequence[PricePoint]) -> pd.DataFrame:
    """DataFrame with a ``DatetimeIndex`` named ``date`` and a ``close`` column."""
    index = pd.DatetimeIndex([pd.Timestamp(p.date) for p in points], name="date")
    return pd.DataFrame({"close": [p.close for p in points]}, index=index, dtype=float)
