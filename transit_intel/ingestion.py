"""
Snapshot Ingestion

Converts raw records supplied by the data-generation collaborator
(already-decoded mappings, camelCase or snake_case keys) into validated
models. A record that fails validation is logged and skipped; the rest
of the batch is still returned.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Type, TypeVar

from pydantic import ValidationError

from transit_intel.exceptions import MalformedInputError
from transit_intel.models import (
    PassengerSnapshot,
    RouteRecord,
    TrafficSegment,
    TransitModel,
    VehicleSnapshot,
    WeatherSnapshot,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=TransitModel)


def parse_record(model: Type[ModelT], raw: Any) -> ModelT:
    """
    Validate a single raw record

    Args:
        model: Target model class
        raw: Mapping (or an instance of the model, returned unchanged)

    Returns:
        Validated model instance

    Raises:
        MalformedInputError: if the record is missing fields or invalid
    """
    if isinstance(raw, model):
        return raw
    if not isinstance(raw, Mapping):
        raise MalformedInputError(
            f"{model.__name__} record must be a mapping, got {type(raw).__name__}",
            record_type=model.__name__,
        )

    try:
        return model.model_validate(dict(raw))
    except ValidationError as e:
        raise MalformedInputError(
            f"Invalid {model.__name__} record: {e.error_count()} error(s)",
            record_type=model.__name__,
        ) from e


def parse_records(model: Type[ModelT], records: Optional[Iterable[Any]]) -> List[ModelT]:
    """
    Validate a batch, skipping malformed records

    Args:
        model: Target model class
        records: Raw records (None is treated as empty)

    Returns:
        Valid models in input order
    """
    parsed: List[ModelT] = []
    skipped = 0

    for index, raw in enumerate(records or []):
        try:
            parsed.append(parse_record(model, raw))
        except MalformedInputError as e:
            skipped += 1
            record_id = raw.get('id') if isinstance(raw, Mapping) else None
            logger.warning(f"Skipping record {index} (id={record_id!r}): {e}")

    if skipped:
        logger.warning(f"Skipped {skipped} malformed {model.__name__} record(s)")

    return parsed


def parse_vehicles(records: Optional[Iterable[Any]]) -> List[VehicleSnapshot]:
    """Validate raw vehicle records"""
    return parse_records(VehicleSnapshot, records)


def parse_segments(records: Optional[Iterable[Any]]) -> List[TrafficSegment]:
    """Validate raw traffic segment records"""
    return parse_records(TrafficSegment, records)


def parse_routes(records: Optional[Iterable[Any]]) -> List[RouteRecord]:
    """Validate raw route records"""
    return parse_records(RouteRecord, records)


def parse_passenger_snapshot(raw: Any) -> Optional[PassengerSnapshot]:
    """Validate passenger aggregates, None if absent or malformed"""
    if raw is None:
        return None
    try:
        return parse_record(PassengerSnapshot, raw)
    except MalformedInputError as e:
        logger.warning(f"Ignoring passenger snapshot: {e}")
        return None


def parse_weather_snapshot(raw: Any) -> Optional[WeatherSnapshot]:
    """Validate weather data, None if absent or malformed"""
    if raw is None:
        return None
    try:
        return parse_record(WeatherSnapshot, raw)
    except MalformedInputError as e:
        logger.warning(f"Ignoring weather snapshot: {e}")
        return None
