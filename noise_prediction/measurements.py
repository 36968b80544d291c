"""Measurement sources: the QuietSpot API client and an in-memory store."""
from collections import defaultdict
from datetime import datetime
import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

import aiohttp
import pytz

from .models import (
    Measurement, LocationId, NoiseLevel,
    DataSourceError, ValidationError
)
from .config import APIConfig

class MeasurementSource(Protocol):
    """Supplies a location's full history, freshest first."""

    async def get_measurements(self, location_id: LocationId) -> Sequence[Measurement]:
        ...

def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not isinstance(raw, str):
        raise ValueError(f"Timestamp must be a string, got {type(raw).__name__}")
    text = raw.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    timestamp = datetime.fromisoformat(text)
    if not timestamp.tzinfo:
        timestamp = pytz.UTC.localize(timestamp)
    return timestamp

class MeasurementApiClient:
    """Async client for the QuietSpot measurements API."""

    def __init__(self, config: APIConfig, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> 'MeasurementApiClient':
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        headers = {'Authorization': f"Bearer {self.config.token}"} if self.config.token else None
        self._session = aiohttp.ClientSession(timeout=timeout, headers=headers)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    async def get_measurements(self, location_id: LocationId) -> Sequence[Measurement]:
        """Fetch every measurement recorded at a location, freshest first."""
        if not self._session:
            raise DataSourceError("Client session not initialized")

        try:
            async with self._session.get(
                f"{self.config.base_url}/measurements/location/{location_id}"
            ) as response:
                response.raise_for_status()
                data = await response.json()
                return self._parse_measurements(data, location_id)

        except aiohttp.ClientError as e:
            raise DataSourceError(f"Failed to fetch measurements for {location_id}: {e}")

    async def get_location_ids(self) -> List[LocationId]:
        """Fetch the ids of all known locations."""
        if not self._session:
            raise DataSourceError("Client session not initialized")

        try:
            async with self._session.get(f"{self.config.base_url}/locations") as response:
                response.raise_for_status()
                data = await response.json()
                return [LocationId(str(row['id'])) for row in data]

        except aiohttp.ClientError as e:
            raise DataSourceError(f"Failed to fetch locations: {e}")
        except (KeyError, TypeError) as e:
            raise ValidationError(f"Invalid location data format: {e}")

    def _parse_measurements(
        self,
        data: Any,
        location_id: LocationId
    ) -> Sequence[Measurement]:
        """Parse API rows into measurements, keeping the server's order."""
        try:
            if not isinstance(data, list):
                raise ValidationError("Expected a list of measurement rows")

            measurements = [
                Measurement(
                    value=NoiseLevel(float(row['noiseDb'])),
                    measured_at=parse_timestamp(row['timestamp'])
                )
                for row in data
            ]

            self.logger.debug(f"Parsed {len(measurements)} measurements for {location_id}")
            return measurements

        except (KeyError, ValueError, TypeError) as e:
            self.logger.error(f"Error parsing measurements for {location_id}: {e}")
            self.logger.debug(f"Problematic data: {data}")
            raise ValidationError(f"Error parsing measurements: {e}")

class InMemoryMeasurementSource:
    """Measurement histories held in process memory."""

    def __init__(self, histories: Optional[Dict[LocationId, Iterable[Measurement]]] = None):
        self._histories: Dict[LocationId, List[Measurement]] = defaultdict(list)
        for location_id, measurements in (histories or {}).items():
            for measurement in measurements:
                self.add(location_id, measurement)

    def add(self, location_id: LocationId, measurement: Measurement) -> None:
        history = self._histories[location_id]
        history.append(measurement)
        history.sort(key=lambda m: m.measured_at, reverse=True)

    async def get_measurements(self, location_id: LocationId) -> Sequence[Measurement]:
        return tuple(self._histories.get(location_id, ()))

    async def get_location_ids(self) -> List[LocationId]:
        return list(self._histories)
