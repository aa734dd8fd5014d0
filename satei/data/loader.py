import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from .base import Dataset, DatasetSource, Deal, MarketMeta, PricePoint, Station
from ..core.config import settings
from ..core.utils import is_finite, parse_iso_date, to_float

logger = logging.getLogger(__name__)

# Logical document name -> settings attribute holding its file name
DOCUMENTS = {
    "earlier": "DATA_EARLIER_FILE",
    "later": "DATA_LATER_FILE",
    "stations": "DATA_STATIONS_FILE",
    "deals": "DATA_DEALS_FILE",
    "meta": "DATA_META_FILE",
}

def _valid_coords(lat: float, lng: float) -> bool:
    return is_finite(lat, lng) and -90 <= lat <= 90 and -180 <= lng <= 180

def _price_points(doc: Optional[dict]) -> tuple:
    out = []
    for p in (doc or {}).get("points") or []:
        if not isinstance(p, dict):
            continue
        lat, lng, ppsqm = to_float(p.get("lat")), to_float(p.get("lng")), to_float(p.get("ppsqm"))
        if _valid_coords(lat, lng) and is_finite(ppsqm) and ppsqm > 0:
            out.append(PricePoint(lat=lat, lng=lng, ppsqm=ppsqm))
    return tuple(out)

def _stations(doc: Optional[dict]) -> tuple:
    out = []
    for s in (doc or {}).get("stations") or []:
        if not isinstance(s, dict):
            continue
        lat, lng = to_float(s.get("lat")), to_float(s.get("lng"))
        if _valid_coords(lat, lng):
            out.append(Station(name=str(s.get("name") or ""), lat=lat, lng=lng))
    return tuple(out)

def _deals(doc: Optional[dict]) -> tuple:
    out = []
    for d in (doc or {}).get("deals") or []:
        if not isinstance(d, dict):
            continue
        lat, lng, ppsqm = to_float(d.get("lat")), to_float(d.get("lng")), to_float(d.get("ppsqm"))
        if _valid_coords(lat, lng) and is_finite(ppsqm) and ppsqm > 0:
            out.append(Deal(lat=lat, lng=lng, ppsqm=ppsqm, transaction_date=parse_iso_date(d.get("date"))))
    return tuple(out)

def _median(doc: dict, *keys: str) -> Optional[float]:
    for key in keys:
        value = to_float(doc.get(key))
        if is_finite(value) and value > 0:
            return value
    return None

def _meta(doc: Optional[dict]) -> MarketMeta:
    doc = doc or {}
    return MarketMeta(
        earlier_median_ppsqm=_median(doc, "l02_2023_median_ppsqm", "l0_earlier_median_ppsqm"),
        later_median_ppsqm=_median(doc, "l01_2025_median_ppsqm", "l0_later_median_ppsqm"),
        current_date=parse_iso_date(doc.get("current_date")),
    )

def parse_dataset(docs: Dict[str, Any]) -> Dataset:
    """
    Build an immutable Dataset from the raw JSON documents.
    Fields are coerced to numbers; entries with non-finite or out-of-range
    values are dropped. Missing documents count as empty.
    """
    dataset = Dataset(
        earlier_points=_price_points(docs.get("earlier")),
        later_points=_price_points(docs.get("later")),
        stations=_stations(docs.get("stations")),
        deals=_deals(docs.get("deals")),
        meta=_meta(docs.get("meta")),
    )
    logger.info("dataset loaded: %s", dataset.summary())
    return dataset

class FileDatasetSource(DatasetSource):
    """
    Reads the bundled JSON snapshot from a local directory.
    """
    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def _read(self, fname: str) -> Optional[dict]:
        path = self.data_dir / fname
        try:
            with path.open(encoding="utf-8") as f:
                doc = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("dataset read failed: %s (%s)", path, exc)
            return None
        return doc if isinstance(doc, dict) else None

    async def load(self) -> Dataset:
        docs = {name: self._read(getattr(settings, attr)) for name, attr in DOCUMENTS.items()}
        return parse_dataset(docs)

class HttpDatasetSource(DatasetSource):
    """
    Fetches the same documents from a static host (bucket, CDN).
    """
    def __init__(self, base_url: str, timeout: float = 15, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _fetch(self, client: httpx.AsyncClient, fname: str) -> Optional[dict]:
        url = f"{self.base_url}/{fname}"
        try:
            r = await client.get(url)
            r.raise_for_status()
            doc = r.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("dataset fetch failed: %s (%s)", url, exc)
            return None
        return doc if isinstance(doc, dict) else None

    async def load(self) -> Dataset:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            docs = {
                name: await self._fetch(client, getattr(settings, attr))
                for name, attr in DOCUMENTS.items()
            }
        return parse_dataset(docs)

def dataset_source() -> DatasetSource:
    """
    Factory picks file or http based on env flags.
    """
    if settings.DATA_SOURCE == "http" and settings.DATA_BASE_URL:
        return HttpDatasetSource(settings.DATA_BASE_URL)
    return FileDatasetSource(settings.DATA_DIR)
