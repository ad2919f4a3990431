"""Region stores: the set of polygons a batch evaluation walks over."""

import json
import logging
from pathlib import Path

from healthrisk.config.schema import EngineConfig, RegionConfig, VulnerabilityInputs

logger = logging.getLogger(__name__)


class ConfigRegionStore:
    """Enabled regions from the engine config, in config order."""

    def __init__(self, config: EngineConfig):
        self.config = config

    def list_regions(self) -> list[RegionConfig]:
        return [r for r in self.config.regions if r.enabled]


class GeoJsonRegionStore:
    """Regions from a GeoJSON FeatureCollection file.

    Only Polygon features are used. The region name comes from
    ``properties.name``; ``properties.population`` and
    ``properties.senior_percent`` feed the vulnerability inputs.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def list_regions(self) -> list[RegionConfig]:
        with open(self.path) as f:
            data = json.load(f)

        regions: list[RegionConfig] = []
        for feature in data.get("features", []):
            geometry = feature.get("geometry") or {}
            if geometry.get("type") != "Polygon":
                continue
            props = feature.get("properties") or {}
            name = props.get("name")
            if not name:
                logger.warning("Skipping unnamed polygon feature in %s", self.path)
                continue
            regions.append(
                RegionConfig(
                    name=name,
                    polygon=[
                        [(v[0], v[1]) for v in ring] for ring in geometry["coordinates"]
                    ],
                    vulnerability=VulnerabilityInputs(
                        population=int(props.get("population") or 0),
                        senior_percent=float(props.get("senior_percent") or 0.0),
                    ),
                )
            )
        return regions
