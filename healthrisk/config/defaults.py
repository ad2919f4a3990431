"""Default regions: Toronto neighbourhoods with simplified boundary polygons."""

from healthrisk.config.schema import RegionConfig, VulnerabilityInputs

DEFAULT_REGIONS: list[RegionConfig] = [
    RegionConfig(
        name="Downtown",
        polygon=[[
            (-79.3990, 43.6400), (-79.3700, 43.6400),
            (-79.3700, 43.6620), (-79.3990, 43.6620),
        ]],
        vulnerability=VulnerabilityInputs(population=112_000, senior_percent=11.2),
    ),
    RegionConfig(
        name="Scarborough",
        polygon=[[
            (-79.2900, 43.7200), (-79.1700, 43.7200),
            (-79.1700, 43.8200), (-79.2900, 43.8200),
        ]],
        vulnerability=VulnerabilityInputs(population=632_000, senior_percent=17.4),
    ),
    RegionConfig(
        name="Etobicoke",
        polygon=[[
            (-79.6000, 43.5900), (-79.4900, 43.5900),
            (-79.4900, 43.7400), (-79.6000, 43.7400),
        ]],
        vulnerability=VulnerabilityInputs(population=365_000, senior_percent=18.1),
    ),
    RegionConfig(
        name="North York",
        polygon=[[
            (-79.5000, 43.7300), (-79.3400, 43.7300),
            (-79.3400, 43.8000), (-79.5000, 43.8000),
        ]],
        vulnerability=VulnerabilityInputs(population=644_000, senior_percent=16.9),
    ),
]
