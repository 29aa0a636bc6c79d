from pydantic import BaseModel, ConfigDict, model_validator

UNKNOWN_LOCATION = "Unknown location"


class GeocodeResult(BaseModel):
    """Coordinates for a place name; both coordinates null means unresolved."""
    model_config = ConfigDict(frozen=True)

    lat: float | None = None
    lng: float | None = None
    formatted_address: str
    provider: str | None = None

    @model_validator(mode="after")
    def coordinates_set_together(self) -> "GeocodeResult":
        if (self.lat is None) != (self.lng is None):
            raise ValueError("lat and lng must both be set or both be null")
        return self

    @property
    def resolved(self) -> bool:
        return self.lat is not None

    @classmethod
    def unresolved(cls, formatted_address: str) -> "GeocodeResult":
        return cls(lat=None, lng=None, formatted_address=formatted_address)


class ResolvedLocation(BaseModel):
    """A location name together with its geocoding."""
    model_config = ConfigDict(frozen=True)

    location_name: str
    geocoding: GeocodeResult
