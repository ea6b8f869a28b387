"""Arc-level location groups, venue suggestions and resolved venue metadata."""

from pydantic import Field

from stripboard.models.base import StripboardModel


class VenueLogistics(StripboardModel):
    """On-site logistics reported for a venue."""

    parking: bool | None = None
    power: bool | None = None
    restrooms: bool | None = None
    permit_required: bool | None = None
    permit_cost: float | None = None

    def describe(self) -> list[str]:
        """Short human-readable logistics notes."""
        notes = []
        if self.parking:
            notes.append("Parking: Available")
        if self.power:
            notes.append("Power: Available")
        if self.restrooms is not None:
            notes.append(f"Restrooms: {'Yes' if self.restrooms else 'No'}")
        return notes


class CostBreakdown(StripboardModel):
    """Itemized venue cost."""

    day_rate: float | None = None


class VenueSuggestion(StripboardModel):
    """A candidate real-world filming location."""

    id: str
    venue_name: str | None = None
    address: str | None = None
    search_guidance: str | None = None
    estimated_cost: float | None = None
    cost_breakdown: CostBreakdown | None = None
    permit_cost: float | None = None
    deposit_amount: float | None = None
    logistics: VenueLogistics | None = None
    insurance_required: bool = False

    @property
    def day_rate(self) -> float:
        """Day rate, falling back to the flat estimate."""
        if self.cost_breakdown and self.cost_breakdown.day_rate:
            return self.cost_breakdown.day_rate
        return self.estimated_cost or 0.0

    @property
    def permit_fee(self) -> float:
        """Permit fee from the venue or its logistics block."""
        if self.permit_cost:
            return self.permit_cost
        if self.logistics and self.logistics.permit_cost:
            return self.logistics.permit_cost
        return 0.0

    @property
    def all_in_cost(self) -> float:
        """Day rate plus permit fee plus deposit."""
        return self.day_rate + self.permit_fee + (self.deposit_amount or 0.0)

    @property
    def permit_required(self) -> bool:
        """A stated permit cost implies a permit even without the flag."""
        if self.logistics and self.logistics.permit_required:
            return True
        return self.permit_cost is not None

    @property
    def display_address(self) -> str | None:
        """Street address or, failing that, search guidance."""
        return self.address or self.search_guidance


class EpisodeUsage(StripboardModel):
    """Which scenes of an episode use a location group."""

    episode_number: int
    scene_numbers: list[int] = Field(default_factory=list)


class LocationGroup(StripboardModel):
    """Scenes, possibly across episodes, bound to one physical location."""

    id: str
    canonical_location_id: str | None = None
    parent_location_name: str = ""
    episode_usage: list[EpisodeUsage] = Field(default_factory=list)
    shooting_location_suggestions: list[VenueSuggestion] = Field(default_factory=list)
    selected_suggestion_id: str | None = None

    @property
    def canonical_id(self) -> str:
        return self.canonical_location_id or self.id

    def selected_venue(self) -> VenueSuggestion | None:
        """The explicitly selected venue, else the cheapest by all-in cost."""
        suggestions = self.shooting_location_suggestions
        if not suggestions:
            return None
        if self.selected_suggestion_id:
            for suggestion in suggestions:
                if suggestion.id == self.selected_suggestion_id:
                    return suggestion
        # min() keeps the first of equally priced venues
        return min(suggestions, key=lambda s: s.all_in_cost)


class ArcLocations(StripboardModel):
    """Location groups for an arc or a whole series."""

    location_groups: list[LocationGroup] = Field(default_factory=list)


class VenueMetadata(StripboardModel):
    """Resolved venue attached to a shooting day."""

    location_id: str
    venue_id: str
    venue_name: str
    venue_address: str | None = None
    permit_required: bool = False
    insurance_required: bool = False
    location_cost: float = 0.0

    @classmethod
    def from_group(
        cls, group: LocationGroup, venue: VenueSuggestion
    ) -> "VenueMetadata":
        return cls(
            location_id=group.canonical_id,
            venue_id=venue.id,
            venue_name=venue.venue_name or group.parent_location_name,
            venue_address=venue.display_address,
            permit_required=venue.permit_required,
            insurance_required=venue.insurance_required,
            location_cost=venue.all_in_cost,
        )
