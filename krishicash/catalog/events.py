"""
Life Events - The catalog drawn from at the start of every month.

Event structure:
- Type (one of seven categories)
- Cost (money lost) or reward (money gained)
- Loan offers carry a monthly interest rate and no direct balance effect
"""

from __future__ import annotations

from ..engine_core.state import Event, EventType


# ============================================================================
# Medical
# ============================================================================

MEDICAL_EMERGENCY = Event(
    event_id="medical_1",
    event_type=EventType.MEDICAL,
    title="Medical Emergency",
    description="A family member fell sick and needs immediate treatment.",
    cost=25_000,
)

HOSPITAL_VISIT = Event(
    event_id="medical_2",
    event_type=EventType.MEDICAL,
    title="Hospital Visit",
    description="Your child needs medical attention and medicines.",
    cost=18_000,
)

ACCIDENT_INJURY = Event(
    event_id="medical_3",
    event_type=EventType.MEDICAL,
    title="Accident Injury",
    description="You hurt yourself while working and need treatment.",
    cost=22_000,
)

MEDICINE_COSTS = Event(
    event_id="medical_4",
    event_type=EventType.MEDICAL,
    title="Medicine Costs",
    description="Monthly medicines for elderly parents are needed.",
    cost=10_000,
)

# ============================================================================
# Crop loss (insurance caps these at the co-pay)
# ============================================================================

PEST_ATTACK = Event(
    event_id="crop_loss_1",
    event_type=EventType.CROP_LOSS,
    title="Pest Attack",
    description="Pests damaged a portion of your crops.",
    cost=40_000,
)

DROUGHT_IMPACT = Event(
    event_id="crop_loss_2",
    event_type=EventType.CROP_LOSS,
    title="Drought Impact",
    description="Lack of rain affected your harvest yield.",
    cost=35_000,
)

FLOOD_DAMAGE = Event(
    event_id="crop_loss_3",
    event_type=EventType.CROP_LOSS,
    title="Flood Damage",
    description="Heavy rains flooded your fields and ruined crops.",
    cost=45_000,
)

# ============================================================================
# Festivals and equipment
# ============================================================================

FESTIVAL_SEASON = Event(
    event_id="festival_1",
    event_type=EventType.FESTIVAL,
    title="Festival Season",
    description="It's festival time! Family expects gifts and celebrations.",
    cost=20_000,
)

FAMILY_WEDDING = Event(
    event_id="festival_2",
    event_type=EventType.FESTIVAL,
    title="Wedding in Family",
    description="A relative's wedding requires contribution and gifts.",
    cost=30_000,
)

TOOL_REPAIR = Event(
    event_id="equipment_1",
    event_type=EventType.EQUIPMENT,
    title="Tool Repair",
    description="Your farming equipment needs urgent repair.",
    cost=12_000,
)

PUMP_BREAKDOWN = Event(
    event_id="equipment_2",
    event_type=EventType.EQUIPMENT,
    title="Pump Breakdown",
    description="Your water pump broke and needs replacement parts.",
    cost=25_000,
)

TRACTOR_SERVICE = Event(
    event_id="equipment_3",
    event_type=EventType.EQUIPMENT,
    title="Tractor Service",
    description="Your tractor requires immediate servicing.",
    cost=18_000,
)

# ============================================================================
# Windfalls
# ============================================================================

EXCELLENT_HARVEST = Event(
    event_id="good_rain_1",
    event_type=EventType.GOOD_RAIN,
    title="Excellent Harvest",
    description="Good rainfall blessed your fields with a bumper crop!",
    reward=30_000,
)

GOVERNMENT_SUBSIDY = Event(
    event_id="bonus_1",
    event_type=EventType.BONUS,
    title="Government Subsidy",
    description="You received a farming subsidy from the government.",
    reward=25_000,
)

CROP_BONUS = Event(
    event_id="bonus_2",
    event_type=EventType.BONUS,
    title="Crop Bonus",
    description="You got a bonus for delivering quality produce.",
    reward=20_000,
)

# ============================================================================
# Offers
# ============================================================================

QUICK_LOAN_OFFER = Event(
    event_id="loan_offer_1",
    event_type=EventType.LOAN_OFFER,
    title="Quick Loan Offer",
    description="An agent offers you a quick loan at 5% monthly interest.",
    interest=5,
)


# Draw order matters for seeded replays
GAME_EVENTS: tuple[Event, ...] = (
    MEDICAL_EMERGENCY,
    HOSPITAL_VISIT,
    ACCIDENT_INJURY,
    PEST_ATTACK,
    DROUGHT_IMPACT,
    FLOOD_DAMAGE,
    FESTIVAL_SEASON,
    FAMILY_WEDDING,
    TOOL_REPAIR,
    PUMP_BREAKDOWN,
    TRACTOR_SERVICE,
    MEDICINE_COSTS,
    EXCELLENT_HARVEST,
    GOVERNMENT_SUBSIDY,
    CROP_BONUS,
    QUICK_LOAN_OFFER,
)

_EVENTS_BY_ID: dict[str, Event] = {event.event_id: event for event in GAME_EVENTS}


def get_event(event_id: str) -> Event | None:
    """Get an event definition by ID."""
    return _EVENTS_BY_ID.get(event_id)


def events_of_type(event_type: EventType) -> list[Event]:
    return [event for event in GAME_EVENTS if event.event_type == event_type]
