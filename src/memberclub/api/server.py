"""
Member Club Rental - FastAPI Server

Presentation layer over one ClubSystem session.

Endpoints:
- POST /login - Operator login, returns the API key
- GET /items, GET /members - Registry listings
- POST /quote - Price a prospective rental
- POST /rentals - Create a single rental
- POST /rentals/{id}/return, POST /rentals/{id}/cancel - Transitions
- POST /checkout/quote, POST /checkout - Cart checkout
- POST /returns - Bulk return
- GET /revenue - Revenue totals
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import structlog

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..auth import api_key_matches
from ..config import ClubConfig
from ..core.ledger import RentalError
from ..core.models import ItemCategory, MembershipTier, RentalStatus, RentalUnit
from ..core.pricing import base_price, get_policy
from ..checkout.cart import ShoppingCart
from ..system import ClubSystem

logger = structlog.get_logger()

VERSION = "1.0.0"


# ============================================================================
# Pydantic Models
# ============================================================================

class LoginRequest(BaseModel):
    """Operator credentials."""
    username: str
    password: str


class LoginResponse(BaseModel):
    operator: str
    api_key: str


class RentalRequest(BaseModel):
    """Request to rent one item."""
    member_id: int = Field(..., description="Renting member")
    item_id: str = Field(..., description="Item to rent, e.g. TENT-001")
    duration: int = Field(..., ge=1, description="Number of hours or days")
    unit: str = Field(default="DAILY", description="HOURLY or DAILY")


class QuoteResponse(BaseModel):
    item_id: str
    member_id: int
    tier: str
    duration: int
    unit: str
    base_price: float
    discount_rate: float
    price: float


class CartLineRequest(BaseModel):
    item_id: str
    duration: int = Field(..., ge=1)
    unit: str = Field(default="DAILY")


class CheckoutRequest(BaseModel):
    """A whole cart submitted at once; submitting it confirms it."""
    member_id: int
    lines: List[CartLineRequest] = Field(..., min_length=1)


class BulkReturnRequest(BaseModel):
    """Either explicit rental IDs or every active rental of one member."""
    rental_ids: Optional[List[str]] = None
    member_id: Optional[int] = None


class MemberRequest(BaseModel):
    name: str = Field(..., min_length=1)
    tier: str = Field(default="STANDARD")
    email: Optional[str] = None
    phone: Optional[str] = None


class TierUpdateRequest(BaseModel):
    tier: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    items: int
    members: int
    active_rentals: int
    uptime_seconds: float


# ============================================================================
# Application Factory
# ============================================================================

@asynccontextmanager
async def lifespan(application: FastAPI):
    """Start a club session unless one was attached beforehand."""
    if getattr(application.state, "system", None) is None:
        application.state.system = ClubSystem(ClubConfig.from_env())
    logger.info("memberclub_starting", version=VERSION)
    yield
    logger.info("memberclub_stopping")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="Member Club Rental",
        description="Rental lifecycle and pricing engine for an outdoor equipment club.",
        version=VERSION,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=ClubConfig.from_env().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return application


app = create_app()


# ============================================================================
# Dependencies
# ============================================================================

def get_system(request: Request) -> ClubSystem:
    """Get the club session."""
    system = getattr(request.app.state, "system", None)
    if system is None:
        raise HTTPException(status_code=503, detail="Application not initialized")
    return system


def verify_api_key(
    x_api_key: str = Header(..., alias="X-API-Key"),
    system: ClubSystem = Depends(get_system),
) -> str:
    """Verify API key."""
    if not api_key_matches(x_api_key, system.config.api_key):
        raise HTTPException(status_code=401, detail="Invalid API key")
    return x_api_key


def _parse_unit(value: str) -> RentalUnit:
    try:
        return RentalUnit[value.upper()]
    except KeyError:
        raise HTTPException(status_code=400, detail=f"Invalid unit: {value}")


def _parse_tier(value: str) -> MembershipTier:
    try:
        return MembershipTier[value.upper()]
    except KeyError:
        raise HTTPException(status_code=400, detail=f"Invalid tier: {value}")


def _raise_for(error: RentalError, message: Optional[str]) -> None:
    """Map a ledger error onto an HTTP error."""
    status = 404 if error in (
        RentalError.ITEM_NOT_FOUND,
        RentalError.MEMBER_NOT_FOUND,
        RentalError.RENTAL_NOT_FOUND,
    ) else 409
    raise HTTPException(
        status_code=status,
        detail={"error": error.value, "message": message},
    )


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(system: ClubSystem = Depends(get_system)):
    """Health check endpoint."""
    uptime = (datetime.now(timezone.utc) - system.start_time).total_seconds()
    return HealthResponse(
        status="healthy",
        version=VERSION,
        items=system.inventory.count(),
        members=system.members.count(),
        active_rentals=len(system.ledger.active_rentals()),
        uptime_seconds=uptime,
    )


@app.post("/login", response_model=LoginResponse, tags=["System"])
async def login(request: LoginRequest, system: ClubSystem = Depends(get_system)):
    """Single operator login. Hands out the API key."""
    if not system.operator.login(request.username, request.password):
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return LoginResponse(operator=system.operator.full_name, api_key=system.config.api_key)


@app.get("/items", tags=["Inventory"])
async def list_items(
    category: Optional[str] = None,
    available_only: bool = False,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    """List inventory, optionally by category or availability."""
    if category:
        try:
            items = system.inventory.by_category(ItemCategory[category.upper()])
        except KeyError:
            raise HTTPException(status_code=400, detail=f"Invalid category: {category}")
    else:
        items = system.inventory.all()

    if available_only:
        items = [i for i in items if i.is_available]

    return {"total": len(items), "items": [i.to_dict() for i in items]}


@app.get("/members", tags=["Members"])
async def list_members(
    search: Optional[str] = None,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    members = system.members.search_by_name(search) if search else system.members.all()
    return {"total": len(members), "members": [m.to_dict() for m in members]}


@app.post("/members", status_code=201, tags=["Members"])
async def register_member(
    request: MemberRequest,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    member = system.members.register(
        name=request.name,
        tier=_parse_tier(request.tier),
        email=request.email,
        phone=request.phone,
    )
    return member.to_dict()


@app.put("/members/{member_id}/tier", tags=["Members"])
async def update_member_tier(
    member_id: int,
    request: TierUpdateRequest,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    """Change a member's tier. Existing rentals keep their cost."""
    tier = _parse_tier(request.tier)
    if not system.members.update_tier(member_id, tier):
        _raise_for(RentalError.MEMBER_NOT_FOUND, f"Member {member_id} not found")
    return system.members.get(member_id).to_dict()


@app.delete("/members/{member_id}", status_code=204, tags=["Members"])
async def remove_member(
    member_id: int,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    """Remove a member. Members holding active rentals are kept."""
    result = system.ledger.remove_member(member_id)
    if not result.ok:
        _raise_for(result.error, result.message)


@app.get("/members/{member_id}/rentals", tags=["Members"])
async def member_rentals(
    member_id: int,
    active_only: bool = False,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    """Rental history of one member, in creation order."""
    if system.members.get(member_id) is None:
        _raise_for(RentalError.MEMBER_NOT_FOUND, f"Member {member_id} not found")
    rentals = system.ledger.rentals_for_member(member_id, active_only=active_only)
    return {"total": len(rentals), "rentals": [r.to_dict() for r in rentals]}


@app.post("/quote", response_model=QuoteResponse, tags=["Rentals"])
async def quote_rental(
    request: RentalRequest,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    """Price a rental without creating it."""
    unit = _parse_unit(request.unit)

    member = system.members.get(request.member_id)
    if member is None:
        _raise_for(RentalError.MEMBER_NOT_FOUND, f"Member {request.member_id} not found")

    item = system.inventory.get(request.item_id)
    if item is None:
        _raise_for(RentalError.ITEM_NOT_FOUND, f"Item {request.item_id} not found")

    policy = get_policy(member.tier)
    return QuoteResponse(
        item_id=item.item_id,
        member_id=member.member_id,
        tier=member.tier.value,
        duration=request.duration,
        unit=unit.value,
        base_price=base_price(item, request.duration, unit),
        discount_rate=policy.discount,
        price=policy.price(item, request.duration, unit),
    )


@app.post("/rentals", status_code=201, tags=["Rentals"])
async def create_rental(
    request: RentalRequest,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    """Rent a single item outside the cart flow."""
    unit = _parse_unit(request.unit)
    result = system.ledger.create(request.member_id, request.item_id, request.duration, unit)
    if not result.ok:
        _raise_for(result.error, result.message)
    return result.rental.to_dict()


@app.get("/rentals", tags=["Rentals"])
async def list_rentals(
    status: Optional[str] = None,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    """All rentals, or only those in one status."""
    if status:
        try:
            wanted = RentalStatus[status.upper()]
        except KeyError:
            raise HTTPException(status_code=400, detail=f"Invalid status: {status}")
        rentals = [r for r in system.ledger.all_rentals() if r.status == wanted]
    else:
        rentals = system.ledger.all_rentals()

    return {"total": len(rentals), "rentals": [r.to_dict() for r in rentals]}


@app.get("/rentals/{rental_id}", tags=["Rentals"])
async def get_rental(
    rental_id: str,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    """One rental, with the late fee it would incur if returned today."""
    rental = system.ledger.by_id(rental_id)
    if rental is None:
        _raise_for(RentalError.RENTAL_NOT_FOUND, f"Rental {rental_id} not found")

    data: Dict[str, Any] = rental.to_dict()
    pending = system.returns.preview(rental_id)
    data["pending_late_fee"] = pending.to_dict() if pending else None
    return data


@app.post("/rentals/{rental_id}/return", tags=["Returns"])
async def return_rental(
    rental_id: str,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    """Return one rental and charge any late fee."""
    result = system.returns.return_rental(rental_id)
    if not result.ok:
        _raise_for(result.error, result.message)
    return result.to_dict()


@app.post("/rentals/{rental_id}/cancel", tags=["Rentals"])
async def cancel_rental(
    rental_id: str,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    """Cancel an active rental. The item becomes available again."""
    result = system.ledger.cancel(rental_id)
    if not result.ok:
        _raise_for(result.error, result.message)
    return result.rental.to_dict()


@app.post("/returns", tags=["Returns"])
async def bulk_return(
    request: BulkReturnRequest,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    """Return several rentals. Individual failures are reported, not raised."""
    if request.rental_ids:
        bulk = system.returns.return_many(request.rental_ids)
    elif request.member_id is not None:
        if system.members.get(request.member_id) is None:
            _raise_for(RentalError.MEMBER_NOT_FOUND, f"Member {request.member_id} not found")
        bulk = system.returns.return_all_for_member(request.member_id)
    else:
        raise HTTPException(status_code=400, detail="Provide rental_ids or member_id")

    return bulk.to_dict()


def _build_cart(request: CheckoutRequest, system: ClubSystem) -> ShoppingCart:
    cart = system.checkout.new_cart(request.member_id)
    if cart is None:
        _raise_for(RentalError.MEMBER_NOT_FOUND, f"Member {request.member_id} not found")

    for line in request.lines:
        item = system.inventory.get(line.item_id)
        if item is None:
            _raise_for(RentalError.ITEM_NOT_FOUND, f"Item {line.item_id} not found")
        cart.add_line(item, line.duration, _parse_unit(line.unit))

    return cart


@app.post("/checkout/quote", tags=["Checkout"])
async def checkout_quote(
    request: CheckoutRequest,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    """Show what a cart would cost without committing it."""
    cart = _build_cart(request, system)
    return system.checkout.quote(cart).to_dict()


@app.post("/checkout", tags=["Checkout"])
async def checkout(
    request: CheckoutRequest,
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    """
    Commit a cart.

    Lines are rented independently; lines that fail are listed in the
    response and do not stop the others.
    """
    cart = _build_cart(request, system)
    result = system.checkout.checkout(cart)
    if result.rentals:
        return result.to_dict()
    raise HTTPException(status_code=409, detail=result.to_dict())


@app.get("/revenue", tags=["Billing"])
async def get_revenue(
    system: ClubSystem = Depends(get_system),
    api_key: str = Depends(verify_api_key),
):
    snapshot = system.revenue.snapshot()
    return {
        "total": snapshot.total,
        "by_source": snapshot.by_source,
        "credits": snapshot.credits,
    }


# ============================================================================
# Run
# ============================================================================

def run():
    """Run the server."""
    import uvicorn
    config = ClubConfig.from_env()
    uvicorn.run(
        "memberclub.api.server:app",
        host="0.0.0.0",
        port=config.port,
        reload=config.debug,
    )


if __name__ == "__main__":
    run()
