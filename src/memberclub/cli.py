"""
Member Club Rental CLI

Commands:
  serve     - Run the rental API server
  quote     - Price a rental for a tier
  late-fee  - Compute the late fee for a paid amount and return day
  demo      - Run a scripted checkout and return against sample data
"""

import argparse
import sys
from datetime import date, timedelta


def cmd_serve(args):
    """Run the rental API server."""
    import uvicorn
    from .config import ClubConfig

    config = ClubConfig.from_env()
    port = args.port or config.port
    host = args.host or "0.0.0.0"

    print(f"Starting Member Club Rental on {host}:{port}")

    uvicorn.run(
        "memberclub.api.server:app",
        host=host,
        port=port,
        reload=args.reload,
    )


def cmd_quote(args):
    """Price a rental for a tier."""
    from .core.models import Item, ItemKind, MembershipTier, RentalUnit
    from .core.pricing import base_price, get_policy

    try:
        tier = MembershipTier[args.tier.upper()]
        unit = RentalUnit[args.unit.upper()]
    except KeyError as e:
        print(f"Error: unknown value {e}")
        sys.exit(1)

    item = Item(
        item_id="QUOTE",
        name="Quoted item",
        kind=ItemKind.TENT,
        price_per_hour=args.hourly,
        price_per_day=args.daily,
    )
    policy = get_policy(tier)

    try:
        base = base_price(item, args.duration, unit)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Tier: {tier.value} ({int(policy.discount * 100)}% discount)")
    print(f"  Base price: {base:.2f}")
    print(f"  Price: {policy.price(item, args.duration, unit):.2f}")


def cmd_late_fee(args):
    """Compute the late fee for a paid amount and return day."""
    from .billing.late_fee import LateFeeCalculator
    from .core.models import Item, ItemKind, Member, MembershipTier, Rental, RentalUnit

    try:
        tier = MembershipTier[args.tier.upper()]
    except KeyError:
        print(f"Error: unknown tier {args.tier}")
        sys.exit(1)

    start = date.today()
    item = Item(
        item_id="FEE",
        name="Returned item",
        kind=ItemKind.TENT,
        price_per_hour=0.0,
        price_per_day=args.daily,
    )
    member = Member(member_id=0, name="Member", tier=tier)
    rental = Rental(
        rental_id="RENT-000",
        member_id=0,
        item_id=item.item_id,
        start_date=start,
        expected_return_date=start,
        total_cost=args.paid,
        duration=0,
        unit=RentalUnit.DAILY,
    )

    assessment = LateFeeCalculator().assess(
        rental, item, member, start + timedelta(days=args.days)
    )

    print(f"Expected days: {assessment.expected_days}")
    print(f"Days rented: {assessment.days_rented}")
    print(f"Overdue days: {assessment.overdue_days}")
    print(f"Late fee: {assessment.fee:.2f}")


def cmd_demo(args):
    """Run a scripted checkout and return against sample data."""
    from .config import ClubConfig
    from .core.models import RentalUnit
    from .system import ClubSystem

    system = ClubSystem(ClubConfig(load_sample_data=True))
    member = system.members.all()[args.member - 1] if 0 < args.member <= 3 else None
    if member is None:
        print("Error: --member must be 1, 2 or 3")
        sys.exit(1)

    cart = system.checkout.new_cart(member.member_id)
    cart.add_line(system.inventory.get("TENT-001"), 3, RentalUnit.DAILY)
    cart.add_line(system.inventory.get("ROD-001"), 4, RentalUnit.HOURLY)

    quote = system.checkout.quote(cart)
    print(f"Member: {member.name} ({member.tier.value})")
    for line in quote.lines:
        print(f"  {line.item.item_id} {line.item.name}: {line.duration} {line.unit.value} = {line.price:.2f}")
    print(f"Total before discount: {quote.total_before_discount:.2f}")
    print(f"Total after discount: {quote.total_after_discount:.2f}")

    result = system.checkout.checkout(cart)
    print(f"Checkout: {result.status.value} ({len(result.rentals)} rentals)")

    bulk = system.returns.return_all_for_member(member.member_id)
    print(f"Returned: {bulk.success_count}, late fees: {bulk.total_late_fees:.2f}")
    print(f"Revenue: {system.revenue.total():.2f}")


def main():
    parser = argparse.ArgumentParser(
        description="Member Club Rental - rental lifecycle and pricing engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the server")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--reload", action="store_true")

    # quote
    quote_parser = subparsers.add_parser("quote", help="Price a rental")
    quote_parser.add_argument("--daily", type=float, required=True, help="Price per day")
    quote_parser.add_argument("--hourly", type=float, default=0.0, help="Price per hour")
    quote_parser.add_argument("--duration", type=int, required=True)
    quote_parser.add_argument("--unit", default="DAILY", help="HOURLY or DAILY")
    quote_parser.add_argument("--tier", default="STANDARD", help="Membership tier")

    # late-fee
    fee_parser = subparsers.add_parser("late-fee", help="Compute a late fee")
    fee_parser.add_argument("--daily", type=float, required=True, help="Price per day")
    fee_parser.add_argument("--paid", type=float, required=True, help="Amount paid")
    fee_parser.add_argument("--days", type=int, required=True, help="Days until return")
    fee_parser.add_argument("--tier", default="STANDARD", help="Membership tier")

    # demo
    demo_parser = subparsers.add_parser("demo", help="Scripted demo session")
    demo_parser.add_argument("--member", type=int, default=1, help="Sample member 1-3")

    args = parser.parse_args()

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "quote":
        cmd_quote(args)
    elif args.command == "late-fee":
        cmd_late_fee(args)
    elif args.command == "demo":
        cmd_demo(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
