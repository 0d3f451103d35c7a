"""
Demo inventory and members for a fresh club session.
"""

from .models import ItemKind, MembershipTier
from .registry import Inventory, MemberDirectory


def load_sample_items(inventory: Inventory) -> None:
    # Camping
    inventory.new_item(ItemKind.BACKPACK, "Urban Daypack 25L", 150.0, 30.0,
                       brand="Patagonia", volume_liters=25, backpack_type="DAYPACK")
    inventory.new_item(ItemKind.BACKPACK, "Mountain Explorer 65L", 300.0, 60.0,
                       brand="Fjallraven", volume_liters=65, backpack_type="EXPEDITION")
    inventory.new_item(ItemKind.TENT, "Summer Breeze 2P", 250.0, 50.0,
                       brand="MSR", capacity=2, season_rating="SUMMER", tent_type="DOME")
    inventory.new_item(ItemKind.TENT, "Arctic Expedition 4P", 600.0, 120.0,
                       brand="Hilleberg", capacity=4, season_rating="WINTER", tent_type="TUNNEL")
    inventory.new_item(ItemKind.LANTERN, "LED Battery Light Pro", 80.0, 15.0,
                       brand="Coleman", lumens=500, power_source="BATTERY")
    inventory.new_item(ItemKind.SLEEPING_BAG, "All Season Comfort", 180.0, 35.0,
                       brand="Marmot", comfort_temp_c=0, season_rating="THREE_SEASON")
    inventory.new_item(ItemKind.TRANGIA_KITCHEN, "Trangia 25 Spirit", 150.0, 30.0,
                       brand="Trangia", burners=2, fuel_type="ALCOHOL")

    # Fishing
    inventory.new_item(ItemKind.FISHING_ROD, "Shimano Spinning Pro", 200.0, 40.0,
                       brand="Shimano", rod_length_m=2.1, rod_type="SPINNING")
    inventory.new_item(ItemKind.FISHING_ROD, "Orvis Fly Master", 280.0, 55.0,
                       brand="Orvis", rod_length_m=2.7, rod_type="FLY")
    inventory.new_item(ItemKind.FISHING_ROD, "Ice Fishing Special", 150.0, 30.0,
                       brand="Rapala", rod_length_m=0.9, rod_type="ICE")
    inventory.new_item(ItemKind.FISHING_NET, "Compact Travel Net", 80.0, 15.0,
                       brand="Frabill", net_size="SMALL", handle_length_m=1.0)
    inventory.new_item(ItemKind.FISHING_NET, "Trophy Catch Net", 180.0, 35.0,
                       brand="Savage Gear", net_size="LARGE", handle_length_m=2.0)
    inventory.new_item(ItemKind.FISHING_BAIT, "Pike Wobbler Pro", 40.0, 10.0,
                       brand="Rapala", bait_type="WOBBLER", pack_size=5)

    # Watercraft
    inventory.new_item(ItemKind.KAYAK, "Ocean Pro Explorer", 850.0, 170.0,
                       brand="Hobie", seats=2, length_m=4.5, kayak_type="SIT_ON_TOP")
    inventory.new_item(ItemKind.KAYAK, "Angler Pro", 950.0, 190.0,
                       brand="Old Town", seats=1, length_m=3.8, kayak_type="FISHING")
    inventory.new_item(ItemKind.MOTOR_BOAT, "Speedster 2000", 2000.0, 400.0,
                       brand="Yamaha", capacity=6, length_m=6.5, horsepower=150,
                       fuel_type="GASOLINE", license_required=True)
    inventory.new_item(ItemKind.ELECTRIC_BOAT, "Eco Cruiser Silent", 1200.0, 240.0,
                       brand="Torqeedo", capacity=4, length_m=4.5, battery_kwh=8.0,
                       range_km=50.0)
    inventory.new_item(ItemKind.ROW_BOAT, "Classic Wooden Fisher", 350.0, 70.0,
                       brand="Traditional Boats", capacity=3, length_m=4.0, oars=2)


def load_sample_members(members: MemberDirectory) -> None:
    members.register("Daniel Svensson", MembershipTier.STANDARD)
    members.register("Erik Johansson", MembershipTier.STUDENT)
    members.register("Anders Karlsson", MembershipTier.PREMIUM)
