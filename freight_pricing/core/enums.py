from enum import Enum


class TransportMode(str, Enum):
    ROAD = "ROAD"
    SEA = "SEA"
    AIR = "AIR"
    RAIL = "RAIL"

    def __str__(self):
        return self.value


class CargoType(str, Enum):
    GENERAL = "GENERAL"
    DANGEROUS = "DANGEROUS"
    PERISHABLE = "PERISHABLE"
    FRAGILE = "FRAGILE"
    BULK = "BULK"
    CONTAINER = "CONTAINER"
    PALLETIZED = "PALLETIZED"
    OTHER = "OTHER"

    def __str__(self):
        return self.value


class Priority(str, Enum):
    STANDARD = "STANDARD"
    NORMAL = "NORMAL"
    EXPRESS = "EXPRESS"
    URGENT = "URGENT"

    def __str__(self):
        return self.value


class QuoteNotice(str, Enum):
    BILLED_ON_VOLUME = "BILLED_ON_VOLUME"
    ESTIMATED_DISTANCE = "ESTIMATED_DISTANCE"
    DEFAULT_RATE = "DEFAULT_RATE"
    MARITIME_PAYABLE_UNIT = "MARITIME_PAYABLE_UNIT"
    DANGEROUS_GOODS = "DANGEROUS_GOODS"
    PERISHABLE_GOODS = "PERISHABLE_GOODS"

    def __str__(self):
        return self.value
