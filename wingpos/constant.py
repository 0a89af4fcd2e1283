"""Editable static menu, option and seed configuration."""

from __future__ import annotations

INVENTORY_UNITS: tuple[str, ...] = ("kg", "g", "L", "ml", "unit")

TABLE_STATUSES: tuple[str, ...] = ("available", "occupied", "reserved", "cleaning")

ORDER_TYPES: tuple[str, ...] = ("dine-in", "delivery", "to-go")

ORDER_STATUSES: tuple[str, ...] = ("open", "ready", "completed", "cancelled")

PAYMENT_METHODS: tuple[str, ...] = ("Cash", "Card", "Transfer")

WING_SAUCES: dict[str, str] = {
    "bbq": "BBQ",
    "buffalo": "Buffalo",
    "honey_mustard": "Honey Mustard",
    "teriyaki": "Teriyaki",
    "mango_habanero": "Mango Habanero",
    "lemon_pepper": "Lemon Pepper",
    "loco": "Loco Hot",
}

FRY_SAUCES: dict[str, str] = {
    "cheddar": "Cheddar",
    "garlic": "Garlic",
    "ketchup": "Ketchup",
    "pink": "Pink Sauce",
}

SUBMENU_CHOICES: dict[str, list[str]] = {
    "soda": ["Cola", "Orange", "Lemon-Lime", "Ginger Ale"],
    "doneness": ["Medium", "Medium Well", "Well Done"],
    "lemonade": ["Classic", "Mint", "Coconut"],
}

GELATO_FLAVORS: list[str] = [
    "Chocolate",
    "Vanilla",
    "Strawberry",
    "Pistachio",
    "Lemon",
    "Mango",
    "Arequipe",
]

# Seed rows consumed by wingpos.data (which wraps them into model instances).
# Recipe entries reference inventory rows by their seed key.
SEED_INVENTORY: dict[str, dict[str, str | float]] = {
    "chicken_wings": {"name": "Chicken Wings", "unit": "g", "stock": 20000, "cost": 28, "alert_threshold": 3000},
    "potatoes": {"name": "Potatoes", "unit": "kg", "stock": 25, "cost": 3500, "alert_threshold": 5},
    "beef_patty": {"name": "Beef Patty", "unit": "unit", "stock": 60, "cost": 4200, "alert_threshold": 10},
    "burger_bun": {"name": "Burger Bun", "unit": "unit", "stock": 60, "cost": 900, "alert_threshold": 10},
    "lemons": {"name": "Lemons", "unit": "unit", "stock": 80, "cost": 400, "alert_threshold": 15},
    "gelato_base": {"name": "Gelato Base", "unit": "L", "stock": 12, "cost": 18000, "alert_threshold": 2},
    "soda_can": {"name": "Soda Can", "unit": "unit", "stock": 96, "cost": 1800, "alert_threshold": 24},
}

SEED_MENU: dict[str, dict[str, object]] = {
    "wings_6": {
        "name": "Wings (6 pcs)",
        "price": 22000,
        "category": "Wings",
        "description": "Six crispy wings tossed in your sauces.",
        "has_wings": True,
        "recipe": [("chicken_wings", 200)],
    },
    "wings_12": {
        "name": "Wings (12 pcs)",
        "price": 40000,
        "category": "Wings",
        "description": "A dozen wings for the table.",
        "has_wings": True,
        "recipe": [("chicken_wings", 400)],
    },
    "wings_combo": {
        "name": "Wings Combo",
        "price": 32000,
        "category": "Combos",
        "description": "Six wings, loaded fries and a soda.",
        "has_wings": True,
        "has_fries": True,
        "submenu_key": "soda",
        "recipe": [("chicken_wings", 200), ("potatoes", 0.25), ("soda_can", 1)],
    },
    "loaded_fries": {
        "name": "Loaded Fries",
        "price": 14000,
        "category": "Sides",
        "description": "Hand-cut fries with your sauces on top.",
        "has_fries": True,
        "recipe": [("potatoes", 0.3)],
    },
    "locaburger": {
        "name": "Locaburger",
        "price": 29000,
        "category": "Burgers",
        "description": "Grilled beef patty, cheddar and house sauce.",
        "has_fries": True,
        "submenu_key": "doneness",
        "recipe": [("beef_patty", 1), ("burger_bun", 1), ("potatoes", 0.2)],
    },
    "summer_lemonade": {
        "name": "Summer Lemonade",
        "price": 9000,
        "category": "Drinks",
        "description": "Fresh squeezed lemonade.",
        "submenu_key": "lemonade",
        "recipe": [("lemons", 2)],
    },
    "soda": {
        "name": "Soda",
        "price": 5000,
        "category": "Drinks",
        "submenu_key": "soda",
        "recipe": [("soda_can", 1)],
    },
    "gelato_1": {
        "name": "Gelato (1 Flavor)",
        "price": 8000,
        "category": "Desserts",
        "max_choices": 1,
        "recipe": [("gelato_base", 0.12)],
    },
    "gelato_2": {
        "name": "Gelato (2 Flavors)",
        "price": 12000,
        "category": "Desserts",
        "max_choices": 2,
        "recipe": [("gelato_base", 0.2)],
    },
}

SEED_TABLES: list[dict[str, int | str]] = [
    {"name": "Table 1", "capacity": 4, "x": 40, "y": 40},
    {"name": "Table 2", "capacity": 4, "x": 180, "y": 40},
    {"name": "Table 3", "capacity": 2, "x": 320, "y": 40},
    {"name": "Table 4", "capacity": 6, "x": 40, "y": 180},
    {"name": "Bar", "capacity": 8, "x": 180, "y": 180},
]
