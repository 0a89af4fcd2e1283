"""
Tests for wingpos.menu: catalog CRUD and recipe validation.
"""

from decimal import Decimal

import pytest

from wingpos.errors import NotFoundError, ValidationError
from wingpos.inventory import InventoryLedger
from wingpos.menu import MenuCatalog
from wingpos.models import RecipeLine


@pytest.fixture
def catalog():
    inventory = InventoryLedger()
    inventory.add_item("Chicken", "g", stock=1000, item_id="chicken")
    inventory.add_item("Potatoes", "kg", stock=10, item_id="potatoes")
    return MenuCatalog(inventory)


class TestMenuItems:
    def test_add_item_stores_decimal_price(self, catalog):
        item = catalog.add_item("Wings", "22000", "Wings", has_wings=True, recipe=[("chicken", 200)])
        assert item.price == Decimal("22000")
        assert item.recipe == (RecipeLine("chicken", 200.0),)
        assert catalog.get(item.id) == item

    def test_invalid_price(self, catalog):
        with pytest.raises(ValidationError, match="not a number"):
            catalog.add_item("Wings", "cheap", "Wings")
        with pytest.raises(ValidationError, match="negative"):
            catalog.add_item("Wings", -1, "Wings")

    def test_required_fields(self, catalog):
        with pytest.raises(ValidationError, match="name"):
            catalog.add_item(" ", 1000, "Wings")
        with pytest.raises(ValidationError, match="category"):
            catalog.add_item("Wings", 1000, "")

    def test_unknown_submenu_and_bad_max_choices(self, catalog):
        with pytest.raises(ValidationError, match="submenu"):
            catalog.add_item("Shake", 9000, "Drinks", submenu_key="milkshake")
        with pytest.raises(ValidationError, match="max_choices"):
            catalog.add_item("Gelato", 9000, "Desserts", max_choices=-1)

    def test_zero_max_choices_means_none(self, catalog):
        item = catalog.add_item("Fries", 9000, "Sides", max_choices=0)
        assert item.max_choices is None

    def test_update_item(self, catalog):
        item = catalog.add_item("Wings", 22000, "Wings", item_id="wings")
        updated = catalog.update_item("wings", price="24000", description="Hot")
        assert updated.price == Decimal("24000")
        assert updated.description == "Hot"
        assert item.price == Decimal("22000")

    def test_update_rejects_unknown_fields(self, catalog):
        catalog.add_item("Wings", 22000, "Wings", item_id="wings")
        with pytest.raises(ValidationError, match="id"):
            catalog.update_item("wings", id="x")

    def test_delete_and_get(self, catalog):
        catalog.add_item("Wings", 22000, "Wings", item_id="wings")
        catalog.delete_item("wings")
        assert "wings" not in catalog
        with pytest.raises(NotFoundError, match="Menu item"):
            catalog.get("wings")

    def test_categories_and_search(self, catalog):
        catalog.add_item("Wings", 22000, "Wings")
        catalog.add_item("Loaded Fries", 14000, "Sides")
        catalog.add_item("Boneless Wings", 25000, "Wings")
        assert catalog.categories() == ["Wings", "Sides"]
        assert [item.name for item in catalog.items_in_category("Wings")] == ["Wings", "Boneless Wings"]
        assert [item.name for item in catalog.search("wings")] == ["Wings", "Boneless Wings"]
        assert len(catalog.search("  ")) == 3


class TestRecipes:
    def test_unknown_ingredient(self, catalog):
        with pytest.raises(NotFoundError, match="ghost"):
            catalog.add_item("Wings", 22000, "Wings", recipe=[("ghost", 1)])

    def test_duplicate_and_non_positive_quantities(self, catalog):
        with pytest.raises(ValidationError, match="twice"):
            catalog.add_item("Wings", 22000, "Wings", recipe=[("chicken", 1), ("chicken", 2)])
        with pytest.raises(ValidationError, match="greater than zero"):
            catalog.add_item("Wings", 22000, "Wings", recipe=[("chicken", 0)])

    def test_add_and_remove_ingredient(self, catalog):
        catalog.add_item("Combo", 30000, "Combos", recipe=[("chicken", 200)], item_id="combo")
        item = catalog.add_ingredient("combo", "potatoes", 0.25)
        assert [line.inventory_item_id for line in item.recipe] == ["chicken", "potatoes"]

        with pytest.raises(ValidationError, match="already"):
            catalog.add_ingredient("combo", "potatoes", 1)

        item = catalog.remove_ingredient("combo", "chicken")
        assert item.recipe == (RecipeLine("potatoes", 0.25),)
        with pytest.raises(NotFoundError, match="Recipe ingredient"):
            catalog.remove_ingredient("combo", "chicken")
