import pytest

from catalog import (
    ProductIn,
    ProductNotFound,
    categories,
    create_product,
    delete_product,
    update_product,
    visible,
)
from database import DEFAULT_PRODUCTS

from conftest import make_product


class TestVisible:
    def test_all_returns_everything_in_order(self):
        assert visible(DEFAULT_PRODUCTS, "All", "") == DEFAULT_PRODUCTS

    def test_category(self):
        result = visible(DEFAULT_PRODUCTS, "Electronics", "")
        assert [p.name for p in result] == ["Premium Wireless Headphones"]

    def test_search_is_case_insensitive_on_name_and_category(self):
        assert [p.id for p in visible(DEFAULT_PRODUCTS, "All", "WATCH")] == ["1"]
        assert [p.id for p in visible(DEFAULT_PRODUCTS, "All", "apparel")] == ["3"]

    def test_search_does_not_look_at_description_or_image(self):
        assert visible(DEFAULT_PRODUCTS, "All", "shirt") == []

    def test_category_and_search_combine(self):
        assert visible(DEFAULT_PRODUCTS, "Apparel", "watch") == []

    def test_is_side_effect_free(self):
        products = list(DEFAULT_PRODUCTS)
        first = visible(products, "Accessories", "quartz")
        second = visible(products, "Accessories", "quartz")
        assert first == second
        assert products == DEFAULT_PRODUCTS


class TestCategories:
    def test_first_seen_order(self):
        products = [
            make_product(id="1", category="B"),
            make_product(id="2", category="A"),
            make_product(id="3", category="B"),
        ]
        assert categories(products) == ["All", "B", "A"]

    def test_empty_catalog(self):
        assert categories([]) == ["All"]


class TestAdminEdits:
    def test_create_prepends_with_timestamp_id(self):
        products, product = create_product(DEFAULT_PRODUCTS, ProductIn(name="Lamp", price=20, category="Home"))
        assert products[0] is product
        assert product.id.isdigit()
        assert product.image.startswith("https://picsum.photos/seed/")
        assert len(products) == len(DEFAULT_PRODUCTS) + 1

    def test_update_keeps_id_and_position(self):
        products, product = update_product(DEFAULT_PRODUCTS, "2", ProductIn(name="Headphones II", price=199, category="Electronics"))
        assert product.id == "2"
        assert [p.id for p in products] == ["1", "2", "3"]
        assert products[1].name == "Headphones II"
        assert DEFAULT_PRODUCTS[1].name == "Premium Wireless Headphones"

    def test_update_without_image_keeps_current_image(self):
        products, product = update_product(DEFAULT_PRODUCTS, "3", ProductIn(name="Tee", price=30, category="Apparel"))
        assert product.image == "https://picsum.photos/seed/shirt/600/600"

    def test_update_with_image_replaces_it(self):
        data = ProductIn(name="Tee", price=30, category="Apparel", image="https://cdn.test/tee.png")
        _, product = update_product(DEFAULT_PRODUCTS, "3", data)
        assert product.image == "https://cdn.test/tee.png"

    def test_delete(self):
        assert [p.id for p in delete_product(DEFAULT_PRODUCTS, "1")] == ["2", "3"]

    @pytest.mark.parametrize("edit", ["update", "delete"])
    def test_unknown_id(self, edit):
        with pytest.raises(ProductNotFound):
            if edit == "update":
                update_product(DEFAULT_PRODUCTS, "nope", ProductIn(name="x"))
            else:
                delete_product(DEFAULT_PRODUCTS, "nope")
