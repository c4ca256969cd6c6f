from storefront.models.product import Product
from storefront.schemas.product import ProductColor, normalize_color, normalize_colors
from storefront.services.inventory import color_names, resolve_ceiling


def _product(**kw) -> Product:
    fields = {"name": "Tee", "slug": "tee", "price": 20.0, "stock": 3}
    fields.update(kw)
    return Product(**fields)


def test_size_specific_stock_wins():
    product = _product(sizes=["M", "L"], stock_by_size={"M": 0, "L": 5})
    assert resolve_ceiling(product, "L") == 5


def test_size_zero_is_authoritative():
    product = _product(stock=3, sizes=["M", "L"], stock_by_size={"M": 0, "L": 5})
    assert resolve_ceiling(product, "M") == 0


def test_untracked_size_falls_back_to_overall_stock():
    product = _product(stock=3, sizes=["S", "M", "L"], stock_by_size={"M": 0, "L": 5})
    assert resolve_ceiling(product, "S") == 3


def test_missing_stock_by_size_uses_overall_stock():
    product = _product(stock=7)
    assert resolve_ceiling(product, "M") == 7
    assert resolve_ceiling(product, None) == 7
    assert resolve_ceiling(product, "") == 7


def test_resolution_is_repeatable():
    product = _product(stock=4, sizes=["S"], stock_by_size={"S": 1})
    assert resolve_ceiling(product, "S") == resolve_ceiling(product, "S") == 1
    assert product.stock_by_size == {"S": 1}


def test_plain_color_gets_default_hex():
    assert normalize_color("Black") == ProductColor(name="Black", hex="#808080")


def test_structured_color_kept():
    color = normalize_color({"name": "Navy", "hex": "#000080"})
    assert color.name == "Navy"
    assert color.hex == "#000080"


def test_mixed_colors_normalized():
    colors = normalize_colors(["Black", {"name": "Navy", "hex": "#000080"}])
    assert [c.hex for c in colors] == ["#808080", "#000080"]
    assert normalize_colors(None) == []


def test_color_names_from_legacy_rows():
    product = _product(colors=["Black", {"name": "Sand", "hex": "#c2b280"}])
    assert color_names(product) == ["Black", "Sand"]
