import os
import sys
from concurrent.futures import ThreadPoolExecutor

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(os.path.dirname(CURRENT_DIR))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from java_ts_core.adapters.java_adapter import JavaAdapter
from java_ts_core.cir.type_system import DEFAULT_TYPE_SYSTEM

PRODUCT = "public class Product { private String name; private List<String> tags; }"

OFFERING = """
package com.acme.entity.customize;

import java.util.List;

/**
 * Catalog offering.
 */
public class ProductOffering extends AbstractEntity {
    private static final long serialVersionUID = 1L;

    @JsonProperty("@type")
    private String type;
    private Money price;
    private List<Characteristic> characteristics;
    private Category category;
    private Map<String, Note> notes;

    public Money getPrice() { return price; }
}
"""


def test_product_end_to_end():
    out = JavaAdapter().convert(PRODUCT)

    assert out == (
        "export interface Product {\n"
        "  name?: string;\n"
        "  tags?: string[];\n"
        "}\n"
    )


def test_enum_end_to_end():
    out = JavaAdapter().convert('public enum Status { ACTIVE("active"), INACTIVE }')

    assert out == (
        "export enum Status {\n"
        '  ACTIVE = "active",\n'
        '  INACTIVE = "inactive"\n'
        "}\n"
    )


def test_empty_enum_gets_placeholder():
    out = JavaAdapter().convert("public enum Nothing { ; }")

    assert "// No enum values found" in out


def test_class_with_imports_and_supertype():
    out = JavaAdapter().convert(OFFERING, "entity/customize/ProductOffering")

    assert out == (
        "import { Money } from '../../utils/base/Money';\n"
        "import { Characteristic } from '../../entity/common/Characteristic';\n"
        "import { Category } from './Category';\n"
        "import { Note } from '../../utils/base/Note';\n"
        "import { AbstractEntity } from '../../utils/base/AbstractEntity';\n"
        "\n"
        "export interface ProductOffering extends AbstractEntity {\n"
        '  "@type"?: string;\n'
        "  price?: Money;\n"
        "  characteristics?: Characteristic[];\n"
        "  category?: Category;\n"
        "  notes?: { [key: string]: Note };\n"
        "}\n"
    )


def test_explain_reports_dependencies():
    outcome = JavaAdapter().explain(OFFERING)

    assert outcome.ok
    assert outcome.dependencies == ("Money", "Characteristic", "Category", "Note", "AbstractEntity")


def test_convert_is_idempotent_and_cached():
    adapter = JavaAdapter()

    first = adapter.convert(PRODUCT, "entity/Product")
    second = adapter.convert(PRODUCT, "entity/Product")

    assert first == second
    assert adapter.interface_cache.hits == 1
    assert len(adapter.interface_cache) == 1


def test_location_is_part_of_cache_key():
    adapter = JavaAdapter()
    adapter.convert(OFFERING, "entity/customize/ProductOffering")
    other = adapter.convert(OFFERING, "ProductOffering")

    assert "import { Money } from 'utils/base/Money';" in other
    assert len(adapter.interface_cache) == 2


def test_fresh_engine_starts_empty():
    adapter = JavaAdapter()
    adapter.convert(PRODUCT)

    stats = JavaAdapter().cache_stats()
    assert stats["interfaces"]["size"] == 0
    assert stats["imports"]["size"] == 0


def test_failures_are_absent_and_not_cached():
    adapter = JavaAdapter()

    assert adapter.convert("class A {}") is None
    assert adapter.convert("public class Controller { private String x; }") is None
    assert adapter.convert("public class lowercase { private String x; }") is None
    assert len(adapter.interface_cache) == 0


def test_explain_reasons():
    adapter = JavaAdapter()

    assert adapter.explain("").status == "too_small"
    assert adapter.explain("public class Controller { private String x; }").reason == "Invalid class name: Controller"
    assert adapter.explain("public interface Repository { String find(); }").reason == "No valid class or enum found"
    assert adapter.explain("public enum Broken ACTIVE, INACTIVE").reason == "Could not parse enum body"


def test_convert_fast_sentinels():
    adapter = JavaAdapter()

    assert adapter.convert_fast("class A {}") == "// Skipped: Input too small\n"
    assert adapter.convert_fast(None) == "// Skipped: Input too small\n"
    assert (
        adapter.convert_fast("public class Runner { public static void main(String[] args) {} }")
        == "// Skipped: Not suitable for interface conversion\n"
    )
    assert (
        adapter.convert_fast("public class NotFound extends Exception { private String code; }")
        == "// Skipped: Not suitable for interface conversion\n"
    )
    assert adapter.convert_fast("public class Controller { private String x; }") == "// Invalid class name: Controller\n"
    assert adapter.convert_fast("public enum Broken ACTIVE, INACTIVE") == "// Could not parse enum body\n"


def test_convert_fast_without_location_skips_imports():
    out = JavaAdapter().convert_fast(OFFERING)

    assert not out.startswith("import")
    assert out.startswith("export interface ProductOffering extends AbstractEntity {")


def test_convert_fast_with_location_resolves_imports():
    out = JavaAdapter().convert_fast(OFFERING, "entity/customize/ProductOffering")

    assert out.startswith("import { Money } from '../../utils/base/Money';\n")


def test_min_source_length_is_configurable():
    adapter = JavaAdapter(min_source_length=5)

    assert adapter.convert("enum E { A }") == 'export enum E {\n  A = "a"\n}\n'


def test_injected_registry():
    types = DEFAULT_TYPE_SYSTEM.with_registry({"Category": "entity/catalog/Category"})
    out = JavaAdapter(type_system=types).convert(OFFERING, "entity/customize/ProductOffering")

    assert "import { Category } from '../../entity/catalog/Category';" in out


def test_concurrent_conversions_agree():
    adapter = JavaAdapter()
    with ThreadPoolExecutor(max_workers=8) as pool:
        outputs = list(pool.map(lambda _: adapter.convert(OFFERING, "entity/customize/ProductOffering"), range(20)))

    assert len(set(outputs)) == 1
    assert len(adapter.interface_cache) == 1


def test_wildcard_field_imports_its_bound():
    out = JavaAdapter().convert("public class W { private List<? extends Item> items; }", "entity/customize/W")

    assert out == (
        "import { Item } from './Item';\n"
        "\n"
        "export interface W {\n"
        "  items?: Item[];\n"
        "}\n"
    )


def test_enum_with_escaped_quote_stays_well_formed():
    out = JavaAdapter().convert('public enum E { A("a\\"b"), B }')

    assert out == 'export enum E {\n  A = "a\\"b",\n  B = "b"\n}\n'


def test_string_literal_does_not_rename_declaration():
    out = JavaAdapter().convert('public class Order { private String note = "the class Helper"; }')

    assert out == "export interface Order {\n  note?: string;\n}\n"


def test_generic_supertype_header_and_imports():
    out = JavaAdapter().convert(
        "public class ItemPage extends BasePage<Item> { private Integer size; }",
        "entity/customize/ItemPage",
    )

    assert out == (
        "import { BasePage } from './BasePage';\n"
        "\n"
        "export interface ItemPage extends BasePage {\n"
        "  size?: number;\n"
        "}\n"
    )
