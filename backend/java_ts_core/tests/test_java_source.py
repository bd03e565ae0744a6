import os
import sys

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(os.path.dirname(CURRENT_DIR))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from java_ts_core.adapters.java_source import (
    clean_declared_type,
    enum_body,
    external_field_name,
    extract_enum_constants,
    extract_fields,
    extract_signature,
    normalize_source,
    strip_comments,
    strip_constants,
)
from java_ts_core.cir.model import Malformed, Matched, NoMatch
from java_ts_core.cir.type_system import DEFAULT_TYPE_SYSTEM

ts = DEFAULT_TYPE_SYSTEM


def signature_of(code):
    return extract_signature(normalize_source(code), ts)


# ---------------- Normalizer ----------------

def test_strip_comments_keeps_string_literals():
    code = 'private String url = "http://example.com"; // trailing\n/* block */private int n;'
    out = strip_comments(code)

    assert '"http://example.com"' in out
    assert "trailing" not in out
    assert "block" not in out
    assert "private int n;" in out


def test_block_comment_keeps_tokens_apart():
    assert strip_comments("class/*x*/Product") == "class Product"


def test_strip_constants():
    code = "private static final long serialVersionUID = 1L; private final static String A = \"a\"; private String b;"
    out = strip_constants(code)

    assert "serialVersionUID" not in out
    assert "A =" not in out
    assert "private String b;" in out


# ---------------- Signature ----------------

def test_signature_with_supertype():
    result = signature_of("public class Product extends AbstractEntity { private String name; }")

    assert isinstance(result, Matched)
    assert result.value.kind == "class"
    assert result.value.name == "Product"
    assert result.value.supertype == "AbstractEntity"


def test_signature_strips_qualified_supertype():
    result = signature_of("public abstract class Offer extends com.acme.base.AbstractEntity {}")

    assert isinstance(result, Matched)
    assert result.value.supertype == "AbstractEntity"


def test_signature_generic_class():
    result = signature_of("public class Page<T> extends Base { private List<T> items; }")

    assert isinstance(result, Matched)
    assert result.value.name == "Page"
    assert result.value.supertype == "Base"


def test_signature_enum():
    result = signature_of("public enum Status { ACTIVE, INACTIVE }")

    assert isinstance(result, Matched)
    assert result.value.kind == "enum"
    assert result.value.supertype is None


def test_signature_last_valid_match_wins():
    result = signature_of("public class Outer { public static class Inner { private String x; } }")

    assert isinstance(result, Matched)
    assert result.value.name == "Inner"


def test_signature_ignores_commented_out_declaration():
    result = signature_of("// public class Old {}\npublic class Product { private String name; }")

    assert isinstance(result, Matched)
    assert result.value.name == "Product"


def test_blocklisted_name_is_malformed():
    result = signature_of("public class Controller { private String x; }")

    assert isinstance(result, Malformed)
    assert result.reason == "Invalid class name: Controller"


def test_lowercase_name_is_no_match():
    result = signature_of("public class lowercase { private String x; }")

    assert isinstance(result, NoMatch)
    assert result.reason == "No valid class or enum found"


def test_interface_declaration_is_no_match():
    result = signature_of("public interface Repository { String find(); }")

    assert isinstance(result, NoMatch)


# ---------------- Fields ----------------

def test_plain_fields():
    code = """
    public class Product {
        private String name;
        private List<String> tags;
        private Map<String, Integer> counts;
        private int[] scores;
        private transient Long version = 0L;
        public String notAField;
    }
    """
    fields = extract_fields(code, ts)

    assert [(f.external_name, f.mapped_type) for f in fields] == [
        ("name", "string"),
        ("tags", "string[]"),
        ("counts", "{ [key: string]: number }"),
        ("scores", "number[]"),
        ("version", "number"),
    ]
    assert all(f.is_optional for f in fields)


def test_json_property_renames_and_quotes():
    code = """
    public class Resource {
        @JsonProperty("@type")
        private String type;
        @JsonProperty(value = "href")
        @NotNull
        private String link;
        private String name;
    }
    """
    fields = extract_fields(code, ts)
    by_original = {f.original_name: f for f in fields}

    assert by_original["type"].external_name == '"@type"'
    assert by_original["link"].external_name == "href"
    assert by_original["name"].external_name == "name"
    assert len(fields) == 3


def test_duplicate_external_name_first_wins():
    code = """
    public class Account {
        @JsonProperty("id")
        private Long identifier;
        private Long id;
    }
    """
    fields = extract_fields(code, ts)

    assert len(fields) == 1
    assert fields[0].external_name == "id"
    assert fields[0].original_name == "identifier"


def test_fields_skip_constants_methods_and_irregular_names():
    code = """
    public class Product {
        private static final long serialVersionUID = 1L;
        private String Name;
        private String sku;
        private void setSku(String sku) { this.sku = sku; }
    }
    """
    fields = extract_fields(code, ts)

    assert [f.original_name for f in fields] == ["sku"]


def test_clean_declared_type():
    assert clean_declared_type("java.util.List< java.lang.String >") == "List<String>"
    assert clean_declared_type("Map<String,Integer>") == "Map<String, Integer>"


def test_external_field_name():
    assert external_field_name("href") == "href"
    assert external_field_name("@baseType") == '"@baseType"'
    assert external_field_name("valid-for") == '"valid-for"'


# ---------------- Enum constants ----------------

def test_enum_constants_with_and_without_literal():
    normalized = normalize_source('public enum Status { ACTIVE("active"), INACTIVE }')
    result = extract_enum_constants(normalized, "Status")

    assert isinstance(result, Matched)
    assert [(c.name, c.literal) for c in result.value] == [("ACTIVE", "active"), ("INACTIVE", "inactive")]


def test_enum_constants_stop_at_member_section():
    code = """
    public enum Priority {
        HIGH("high", 1),
        LOW("low", 2);

        private final String value;
        Priority(String value, int rank) { this.value = value; }
    }
    """
    result = extract_enum_constants(normalize_source(code), "Priority")

    assert isinstance(result, Matched)
    assert [c.literal for c in result.value] == ["high", "low"]


def test_enum_without_body_is_malformed():
    result = extract_enum_constants(normalize_source("public enum Broken ACTIVE, INACTIVE"), "Broken")

    assert isinstance(result, Malformed)
    assert result.reason == "Could not parse enum body"


def test_enum_body_matches_nested_braces():
    normalized = "enum E { A { void f() {} }, B } trailing }"
    assert enum_body(normalized, normalized.index("{")) == " A { void f() {} }, B "


def test_wildcard_field_type_is_reduced_to_bound():
    fields = extract_fields("public class W { private List<? extends Item> items; }", ts)

    assert fields[0].declared_type == "List<Item>"
    assert fields[0].mapped_type == "Item[]"


def test_multi_declarator_field_yields_each_name():
    code = "public class Point { private int x, y; private String label; }"
    fields = extract_fields(code, ts)

    assert [(f.external_name, f.mapped_type) for f in fields] == [
        ("x", "number"),
        ("y", "number"),
        ("label", "string"),
    ]


def test_json_property_keeps_escaped_quote():
    code = 'public class Q { @JsonProperty("x\\"y") private String xy; }'
    fields = extract_fields(code, ts)

    assert fields[0].external_name == '"x\\"y"'


def test_enum_literal_keeps_escaped_quote():
    result = extract_enum_constants(normalize_source('public enum E { A("a\\"b"), B }'), "E")

    assert isinstance(result, Matched)
    assert [(c.name, c.literal) for c in result.value] == [("A", 'a\\"b'), ("B", "b")]


def test_declaration_text_inside_string_literal_is_ignored():
    result = signature_of('public class Order { private String note = "the class Helper"; }')

    assert isinstance(result, Matched)
    assert result.value.name == "Order"


def test_generic_supertype_keeps_only_its_name():
    result = signature_of("public class ItemPage extends BasePage<Item> { private Integer size; }")

    assert isinstance(result, Matched)
    assert result.value.supertype == "BasePage"


def test_enum_literal_with_braces():
    result = extract_enum_constants(normalize_source('public enum Shape { CURLY("{}"), ROUND }'), "Shape")

    assert isinstance(result, Matched)
    assert [(c.name, c.literal) for c in result.value] == [("CURLY", "{}"), ("ROUND", "round")]
