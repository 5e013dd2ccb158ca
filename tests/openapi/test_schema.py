"""Unit tests for the OpenAPI to JSON Schema mapper."""

import copy
import unittest
import sys
import os

# Add the src directory to the Python path
src_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..', 'src'))
if src_root not in sys.path:
    sys.path.insert(0, src_root)

from mcpforge.openapi.diagnostics import (
    DiagnosticCollector,
    INVALID_SCHEMA,
    SCHEMA_CYCLE,
    UNRESOLVED_REF,
)
from mcpforge.openapi.schema import map_openapi_schema_to_json_schema, strip_cycles


class TestSchemaMapper(unittest.TestCase):

    def setUp(self):
        self.diagnostics = DiagnosticCollector()

    def map(self, schema):
        return map_openapi_schema_to_json_schema(schema, self.diagnostics)

    def test_nullable_integer(self):
        self.assertEqual(self.map({"type": "integer", "nullable": True}), {"type": ["number", "null"]})

    def test_integer_becomes_number(self):
        self.assertEqual(self.map({"type": "integer", "format": "int64"}), {"type": "number", "format": "int64"})

    def test_openapi_only_fields_are_stripped(self):
        schema = {
            "type": "string",
            "description": "A name",
            "example": "Rex",
            "xml": {"name": "n"},
            "externalDocs": {"url": "https://example.com"},
            "deprecated": True,
            "readOnly": True,
            "writeOnly": False,
            "nullable": False,
        }
        self.assertEqual(self.map(schema), {"type": "string", "description": "A name"})

    def test_nullable_union_gains_null(self):
        self.assertEqual(self.map({"type": ["string", "number"], "nullable": True}), {"type": ["string", "number", "null"]})
        self.assertEqual(self.map({"type": ["string", "null"], "nullable": True}), {"type": ["string", "null"]})

    def test_nullable_without_type(self):
        self.assertEqual(self.map({"nullable": True, "description": "x"}), {"type": "null", "description": "x"})

    def test_boolean_schemas_pass_through(self):
        self.assertIs(self.map(True), True)
        self.assertIs(self.map(False), False)

    def test_unresolved_reference(self):
        result = self.map({"$ref": "#/components/schemas/Pet"})
        self.assertEqual(result, {"type": "object"})
        diagnostics = self.diagnostics.by_code(UNRESOLVED_REF)
        self.assertEqual(len(diagnostics), 1)
        self.assertEqual(diagnostics[0].value, "#/components/schemas/Pet")

    def test_invalid_schema_degrades(self):
        self.assertEqual(self.map("string"), {"type": "object"})
        self.assertEqual(self.diagnostics.codes(), [INVALID_SCHEMA])

    def test_nested_properties_and_items(self):
        schema = {
            "type": "object",
            "required": ["tags"],
            "properties": {
                "count": {"type": "integer", "example": 3},
                "tags": {"type": "array", "items": {"type": "integer", "nullable": True}},
                "any": True,
                "owner": {"$ref": "#/components/schemas/Owner"},
                "broken": "not-a-schema",
            },
        }
        result = self.map(schema)
        self.assertEqual(
            result,
            {
                "type": "object",
                "required": ["tags"],
                "properties": {
                    "count": {"type": "number"},
                    "tags": {"type": "array", "items": {"type": ["number", "null"]}},
                    "any": True,
                    "owner": {"type": "object"},
                },
            },
        )

    def test_nullable_object_still_maps_properties(self):
        schema = {"type": "object", "nullable": True, "properties": {"n": {"type": "integer"}}}
        self.assertEqual(
            self.map(schema),
            {"type": ["object", "null"], "properties": {"n": {"type": "number"}}},
        )

    def test_properties_ignored_for_non_object_types(self):
        schema = {"type": "string", "properties": {"n": {"type": "integer"}}}
        self.assertEqual(self.map(schema)["properties"], {"n": {"type": "integer"}})

    def test_input_is_not_mutated(self):
        schema = {
            "type": ["object"],
            "nullable": True,
            "properties": {"a": {"type": "integer"}},
        }
        original = copy.deepcopy(schema)
        self.map(schema)
        self.assertEqual(schema, original)

    def test_direct_self_reference_terminates(self):
        node = {"type": "object", "title": "Node", "properties": {}}
        node["properties"]["next"] = node

        result = self.map(node)

        self.assertEqual(result["properties"]["next"], {"type": "object"})
        cycles = self.diagnostics.by_code(SCHEMA_CYCLE)
        self.assertEqual(len(cycles), 1)
        self.assertIn('"Node"', cycles[0].message)

    def test_transitive_cycle_through_items(self):
        tree = {"type": "object", "properties": {}}
        children = {"type": "array", "items": tree}
        tree["properties"]["children"] = children

        result = self.map(tree)

        self.assertEqual(
            result,
            {
                "type": "object",
                "properties": {
                    "children": {"type": "array", "items": {"type": "object"}},
                },
            },
        )
        self.assertEqual(self.diagnostics.codes(), [SCHEMA_CYCLE])

    def test_composition_keywords_are_mapped(self):
        schema = {
            "oneOf": [{"type": "integer"}, {"$ref": "#/components/schemas/Cat"}],
            "not": {"type": "integer", "example": 1},
            "additionalProperties": {"type": "integer", "nullable": True},
        }
        self.assertEqual(
            self.map(schema),
            {
                "oneOf": [{"type": "number"}, {"type": "object"}],
                "not": {"type": "number"},
                "additionalProperties": {"type": ["number", "null"]},
            },
        )
        self.assertEqual(self.diagnostics.codes(), [UNRESOLVED_REF])

    def test_cycle_through_all_of_is_cut(self):
        pet = {"type": "object", "allOf": []}
        pet["allOf"].append({"properties": {"parent": pet}})

        result = self.map(pet)

        self.assertEqual(result["allOf"], [{"properties": {"parent": {"type": "object"}}}])
        self.assertEqual(self.diagnostics.codes(), [SCHEMA_CYCLE])

    def test_cycle_through_additional_properties_is_cut(self):
        tree = {"type": "object"}
        tree["additionalProperties"] = tree

        result = self.map(tree)

        self.assertEqual(result, {"type": "object", "additionalProperties": {"type": "object"}})
        self.assertEqual(self.diagnostics.codes(), [SCHEMA_CYCLE])

    def test_result_shares_no_objects_with_input(self):
        schema = {"type": ["object"], "enum": [{"a": 1}], "properties": {}}
        result = self.map(schema)
        self.assertEqual(result, schema)
        self.assertIsNot(result["type"], schema["type"])
        self.assertIsNot(result["enum"][0], schema["enum"][0])

    def test_strip_cycles(self):
        node = {"name": "root", "children": []}
        node["children"].append(node)
        self.assertEqual(
            strip_cycles(node, self.diagnostics),
            {"name": "root", "children": [{"type": "object"}]},
        )
        self.assertEqual(self.diagnostics.codes(), [SCHEMA_CYCLE])

        self.diagnostics.clear()
        strip_cycles(node, self.diagnostics, report_cycles=False)
        self.assertEqual(len(self.diagnostics), 0)

    def test_shared_non_cyclic_node_is_mapped_each_time(self):
        address = {"type": "object", "properties": {"zip": {"type": "integer"}}}
        schema = {
            "type": "object",
            "properties": {"home": address, "work": address},
        }

        result = self.map(schema)

        expected = {"type": "object", "properties": {"zip": {"type": "number"}}}
        self.assertEqual(result["properties"]["home"], expected)
        self.assertEqual(result["properties"]["work"], expected)
        self.assertEqual(len(self.diagnostics), 0)


if __name__ == '__main__':
    unittest.main()
