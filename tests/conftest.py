"""Configuration file for pytest."""

import json
import os
import sys
import tempfile
import pytest
from pathlib import Path

# Add src directory to the path so tests can import modules correctly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Fixtures for test data


@pytest.fixture
def sample_openapi_spec():
    """Return a sample OpenAPI specification for testing."""
    return {
        "openapi": "3.0.0",
        "info": {
            "title": "Pet Store",
            "description": "API for testing",
            "version": "1.0.0",
        },
        "servers": [{"url": "https://api.example.com/v1/"}],
        "security": [{"apiKey": []}],
        "components": {
            "securitySchemes": {
                "apiKey": {"type": "apiKey", "in": "header", "name": "X-API-Key"}
            },
            "schemas": {
                "Pet": {
                    "type": "object",
                    "required": ["name"],
                    "properties": {
                        "id": {"type": "integer", "readOnly": True},
                        "name": {"type": "string", "example": "Rex"},
                        "tag": {"type": "string", "nullable": True},
                    },
                }
            },
        },
        "paths": {
            "/pets": {
                "get": {
                    "operationId": "listPets",
                    "summary": "List all pets",
                    "parameters": [
                        {
                            "name": "limit",
                            "in": "query",
                            "description": "How many items to return",
                            "required": False,
                            "schema": {"type": "integer"},
                        }
                    ],
                    "responses": {"200": {"description": "A list of pets"}},
                },
                "post": {
                    "operationId": "createPet",
                    "description": "Create a pet",
                    "requestBody": {
                        "required": True,
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Pet"}
                            }
                        },
                    },
                    "security": [],
                    "responses": {"201": {"description": "Pet created"}},
                },
            },
            "/pets/{petId}": {
                "parameters": [
                    {
                        "name": "petId",
                        "in": "path",
                        "required": True,
                        "schema": {"type": "string"},
                    }
                ],
                "get": {
                    "operationId": "showPetById",
                    "responses": {"200": {"description": "A pet"}},
                },
            },
        },
    }


@pytest.fixture
def temp_spec_file(sample_openapi_spec):
    """Write the sample spec to a temporary JSON file."""
    with tempfile.NamedTemporaryFile(suffix=".json", delete=False, mode="w") as tmp:
        json.dump(sample_openapi_spec, tmp)
        tmp_path = tmp.name

    yield tmp_path

    # Cleanup after test
    if os.path.exists(tmp_path):
        os.unlink(tmp_path)
