from pathlib import Path

import pytest

from postman_publisher.errors import ConversionError
from postman_publisher.spec.detect import OPENAPI3, SWAGGER2, detect_spec_version, parse_spec_document

FIXTURES = Path(__file__).parent / "fixtures"


class TestParseSpecDocument:
    def test_yaml(self):
        doc = parse_spec_document((FIXTURES / "widgets.yaml").read_text(encoding="utf-8"))
        assert doc["info"]["title"] == "Widget Service"

    def test_json(self):
        doc = parse_spec_document((FIXTURES / "secured.json").read_text(encoding="utf-8"))
        assert doc["info"]["title"] == "Orders API"

    def test_non_mapping_rejected(self):
        with pytest.raises(ConversionError, match="object"):
            parse_spec_document("- a\n- b\n")

    def test_yaml_dates_stay_strings(self):
        doc = parse_spec_document("openapi: 3.0.0\ninfo:\n  version: 2024-01-01\nx-released: 2024-01-01T10:00:00Z\n")
        assert doc["info"]["version"] == "2024-01-01"
        assert doc["x-released"] == "2024-01-01T10:00:00Z"


class TestDetectSpecVersion:
    def test_openapi3(self):
        assert detect_spec_version({"openapi": "3.1.0"}) == OPENAPI3

    def test_swagger2(self):
        assert detect_spec_version({"swagger": "2.0"}) == SWAGGER2

    def test_unsupported_openapi(self):
        with pytest.raises(ConversionError, match="unsupported"):
            detect_spec_version({"openapi": "4.0.0"})

    def test_unknown_document(self):
        with pytest.raises(ConversionError):
            detect_spec_version({"info": {}})
