import io
import json
from urllib.error import HTTPError

import pytest

from concordia import SchemaDocument
from concordia.exceptions import (
    DataValidationError,
    ReferenceEmptyBodyError,
    ReferenceFetchError,
    ReferenceNotJsonError,
    ReferenceUnreachableError,
    RootKindError,
    SchemaValidationError,
    UnknownSchemaTypeError,
)
from concordia.models import ObjectSchema, ReferenceSchema
from concordia.resolvers import ReferenceResolver, UrlFetcher
from concordia.resolvers import reference_resolver
from concordia.validator import ValidationController, get_default_controller

XY_URL = "http://schemas.example.com/xy.json"


def _outer(*fields):
    return {"type": "object", "fields": list(fields)}


def test_fetch_failure(fake_fetcher, fake_resolver):
    fake_fetcher.bodies[XY_URL] = ReferenceFetchError("connection refused", url=XY_URL)
    with pytest.raises(ReferenceUnreachableError) as exc_info:
        SchemaDocument.from_value(_outer({"$ref": XY_URL}), resolver=fake_resolver)
    assert isinstance(exc_info.value, ReferenceFetchError)
    assert exc_info.value.url == XY_URL


def test_missing_file_url(tmp_path):
    url = (tmp_path / "missing.json").as_uri()
    with pytest.raises(ReferenceFetchError):
        SchemaDocument.from_value(_outer({"$ref": url}))


def test_fetch_function_errors_are_wrapped():
    def fetch(url):
        raise ConnectionError("connection refused")

    with pytest.raises(ReferenceFetchError, match="connection refused") as exc_info:
        SchemaDocument.from_value(
            _outer({"$ref": XY_URL, "name": "p"}), resolver=ReferenceResolver(fetcher=fetch)
        )
    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert exc_info.value.url == XY_URL


def test_fetcher_may_return_a_stream(xy_object):
    stream = io.BytesIO(json.dumps(xy_object).encode("utf-8"))
    document = SchemaDocument.from_value(
        _outer({"$ref": XY_URL, "name": "p"}), resolver=ReferenceResolver(fetcher=lambda url: stream)
    )

    assert document.root.fields[0].resolved.field_names() == ["x", "y"]
    assert stream.closed


def test_fetcher_returning_other_types():
    with pytest.raises(ReferenceFetchError, match="int"):
        SchemaDocument.from_value(
            _outer({"$ref": XY_URL, "name": "p"}), resolver=ReferenceResolver(fetcher=lambda url: 42)
        )


def test_http_error_status(monkeypatch):
    def fake_urlopen(request, timeout=None):
        raise HTTPError(request.full_url, 404, "Not Found", {}, None)

    monkeypatch.setattr(reference_resolver, "urlopen", fake_urlopen)
    with pytest.raises(ReferenceFetchError, match="404"):
        SchemaDocument.from_value(_outer({"$ref": XY_URL, "name": "p"}))


def test_non_success_status(monkeypatch):
    class Response:
        status = 500

        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            return False

        def read(self):
            return b'{"type": "object", "fields": []}'

    monkeypatch.setattr(reference_resolver, "urlopen", lambda request, timeout=None: Response())
    with pytest.raises(ReferenceFetchError, match="status 500"):
        SchemaDocument.from_value(_outer({"$ref": XY_URL, "name": "p"}))


@pytest.mark.parametrize("body", [b"", b"   \n"])
def test_empty_body(fake_fetcher, fake_resolver, body):
    fake_fetcher.bodies[XY_URL] = body
    with pytest.raises(ReferenceEmptyBodyError):
        SchemaDocument.from_value(_outer({"$ref": XY_URL}), resolver=fake_resolver)


def test_body_not_json(fake_fetcher, fake_resolver):
    fake_fetcher.bodies[XY_URL] = "type: object"
    with pytest.raises(ReferenceNotJsonError):
        SchemaDocument.from_value(_outer({"$ref": XY_URL}), resolver=fake_resolver)


def test_invalid_referenced_schema(fake_fetcher, fake_resolver):
    fake_fetcher.bodies[XY_URL] = {"type": "integer"}
    with pytest.raises(ReferenceUnreachableError) as exc_info:
        SchemaDocument.from_value(_outer({"$ref": XY_URL}), resolver=fake_resolver)
    assert isinstance(exc_info.value.__cause__, UnknownSchemaTypeError)


def test_referenced_document_root_must_be_object_or_array(fake_fetcher, fake_resolver):
    fake_fetcher.bodies[XY_URL] = {"type": "string"}
    with pytest.raises(ReferenceUnreachableError) as exc_info:
        SchemaDocument.from_value(_outer({"$ref": XY_URL, "name": "s"}), resolver=fake_resolver)
    assert isinstance(exc_info.value.__cause__, RootKindError)


def test_nameless_reference_flattens_fields(fake_fetcher, fake_resolver, xy_object):
    fake_fetcher.bodies[XY_URL] = xy_object
    document = SchemaDocument.from_value(
        _outer({"$ref": XY_URL}, {"type": "string", "name": "z"}), resolver=fake_resolver
    )

    assert document.root.field_names() == ["x", "y", "z"]
    document.validate_data({"x": 1, "y": 2, "z": "a"})
    with pytest.raises(DataValidationError):
        document.validate_data({"x": 1, "z": "a"})


def test_flattened_duplicate_field(fake_fetcher, fake_resolver, xy_object):
    fake_fetcher.bodies[XY_URL] = xy_object
    with pytest.raises(SchemaValidationError, match="duplicate field name: x"):
        SchemaDocument.from_value(
            _outer({"$ref": XY_URL}, {"type": "string", "name": "z"}, {"type": "number", "name": "x"}),
            resolver=fake_resolver,
        )


def test_nameless_reference_must_resolve_to_object(fake_fetcher, fake_resolver):
    fake_fetcher.bodies[XY_URL] = {"type": "array", "constType": {"type": "number"}}
    with pytest.raises(SchemaValidationError, match="nameless reference must resolve to an object"):
        SchemaDocument.from_value(_outer({"$ref": XY_URL}), resolver=fake_resolver)


def test_named_reference(fake_fetcher, fake_resolver, xy_object):
    fake_fetcher.bodies[XY_URL] = xy_object
    document = SchemaDocument.from_value(
        _outer({"$ref": XY_URL, "name": "point", "doc": "A point"}), resolver=fake_resolver
    )

    reference = document.root.fields[0]
    assert isinstance(reference, ReferenceSchema)
    assert reference.locator == XY_URL
    assert reference.resolved == reference.document.root

    document.validate_data({"point": {"x": 1, "y": 2}})
    with pytest.raises(DataValidationError):
        document.validate_data({"point": {"x": 1, "y": "2"}})
    with pytest.raises(DataValidationError, match="value missing but not optional"):
        document.validate_data({})


def test_same_url_is_fetched_each_time(fake_fetcher, fake_resolver, xy_object):
    fake_fetcher.bodies[XY_URL] = xy_object
    document = SchemaDocument.from_value(
        _outer({"$ref": XY_URL, "name": "a"}, {"$ref": XY_URL, "name": "b"}),
        resolver=fake_resolver,
    )

    assert fake_fetcher.calls == [XY_URL, XY_URL]
    first, second = document.root.fields
    assert first.document is not second.document
    assert first.resolved == second.resolved


def test_file_urls(write_schema, xy_object):
    url = write_schema("xy.json", xy_object)
    document = SchemaDocument.from_value(_outer({"$ref": url, "name": "p"}))
    document.validate_data({"p": {"x": 0, "y": 0}})


def test_from_url(write_schema, xy_object):
    document = SchemaDocument.from_url(write_schema("xy.json", xy_object))
    assert document.root.field_names() == ["x", "y"]


def test_url_fetcher_reads_file_urls(write_schema):
    url = write_schema("raw.json", '{"type": "object", "fields": []}')
    assert UrlFetcher(timeout=1.0).fetch(url) == b'{"type": "object", "fields": []}'


def test_reference_serializes_as_locator(fake_fetcher, fake_resolver, xy_object):
    fake_fetcher.bodies[XY_URL] = xy_object
    document = SchemaDocument.from_value(
        _outer({"$ref": XY_URL, "name": "p", "optional": True}), resolver=fake_resolver
    )
    assert document.to_value() == _outer({"$ref": XY_URL, "name": "p", "optional": True})


def test_controller_propagates_through_nested_references(fake_fetcher, fake_resolver, xy_object):
    inner_url = "http://schemas.example.com/inner.json"
    fake_fetcher.bodies[inner_url] = xy_object
    fake_fetcher.bodies[XY_URL] = _outer({"$ref": inner_url, "name": "inner"})

    controller = ValidationController.builder().build()
    document = SchemaDocument.from_value(
        _outer({"$ref": XY_URL, "name": "outer"}), controller=controller, resolver=fake_resolver
    )

    referenced = document.referenced_documents()
    assert len(referenced) == 2
    assert all(d.controller is controller for d in referenced)

    replacement = ValidationController.builder().build()
    document.set_controller(replacement)
    document.set_controller(replacement)
    assert document.controller is replacement
    assert all(d.controller is replacement for d in document.referenced_documents())


def test_referenced_documents_validated_with_resolver_controller(fake_fetcher, xy_object):
    def reject_numbers(schema, controller):
        raise SchemaValidationError("numbers are not allowed here")

    strict = ValidationController.builder().add_schema_validator("number", reject_numbers).build()
    fake_fetcher.bodies[XY_URL] = xy_object

    # The document's own controller does not validate fetched documents.
    SchemaDocument.from_value(
        _outer({"$ref": XY_URL, "name": "p"}),
        controller=ValidationController.builder().build(),
        resolver=ReferenceResolver(fetcher=fake_fetcher),
    )

    with pytest.raises(ReferenceUnreachableError, match="numbers are not allowed here"):
        SchemaDocument.from_value(
            _outer({"$ref": XY_URL, "name": "p"}),
            resolver=ReferenceResolver(fetcher=fake_fetcher, controller=strict),
        )


def test_in_memory_reference_document_uses_default_controller():
    document = SchemaDocument(
        ObjectSchema(fields=[ReferenceSchema(name="p", resolved=ObjectSchema(fields=[]))])
    )
    assert document.controller is get_default_controller()
    assert document.referenced_documents() == []


def test_reference_cycle_is_not_detected(fake_fetcher, fake_resolver):
    fake_fetcher.bodies[XY_URL] = _outer({"$ref": XY_URL, "name": "self"})
    with pytest.raises(RecursionError):
        SchemaDocument.from_value(_outer({"$ref": XY_URL, "name": "loop"}), resolver=fake_resolver)
