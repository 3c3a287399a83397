"""Tests for the command line interface and document loading."""

import json

import pytest
import requests

from schemagen.cli import build_parser, main
from schemagen.utils import DocumentLoaderError, load_document, load_document_from_url


@pytest.fixture
def schema_file(tmp_path, asyncapi_document):
    path = tmp_path / "account.json"
    path.write_text(json.dumps(asyncapi_document))
    return path


class TestMain:

    def test_writes_one_file_per_model(self, tmp_path, schema_file):
        output_dir = tmp_path / "out"

        exit_code = main(
            [str(schema_file), "--output-dir", str(output_dir), "--package-name", "accounts"]
        )

        assert exit_code == 0
        assert sorted(p.name for p in output_dir.iterdir()) == [
            "email_verification.go",
            "phone_verification.go",
            "status.go",
        ]
        status = (output_dir / "status.go").read_text()
        assert status.startswith("package accounts\n\n// Status represents an enum of string.")

    def test_flags_reach_the_generator(self, tmp_path, schema_file):
        output_dir = tmp_path / "out"

        exit_code = main(
            [str(schema_file), "-o", str(output_dir), "--no-comments", "--no-json-tags"]
        )

        assert exit_code == 0
        text = (output_dir / "email_verification.go").read_text()
        assert text == (
            "package main\n\n"
            "type EmailVerification struct {\n"
            "  Status Status\n"
            "  AdditionalProperties map[string]interface{}\n"
            "}\n"
        )

    def test_prints_without_output_dir(self, schema_file, capsys):
        assert main([str(schema_file), "--verbose"]) == 0
        assert "EmailVerification" in capsys.readouterr().out

    def test_list_languages(self, capsys):
        assert main(["--list-languages"]) == 0
        out = capsys.readouterr().out
        assert "go" in out
        assert "golang" in out

    def test_missing_input(self):
        assert main([]) == 1

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "nope.json")]) == 1

    def test_unknown_language(self, schema_file):
        assert main([str(schema_file), "--language", "cobol"]) == 1

    def test_render_failure_sets_exit_code(self, tmp_path):
        path = tmp_path / "clash.json"
        path.write_text(json.dumps({"$id": "Code", "enum": ["1", 1]}))

        assert main([str(path), "-o", str(tmp_path / "out")]) == 1

    def test_parser_defaults(self):
        args = build_parser().parse_args(["schema.json"])
        assert args.language == "go"
        assert args.root_name == "Root"
        assert args.output_dir is None


class TestLoadDocument:

    def test_file_must_hold_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")

        with pytest.raises(DocumentLoaderError):
            load_document(file_path=path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")

        with pytest.raises(DocumentLoaderError):
            load_document(file_path=path)

    def test_exactly_one_source(self, tmp_path):
        with pytest.raises(DocumentLoaderError):
            load_document()
        with pytest.raises(DocumentLoaderError):
            load_document(file_path=tmp_path / "a.json", url="https://example.com/a.json")

    def test_invalid_url(self):
        with pytest.raises(DocumentLoaderError):
            load_document_from_url("not a url")

    def test_url(self, monkeypatch):
        class Response:
            def raise_for_status(self):
                pass

            def json(self):
                return {"$id": "Remote", "type": "object"}

        calls = []

        def fake_get(url, timeout):
            calls.append((url, timeout))
            return Response()

        monkeypatch.setattr(requests, "get", fake_get)

        source, document = load_document(url="https://example.com/schema.json", timeout=5)

        assert source == "https://example.com/schema.json"
        assert document["$id"] == "Remote"
        assert calls == [("https://example.com/schema.json", 5)]

    def test_url_errors(self, monkeypatch):
        def fake_get(url, timeout):
            raise requests.exceptions.ConnectionError("down")

        monkeypatch.setattr(requests, "get", fake_get)

        with pytest.raises(DocumentLoaderError):
            load_document(url="https://example.com/schema.json")
