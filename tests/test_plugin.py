"""Tests for buildtag/plugin.py — descriptor registration and form validation."""

import pytest

import buildtag.plugin as plugin
from buildtag.plugin import (
    Descriptor,
    FormValidation,
    GitPublisherDescriptor,
    all_descriptors,
    extension,
    get_descriptor,
)
from buildtag.publisher import GitPublisher


@pytest.fixture
def descriptor():
    return get_descriptor("GitPublisherDescriptor")


class TestRegistration:
    def test_git_publisher_registered(self, descriptor):
        assert isinstance(descriptor, GitPublisherDescriptor)
        assert descriptor in all_descriptors()

    def test_surface(self, descriptor):
        assert descriptor.display_name == "Push Merges back to origin"
        assert descriptor.help_file == "/plugin/git/gitPublisher.html"
        assert descriptor.is_applicable(object) is True

    def test_extension_decorator(self, monkeypatch):
        monkeypatch.setattr(plugin, "_registry", dict(plugin._registry))

        @extension
        class DummyDescriptor(Descriptor):
            display_name = "Dummy"

        assert get_descriptor("DummyDescriptor").display_name == "Dummy"

    def test_registry_holds_only_shipped_descriptors(self):
        assert [type(d).__name__ for d in all_descriptors()] == ["GitPublisherDescriptor"]

    def test_unknown_descriptor(self):
        with pytest.raises(KeyError):
            get_descriptor("NoSuchDescriptor")


class TestNewInstance:
    def test_default_prefix(self, descriptor):
        publisher = descriptor.new_instance({})
        assert isinstance(publisher, GitPublisher)
        assert publisher.tag_prefix == "hudson"

    def test_custom_prefix(self, descriptor):
        assert descriptor.new_instance({"tag_prefix": "ci"}).tag_prefix == "ci"

    def test_none_form_data(self, descriptor):
        assert descriptor.new_instance(None).tag_prefix == "hudson"


class TestFileMask:
    @pytest.fixture
    def ws(self, tmp_path):
        (tmp_path / "target").mkdir()
        (tmp_path / "target" / "app.jar").write_text("jar")
        (tmp_path / "README.md").write_text("readme")
        return tmp_path

    def test_empty_mask_ok(self, descriptor, ws):
        assert descriptor.check_file_mask(ws, "").is_ok
        assert descriptor.check_file_mask(ws, None).is_ok

    def test_matching_masks(self, descriptor, ws):
        assert descriptor.check_file_mask(ws, "target/*.jar, *.md").is_ok
        assert descriptor.check_file_mask(ws, "**/*.jar").is_ok

    def test_non_matching_mask(self, descriptor, ws):
        validation = descriptor.check_file_mask(ws, "*.md,dist/*.whl")
        assert validation == FormValidation.error("'dist/*.whl' doesn't match anything")

    def test_trailing_double_star(self, descriptor, ws):
        assert descriptor.check_file_mask(ws, "target/**").is_ok
        assert descriptor.check_file_mask(ws, "**").is_ok

    def test_directory_only_mask_warns(self, descriptor, ws):
        validation = descriptor.check_file_mask(ws, "*.md, target")
        assert validation == FormValidation.warning("'target' matches only directories")

    def test_error_beats_warning(self, descriptor, ws):
        validation = descriptor.check_file_mask(ws, "target,dist/*.whl")
        assert validation.kind == "error"

    def test_missing_workspace_ok(self, descriptor, tmp_path):
        assert descriptor.check_file_mask(tmp_path / "not-built-yet", "*.jar").is_ok

    def test_absolute_mask_rejected(self, descriptor, ws):
        validation = descriptor.check_file_mask(ws, "/etc/*")
        assert validation.kind == "error"
