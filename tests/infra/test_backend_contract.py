"""Behaviour shared by every storage backend, run against in-memory clients."""

from __future__ import annotations

import pytest

from object_storage.infra.storage import (
    KeyOutsidePrefixError,
    ObjectNotFoundError,
    OperationContext,
    StorageError,
)

PREFIXES = ["", "root", "/nested/root/"]


@pytest.fixture
def ctx() -> OperationContext:
    return OperationContext.background()


class TestRoundTrip:
    """put_object followed by get_object returns the stored bytes."""

    @pytest.mark.parametrize("prefix", PREFIXES)
    def test_put_then_get_returns_same_content(self, backend_factory, ctx, prefix):
        backend = backend_factory(prefix)
        content = bytes(range(256)) * 4

        backend.put_object(ctx, "data/blob.bin", content)
        obj = backend.get_object(ctx, "data/blob.bin")

        assert obj.content == content
        assert obj.path == "data/blob.bin"
        assert obj.last_modified is not None

    def test_put_overwrites_existing_object(self, backend_factory, ctx):
        backend = backend_factory("root")
        backend.put_object(ctx, "a.txt", b"first")
        backend.put_object(ctx, "a.txt", b"second")

        assert backend.get_object(ctx, "a.txt").content == b"second"

    def test_empty_content(self, backend_factory, ctx):
        backend = backend_factory()
        backend.put_object(ctx, "empty", b"")

        assert backend.get_object(ctx, "empty").content == b""

    def test_metadata_is_never_populated(self, backend_factory, ctx):
        backend = backend_factory()
        backend.put_object(ctx, "a.txt", b"x")

        obj = backend.get_object(ctx, "a.txt")

        assert obj.meta.name == ""
        assert obj.meta.version == ""


class TestPrefixHandling:
    @pytest.mark.parametrize("prefix", ["root", "/nested/root/"])
    def test_listed_paths_never_contain_configured_prefix(
        self, backend_factory, ctx, prefix
    ):
        backend = backend_factory(prefix)
        backend.put_object(ctx, "one.txt", b"1")
        backend.put_object(ctx, "dir/two.txt", b"2")

        paths = sorted(obj.path for obj in backend.list_objects(ctx, ""))

        assert paths == ["dir/two.txt", "one.txt"]
        assert backend.prefix == prefix.strip("/")

    def test_listing_paths_are_relative_to_listing_prefix(self, backend_factory, ctx):
        backend = backend_factory("root")
        backend.put_object(ctx, "test/hello.txt", b"hi")
        backend.put_object(ctx, "other/file.txt", b"x")

        objects = backend.list_objects(ctx, "test/")

        assert [obj.path for obj in objects] == ["hello.txt"]
        assert objects[0].content == b""

    def test_listing_outside_any_object_returns_empty(self, backend_factory, ctx):
        backend = backend_factory("root")
        backend.put_object(ctx, "a.txt", b"x")

        assert backend.list_objects(ctx, "missing/") == []

    def test_backends_sharing_a_bucket_are_isolated_by_prefix(
        self, backend_factory, ctx
    ):
        first = backend_factory("tenant-a")
        second = backend_factory("tenant-b")
        first.put_object(ctx, "shared.txt", b"a")
        second.put_object(ctx, "shared.txt", b"b")

        assert first.get_object(ctx, "shared.txt").content == b"a"
        assert second.get_object(ctx, "shared.txt").content == b"b"

    def test_sibling_directory_is_not_listed(self, backend_factory, ctx):
        backend = backend_factory("root")
        backend.put_object(ctx, "test/a.txt", b"a")
        backend.put_object(ctx, "testing/b.txt", b"b")

        assert [obj.path for obj in backend.list_objects(ctx, "test/")] == ["a.txt"]

    def test_partial_segment_paths_are_relative_to_configured_prefix(
        self, backend_factory, ctx
    ):
        backend = backend_factory("root")
        backend.put_object(ctx, "test/a.txt", b"a")
        backend.put_object(ctx, "testing/b.txt", b"b")
        backend.put_object(ctx, "other.txt", b"c")

        paths = [obj.path for obj in backend.list_objects(ctx, "te")]

        assert paths == ["test/a.txt", "testing/b.txt"]

    def test_sibling_prefix_is_not_listed(self, backend_factory, ctx):
        tenant = backend_factory("tenant-a")
        neighbour = backend_factory("tenant-a2")
        neighbour.put_object(ctx, "other.txt", b"x")

        assert tenant.list_objects(ctx, "") == []

        tenant.put_object(ctx, "mine.txt", b"y")

        assert [obj.path for obj in tenant.list_objects(ctx, "")] == ["mine.txt"]


class TestPathEscape:
    @pytest.mark.parametrize(
        "path", ["../tenant-b/secret.txt", "docs/../../tenant-b/secret.txt"]
    )
    def test_put_outside_prefix_is_rejected(self, backend_factory, ctx, path):
        tenant = backend_factory("tenant-a")
        other = backend_factory("tenant-b")

        with pytest.raises(StorageError) as exc_info:
            tenant.put_object(ctx, path, b"x")

        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value.__cause__, KeyOutsidePrefixError)
        assert other.list_objects(ctx, "") == []

    @pytest.mark.parametrize("operation", ["get", "delete", "list"])
    def test_other_operations_outside_prefix_are_rejected(
        self, backend_factory, ctx, operation
    ):
        other = backend_factory("tenant-b")
        other.put_object(ctx, "secret.txt", b"x")
        tenant = backend_factory("tenant-a")
        calls = {
            "get": lambda: tenant.get_object(ctx, "../tenant-b/secret.txt"),
            "delete": lambda: tenant.delete_object(ctx, "../tenant-b/secret.txt"),
            "list": lambda: tenant.list_objects(ctx, "../tenant-b/"),
        }

        with pytest.raises(StorageError) as exc_info:
            calls[operation]()

        assert not exc_info.value.not_found
        assert other.get_object(ctx, "secret.txt").content == b"x"

    def test_parent_segments_inside_prefix_are_allowed(self, backend_factory, ctx):
        backend = backend_factory("tenant-a")
        backend.put_object(ctx, "docs/../a.txt", b"x")

        assert backend.get_object(ctx, "a.txt").content == b"x"


class TestListing:
    def test_accumulates_every_page(self, backend_factory, ctx):
        backend = backend_factory("root")
        expected = [f"keys/{index:05d}.txt" for index in range(1500)]
        for path in expected:
            backend.put_object(ctx, path, b"")

        objects = backend.list_objects(ctx, "")

        assert [obj.path for obj in objects] == expected
        assert all(obj.content == b"" for obj in objects)
        assert all(obj.last_modified is not None for obj in objects)

    def test_empty_bucket(self, backend_factory, ctx):
        assert backend_factory().list_objects(ctx, "") == []


class TestDelete:
    def test_deleted_object_is_not_found(self, backend_factory, ctx):
        backend = backend_factory("root")
        backend.put_object(ctx, "a.txt", b"x")

        backend.delete_object(ctx, "a.txt")

        with pytest.raises(ObjectNotFoundError):
            backend.get_object(ctx, "a.txt")


class TestCopy:
    def test_copy_is_independent_of_source(self, backend_factory, ctx):
        # The GCS backend uses copy paths as full object names, so this runs
        # without a prefix to compare both backends on equal terms.
        backend = backend_factory("")
        backend.put_object(ctx, "src.txt", b"payload")

        backend.copy_object(ctx, "src.txt", "dst.txt")
        assert (
            backend.get_object(ctx, "dst.txt").content
            == backend.get_object(ctx, "src.txt").content
        )

        backend.delete_object(ctx, "src.txt")
        assert backend.get_object(ctx, "dst.txt").content == b"payload"

    def test_copy_of_missing_source_is_not_found(self, backend_factory, ctx):
        backend = backend_factory("")

        with pytest.raises(ObjectNotFoundError) as exc_info:
            backend.copy_object(ctx, "missing.txt", "dst.txt")

        assert exc_info.value.status_code == 404


class TestHelloWorldScenario:
    def test_full_lifecycle(self, backend_factory, ctx):
        backend = backend_factory("")
        content = b"Hello, World!"

        backend.put_object(ctx, "test/hello.txt", content)
        assert backend.get_object(ctx, "test/hello.txt").content == content

        listed = backend.list_objects(ctx, "test/")
        assert [(obj.path, obj.content) for obj in listed] == [("hello.txt", b"")]

        backend.copy_object(ctx, "test/hello.txt", "test/hello-copy.txt")
        copy = backend.get_object(ctx, "test/hello-copy.txt")
        assert copy.path == "test/hello-copy.txt"
        assert copy.content == content

        backend.delete_object(ctx, "test/hello.txt")
        backend.delete_object(ctx, "test/hello-copy.txt")

        for path in ("test/hello.txt", "test/hello-copy.txt"):
            with pytest.raises(ObjectNotFoundError):
                backend.get_object(ctx, path)


class TestContext:
    def test_cancelled_context_blocks_every_operation(self, backend_factory):
        backend = backend_factory("root")
        ctx = OperationContext.background()
        ctx.cancel()

        calls = [
            lambda: backend.get_object(ctx, "a.txt"),
            lambda: backend.list_objects(ctx, ""),
            lambda: backend.put_object(ctx, "a.txt", b"x"),
            lambda: backend.delete_object(ctx, "a.txt"),
            lambda: backend.copy_object(ctx, "a.txt", "b.txt"),
        ]
        for call in calls:
            with pytest.raises(StorageError) as exc_info:
                call()
            assert not exc_info.value.not_found
            assert exc_info.value.status_code == 500

    def test_expired_deadline_is_internal_error(self, backend_factory):
        backend = backend_factory()
        ctx = OperationContext.with_timeout(0)

        with pytest.raises(StorageError) as exc_info:
            backend.put_object(ctx, "a.txt", b"x")

        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value.__cause__, TimeoutError)
