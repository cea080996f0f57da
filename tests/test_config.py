"""Tests for configuration objects and display path helpers."""

import pytest

from remotetreelib._common.config import (
    ListOptions,
    PresentationOptions,
    TypeMask,
    validate_mask,
)
from remotetreelib._common.paths import (
    is_hidden,
    join_head_path,
    normalize_head_path,
    parent_path,
    root_like,
)


class TestTypeMask:

    def test_any_combination_is_legal(self):
        mask = TypeMask.MINIMAL | TypeMask.DISK_USAGE_ONLY | TypeMask.OWNERS | TypeMask.STARRED
        assert validate_mask(mask) == mask
        assert validate_mask(int(TypeMask.FOLDER)) == TypeMask.FOLDER

    def test_folder_and_non_folder_are_exclusive(self):
        with pytest.raises(ValueError):
            validate_mask(TypeMask.FOLDER | TypeMask.NON_FOLDER)
        with pytest.raises(ValueError):
            ListOptions(type_mask=TypeMask.FOLDER | TypeMask.NON_FOLDER)


class TestListOptions:

    def test_defaults(self):
        options = ListOptions()
        assert options.depth == 1
        assert options.path == "/"
        assert options.can_prompt()
        assert options.sort_keys == []

    def test_trash_mask_implies_in_trash(self):
        assert ListOptions(type_mask=TypeMask.IN_TRASH).in_trash

    def test_page_size_must_be_positive(self):
        with pytest.raises(ValueError):
            ListOptions(page_size=0)

    def test_no_prompt(self):
        assert not ListOptions(no_prompt=True).can_prompt()

    def test_sort_keys_from_meta(self):
        options = ListOptions(meta={"sort": ["name,size_r"]})
        assert options.sort_keys == ["name", "size_r"]


class TestPresentationOptions:

    def test_from_mask(self):
        opt = PresentationOptions.from_mask(TypeMask.MINIMAL | TypeMask.VERSION, "/docs")
        assert opt.minimal and opt.show_version
        assert not opt.disk_usage_only and not opt.show_owners
        assert opt.parent == "/docs"

    def test_slash_head_path_is_blanked(self):
        assert PresentationOptions.from_mask(0, "/").parent == ""


class TestPaths:

    @pytest.mark.parametrize("p", ["", "/", "root"])
    def test_root_like(self, p):
        assert root_like(p)

    def test_not_root_like(self):
        assert not root_like("docs")
        assert not root_like("My Drive")

    @pytest.mark.parametrize("parent, name", [
        ("", ""), ("", "/"), ("/", ""), ("", "root"), ("/", "/"),
    ])
    def test_root_normalization_is_idempotent(self, parent, name):
        joined = join_head_path(parent, name)
        assert joined == parent
        assert "//" not in joined
        assert join_head_path(joined, name) == joined

    def test_join(self):
        assert join_head_path("", "docs") == "/docs"
        assert join_head_path("/docs", "archive") == "/docs/archive"
        assert join_head_path("abc", "docs") == "abc/docs"

    @pytest.mark.parametrize("locator, expected", [
        ("/", "/"),
        ("/docs", "/"),
        ("/docs/archive", "/docs"),
        ("/docs/archive/", "/docs"),
        ("docs", ""),
        ("docs/archive", "docs"),
    ])
    def test_parent_path(self, locator, expected):
        assert parent_path(locator) == expected

    @pytest.mark.parametrize("p, expected", [
        ("/", ""), ("", ""), ("root", ""), ("My Drive", ""), ("/docs", "/docs"),
    ])
    def test_normalize_head_path(self, p, expected):
        assert normalize_head_path(p) == expected

    def test_is_hidden(self):
        assert is_hidden(".secret", False)
        assert not is_hidden(".secret", True)
        assert not is_hidden("visible", False)
