from __future__ import annotations

import pytest

from strata._internal._path import Key, compile_path, decode_component, tokenize
from strata.exceptions import ImproperlyConfigured


@pytest.mark.parametrize(
    "pattern,tokens",
    [
        ("/users", ["/users"]),
        ("/users/:id", ["/users", Key("id", "/", "[^/]+?", "")]),
        ("/files/:path(.*)", ["/files", Key("path", "/", ".*", "")]),
        ("/:lang?/docs", [Key("lang", "/", "[^/]+?", "?"), "/docs"]),
        ("(.*)", [Key("0", "", ".*", "")]),
        ("/a(\\d+)/(\\w+)", ["/a", Key("0", "", "\\d+", ""), Key("1", "/", "\\w+", "")]),
        ("/static\\:name", ["/static:name"]),
    ],
)
def test_tokenize(pattern, tokens):
    assert tokenize(pattern) == tokens


@pytest.mark.parametrize(
    "pattern",
    ["/:", "/(", "/()", "/(a(b))", "/(?:x)"],
)
def test_tokenize_rejects_invalid_patterns(pattern):
    with pytest.raises(ImproperlyConfigured):
        tokenize(pattern)


@pytest.mark.parametrize(
    "pattern,path,captures",
    [
        ("/foo/bar", "/foo/bar", ()),
        ("/foo/bar", "/foo/bar/", ()),
        ("/foo/bar", "/FOO/BAR", ()),
        ("/foo/bar", "/foo/bar/baz", None),
        ("/foo/:bar", "/foo/123", ("123",)),
        ("/foo/:bar", "/foo/123/456", None),
        ("/foo/:bar(\\d+)", "/foo/abc", None),
        ("/foo/:bar?", "/foo", (None,)),
        ("/files/:path*", "/files/a/b/c", ("a/b/c",)),
        ("/files/:path+", "/files", None),
        ("(.*)", "/anything/at/all", ("/anything/at/all",)),
    ],
)
def test_compile_path_end_anchored(pattern, path, captures):
    matcher = compile_path(pattern)

    assert matcher.test(path) == captures


@pytest.mark.parametrize(
    "pattern,path,matched",
    [
        ("/foo", "/foo", True),
        ("/foo", "/foo/", True),
        ("/foo", "/foo/bar", True),
        ("/foo", "/foobar", False),
        ("/foo/", "/foo/bar", True),
        ("/foo/:bar", "/foo/123/beep", True),
        ("", "/whatever", True),
    ],
)
def test_compile_path_prefix_match(pattern, path, matched):
    matcher = compile_path(pattern, end=False)

    assert (matcher.test(path) is not None) is matched


def test_compile_path_strict():
    matcher = compile_path("/foo", strict=True)

    assert matcher.test("/foo") == ()
    assert matcher.test("/foo/") is None


def test_compile_path_sensitive():
    matcher = compile_path("/Foo", sensitive=True)

    assert matcher.test("/Foo") == ()
    assert matcher.test("/foo") is None


def test_compile_path_is_memoised():
    assert compile_path("/memo/:id") is compile_path("/memo/:id")
    assert compile_path("/memo/:id") is not compile_path("/memo/:id", end=False)


def test_keys_are_declared_in_order():
    matcher = compile_path("/:first/:second/(.*)")

    assert [key.name for key in matcher.keys] == ["first", "second", "0"]


@pytest.mark.parametrize(
    "value,decoded",
    [
        ("plain", "plain"),
        ("hello%20world", "hello world"),
        ("caf%C3%A9", "café"),
        ("%E0%A4%A", "%E0%A4%A"),
        ("%FF", "%FF"),
    ],
)
def test_decode_component(value, decoded):
    assert decode_component(value) == decoded


def test_repeated_param_names_are_tokenized_in_order():
    matcher = compile_path("/users/:id/posts/:id")

    assert [key.name for key in matcher.keys] == ["id", "id"]
    assert matcher.test("/users/1/posts/2") == ("1", "2")
