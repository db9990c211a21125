import time

from f95metadata.config import (
    COOKIE_LIFETIME_SECONDS,
    cookies_from_env,
    create_cookie_jar,
    filter_whitelisted,
    parse_cookie_string,
    verify_cookies,
)


def test_parse_cookie_string():
    raw = "xf_user=123%2Cabc; xf_csrf = token ;broken; =nameless; __ddg1_=x=y"
    assert parse_cookie_string(raw) == [("xf_user", "123%2Cabc"), ("xf_csrf", "token"), ("__ddg1_", "x=y")]
    assert parse_cookie_string("") == []
    assert parse_cookie_string(None) == []


def test_filter_whitelisted_drops_tracking_cookies():
    pairs = [("xf_user", "1"), ("_ga", "2"), ("__ddg2_", "3")]
    assert filter_whitelisted(pairs) == [("xf_user", "1"), ("__ddg2_", "3")]


def test_cookie_jar_scopes_cookies_to_site():
    jar = create_cookie_jar({"xf_user": "1", "xf_csrf": "2", "skipped": None})
    cookies = {cookie.name: cookie for cookie in jar}

    assert set(cookies) == {"xf_user", "xf_csrf"}
    cookie = cookies["xf_user"]
    assert cookie.domain == "f95zone.to"
    assert cookie.path == "/"
    assert cookie.secure
    assert cookie.has_nonstandard_attr("HttpOnly")
    assert abs(cookie.expires - (time.time() + COOKIE_LIFETIME_SECONDS)) < 60


def test_verify_cookies_names_missing():
    assert verify_cookies(create_cookie_jar([("xf_user", "1"), ("xf_csrf", "2")])) == []
    assert verify_cookies(create_cookie_jar([("xf_user", "1")])) == ["The xf_csrf cookie has to be set!"]


def test_cookies_from_env(monkeypatch):
    monkeypatch.setenv("F95_COOKIES", "xf_user=1; xf_csrf=2; _ga=3")
    assert sorted(cookie.name for cookie in cookies_from_env()) == ["xf_csrf", "xf_user"]
